from .partner_contacts import PartnerContactRepository, build_repository

__all__ = ["PartnerContactRepository", "build_repository"]
