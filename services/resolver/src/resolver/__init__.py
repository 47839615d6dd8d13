"""Registrable domain resolver service."""

from resolver.config import ResolverSettings, load_settings
from resolver.matching import SuffixMatcher
from resolver.service import RegistrableDomainResolver

__all__ = [
    "ResolverSettings",
    "load_settings",
    "SuffixMatcher",
    "RegistrableDomainResolver",
]
