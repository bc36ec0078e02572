"""
Company Module

Uncached company news lookups.
"""
from news_desk.company.resolver import CompanyNewsResolver, ResolverStats

__all__ = [
    "CompanyNewsResolver",
    "ResolverStats",
]
