"""
Service interfaces for dependency inversion.
Allows swapping the persistence layer without changing business logic.
"""

from .stores import BookingFilters, BookingScope, BookingStats, BookingStore, CatalogStore

__all__ = ['BookingFilters', 'BookingScope', 'BookingStats', 'BookingStore', 'CatalogStore']
