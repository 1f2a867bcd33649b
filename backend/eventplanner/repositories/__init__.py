"""
SQLAlchemy implementations of the booking and catalog stores.
"""

from .booking_repository import SqlBookingStore
from .catalog_repository import SqlCatalogStore

__all__ = ['SqlBookingStore', 'SqlCatalogStore']
