from eventplanner.models.user import User
from eventplanner.models.event import Event
from eventplanner.models.vendor import VendorProfile, VendorService
from eventplanner.models.booking import Booking

__all__ = ["User", "Event", "VendorProfile", "VendorService", "Booking"]
