# Models package init: importing it registers every table on Base.metadata
from artfolio.models.artwork import Artwork
from artfolio.models.category import Category
from artfolio.models.enquiry import Enquiry, EnquiryStatus
from artfolio.models.user import User, UserRole, saved_artists

__all__ = [
    "Artwork",
    "Category",
    "Enquiry",
    "EnquiryStatus",
    "User",
    "UserRole",
    "saved_artists",
]
