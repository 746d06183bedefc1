"""
localbiz Data Models
====================
Pydantic models for the directory services and API.
"""

from .enums import AppRole, AccountType
from .database import Profile, BusinessProfile, Review, ReviewAttempt, UserRole
from .listing import BusinessListing, ReviewView, EligibilityResult, SaveResult, UserWithRoles
from .forms import SignInForm, SignUpForm, AddBusinessForm, ReviewForm

__all__ = [
    # Enums
    "AppRole",
    "AccountType",
    # Database
    "Profile",
    "BusinessProfile",
    "Review",
    "ReviewAttempt",
    "UserRole",
    # Display
    "BusinessListing",
    "ReviewView",
    "EligibilityResult",
    "SaveResult",
    "UserWithRoles",
    # Forms
    "SignInForm",
    "SignUpForm",
    "AddBusinessForm",
    "ReviewForm",
]
