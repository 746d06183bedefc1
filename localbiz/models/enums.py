"""Enumeration types for localbiz."""

from enum import Enum


class AppRole(str, Enum):
    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"
    BUSINESS = "business"


class AccountType(str, Enum):
    USER = "user"
    BUSINESS = "business"
