"""Input forms, validated with the same messages the web client shows."""

import re
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from .enums import AccountType

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


class SignInForm(BaseModel):
    email: str
    password: str

    @model_validator(mode="after")
    def require_fields(self):
        if not self.email or not self.password:
            raise ValueError("Please fill in all fields")
        return self


class SignUpForm(BaseModel):
    email: str
    password: str
    confirm_password: str
    account_type: AccountType = AccountType.USER
    accept_terms: bool = False

    # Regular accounts
    username: Optional[str] = None
    display_name: Optional[str] = None

    # Business accounts
    business_name: Optional[str] = None
    business_description: Optional[str] = None
    business_category: Optional[str] = None

    @model_validator(mode="after")
    def check_rules(self):
        if not self.email or not self.password or not self.confirm_password:
            raise ValueError("Please fill in all required fields")
        if self.account_type == AccountType.BUSINESS and not self.business_name:
            raise ValueError("Business name is required for business accounts")
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        if len(self.password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        if not self.accept_terms:
            raise ValueError("You must accept the Terms and Conditions to create an account")
        return self

    def metadata(self) -> dict:
        """User metadata stored with the auth account."""
        data = {"account_type": self.account_type.value}
        if self.account_type == AccountType.USER:
            data["username"] = self.username
            data["display_name"] = self.display_name
        else:
            data["business_name"] = self.business_name
            data["business_description"] = self.business_description
            data["business_category"] = self.business_category
        return data


class AddBusinessForm(BaseModel):
    business_name: str
    business_email: str
    business_description: Optional[str] = None
    business_category: Optional[str] = None
    business_address: Optional[str] = None
    business_phone: Optional[str] = None
    business_website: Optional[str] = None

    @model_validator(mode="after")
    def check_required(self):
        if not self.business_name.strip() or not self.business_email.strip():
            raise ValueError("Business name and email are required")
        if not EMAIL_PATTERN.match(self.business_email):
            raise ValueError("Please enter a valid email address")
        return self


class ReviewForm(BaseModel):
    model_config = {"validate_default": True}

    rating: int = 0
    title: str = ""
    content: str = ""

    @field_validator("rating")
    @classmethod
    def check_rating(cls, v):
        if v == 0:
            raise ValueError("Please provide a rating")
        if not 1 <= v <= 5:
            raise ValueError("Rating must be between 1 and 5")
        return v

    @field_validator("title", "content", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return v or ""
