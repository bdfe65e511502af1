"""
Artfolio Backend — User & Auth Schemas
=======================================

What:  Request/response models for registration, login and profiles.
Why:   The ORM model carries password_hash; these models decide exactly which
       fields leave the server. Three projections exist:

       ArtistSummary  id, display name, image          (joined into listings)
       UserPublic     full public profile, no email     (GET /user/{id})
       UserAccount    UserPublic + email + last login   (directory, validate)
       UserProfile    UserAccount + saved artist ids    (own profile)

       No response model has a password field.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from artfolio.models.user import UserRole


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RegisterRequest(BaseModel):
    email: EmailStr = Field(description="Login email, stored lower-cased")
    password: str = Field(min_length=6, max_length=72, description="Plaintext password (6-72 chars)")
    display_name: str = Field(min_length=1, max_length=120)
    role: UserRole = Field(description="'artist' or 'client'")

    model_config = {"str_strip_whitespace": True}


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class SocialLinks(BaseModel):
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None


class ProfileUpdate(BaseModel):
    """
    Partial profile update: fields left out, or sent as null, keep their
    current value.
    """
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    location: Optional[str] = Field(default=None, max_length=255)
    bio: Optional[str] = None
    professional_title: Optional[str] = Field(default=None, max_length=255)
    website: Optional[str] = Field(default=None, max_length=500)
    social_links: Optional[SocialLinks] = None
    categories: Optional[List[str]] = None

    model_config = {"str_strip_whitespace": True}


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ArtistSummary(BaseModel):
    id: uuid.UUID
    display_name: str
    profile_image: str

    model_config = {"from_attributes": True}


class UserPublic(BaseModel):
    id: uuid.UUID
    role: str
    display_name: str
    profile_image: str
    location: Optional[str] = None
    bio: Optional[str] = None
    professional_title: Optional[str] = None
    website: Optional[str] = None
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    categories: List[str] = Field(default_factory=list)
    created_at: datetime

    model_config = {"from_attributes": True}


class UserAccount(UserPublic):
    email: str
    last_login: datetime


class UserProfile(UserAccount):
    saved_artists: List[uuid.UUID] = Field(default_factory=list)


class AuthUser(BaseModel):
    """Compact user block returned alongside a freshly issued token."""
    id: uuid.UUID
    email: str
    display_name: str
    role: str
    profile_image: str

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    token: str = Field(description="Bearer token, valid for 7 days by default")
    token_type: str = "bearer"
    user: AuthUser


class ValidateResponse(BaseModel):
    user: UserAccount


class ProfileImageResponse(BaseModel):
    success: bool = True
    profile_image: str
    user: UserProfile
