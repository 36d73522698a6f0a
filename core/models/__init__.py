"""
SQLAlchemy models for the profile service.

Usage:
    from core.models import User, Profile, Experience, Education
"""

from core.db import Base

from .profile import SOCIAL_NETWORKS, Education, Experience, Profile
from .user import User

__all__ = [
    "Base",
    "User",
    "Profile",
    "Experience",
    "Education",
    "SOCIAL_NETWORKS",
]
