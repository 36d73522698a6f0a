"""
DevConnector profile service core library.

Database management, models, repositories, configuration, logging and the
GitHub client shared by the API.

Usage:
    from core.db import db, get_db
    from core.models import User, Profile
    from core.repositories import ProfileRepository
    from core.config import get_settings
    from core.logging import get_logger
"""

__version__ = "1.0.0"
