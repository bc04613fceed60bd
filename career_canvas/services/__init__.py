# career_canvas/services/__init__.py
from .auth_service import AuthService
from .connection_service import ConnectionService
from .mentor_directory_service import MentorDirectoryService, MentorListing
from .preferences_service import PreferencesService
from .profile_service import ProfileService
from .seed_service import SeedService
from .story_service import StoryService

__all__ = [
    "AuthService",
    "ConnectionService",
    "MentorDirectoryService",
    "MentorListing",
    "PreferencesService",
    "ProfileService",
    "SeedService",
    "StoryService",
]
