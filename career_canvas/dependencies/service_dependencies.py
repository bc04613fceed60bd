# career_canvas/dependencies/service_dependencies.py
from typing import AsyncIterator

import httpx
from fastapi import Depends
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_db
from ..services import (
    AuthService, ConnectionService, MentorDirectoryService, PreferencesService,
    ProfileService, SeedService, StoryService,
)


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """Outbound client for identity providers, one per request."""
    async with httpx.AsyncClient(timeout=get_settings().OAUTH_HTTP_TIMEOUT) as client:
        yield client


def get_directory_service(db: Session = Depends(get_db)) -> MentorDirectoryService:
    return MentorDirectoryService(db)

def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    return ProfileService(db)

def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)

def get_preferences_service(db: Session = Depends(get_db)) -> PreferencesService:
    return PreferencesService(db)

def get_connection_service(db: Session = Depends(get_db)) -> ConnectionService:
    return ConnectionService(db)

def get_story_service(db: Session = Depends(get_db)) -> StoryService:
    return StoryService(db)

def get_seed_service(db: Session = Depends(get_db)) -> SeedService:
    return SeedService(db)
