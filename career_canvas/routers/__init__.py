# career_canvas/routers/__init__.py
from . import auth_router
from . import connection_router
from . import mentor_router
from . import preferences_router
from . import profile_router
from . import story_router

__all__ = [
    "auth_router",
    "connection_router",
    "mentor_router",
    "preferences_router",
    "profile_router",
    "story_router",
]
