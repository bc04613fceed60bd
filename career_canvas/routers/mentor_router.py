# career_canvas/routers/mentor_router.py
from fastapi import APIRouter, Depends, Request

from ..config import get_settings
from ..constants import ErrorMessages
from ..core.query_builder import parse_filter_params
from ..dependencies.service_dependencies import (
    get_directory_service, get_preferences_service, get_seed_service,
)
from ..exceptions import UnauthorizedError
from ..schemas import (
    MentorListResponse, RankedMentorListResponse, SeedResponse, SeededMentor, TokenData,
)
from ..security import get_current_user
from ..services import MentorDirectoryService, PreferencesService, SeedService

router = APIRouter(prefix="/api", tags=["mentors"])


@router.get("/mentors", response_model=MentorListResponse)
async def list_mentors(
    request: Request,
    directory: MentorDirectoryService = Depends(get_directory_service),
):
    """
    Filtered mentor directory. Accepts departments, skills, availability
    (comma-separated), minExperience, maxExperience, minRating, maxRating,
    search, sortBy, sortOrder and userEmail. Malformed values fall back to
    their defaults instead of failing the request.
    """
    spec = parse_filter_params(request.query_params)
    listing = directory.list_mentors(spec)
    return MentorListResponse(mentors=listing.mentors, total=listing.total, filters=listing.filters)


@router.get("/mentors/recommended", response_model=RankedMentorListResponse)
async def recommended_mentors(
    request: Request,
    current_user: TokenData = Depends(get_current_user),
    directory: MentorDirectoryService = Depends(get_directory_service),
    preferences: PreferencesService = Depends(get_preferences_service),
):
    """Same filters as /mentors, ranked by interests shared with the caller's saved preferences."""
    spec = parse_filter_params(request.query_params)
    interests = preferences.requester_interests(current_user.id)
    listing = directory.recommend(spec, interests)
    return RankedMentorListResponse(
        mentors=listing.mentors,
        total=listing.total,
        filters=listing.filters,
        requester_interests=interests,
    )


@router.post("/mentors/seed", response_model=SeedResponse)
async def seed_mentors(seed_service: SeedService = Depends(get_seed_service)):
    """Replaces every mentor with the sample directory. Only enabled when ALLOW_SEEDING is set."""
    if not get_settings().ALLOW_SEEDING:
        raise UnauthorizedError(ErrorMessages.SEEDING_DISABLED)
    mentors = seed_service.seed_mentors()
    return SeedResponse(
        message="Mentors seeded successfully",
        inserted_count=len(mentors),
        mentors=[SeededMentor(name=m.name, department=m.department, title=m.title) for m in mentors],
    )
