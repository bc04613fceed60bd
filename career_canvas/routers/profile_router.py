# career_canvas/routers/profile_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response

from ..services import ProfileService
from ..dependencies.auth_dependencies import get_owned_mentor
from ..dependencies.service_dependencies import get_profile_service
from ..schemas import DeleteResponse, MentorMutationResponse, MentorProfileInput, TokenData
from ..models import Mentor
from ..security import get_current_user
from ..utils.response_enricher import ResponseEnricher

router = APIRouter(prefix="/api", tags=["profiles"])


def _is_update_flag(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in ("true", "1", "yes")


def _mutation_response(mentor: Mentor, message: str) -> MentorMutationResponse:
    return MentorMutationResponse(
        message=message,
        mentor_id=mentor.id,
        data=ResponseEnricher.serialize_mentor(mentor),
    )


@router.post("/createMentorProfile", response_model=MentorMutationResponse, status_code=201)
async def create_mentor_profile(
    response: Response,
    mentor_data: MentorProfileInput,
    update: Optional[str] = Query(None, description="Set to true to update the existing profile"),
    current_user: TokenData = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    """Create the caller's mentor profile, or update it when ?update=true"""
    data = mentor_data.model_dump(mode="json", exclude_unset=True)
    if _is_update_flag(update):
        mentor = profile_service.update_mentor(current_user, data)
        response.status_code = 200
        return _mutation_response(mentor, "Mentor profile updated successfully")

    mentor = profile_service.create_mentor(current_user, data)
    return _mutation_response(mentor, "Mentor profile created successfully")


@router.put("/createMentorProfile", response_model=MentorMutationResponse)
@router.put("/updateMentorProfile", response_model=MentorMutationResponse)
async def update_mentor_profile(
    mentor_data: MentorProfileInput,
    current_user: TokenData = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    """Update the caller's mentor profile; rating, mentee count and history are carried over"""
    mentor = profile_service.update_mentor(current_user, mentor_data.model_dump(mode="json", exclude_unset=True))
    return _mutation_response(mentor, "Mentor profile updated successfully")


@router.delete("/deleteMentorProfile/{mentorId}", response_model=DeleteResponse)
async def delete_mentor_profile(
    mentor_id: str = Path(..., alias="mentorId", description="The ID of the mentor to delete"),
    owned_mentor: Mentor = Depends(get_owned_mentor),
    profile_service: ProfileService = Depends(get_profile_service),
):
    """Delete a mentor profile owned by the caller"""
    profile_service.delete_mentor(owned_mentor)
    return DeleteResponse(message="Mentor profile deleted successfully", deleted_count=1)
