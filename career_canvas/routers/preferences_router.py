# career_canvas/routers/preferences_router.py
from fastapi import APIRouter, Depends

from ..dependencies.service_dependencies import get_preferences_service
from ..schemas import (
    MentorshipPreferencesInput, MentorshipPreferencesResponse, PreferencesEnvelope,
    PreferencesSavedResponse, TokenData,
)
from ..security import get_current_user
from ..services import PreferencesService

router = APIRouter(prefix="/api", tags=["preferences"])


@router.post("/submitMentorshipPreferences", response_model=PreferencesSavedResponse, status_code=201)
async def submit_preferences(
    preferences_data: MentorshipPreferencesInput,
    current_user: TokenData = Depends(get_current_user),
    preferences_service: PreferencesService = Depends(get_preferences_service),
):
    """Save the caller's mentorship preferences, replacing any earlier submission"""
    prefs = preferences_service.submit(current_user.id, preferences_data)
    return PreferencesSavedResponse(preference_id=prefs.id, message="Preferences saved successfully")


@router.get("/getMentorshipPreferences", response_model=PreferencesEnvelope)
async def get_preferences(
    current_user: TokenData = Depends(get_current_user),
    preferences_service: PreferencesService = Depends(get_preferences_service),
):
    prefs = preferences_service.get(current_user.id)
    return PreferencesEnvelope(preferences=MentorshipPreferencesResponse.model_validate(prefs))
