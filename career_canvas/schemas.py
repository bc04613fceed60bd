from datetime import datetime, timezone
from typing import List, Dict, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .constants import BusinessRules
from .models import Availability


def _as_list(value: Any) -> Any:
    """Accepts either a JSON list or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return [token.strip() for token in value.split(",") if token.strip()]
    return value


def _as_utc(value: Any) -> Any:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CamelModel(BaseModel):
    """Base for every payload: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# --- Authentication Schemas ---

class TokenData(CamelModel):
    """Claims carried by the session token and handed to routes as the caller."""
    id: str
    email: str
    name: Optional[str] = None
    provider: Optional[str] = None
    picture: Optional[str] = None


class AuthCodeRequest(BaseModel):
    # Field names follow the OAuth redirect parameters, not camelCase
    code: Optional[str] = None
    redirect_uri: Optional[str] = None


class UserResponse(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None
    provider: Optional[str] = None


class AuthResponse(CamelModel):
    success: bool = True
    token: str
    user: UserResponse


class ValidateTokenResponse(CamelModel):
    success: bool = True
    user: TokenData


# --- Mentor Profile Schemas ---

class MentorProfileInput(CamelModel):
    name: Optional[str] = Field(None, max_length=200)
    title: Optional[str] = None
    department: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=BusinessRules.MAX_BIO_LENGTH)
    experience: Optional[int] = Field(None, ge=BusinessRules.MIN_EXPERIENCE, le=BusinessRules.MAX_EXPERIENCE)
    skills: List[str] = Field(default_factory=list)
    interests: Optional[List[str]] = None
    availability: Optional[Availability] = None

    @field_validator("skills", "interests", mode="before")
    @classmethod
    def _split_lists(cls, value):
        return _as_list(value)


class MentorshipHistory(CamelModel):
    total_mentees: int = 0
    completed_sessions: int = 0
    average_rating: float = BusinessRules.DEFAULT_RATING
    specializations: List[str] = Field(default_factory=list)


class MentorResponse(CamelModel):
    id: str
    user_id: Optional[str] = None
    email: str
    name: str
    title: str
    department: str
    bio: str
    experience: int
    skills: List[str]
    interests: List[str]
    availability: str
    rating: float
    mentee_count: int
    mentorship_history: Optional[MentorshipHistory] = None
    last_active: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("last_active", "created_at", "updated_at", mode="before")
    @classmethod
    def _assume_utc(cls, value):
        return _as_utc(value)


class RankedMentorResponse(MentorResponse):
    relevance_score: int = 0


class NumericRange(CamelModel):
    min: float
    max: float


class AppliedFilters(CamelModel):
    departments: List[str]
    skills: List[str]
    availability: List[str]
    experience: NumericRange
    rating: NumericRange
    search: str
    sort_by: str
    sort_order: str


class MentorListResponse(CamelModel):
    success: bool = True
    mentors: List[MentorResponse]
    total: int
    filters: AppliedFilters


class RankedMentorListResponse(MentorListResponse):
    mentors: List[RankedMentorResponse]
    requester_interests: List[str]


class MentorMutationResponse(CamelModel):
    success: bool = True
    message: str
    mentor_id: str
    data: MentorResponse


class DeleteResponse(CamelModel):
    success: bool = True
    message: str
    deleted_count: int = 1


class SeededMentor(CamelModel):
    name: str
    department: str
    title: str


class SeedResponse(CamelModel):
    success: bool = True
    message: str
    inserted_count: int
    mentors: List[SeededMentor]


# --- Mentorship Preferences Schemas ---

class PreferenceDetails(CamelModel):
    industries: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    career_levels: List[str] = Field(default_factory=list)
    meeting_frequency: str = "monthly"
    communication_style: str = "casual"
    goals: List[str] = Field(default_factory=list)
    time_commitment: str = "1-2-hours"
    remote_preference: str = "hybrid"
    interests: List[str] = Field(default_factory=list)


class PreferenceAvailability(CamelModel):
    timezone: str = "UTC"
    preferred_times: List[str] = Field(default_factory=list)
    start_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    end_date: Optional[datetime] = None


class MentorshipPreferencesInput(CamelModel):
    mentorship_type: Optional[str] = None
    interests: List[str] = Field(default_factory=list)
    preferred_departments: List[str] = Field(default_factory=list)
    availability_type: str = "flexible"
    session_frequency: str = "bi-weekly"
    communication_style: str = "mixed"
    goals: str = ""
    experience: str = ""
    preferences: PreferenceDetails = Field(default_factory=PreferenceDetails)
    availability: PreferenceAvailability = Field(default_factory=PreferenceAvailability)
    bio: str = ""

    @field_validator("interests", "preferred_departments", mode="before")
    @classmethod
    def _split_lists(cls, value):
        return _as_list(value)


class MentorshipPreferencesResponse(CamelModel):
    id: str
    user_id: str
    mentorship_type: str
    interests: List[str]
    preferred_departments: List[str]
    availability_type: str
    session_frequency: str
    communication_style: str
    goals: str
    experience: str
    preferences: Optional[Dict[str, Any]] = None
    availability: Optional[Dict[str, Any]] = None
    bio: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PreferencesSavedResponse(CamelModel):
    success: bool = True
    preference_id: str
    message: str


class PreferencesEnvelope(CamelModel):
    success: bool = True
    preferences: MentorshipPreferencesResponse


# --- Connection Request Schemas ---

class ConnectionRequestInput(CamelModel):
    mentor_id: Optional[str] = None
    message: Optional[str] = None


class ConnectionSubmittedResponse(CamelModel):
    success: bool = True
    connection_id: str
    message: str


# --- Story Schemas ---

class StoryInput(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_public: bool = True
    media_urls: List[str] = Field(default_factory=list)
    career_level: str = "mid"
    industry: str = "technology"

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value):
        return _as_list(value)

    @field_validator("is_public", mode="before")
    @classmethod
    def _public_unless_false(cls, value):
        # Only an explicit false hides a story
        return value is not False


class StoryResponse(CamelModel):
    id: str
    user_id: str
    title: str
    content: str
    category: str
    tags: List[str]
    is_public: bool
    media_urls: List[str]
    career_level: str
    industry: str
    likes: int
    views: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Pagination(CamelModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class StoryListResponse(CamelModel):
    success: bool = True
    stories: List[StoryResponse]
    pagination: Pagination


class StorySubmittedResponse(CamelModel):
    success: bool = True
    story_id: str
    message: str


class StoryUpdatedResponse(CamelModel):
    success: bool = True
    story: StoryResponse
    message: str


# --- Probes ---

class ConnectionTestResponse(CamelModel):
    success: bool = True
    message: str
    database: Optional[str] = None
    collections_count: int
    collections: List[str]
