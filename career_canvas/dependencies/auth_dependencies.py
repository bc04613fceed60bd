# career_canvas/dependencies/auth_dependencies.py
from typing import TypeVar, Type, Callable, Optional
from fastapi import Depends, Path, Query
from sqlalchemy.orm import Session
from ..models import Mentor, Story
from ..database import get_db
from ..schemas import TokenData
from ..security import get_current_user
from ..constants import ErrorMessages
from ..exceptions import NotFoundError
from ..utils.validation_utils import ValidationUtils

T = TypeVar('T')

def create_ownership_dependency(
    model_class: Type[T],
    param_name: str,
    owner_of: Callable[[T, TokenData], tuple],
    missing_message: str,
    invalid_message: str,
    not_found_message: str,
    forbidden_message: str,
    in_path: bool = True,
) -> Callable:
    """
    Factory to create ownership verification dependencies.
    The caller is resolved first, so a missing token fails before the id is
    even looked at. Then the id is checked for shape, the entity loaded, and
    ``owner_of`` returns the (owner, caller) pair that must match.
    """
    if in_path:
        id_param = Path(..., alias=param_name, description=f"The ID of the {model_class.__name__.lower()}")
    else:
        id_param = Query(None, alias=param_name, description=f"The ID of the {model_class.__name__.lower()}")

    def dependency(
        current_user: TokenData = Depends(get_current_user),
        entity_id: Optional[str] = id_param,
        db: Session = Depends(get_db),
    ) -> T:
        validator = ValidationUtils(db)
        entity_id = validator.require_id(entity_id, missing_message, invalid_message)
        entity = db.get(model_class, entity_id)
        if not entity:
            raise NotFoundError(not_found_message)
        owner, caller = owner_of(entity, current_user)
        validator.ensure_owner(owner, caller, forbidden_message)
        return entity

    return dependency

# Mentor profiles are owned by email, stories by user id
get_owned_mentor = create_ownership_dependency(
    Mentor,
    "mentorId",
    lambda mentor, user: (mentor.email, user.email),
    ErrorMessages.MENTOR_ID_REQUIRED,
    ErrorMessages.INVALID_MENTOR_ID,
    ErrorMessages.MENTOR_NOT_FOUND,
    ErrorMessages.UNAUTHORIZED_MENTOR,
)
get_owned_story = create_ownership_dependency(
    Story,
    "id",
    lambda story, user: (story.user_id, user.id),
    ErrorMessages.STORY_ID_REQUIRED,
    ErrorMessages.INVALID_STORY_ID,
    ErrorMessages.STORY_NOT_FOUND,
    ErrorMessages.UNAUTHORIZED_STORY,
    in_path=False,
)
