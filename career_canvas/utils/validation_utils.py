# career_canvas/utils/validation_utils.py
import uuid
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import Session

from ..constants import ErrorMessages
from ..exceptions import InvalidInputError, NotFoundError, UnauthorizedError
from ..models import Mentor, Story


def is_valid_id(value: Optional[str]) -> bool:
    try:
        uuid.UUID(str(value))
        return True
    except (TypeError, ValueError):
        return False


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set)):
        return len(value) == 0
    return False


class ValidationUtils:
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def require_id(value: Optional[str], missing_message: str, invalid_message: str) -> str:
        if is_blank(value):
            raise InvalidInputError(missing_message)
        if not is_valid_id(value):
            raise InvalidInputError(invalid_message)
        return str(value)

    @staticmethod
    def require_fields(data: Dict[str, Any], fields: Iterable[str], message: str):
        missing = [name for name in fields if is_blank(data.get(name))]
        if missing:
            raise InvalidInputError(message, details={"missingFields": missing})

    @staticmethod
    def ensure_owner(owner: Optional[str], caller: Optional[str], message: str):
        if owner is None or owner != caller:
            raise UnauthorizedError(message)

    def get_mentor_or_404(self, mentor_id: str) -> Mentor:
        mentor = self.db.get(Mentor, mentor_id)
        if not mentor:
            raise NotFoundError(ErrorMessages.MENTOR_NOT_FOUND)
        return mentor

    def get_mentor_by_email(self, email: str) -> Optional[Mentor]:
        return self.db.query(Mentor).filter(Mentor.email == email).first()

    def get_story_or_404(self, story_id: str) -> Story:
        story = self.db.get(Story, story_id)
        if not story:
            raise NotFoundError(ErrorMessages.STORY_NOT_FOUND)
        return story
