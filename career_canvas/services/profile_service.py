# career_canvas/services/profile_service.py
from typing import Dict, Any, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from datetime import datetime, timezone

from ..constants import BusinessRules, ErrorMessages
from ..models import Availability, Mentor
from ..schemas import TokenData
from ..utils.validation_utils import ValidationUtils
from ..exceptions import (
    BusinessLogicError, InternalError, InvalidInputError, NotFoundError, ProfileAlreadyExistsError,
)
import logging

logger = logging.getLogger(__name__)

REQUIRED_PROFILE_FIELDS = ("name", "title", "department", "bio", "skills")


class ProfileService:
    """Create, update and delete of the caller's own mentor profile, keyed by their email."""

    def __init__(self, db: Session):
        self.db = db
        self.validator = ValidationUtils(db)

    def get_profile(self, email: str) -> Optional[Mentor]:
        return self.validator.get_mentor_by_email(email)

    def save_mentor(self, user: TokenData, data: Dict[str, Any], update: bool = False) -> Mentor:
        """The create/update switch behind the single profile endpoint."""
        if update:
            return self.update_mentor(user, data)
        return self.create_mentor(user, data)

    def create_mentor(self, user: TokenData, data: Dict[str, Any]) -> Mentor:
        """Creates the caller's mentor profile with fresh aggregate fields"""
        data = dict(data)
        data["name"] = data.get("name") or user.name
        self.validator.require_fields(data, REQUIRED_PROFILE_FIELDS, ErrorMessages.PROFILE_FIELDS_REQUIRED)

        try:
            # Check for existing profile
            if self.get_profile(user.email):
                raise ProfileAlreadyExistsError(ErrorMessages.DUPLICATE_PROFILE)

            now = datetime.now(timezone.utc)
            interests = data.get("interests") or []
            mentor = Mentor(
                user_id=user.id,
                email=user.email,
                name=data["name"].strip(),
                title=data["title"].strip(),
                department=data["department"].strip(),
                bio=data["bio"].strip(),
                experience=data.get("experience") or 0,
                availability=self._availability(data.get("availability")) or Availability.AVAILABLE.value,
                rating=BusinessRules.DEFAULT_RATING,
                mentee_count=0,
                mentorship_history={
                    "totalMentees": 0,
                    "completedSessions": 0,
                    "averageRating": BusinessRules.DEFAULT_RATING,
                    "specializations": list(interests),
                },
                last_active=now,
                created_at=now,
                updated_at=now,
            )
            mentor.skills = data["skills"]
            mentor.interests = interests
            self.db.add(mentor)
            self.db.commit()
            self.db.refresh(mentor)
            logger.info(f"Mentor {mentor.id} ({mentor.name}) created for user {user.id}")
            return mentor

        except BusinessLogicError:
            raise
        except IntegrityError as e:
            # Lost a concurrent create for the same email
            self.db.rollback()
            logger.warning(f"Duplicate mentor insert for user {user.id}: {e}")
            raise ProfileAlreadyExistsError(ErrorMessages.DUPLICATE_PROFILE)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error creating mentor: {e}")
            raise InternalError(ErrorMessages.INTERNAL, details=str(e))

    def update_mentor(self, user: TokenData, data: Dict[str, Any]) -> Mentor:
        """
        Edits the caller's profile in place. Omitted experience, availability and
        interests keep their stored values; rating, mentee count and history are
        never touched here.
        """
        try:
            mentor = self.get_profile(user.email)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error loading mentor for {user.id}: {e}")
            raise InternalError(ErrorMessages.INTERNAL, details=str(e))
        if not mentor:
            raise NotFoundError(ErrorMessages.PROFILE_UPDATE_NOT_FOUND)

        data = dict(data)
        data["name"] = data.get("name") or mentor.name
        self.validator.require_fields(data, REQUIRED_PROFILE_FIELDS, ErrorMessages.PROFILE_FIELDS_REQUIRED)

        try:
            mentor.name = data["name"].strip()
            mentor.title = data["title"].strip()
            mentor.department = data["department"].strip()
            mentor.bio = data["bio"].strip()
            mentor.skills = data["skills"]
            if data.get("experience") is not None:
                mentor.experience = data["experience"]
            if data.get("availability") is not None:
                mentor.availability = self._availability(data["availability"])
            if data.get("interests") is not None:
                mentor.interests = data["interests"]

            now = datetime.now(timezone.utc)
            mentor.last_active = now
            mentor.updated_at = now
            self.db.add(mentor)
            self.db.commit()
            self.db.refresh(mentor)
            logger.info(f"Mentor {mentor.id} ({mentor.name}) updated")
            return mentor

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error updating mentor {mentor.id}: {e}")
            raise InternalError(ErrorMessages.INTERNAL, details=str(e))

    def delete_mentor(self, mentor: Mentor):
        """Deletes a mentor profile whose ownership was already verified"""
        mentor_id = mentor.id
        try:
            self.db.delete(mentor)
            self.db.commit()
            logger.info(f"Mentor {mentor_id} deleted")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error deleting mentor {mentor_id}: {e}")
            raise InternalError(ErrorMessages.INTERNAL, details=str(e))

    @staticmethod
    def _availability(value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, Availability):
            return value.value
        if value not in BusinessRules.AVAILABILITY_STATES:
            raise InvalidInputError(f"Invalid availability: {value}")
        return value
