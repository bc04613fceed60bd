# career_canvas/services/preferences_service.py
import logging
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import ErrorMessages
from ..core.ranking import resolve_requester_interests
from ..exceptions import InternalError, InvalidInputError, NotFoundError, ProfileAlreadyExistsError
from ..models import MentorshipPreferences
from ..schemas import MentorshipPreferencesInput

logger = logging.getLogger(__name__)


class PreferencesService:
    def __init__(self, db: Session):
        self.db = db

    def find(self, user_id: str):
        return self.db.query(MentorshipPreferences).filter(MentorshipPreferences.user_id == user_id).first()

    def submit(self, user_id: str, payload: MentorshipPreferencesInput) -> MentorshipPreferences:
        """Replaces the user's whole preferences row, creating it on first submit"""
        if not payload.mentorship_type or not payload.mentorship_type.strip():
            raise InvalidInputError(ErrorMessages.MENTORSHIP_TYPE_REQUIRED)

        values = {
            "mentorship_type": payload.mentorship_type.strip(),
            "interests": list(payload.interests),
            "preferred_departments": list(payload.preferred_departments),
            "availability_type": payload.availability_type,
            "session_frequency": payload.session_frequency,
            "communication_style": payload.communication_style,
            "goals": payload.goals,
            "experience": payload.experience,
            "preferences": payload.preferences.model_dump(mode="json", by_alias=True),
            "availability": payload.availability.model_dump(mode="json", by_alias=True),
            "bio": payload.bio,
            "is_active": True,
        }

        try:
            prefs = self.find(user_id)
            if prefs is None:
                prefs = MentorshipPreferences(user_id=user_id)
                self.db.add(prefs)
            for key, value in values.items():
                setattr(prefs, key, value)
            self.db.commit()
            self.db.refresh(prefs)
            logger.info(f"Mentorship preferences {prefs.id} saved for user {user_id}")
            return prefs
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Concurrent preferences insert for user {user_id}: {e}")
            raise ProfileAlreadyExistsError(ErrorMessages.DUPLICATE_PREFERENCES)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error saving preferences for user {user_id}: {e}")
            raise InternalError(ErrorMessages.INTERNAL, details=str(e))

    def get(self, user_id: str) -> MentorshipPreferences:
        try:
            prefs = self.find(user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error fetching preferences for user {user_id}: {e}")
            raise InternalError("Internal server error while fetching preferences", details=str(e))
        if not prefs:
            raise NotFoundError(ErrorMessages.PREFERENCES_NOT_FOUND)
        return prefs

    def requester_interests(self, user_id: str) -> List[str]:
        """Interests the ranker should use for this user; the starter set if nothing is saved"""
        try:
            prefs = self.find(user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error fetching preferences for user {user_id}: {e}")
            raise InternalError(ErrorMessages.INTERNAL, details=str(e))
        return resolve_requester_interests(prefs)
