# career_canvas/services/connection_service.py
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import ErrorMessages
from ..exceptions import InternalError, InvalidInputError
from ..models import ConnectionRequest, ConnectionStatus
from ..schemas import ConnectionRequestInput
from ..utils.validation_utils import ValidationUtils

logger = logging.getLogger(__name__)


class ConnectionService:
    def __init__(self, db: Session):
        self.db = db
        self.validator = ValidationUtils(db)

    def submit(self, user_id: str, payload: ConnectionRequestInput) -> ConnectionRequest:
        """Records a pending request from the caller to an existing mentor"""
        if not payload.mentor_id or not payload.mentor_id.strip():
            raise InvalidInputError(ErrorMessages.MENTOR_ID_REQUIRED)

        try:
            mentor = self.validator.get_mentor_or_404(payload.mentor_id.strip())
            request = ConnectionRequest(
                user_id=user_id,
                mentor_id=mentor.id,
                message=payload.message or "Connection request",
                status=ConnectionStatus.PENDING.value,
            )
            self.db.add(request)
            self.db.commit()
            self.db.refresh(request)
            logger.info(f"Connection request {request.id} from user {user_id} to mentor {mentor.id}")
            return request
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error submitting connection request: {e}")
            raise InternalError("Failed to submit connection request", details=str(e))
