# career_canvas/utils/response_enricher.py
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, List, Optional

from ..constants import BusinessRules
from ..models import Mentor
from ..schemas import MentorResponse

LAST_ACTIVE_WINDOW_SECONDS = BusinessRules.LAST_ACTIVE_WINDOW_DAYS * 24 * 60 * 60


class ResponseEnricher:
    @staticmethod
    def synthetic_last_active(mentor_id: str, now: Optional[datetime] = None) -> datetime:
        """
        Stand-in lastActive for mentors that never recorded one: a point in the
        past week derived from the id alone, so the same mentor always shows
        the same "active N ago". Never written back to the database.
        """
        now = now or datetime.now(timezone.utc)
        digest = hashlib.sha256(str(mentor_id).encode("utf-8")).digest()
        offset = int.from_bytes(digest[:8], "big") % LAST_ACTIVE_WINDOW_SECONDS
        return now - timedelta(seconds=offset)

    @staticmethod
    def serialize_mentor(mentor: Mentor, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Mentor row as a camelCase record, with lastActive filled when absent"""
        record = MentorResponse.model_validate(mentor).model_dump(by_alias=True)
        if record.get("lastActive") is None:
            record["lastActive"] = ResponseEnricher.synthetic_last_active(mentor.id, now)
        return record

    @staticmethod
    def serialize_mentors(mentors: List[Mentor]) -> List[Dict[str, Any]]:
        now = datetime.now(timezone.utc)
        return [ResponseEnricher.serialize_mentor(mentor, now) for mentor in mentors]
