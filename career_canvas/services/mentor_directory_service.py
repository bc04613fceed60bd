# career_canvas/services/mentor_directory_service.py
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import ErrorMessages
from ..core.query_builder import FilterSpec, build_query
from ..core.ranking import primary_sort_pipeline, rank
from ..exceptions import InternalError
from ..utils.response_enricher import ResponseEnricher

logger = logging.getLogger(__name__)

LAST_ACTIVE_KEY = "lastActive"


@dataclass
class MentorListing:
    mentors: List[Dict[str, Any]]
    total: int
    filters: Dict[str, Any]


class MentorDirectoryService:
    def __init__(self, db: Session):
        self.db = db
        self.settings = get_settings()

    def list_mentors(self, spec: FilterSpec) -> MentorListing:
        """
        Runs the filtered, sorted query and returns at most MENTOR_LIST_LIMIT
        records. There is no offset; ``total`` counts the returned records.
        """
        stmt = build_query(spec, limit=self.settings.MENTOR_LIST_LIMIT)
        try:
            mentors = self.db.scalars(stmt).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error listing mentors: {e}")
            raise InternalError(ErrorMessages.FETCH_MENTORS_FAILED, details=str(e))

        records = ResponseEnricher.serialize_mentors(mentors)
        if spec.sort.field == LAST_ACTIVE_KEY:
            # SQL put unrecorded values last; order again by the values actually shown
            records = primary_sort_pipeline(spec.sort).run(records)
        logger.info(f"Listed {len(records)} mentors")
        return MentorListing(mentors=records, total=len(records), filters=spec.echo())

    def recommend(self, spec: FilterSpec, requester_interests: Optional[Iterable[str]]) -> MentorListing:
        """Directory listing re-ordered by shared interests, then rating."""
        listing = self.list_mentors(spec)
        listing.mentors = rank(listing.mentors, requester_interests)
        return listing
