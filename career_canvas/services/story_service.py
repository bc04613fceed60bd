# career_canvas/services/story_service.py
import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import ErrorMessages
from ..exceptions import InternalError
from ..models import Story, utcnow
from ..schemas import StoryInput
from ..utils.validation_utils import ValidationUtils

logger = logging.getLogger(__name__)

ANONYMOUS_USER = "anonymous"
STORY_FIELDS = ("title", "content", "category")


def _parse_int(raw: Any, default: int) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def parse_pagination(raw_limit: Any, raw_offset: Any) -> Tuple[int, int]:
    """Clamps limit to 1..STORY_MAX_PAGE_LIMIT and offset to >= 0; junk falls back to defaults"""
    settings = get_settings()
    limit = _parse_int(raw_limit, settings.STORY_PAGE_LIMIT)
    offset = _parse_int(raw_offset, 0)
    return min(max(limit, 1), settings.STORY_MAX_PAGE_LIMIT), max(offset, 0)


class StoryService:
    def __init__(self, db: Session):
        self.db = db
        self.validator = ValidationUtils(db)

    def list_public(self, limit: int, offset: int, category: Optional[str] = None) -> Tuple[List[Story], int]:
        """Public stories, newest first, with the total count for pagination"""
        filters = [Story.is_public.is_(True)]
        if category and category != "all":
            filters.append(Story.category == category)

        try:
            total = self.db.scalar(select(func.count()).select_from(Story).where(*filters))
            stories = self.db.scalars(
                select(Story)
                .where(*filters)
                .order_by(Story.created_at.desc(), Story.id.desc())
                .offset(offset)
                .limit(limit)
            ).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error fetching stories: {e}")
            raise InternalError("Failed to fetch stories", details=str(e))
        return list(stories), total or 0

    def create(self, user_id: Optional[str], payload: StoryInput) -> Story:
        data = payload.model_dump()
        self.validator.require_fields(data, STORY_FIELDS, ErrorMessages.STORY_FIELDS_REQUIRED)
        try:
            story = Story(user_id=user_id or ANONYMOUS_USER, likes=0, views=0)
            self._apply(story, data)
            self.db.add(story)
            self.db.commit()
            self.db.refresh(story)
            logger.info(f"Story {story.id} submitted by {story.user_id}")
            return story
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error submitting story: {e}")
            raise InternalError("Failed to submit story", details=str(e))

    def update(self, story: Story, payload: StoryInput) -> Story:
        data = payload.model_dump()
        self.validator.require_fields(data, STORY_FIELDS, ErrorMessages.STORY_FIELDS_REQUIRED)
        try:
            self._apply(story, data)
            story.updated_at = utcnow()
            self.db.commit()
            self.db.refresh(story)
            logger.info(f"Story {story.id} updated")
            return story
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error updating story {story.id}: {e}")
            raise InternalError("Failed to update story", details=str(e))

    def delete(self, story: Story):
        story_id = story.id
        try:
            self.db.delete(story)
            self.db.commit()
            logger.info(f"Story {story_id} deleted")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error deleting story {story_id}: {e}")
            raise InternalError("Failed to delete story", details=str(e))

    @staticmethod
    def _apply(story: Story, data: dict):
        story.title = data["title"].strip()
        story.content = data["content"]
        story.category = data["category"].strip()
        story.tags = list(data.get("tags") or [])
        story.is_public = data.get("is_public", True)
        story.media_urls = list(data.get("media_urls") or [])
        story.career_level = data.get("career_level") or "mid"
        story.industry = data.get("industry") or "technology"
