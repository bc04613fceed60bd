# career_canvas/routers/story_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..dependencies.auth_dependencies import get_owned_story
from ..dependencies.service_dependencies import get_story_service
from ..models import Story
from ..schemas import (
    DeleteResponse, Pagination, StoryInput, StoryListResponse, StoryResponse,
    StorySubmittedResponse, StoryUpdatedResponse, TokenData,
)
from ..security import get_optional_user
from ..services import StoryService
from ..services.story_service import parse_pagination

router = APIRouter(prefix="/api", tags=["stories"])


@router.get("/getStories", response_model=StoryListResponse)
async def get_stories(
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    story_service: StoryService = Depends(get_story_service),
):
    """Public stories, newest first. category=all or empty means every category."""
    page_limit, page_offset = parse_pagination(limit, offset)
    stories, total = story_service.list_public(page_limit, page_offset, category)
    return StoryListResponse(
        stories=[StoryResponse.model_validate(story) for story in stories],
        pagination=Pagination(
            total=total,
            limit=page_limit,
            offset=page_offset,
            has_more=page_offset + page_limit < total,
        ),
    )


@router.post("/submitStory", response_model=StorySubmittedResponse, status_code=201)
async def submit_story(
    story_data: StoryInput,
    current_user: Optional[TokenData] = Depends(get_optional_user),
    story_service: StoryService = Depends(get_story_service),
):
    """Share a story; without a valid token it is posted as anonymous"""
    story = story_service.create(current_user.id if current_user else None, story_data)
    return StorySubmittedResponse(story_id=story.id, message="Story submitted successfully")


@router.put("/updateStory", response_model=StoryUpdatedResponse)
async def update_story(
    story_data: StoryInput,
    owned_story: Story = Depends(get_owned_story),
    story_service: StoryService = Depends(get_story_service),
):
    story = story_service.update(owned_story, story_data)
    return StoryUpdatedResponse(story=StoryResponse.model_validate(story), message="Story updated successfully")


@router.delete("/deleteStory", response_model=DeleteResponse)
async def delete_story(
    owned_story: Story = Depends(get_owned_story),
    story_service: StoryService = Depends(get_story_service),
):
    story_service.delete(owned_story)
    return DeleteResponse(message="Story deleted successfully")
