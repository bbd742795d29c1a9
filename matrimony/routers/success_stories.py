from fastapi import APIRouter, Depends, status

from ..dependencies import get_current_email
from ..models.success_story import SuccessStory, SuccessStoryCreate, SuccessStoryList
from ..services.success_story_service import SuccessStoryService, get_success_story_service

router = APIRouter(prefix="/success-stories", tags=["success-stories"])


@router.post("", response_model=SuccessStory, status_code=status.HTTP_201_CREATED)
async def share_story(
    payload: SuccessStoryCreate,
    email: str = Depends(get_current_email),
    service: SuccessStoryService = Depends(get_success_story_service),
) -> SuccessStory:
    return await service.share(email, payload)


@router.get("", response_model=SuccessStoryList)
async def list_stories(
    service: SuccessStoryService = Depends(get_success_story_service),
) -> SuccessStoryList:
    return SuccessStoryList(stories=await service.list_stories())


__all__ = ["router"]
