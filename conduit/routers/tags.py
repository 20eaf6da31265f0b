from fastapi import APIRouter, Depends

from conduit.dependencies import get_tag_service
from conduit.schemas import TagsResponse
from conduit.services.tag_service import TagService

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=TagsResponse)
async def list_tags(tag_service: TagService = Depends(get_tag_service)):
    return TagsResponse(tags=await tag_service.find_all())
