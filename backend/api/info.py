from fastapi import APIRouter

from schemas import ApiInfoResponse
from services.info_service import get_api_info

router = APIRouter(prefix="/api", tags=["info"])


@router.get("/info", response_model=ApiInfoResponse)
async def read_info() -> ApiInfoResponse:
    return await get_api_info()
