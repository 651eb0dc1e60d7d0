from fastapi import APIRouter

from app.api.dependencies import ViewCounterDep
from app.schemas.profile import ProfileViewRequest, ProfileViewsResponse

router = APIRouter()


@router.post("/view", response_model=ProfileViewsResponse)
async def record_profile_view(
    payload: ProfileViewRequest, counter: ViewCounterDep
) -> ProfileViewsResponse:
    window, total = await counter.record_view(payload.trainer_id)
    return ProfileViewsResponse(
        trainer_id=payload.trainer_id, views_30d=window, views_total=total
    )


@router.get("/{trainer_id}/views", response_model=ProfileViewsResponse)
async def get_profile_views(
    trainer_id: str, counter: ViewCounterDep
) -> ProfileViewsResponse:
    window, total = await counter.get_views(trainer_id)
    return ProfileViewsResponse(
        trainer_id=trainer_id, views_30d=window, views_total=total
    )
