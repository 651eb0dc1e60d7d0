from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import BaseResponse


class ProfileViewRequest(BaseModel):
    trainer_id: str = Field(..., min_length=1, alias="trainerId")

    model_config = ConfigDict(populate_by_name=True)


class ProfileViewsResponse(BaseResponse):
    trainer_id: str
    views_30d: int
    views_total: int
