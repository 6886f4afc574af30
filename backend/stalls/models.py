from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class NearbyRequest(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    long: float = Field(..., ge=-180.0, le=180.0)
    radius: int = Field(default=1000, ge=1, le=50_000, description="Search radius in metres")
    open_only: bool = False


class HygieneResponses(BaseModel):
    vendor_wears_gloves: bool | None = None
    filtered_water_visible: bool | None = None
    clean_utensils: bool | None = None
    covered_food_storage: bool | None = None


class ReviewCreate(BaseModel):
    stall_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    hygiene_score: int = Field(..., ge=1, le=5)
    hygiene_responses: HygieneResponses | None = None
    comment: str | None = Field(default=None, max_length=2000)


class ReviewUpdate(BaseModel):
    rating: int | None = Field(default=None, ge=1, le=5)
    hygiene_score: int | None = Field(default=None, ge=1, le=5)
    hygiene_responses: HygieneResponses | None = None
    comment: str | None = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def _scores_not_null(self) -> ReviewUpdate:
        for field in ("rating", "hygiene_score"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class ReviewOut(BaseModel):
    id: str
    stall_id: str
    user_id: str
    rating: int
    hygiene_score: int
    hygiene_tags: list[str]
    hygiene_responses: dict | None = None
    comment: str | None = None
    created_at: str
    updated_at: str


class ReviewResponse(BaseModel):
    success: bool = True
    message: str
    review: ReviewOut


class HygieneBreakdown(BaseModel):
    total_reviews: int
    avg_user_score: float | None = None
    avg_tag_score: int | None = None
    positive_tag_count: int | None = None
    negative_tag_count: int | None = None


class StallOut(BaseModel):
    id: str
    owner_id: str
    name: str
    cuisine_type: str | None = None
    description: str | None = None
    is_open: bool
    last_status_update: str | None = None
    price_range: str | None = None
    dietary_tags: list[str] = Field(default_factory=list)
    hygiene_badges: list[str] = Field(default_factory=list)
    latitude: float | None = None
    longitude: float | None = None
    menu_text: str | None = None


class NearbyStall(StallOut):
    distance_km: float
    review_count: int
    avg_rating: float
    hygiene_score: float


class NearbyResponse(BaseModel):
    success: bool = True
    count: int
    stalls: list[NearbyStall]


class StallDetail(StallOut):
    review_count: int
    avg_rating: float
    hygiene_score: float
    hygiene_breakdown: HygieneBreakdown


class StallDetailResponse(BaseModel):
    success: bool = True
    stall: StallDetail
    reviews: list[ReviewOut]


class OwnerStall(StallOut):
    review_count: int
    avg_rating: float


class OwnerStallsResponse(BaseModel):
    success: bool = True
    count: int
    stalls: list[OwnerStall]


class LocationIn(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    long: float = Field(..., ge=-180.0, le=180.0)


class StatusUpdateRequest(BaseModel):
    stall_id: str = Field(..., min_length=1)
    owner_id: str = Field(..., min_length=1)
    is_open: bool
    location: LocationIn | None = None


class MenuUpdateRequest(BaseModel):
    stall_id: str = Field(..., min_length=1)
    owner_id: str = Field(..., min_length=1)
    menu_text: str = Field(..., min_length=1)


class StallUpdateResponse(BaseModel):
    success: bool = True
    message: str
    stall: StallOut


class ScoreReview(BaseModel):
    hygiene_score: int | None = Field(default=None, ge=0, le=5)
    hygiene_tags: list[str] | None = None


class ScoreRequest(BaseModel):
    reviews: list[ScoreReview] = Field(default_factory=list)
