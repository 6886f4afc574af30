from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from ..stalls.models import StallOut

ReportType = Literal[
    "incorrect_info",
    "closed_permanently",
    "hygiene_issue",
    "new_stall_suggestion",
    "other",
]


class FavoriteStall(StallOut):
    favorited_at: str
    review_count: int
    avg_rating: float


class FavoritesResponse(BaseModel):
    success: bool = True
    count: int
    favorites: list[FavoriteStall]


class ReportCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    stall_id: str | None = None
    type: ReportType
    description: str = Field(..., min_length=1, max_length=2000)


class ReportOut(BaseModel):
    id: str
    user_id: str
    stall_id: str | None = None
    stall_name: str | None = None
    type: ReportType
    description: str
    status: str = "pending"
    created_at: str


class ReportResponse(BaseModel):
    success: bool = True
    message: str
    report: ReportOut


class ReportsResponse(BaseModel):
    success: bool = True
    count: int
    reports: list[ReportOut]


class NotificationOut(BaseModel):
    id: str
    user_id: str
    type: str
    title: str
    body: str | None = None
    data: dict = Field(default_factory=dict)
    read: bool = False
    created_at: str


class NotificationsResponse(BaseModel):
    success: bool = True
    unread_count: int
    notifications: list[NotificationOut]
