"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class StatusResponse(BaseModel):
    """Liveness payload for the root endpoint."""

    message: str
    timestamp: str = Field(..., description="Current UTC instant in ISO 8601.")


class HealthResponse(BaseModel):
    status: str
    message: str


class RouteInfo(BaseModel):
    method: str
    path: str
    description: str


class RoutesResponse(BaseModel):
    """Static catalog of the API surface."""

    message: str
    routes: List[RouteInfo]
    baseUrl: str


class Reading(BaseModel):
    """A stored reading; unknown stored fields are passed through."""

    model_config = ConfigDict(extra="allow")

    id: str
    value1: Any = None
    value2: Any = None
    value3: Any = None
    value4: Any = None
    value5: Any = None
    timestamp: Optional[str] = Field(
        default=None, description="Display time at UTC+05:30, YYYY:MM:DD HH:MM:SS."
    )
    createdAt: Optional[str] = Field(
        default=None, description="Database-assigned creation instant (ISO 8601)."
    )


class SaveResponse(BaseModel):
    message: str
    id: str
    timestamp: str


class ReadingListResponse(BaseModel):
    message: str
    data: List[Reading]
    count: int = Field(..., ge=0)


class ReadingResponse(BaseModel):
    message: str
    data: Optional[Reading] = None


class DateRange(BaseModel):
    startDate: str
    endDate: str


class ReadingRangeResponse(ReadingListResponse):
    range: DateRange


class DeleteResponse(BaseModel):
    message: str
    id: str
