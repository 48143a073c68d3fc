"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from app.errors import InvalidRequestError, ReadingNotFoundError, UpstreamError
from app.schemas import (
    DateRange,
    DeleteResponse,
    HealthResponse,
    Reading,
    ReadingListResponse,
    ReadingRangeResponse,
    ReadingResponse,
    RouteInfo,
    RoutesResponse,
    SaveResponse,
    StatusResponse,
)
from datastore.base import ReadingStoreError
from models.records import VALUE_FIELDS, StoredReading
from services.readings import DEFAULT_LIST_LIMIT, DEFAULT_RANGE_LIMIT, ReadingService
from services.timestamps import iso_timestamp, range_bounds
from services.validation import (
    InvalidParameterError,
    missing_value_fields,
    parse_descending,
    parse_limit,
    parse_order_by,
)
from settings import Settings

router = APIRouter()

RANGE_PARAMETERS = ["startDate", "endDate"]
DATE_FORMAT = "YYYY-MM-DD"

ROUTE_CATALOG = (
    RouteInfo(method="GET", path="/", description="Server status"),
    RouteInfo(method="GET", path="/health", description="Health check"),
    RouteInfo(method="GET", path="/routes", description="List all available routes"),
    RouteInfo(
        method="POST",
        path="/data",
        description="Save new data (requires: value1, value2, value3, value4, value5)",
    ),
    RouteInfo(
        method="GET", path="/data", description="Get all data (query params: limit, orderBy, order)"
    ),
    RouteInfo(method="GET", path="/data/:id", description="Get data by ID"),
    RouteInfo(method="GET", path="/data/latest", description="Get latest data record"),
    RouteInfo(
        method="GET",
        path="/data/range",
        description="Get data by date range (query params: startDate, endDate, limit)",
    ),
    RouteInfo(method="DELETE", path="/data/:id", description="Delete data by ID"),
)


def get_service(request: Request) -> ReadingService:
    return request.app.state.reading_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _to_readings(readings: list[StoredReading]) -> list[Reading]:
    return [Reading(**reading.to_payload()) for reading in readings]


def _invalid_parameter(exc: InvalidParameterError) -> InvalidRequestError:
    details: dict[str, Any] = {"parameter": exc.parameter, "message": str(exc)}
    if exc.allowed is not None:
        details["allowed"] = exc.allowed
    return InvalidRequestError("Invalid query parameter", **details)


async def _read_json_object(request: Request) -> dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


@router.get("/", response_model=StatusResponse, summary="Server status.")
async def root() -> StatusResponse:
    return StatusResponse(message="Server is running", timestamp=iso_timestamp())


@router.get("/health", response_model=HealthResponse, summary="Health check endpoint.")
async def healthcheck() -> HealthResponse:
    return HealthResponse(status="healthy", message="Server is operational")


@router.get("/routes", response_model=RoutesResponse, summary="List all available routes.")
async def list_routes(settings: Settings = Depends(get_app_settings)) -> RoutesResponse:
    return RoutesResponse(
        message="Available API routes",
        routes=list(ROUTE_CATALOG),
        baseUrl=settings.base_url,
    )


@router.post(
    "/data",
    status_code=status.HTTP_200_OK,
    response_model=SaveResponse,
    summary="Save a new reading.",
)
async def save_reading(
    request: Request,
    service: ReadingService = Depends(get_service),
) -> SaveResponse:
    payload = await _read_json_object(request)
    if missing_value_fields(payload):
        raise InvalidRequestError("Missing required fields", required=list(VALUE_FIELDS))

    result = await service.save(payload)
    if not result.success:
        raise UpstreamError("Failed to save data", details=result.error)
    return SaveResponse(
        message="Data saved successfully",
        id=result.id or "",
        timestamp=result.timestamp or "",
    )


@router.get("/data", response_model=ReadingListResponse, summary="List readings.")
async def list_readings(
    limit: Optional[str] = Query(None),
    order_by: Optional[str] = Query(None, alias="orderBy"),
    order: Optional[str] = Query(None),
    service: ReadingService = Depends(get_service),
) -> ReadingListResponse:
    try:
        parsed_limit = parse_limit(limit, DEFAULT_LIST_LIMIT)
        field = parse_order_by(order_by)
        descending = parse_descending(order)
    except InvalidParameterError as exc:
        raise _invalid_parameter(exc) from exc

    try:
        readings = await service.list_readings(
            limit=parsed_limit, order_by=field, descending=descending
        )
    except ReadingStoreError as exc:
        raise UpstreamError("Failed to retrieve data", message=str(exc)) from exc

    if not readings:
        return ReadingListResponse(message="No data found", data=[], count=0)
    return ReadingListResponse(
        message="Data retrieved successfully",
        data=_to_readings(readings),
        count=len(readings),
    )


@router.get("/data/latest", response_model=ReadingResponse, summary="Most recent reading.")
async def latest_reading(service: ReadingService = Depends(get_service)) -> ReadingResponse:
    try:
        reading = await service.latest()
    except ReadingStoreError as exc:
        raise UpstreamError("Failed to retrieve latest data", message=str(exc)) from exc

    if reading is None:
        return ReadingResponse(message="No data found", data=None)
    return ReadingResponse(
        message="Latest data retrieved successfully",
        data=Reading(**reading.to_payload()),
    )


@router.get(
    "/data/range",
    response_model=ReadingRangeResponse,
    summary="Readings created between two calendar dates, inclusive.",
)
async def readings_in_range(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    limit: Optional[str] = Query(None),
    service: ReadingService = Depends(get_service),
) -> ReadingRangeResponse:
    if not start_date or not end_date:
        raise InvalidRequestError(
            "Missing required parameters", required=RANGE_PARAMETERS, format=DATE_FORMAT
        )
    try:
        start, end = range_bounds(start_date, end_date)
    except ValueError as exc:
        raise InvalidRequestError(
            "Invalid date format", required=RANGE_PARAMETERS, format=DATE_FORMAT
        ) from exc
    try:
        parsed_limit = parse_limit(limit, DEFAULT_RANGE_LIMIT)
    except InvalidParameterError as exc:
        raise _invalid_parameter(exc) from exc

    try:
        readings = await service.in_range(start, end, limit=parsed_limit)
    except ReadingStoreError as exc:
        raise UpstreamError("Failed to retrieve data", message=str(exc)) from exc

    echoed = DateRange(startDate=start_date, endDate=end_date)
    if not readings:
        return ReadingRangeResponse(
            message="No data found in the specified range", data=[], count=0, range=echoed
        )
    return ReadingRangeResponse(
        message="Data retrieved successfully",
        data=_to_readings(readings),
        count=len(readings),
        range=echoed,
    )


@router.get("/data/{reading_id}", response_model=ReadingResponse, summary="Fetch a reading by id.")
async def get_reading(
    reading_id: str,
    service: ReadingService = Depends(get_service),
) -> ReadingResponse:
    try:
        reading = await service.get(reading_id)
    except KeyError as exc:
        raise ReadingNotFoundError(reading_id) from exc
    except ReadingStoreError as exc:
        raise UpstreamError("Failed to retrieve data", message=str(exc)) from exc
    return ReadingResponse(
        message="Data retrieved successfully",
        data=Reading(**reading.to_payload()),
    )


@router.delete("/data/{reading_id}", response_model=DeleteResponse, summary="Delete a reading.")
async def delete_reading(
    reading_id: str,
    service: ReadingService = Depends(get_service),
) -> DeleteResponse:
    try:
        await service.delete(reading_id)
    except KeyError as exc:
        raise ReadingNotFoundError(reading_id) from exc
    except ReadingStoreError as exc:
        raise UpstreamError("Failed to delete data", message=str(exc)) from exc
    return DeleteResponse(message="Data deleted successfully", id=reading_id)
