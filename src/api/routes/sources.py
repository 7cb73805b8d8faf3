"""Feedback source endpoints: create, update, and list the caller's sources."""

import time

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.requests import Request
import structlog

from src.api.auth import get_current_user
from src.api.dependencies import get_feedback_service
from src.api.instrumentation import record_operation
from src.api.models import (
    CreateSourceRequest,
    ErrorResponse,
    SourceData,
    SourceItem,
    SourceListData,
    SourceListResponse,
    SourceResponse,
    UpdateSourceRequest,
)
from src.api.rate_limit import limiter, read_limit, write_limit
from src.feedback.errors import FeedbackError
from src.feedback.schemas import FeedbackSource
from src.feedback.service import FeedbackService

logger = structlog.get_logger(__name__)
router = APIRouter()


def _source_to_item(s: FeedbackSource) -> SourceItem:
    return SourceItem(
        id=s.id,
        user_id=s.user_id,
        name=s.name,
        source_type=s.source_type,
        description=s.description,
        created_at=s.created_at.isoformat(),
        updated_at=s.updated_at.isoformat(),
    )


@router.post(
    "/sources",
    response_model=SourceResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createFeedbackSource",
    responses={
        401: {"model": ErrorResponse, "description": "No caller identity"},
        422: {"model": ErrorResponse, "description": "Invalid input"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
    summary="Create a feedback source",
)
@limiter.limit(write_limit)
async def create_feedback_source(
    request: Request,
    body: CreateSourceRequest,
    user_id: str = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> SourceResponse:
    start_time = time.perf_counter()

    try:
        source = await service.create_source(
            user_id,
            name=body.name,
            source_type=body.source_type,
            description=body.description,
        )
    except FeedbackError as e:
        record_operation("createFeedbackSource", start_time, e)
        raise
    except Exception as e:
        record_operation("createFeedbackSource", start_time, e)
        logger.error("create_feedback_source_failed", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create feedback source",
        )

    latency_ms = record_operation("createFeedbackSource", start_time)
    logger.info(
        "Feedback source created",
        source_id=source.id,
        user_id=user_id,
        latency_ms=latency_ms,
    )
    return SourceResponse(
        data=SourceData(source=_source_to_item(source)),
        latency_ms=latency_ms,
    )


@router.patch(
    "/sources/{source_id}",
    response_model=SourceResponse,
    operation_id="updateFeedbackSource",
    responses={
        401: {"model": ErrorResponse, "description": "No caller identity"},
        404: {"model": ErrorResponse, "description": "Source not found"},
        422: {"model": ErrorResponse, "description": "No fields to update or invalid input"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
    summary="Update a feedback source",
    description="Partial update: only the provided fields change. At least one is required.",
)
@limiter.limit(write_limit)
async def update_feedback_source(
    request: Request,
    source_id: str,
    body: UpdateSourceRequest,
    user_id: str = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> SourceResponse:
    start_time = time.perf_counter()

    try:
        source = await service.update_source(
            user_id,
            source_id,
            name=body.name,
            source_type=body.source_type,
            description=body.description,
        )
    except FeedbackError as e:
        record_operation("updateFeedbackSource", start_time, e)
        raise
    except Exception as e:
        record_operation("updateFeedbackSource", start_time, e)
        logger.error("update_feedback_source_failed", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update feedback source",
        )

    latency_ms = record_operation("updateFeedbackSource", start_time)
    logger.info("Feedback source updated", source_id=source_id, latency_ms=latency_ms)
    return SourceResponse(
        data=SourceData(source=_source_to_item(source)),
        latency_ms=latency_ms,
    )


@router.get(
    "/sources",
    response_model=SourceListResponse,
    operation_id="listFeedbackSources",
    responses={
        401: {"model": ErrorResponse, "description": "No caller identity"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
    summary="List the caller's feedback sources",
)
@limiter.limit(read_limit)
async def list_feedback_sources(
    request: Request,
    user_id: str = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> SourceListResponse:
    start_time = time.perf_counter()

    try:
        sources, total = await service.list_sources(user_id)
    except FeedbackError as e:
        record_operation("listFeedbackSources", start_time, e)
        raise
    except Exception as e:
        record_operation("listFeedbackSources", start_time, e)
        logger.error("list_feedback_sources_failed", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list feedback sources",
        )

    latency_ms = record_operation("listFeedbackSources", start_time)
    logger.info("Feedback sources listed", total=total, latency_ms=latency_ms)
    return SourceListResponse(
        data=SourceListData(
            items=[_source_to_item(s) for s in sources],
            total=total,
        ),
        latency_ms=latency_ms,
    )
