"""Feedback entry endpoints: record and list feedback under owned sources."""

import time

from fastapi import APIRouter, Depends, HTTPException, Query, status
from starlette.requests import Request
import structlog

from src.api.auth import get_current_user
from src.api.dependencies import get_feedback_service
from src.api.instrumentation import record_operation
from src.api.models import (
    CreateEntryRequest,
    EntryData,
    EntryItem,
    EntryListData,
    EntryListResponse,
    EntryResponse,
    ErrorResponse,
)
from src.api.rate_limit import limiter, read_limit, write_limit
from src.feedback.errors import FeedbackError
from src.feedback.schemas import FeedbackEntry
from src.feedback.service import FeedbackService

logger = structlog.get_logger(__name__)
router = APIRouter()


def _entry_to_item(e: FeedbackEntry) -> EntryItem:
    return EntryItem(
        id=e.id,
        source_id=e.source_id,
        user_id=e.user_id,
        channel=e.channel,
        author=e.author,
        rating=e.rating,
        raw_text=e.raw_text,
        created_at=e.created_at.isoformat(),
    )


@router.post(
    "/entries",
    response_model=EntryResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createFeedbackEntry",
    responses={
        401: {"model": ErrorResponse, "description": "No caller identity"},
        404: {"model": ErrorResponse, "description": "Source not found"},
        422: {"model": ErrorResponse, "description": "Invalid input"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
    summary="Record a feedback entry",
    description="Creates an entry under a source owned by the caller.",
)
@limiter.limit(write_limit)
async def create_feedback_entry(
    request: Request,
    body: CreateEntryRequest,
    user_id: str = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> EntryResponse:
    start_time = time.perf_counter()

    try:
        entry = await service.create_entry(
            user_id,
            source_id=body.source_id,
            raw_text=body.raw_text,
            channel=body.channel,
            author=body.author,
            rating=body.rating,
        )
    except FeedbackError as e:
        record_operation("createFeedbackEntry", start_time, e)
        raise
    except Exception as e:
        record_operation("createFeedbackEntry", start_time, e)
        logger.error("create_feedback_entry_failed", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create feedback entry",
        )

    latency_ms = record_operation("createFeedbackEntry", start_time)
    logger.info(
        "Feedback entry created",
        entry_id=entry.id,
        source_id=entry.source_id,
        latency_ms=latency_ms,
    )
    return EntryResponse(
        data=EntryData(entry=_entry_to_item(entry)),
        latency_ms=latency_ms,
    )


@router.get(
    "/entries",
    response_model=EntryListResponse,
    operation_id="listFeedbackEntries",
    responses={
        401: {"model": ErrorResponse, "description": "No caller identity"},
        404: {"model": ErrorResponse, "description": "Source not found"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
    summary="List the caller's feedback entries",
)
@limiter.limit(read_limit)
async def list_feedback_entries(
    request: Request,
    source_id: str | None = Query(
        default=None,
        alias="sourceId",
        description="Only entries under this source",
    ),
    user_id: str = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> EntryListResponse:
    start_time = time.perf_counter()

    try:
        entries, total = await service.list_entries(user_id, source_id=source_id)
    except FeedbackError as e:
        record_operation("listFeedbackEntries", start_time, e)
        raise
    except Exception as e:
        record_operation("listFeedbackEntries", start_time, e)
        logger.error("list_feedback_entries_failed", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list feedback entries",
        )

    latency_ms = record_operation("listFeedbackEntries", start_time)
    logger.info(
        "Feedback entries listed",
        source_id=source_id,
        total=total,
        latency_ms=latency_ms,
    )
    return EntryListResponse(
        data=EntryListData(
            items=[_entry_to_item(e) for e in entries],
            total=total,
        ),
        latency_ms=latency_ms,
    )
