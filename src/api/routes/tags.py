"""Feedback tag endpoints: label entries and list labels on owned entries."""

import time

from fastapi import APIRouter, Depends, HTTPException, Query, status
from starlette.requests import Request
import structlog

from src.api.auth import get_current_user
from src.api.dependencies import get_feedback_service
from src.api.instrumentation import record_operation
from src.api.models import (
    AddTagRequest,
    ErrorResponse,
    TagData,
    TagItem,
    TagListData,
    TagListResponse,
    TagResponse,
)
from src.api.rate_limit import limiter, read_limit, write_limit
from src.feedback.errors import FeedbackError
from src.feedback.schemas import FeedbackTag
from src.feedback.service import FeedbackService

logger = structlog.get_logger(__name__)
router = APIRouter()


def _tag_to_item(t: FeedbackTag) -> TagItem:
    return TagItem(
        id=t.id,
        feedback_id=t.feedback_id,
        tag=t.tag,
        sentiment=t.sentiment,
        importance=t.importance,
        created_at=t.created_at.isoformat(),
    )


@router.post(
    "/tags",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="addFeedbackTag",
    responses={
        401: {"model": ErrorResponse, "description": "No caller identity"},
        404: {"model": ErrorResponse, "description": "Entry not found"},
        422: {"model": ErrorResponse, "description": "Invalid input"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
    summary="Tag a feedback entry",
)
@limiter.limit(write_limit)
async def add_feedback_tag(
    request: Request,
    body: AddTagRequest,
    user_id: str = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> TagResponse:
    start_time = time.perf_counter()

    try:
        tag = await service.add_tag(
            user_id,
            feedback_id=body.feedback_id,
            tag=body.tag,
            sentiment=body.sentiment,
            importance=body.importance,
        )
    except FeedbackError as e:
        record_operation("addFeedbackTag", start_time, e)
        raise
    except Exception as e:
        record_operation("addFeedbackTag", start_time, e)
        logger.error("add_feedback_tag_failed", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add feedback tag",
        )

    latency_ms = record_operation("addFeedbackTag", start_time)
    logger.info(
        "Feedback tag added",
        tag_id=tag.id,
        feedback_id=tag.feedback_id,
        tag=tag.tag,
        latency_ms=latency_ms,
    )
    return TagResponse(
        data=TagData(tag=_tag_to_item(tag)),
        latency_ms=latency_ms,
    )


@router.get(
    "/tags",
    response_model=TagListResponse,
    operation_id="listFeedbackTags",
    responses={
        401: {"model": ErrorResponse, "description": "No caller identity"},
        404: {"model": ErrorResponse, "description": "Entry not found"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
    summary="List tags on the caller's feedback entries",
)
@limiter.limit(read_limit)
async def list_feedback_tags(
    request: Request,
    feedback_id: str | None = Query(
        default=None,
        alias="feedbackId",
        description="Only tags on this entry",
    ),
    user_id: str = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> TagListResponse:
    start_time = time.perf_counter()

    try:
        tags, total = await service.list_tags(user_id, feedback_id=feedback_id)
    except FeedbackError as e:
        record_operation("listFeedbackTags", start_time, e)
        raise
    except Exception as e:
        record_operation("listFeedbackTags", start_time, e)
        logger.error("list_feedback_tags_failed", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list feedback tags",
        )

    latency_ms = record_operation("listFeedbackTags", start_time)
    logger.info(
        "Feedback tags listed",
        feedback_id=feedback_id,
        total=total,
        latency_ms=latency_ms,
    )
    return TagListResponse(
        data=TagListData(
            items=[_tag_to_item(t) for t in tags],
            total=total,
        ),
        latency_ms=latency_ms,
    )
