"""
Comment surface.

POST /comments  — form: author, content, cf-turnstile-response
GET  /comments  — list persisted comments

A comment is persisted only if every preprocess_comment filter returns;
a halted submission (CommentHalted) never reaches the store.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_comments, get_pipeline, get_submission
from schemas.dto.responses.comment import CommentListResponse, CommentResponse
from schemas.dto.responses.common import ErrorResponse
from schemas.models.actions import CommentSubmission, Submission
from services.action_pipeline import PREPROCESS_COMMENT, ActionPipeline
from services.hosting import CommentStore
from shared.logging import get_logger

router = APIRouter(tags=["comments"])
log = get_logger(__name__)


@router.post(
    "/comments",
    response_model=CommentResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def submit_comment(
    submission: Submission = Depends(get_submission),
    pipeline: ActionPipeline = Depends(get_pipeline),
    comments: CommentStore = Depends(get_comments),
) -> CommentResponse:
    comment = CommentSubmission(
        author=submission.get("author").strip() or "Anonymous",
        content=submission.get("content"),
    )
    comment = await pipeline.apply_filters(PREPROCESS_COMMENT, comment, submission)
    stored = comments.persist(comment)
    log.info("comment_persisted", comment_id=stored.id)
    return CommentResponse(
        id=stored.id,
        author=stored.author,
        content=stored.content,
        created_at=stored.created_at,
    )


@router.get("/comments", response_model=CommentListResponse)
async def list_comments(
    comments: CommentStore = Depends(get_comments),
) -> CommentListResponse:
    return CommentListResponse(
        comments=[
            CommentResponse(
                id=c.id, author=c.author, content=c.content, created_at=c.created_at
            )
            for c in comments.all()
        ]
    )
