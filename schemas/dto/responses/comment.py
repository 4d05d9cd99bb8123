"""
Response DTOs for comment endpoints.

CommentResponse     — one stored comment
CommentListResponse — GET /comments
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class CommentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    author: str
    content: str
    created_at: datetime


class CommentListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    comments: list[CommentResponse]
