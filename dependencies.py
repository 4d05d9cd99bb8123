"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Everything lives on app.state, set up by the
lifespan in app.create_app().
"""

from __future__ import annotations

from fastapi import Request

from config import AppSettings
from infrastructure.config_store.protocol import ConfigurationStore
from schemas.models.actions import Submission
from services.action_pipeline import ActionPipeline
from services.hosting import AccountDirectory, CommentStore
from shared.ip_utils import get_client_ip


def get_config_store(request: Request) -> ConfigurationStore:
    return request.app.state.config_store


def get_pipeline(request: Request) -> ActionPipeline:
    return request.app.state.pipeline


def get_accounts(request: Request) -> AccountDirectory:
    return request.app.state.accounts


def get_comments(request: Request) -> CommentStore:
    return request.app.state.comments


async def get_submission(request: Request) -> Submission:
    """Build the Submission for a form POST: string fields plus the caller's IP."""
    form = await request.form()
    fields = {k: v for k, v in form.items() if isinstance(v, str)}
    settings: AppSettings = request.app.state.settings
    client_ip = get_client_ip(request, settings.turnstile.trust_proxy_headers)
    return Submission(form=fields, client_ip=client_ip)
