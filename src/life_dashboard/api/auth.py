"""Static API token check shared by the dashboard routes."""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

from fastapi import Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from life_dashboard.containers import AppContainer


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include the configured API token."""
    if not x_api_token or not secrets.compare_digest(
        x_api_token.encode(), api_token.encode()
    ):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
