"""FastAPI dependencies: bearer-token identity and the scheduling service."""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from psipro.config import get_settings
from psipro.core.auth import AuthProvider, TokenAuthProvider
from psipro.core.database import get_db
from psipro.core.repository import AppointmentRepository
from psipro.scheduling.scheduler import SchedulingService


def get_auth_provider(request: Request) -> AuthProvider:
    """Identity from ``Authorization: Bearer <token>``.

    Validation is deferred to the service call so a missing or expired token
    surfaces as ``AuthError`` (401) from the operation itself.
    """
    auth_header = request.headers.get("Authorization")
    token = None
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[7:]
    return TokenAuthProvider(token, get_settings())


async def get_scheduling_service(
    db: AsyncSession = Depends(get_db),
    auth: AuthProvider = Depends(get_auth_provider),
) -> SchedulingService:
    settings = get_settings()
    store = AppointmentRepository(
        db, embed_legacy_justification=settings.embed_legacy_justification
    )
    return SchedulingService(store, auth, settings)
