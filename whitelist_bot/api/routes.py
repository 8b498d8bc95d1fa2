from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response, status

from ..core.engine import LifecycleEngine, LifecycleResult
from ..core.models import Application, ApplicationStatus, Identity

WARNING_HEADER = "X-Notification-Warning"


def get_engine(request: Request) -> LifecycleEngine:
    return request.app.state.engine


def get_requester(request: Request) -> Identity | None:
    return request.app.state.identity_resolver(request)


def _review_fields(payload: Any) -> tuple[Any, Any]:
    """Pull ``status`` and ``reason`` (or ``reviewReason``) out of a PATCH body.

    The body is read loosely; the engine checks permissions first and then
    rejects anything that is not a valid decision with a 400.
    """
    if not isinstance(payload, Mapping):
        return None, None
    reason = payload.get("reason")
    if reason is None:
        reason = payload.get("reviewReason")
    return payload.get("status"), reason


def _with_warnings(response: Response, result: LifecycleResult) -> Application:
    if result.warnings:
        response.headers[WARNING_HEADER] = "; ".join(result.warnings)
    return result.application


auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.get("/user", response_model=Identity)
async def current_user(requester: Identity | None = Depends(get_requester)) -> Identity:
    if requester is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return requester


router = APIRouter(prefix="/applications", tags=["applications"])


@router.get("", response_model=list[Application])
async def list_applications_endpoint(
    status: ApplicationStatus | None = Query(None, description="Application status"),
    engine: LifecycleEngine = Depends(get_engine),
) -> list[Application]:
    return engine.list(status)


@router.get("/status/{status}", response_model=list[Application])
async def list_applications_by_status_endpoint(
    status: ApplicationStatus,
    engine: LifecycleEngine = Depends(get_engine),
) -> list[Application]:
    return engine.list(status)


@router.get("/{application_id}", response_model=Application)
async def get_application_endpoint(
    application_id: str,
    engine: LifecycleEngine = Depends(get_engine),
) -> Application:
    return engine.get(application_id)


@router.post("", response_model=Application, status_code=status.HTTP_201_CREATED)
async def create_application_endpoint(
    response: Response,
    payload: Any = Body(None),
    requester: Identity | None = Depends(get_requester),
    engine: LifecycleEngine = Depends(get_engine),
) -> Application:
    result = await engine.submit(payload, requester)
    return _with_warnings(response, result)


@router.patch("/{application_id}", response_model=Application)
async def review_application_endpoint(
    application_id: str,
    response: Response,
    payload: Any = Body(None),
    requester: Identity | None = Depends(get_requester),
    engine: LifecycleEngine = Depends(get_engine),
) -> Application:
    target_status, reason = _review_fields(payload)
    result = await engine.review(application_id, target_status, requester, reason)
    return _with_warnings(response, result)


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_application_endpoint(
    application_id: str,
    requester: Identity | None = Depends(get_requester),
    engine: LifecycleEngine = Depends(get_engine),
) -> Response:
    await engine.delete(application_id, requester)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
