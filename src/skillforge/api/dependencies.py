"""Shared dependencies for API routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from skillforge.ai.gateway import ContentGateway
from skillforge.services.data_service import DataService, build_data_service


def get_current_uid(
    x_user_id: Annotated[
        str | None,
        Header(
            description=(
                "Opaque identity of the signed-in user. In production this "
                "should come from the authentication backend's session token."
            )
        ),
    ] = None,
) -> str:
    """Get the current user's uid from the X-User-Id header.

    Raises:
        HTTPException: If the header is missing (401).
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication. Please provide X-User-Id header.",
        )
    return x_user_id


def get_data_service(request: Request) -> DataService:
    """Return the application's data service, building it on first use."""
    service = getattr(request.app.state, "data_service", None)
    if service is None:
        service = build_data_service()
        request.app.state.data_service = service
    return service


def get_gateway(request: Request) -> ContentGateway:
    """Return the application's AI gateway, building it on first use."""
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        gateway = ContentGateway()
        request.app.state.gateway = gateway
    return gateway


CurrentUid = Annotated[str, Depends(get_current_uid)]
DataServiceDep = Annotated[DataService, Depends(get_data_service)]
GatewayDep = Annotated[ContentGateway, Depends(get_gateway)]
