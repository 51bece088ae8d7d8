"""Tenant header extraction and validation dependencies."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.teamdesk.api.dependencies.db import DBSession
from src.teamdesk.core.logging import bind_tenant_context
from src.teamdesk.models import Tenant
from src.teamdesk.repositories import TenantRepository


async def get_tenant_id_from_header(
    x_tenant_id: Annotated[str | None, Header()] = None,
) -> UUID:
    """Extract company id from header."""
    if not x_tenant_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Tenant-ID header is required",
        )
    try:
        return UUID(x_tenant_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Tenant-ID header must be a UUID",
        ) from None


async def get_validated_tenant(
    tenant_id: Annotated[UUID, Depends(get_tenant_id_from_header)],
    session: DBSession,
) -> Tenant:
    """Validate the company exists."""
    tenant = await TenantRepository(session).get_tenant(tenant_id)
    if tenant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tenant not found",
        )
    bind_tenant_context(tenant.id)
    return tenant


ValidatedTenant = Annotated[Tenant, Depends(get_validated_tenant)]
