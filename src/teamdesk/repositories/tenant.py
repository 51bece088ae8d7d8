"""Repository for Tenant (company) entity."""

from typing import Protocol
from uuid import UUID

from src.teamdesk.models import Tenant
from src.teamdesk.repositories.base import BaseRepository


class TenantRegistry(Protocol):
    """Read access to company records."""

    async def get_tenant(self, tenant_id: UUID) -> Tenant | None: ...


class TenantRepository(BaseRepository[Tenant]):
    """Company registry backed by the companies table."""

    model = Tenant

    async def get_tenant(self, tenant_id: UUID) -> Tenant | None:
        """Get company by id, or None if it does not exist."""
        return await self.get_by_id(tenant_id)
