"""Company factory for test data generation."""

from polyfactory import Use

from src.teamdesk.models import Tenant
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class TenantFactory(BaseFactory):
    """Factory for generating Tenant (company) test data."""

    __model__ = Tenant

    id = Use(generate_uuid)
    name = Use(lambda: f"Test Company {generate_uuid().hex[-8:]}")
    owner_user_id = None  # Required FK - must be set explicitly
    created_at = Use(utc_now)
