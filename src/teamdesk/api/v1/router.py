from fastapi import APIRouter

from src.teamdesk.api.v1 import invitations, members, membership_requests

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(members.router)
api_router.include_router(invitations.router)
api_router.include_router(membership_requests.router)
