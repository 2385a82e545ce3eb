from fastapi import APIRouter

from .issues.router import issue_router, assignee_router, stats_router
from .events.router import events_router

api_router = APIRouter()

api_router.include_router(issue_router)
api_router.include_router(assignee_router)
api_router.include_router(stats_router)
api_router.include_router(events_router)
