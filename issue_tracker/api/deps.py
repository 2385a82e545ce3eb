from typing import Annotated
from motor.motor_asyncio import AsyncIOMotorDatabase
from fastapi import Depends, Request

from issue_tracker.config.db import get_db
from .events.broadcaster import EventBroadcaster

DbDep = Annotated[AsyncIOMotorDatabase, Depends(get_db)]


def get_broadcaster(request: Request) -> EventBroadcaster:
    return request.app.state.broadcaster


BroadcasterDep = Annotated[EventBroadcaster, Depends(get_broadcaster)]
