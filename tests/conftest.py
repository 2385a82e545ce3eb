"""
Pytest configuration and fixtures
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest
from bson import ObjectId
from bson.errors import InvalidId
from httpx import ASGITransport, AsyncClient
from pymongo.errors import ServerSelectionTimeoutError

from issue_tracker.api.events.broadcaster import EventBroadcaster
from issue_tracker.api.issues.repository import IssueRepository
from issue_tracker.api.issues.service import IssueService
from issue_tracker.config.db import get_db
from issue_tracker.main import create_app


def _matches(doc: dict, query: Dict[str, Any]) -> bool:
    for field, condition in query.items():
        value = doc.get(field)
        if isinstance(condition, dict) and "$regex" in condition:
            flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
            if value is None or not re.search(condition["$regex"], value, flags):
                return False
        elif value != condition:
            return False
    return True


class FakeIssueRepository:
    """IssueRepository와 같은 인터페이스의 메모리 저장소"""

    def __init__(self):
        self.docs: Dict[ObjectId, dict] = {}
        self.unreachable = False

    def _check(self):
        if self.unreachable:
            raise ServerSelectionTimeoutError("localhost:27017: connection refused")

    def add(self, **fields) -> dict:
        now = datetime.now(timezone.utc)
        doc = {
            "_id": ObjectId(),
            "description": "description",
            "status": "open",
            "priority": "medium",
            "assignee": "Unassigned",
            "createdAt": now,
            "updatedAt": now,
            **fields,
        }
        self.docs[doc["_id"]] = doc
        return doc

    async def find(
        self,
        query: Dict[str, Any],
        sort: Tuple[str, int],
        skip: int = 0,
        limit: int = 0,
    ) -> List[dict]:
        self._check()
        field, direction = sort
        found = [dict(d) for d in self.docs.values() if _matches(d, query)]
        found.sort(key=lambda d: d.get(field), reverse=direction == -1)
        found = found[skip:]
        return found[:limit] if limit else found

    async def count(self, query: Dict[str, Any]) -> int:
        self._check()
        return sum(1 for d in self.docs.values() if _matches(d, query))

    async def distinct(self, field: str) -> List[Any]:
        self._check()
        values = []
        for doc in self.docs.values():
            if doc.get(field) not in values:
                values.append(doc.get(field))
        return values

    async def get_by_id(self, issue_id: str) -> Optional[dict]:
        self._check()
        try:
            doc = self.docs.get(ObjectId(issue_id))
        except (InvalidId, TypeError):
            return None
        return dict(doc) if doc else None

    async def insert(self, doc: Dict[str, Any]) -> dict:
        self._check()
        stored = {**doc, "_id": ObjectId()}
        self.docs[stored["_id"]] = stored
        return dict(stored)

    async def update(self, issue_id: str, fields: Dict[str, Any]) -> Optional[dict]:
        self._check()
        doc = self.docs.get(ObjectId(issue_id))
        if doc is None:
            return None
        doc.update(fields)
        return dict(doc)


class FakeDb:
    def __init__(self, connected: bool = True):
        self.connected = connected

    async def command(self, name: str):
        if not self.connected:
            raise ServerSelectionTimeoutError("localhost:27017: connection refused")
        return {"ok": 1.0}


@pytest.fixture
def repository() -> FakeIssueRepository:
    return FakeIssueRepository()


@pytest.fixture
def seeded_repository(repository: FakeIssueRepository) -> FakeIssueRepository:
    """우선순위/상태/담당자가 섞인 이슈 12개"""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    statuses = ["open", "in-progress", "closed"]
    priorities = ["low", "medium", "high", "critical"]
    assignees = ["Alice", "Bob", "Unassigned", ""]
    for i in range(12):
        ts = base + timedelta(hours=i)
        repository.add(
            title=f"Issue {i:02d} {'Login bug' if i % 5 == 0 else 'Task'}",
            status=statuses[i % 3],
            priority=priorities[i % 4],
            assignee=assignees[i % 4],
            createdAt=ts,
            updatedAt=ts,
        )
    return repository


@pytest.fixture
def broadcaster() -> EventBroadcaster:
    return EventBroadcaster(queue_size=10)


@pytest.fixture
def service(repository, broadcaster) -> IssueService:
    return IssueService(broadcaster, repository=repository)


@pytest.fixture
def fake_db() -> FakeDb:
    return FakeDb()


@pytest.fixture
def app(repository, fake_db):
    application = create_app()
    application.dependency_overrides[IssueRepository] = lambda: repository
    application.dependency_overrides[get_db] = lambda: fake_db
    return application


@pytest.fixture
async def client(app):
    """테스트용 HTTP 클라이언트 (ASGI 직접 호출)"""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
