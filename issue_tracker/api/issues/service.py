"""
Issues 서비스 로직
"""
import logging
from datetime import datetime, timezone
from typing import List

from fastapi import Depends, HTTPException, status
from pymongo.errors import ConnectionFailure

from ..deps import BroadcasterDep
from ..events.broadcaster import EventBroadcaster
from ..events.models import IssueEventType
from .models import (
    DEFAULT_ASSIGNEE,
    IssueCreate,
    IssueFilters,
    IssueListResponse,
    IssueOut,
    IssuePriority,
    IssueStats,
    IssueStatus,
    IssueUpdate,
    Pagination,
)
from .query import build_issue_query, total_pages
from .repository import IssueRepository

logger = logging.getLogger(__name__)

RECENT_ISSUES_LIMIT = 5


class IssueService:
    """이슈 관리 서비스"""

    def __init__(
        self,
        broadcaster: BroadcasterDep,
        repository: IssueRepository = Depends(IssueRepository),
    ):
        self.repository = repository
        self.broadcaster: EventBroadcaster = broadcaster

    async def list_issues(self, filters: IssueFilters) -> IssueListResponse:
        """
        조건에 맞는 이슈 한 페이지와 페이지 정보를 반환합니다.

        DB에 연결할 수 없으면 에러 대신 빈 페이지를 돌려줍니다.

        Args:
            filters: 검색/필터/정렬/페이지 파라미터

        Returns:
            issues, pagination(page, pageSize, total, totalPages)
        """
        query = build_issue_query(filters)
        try:
            docs = await self.repository.find(
                query.filter, query.sort, skip=query.skip, limit=query.limit
            )
            total = await self.repository.count(query.filter)
        except ConnectionFailure as exc:
            logger.warning(f"Issue list degraded to empty page: {exc}")
            docs, total = [], 0

        return IssueListResponse(
            issues=[IssueOut.model_validate(doc) for doc in docs],
            pagination=Pagination(
                page=filters.page,
                pageSize=filters.pageSize,
                total=total,
                totalPages=total_pages(total, filters.pageSize),
            ),
        )

    async def get_issue(self, issue_id: str) -> IssueOut:
        try:
            doc = await self.repository.get_by_id(issue_id)
        except ConnectionFailure as exc:
            logger.warning(f"Issue lookup failed, database unreachable: {exc}")
            doc = None

        if not doc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Issue not found",
            )
        return IssueOut.model_validate(doc)

    async def create_issue(self, payload: IssueCreate) -> IssueOut:
        """
        이슈를 생성하고 issue-created 이벤트를 보냅니다.

        Args:
            payload: 이슈 생성 데이터

        Returns:
            저장된 이슈
        """
        title = payload.title.strip() if payload.title else ""
        if not title or not payload.description:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Title and description are required",
            )

        now = datetime.now(timezone.utc)
        doc = {
            "title": title,
            "description": payload.description,
            "status": payload.status or IssueStatus.OPEN.value,
            "priority": payload.priority or IssuePriority.MEDIUM.value,
            "assignee": payload.assignee or DEFAULT_ASSIGNEE,
            "createdAt": now,
            "updatedAt": now,
        }

        try:
            saved = await self.repository.insert(doc)
        except ConnectionFailure as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Database unavailable",
            ) from exc

        issue = IssueOut.model_validate(saved)
        logger.info(f"Created issue: id={issue.id}, title={issue.title!r}")
        await self._publish(IssueEventType.ISSUE_CREATED, issue)
        return issue

    async def update_issue(self, issue_id: str, patch: IssueUpdate) -> IssueOut:
        """
        보낸 필드만 반영해 이슈를 수정하고 issue-updated 이벤트를 보냅니다.

        빈 값은 무시하지만 assignee는 명시적으로 보낸 경우 빈 문자열이나 null도 반영합니다.

        Args:
            issue_id: 이슈 ID
            patch: 수정할 필드

        Returns:
            수정된 이슈
        """
        try:
            existing = await self.repository.get_by_id(issue_id)
            if not existing:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Issue not found",
                )

            fields = self._changed_fields(patch)
            fields["updatedAt"] = datetime.now(timezone.utc)
            updated = await self.repository.update(issue_id, fields)
        except ConnectionFailure as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Database unavailable",
            ) from exc

        # 조회와 수정 사이에 문서가 사라진 경우
        if not updated:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Issue not found",
            )

        issue = IssueOut.model_validate(updated)
        logger.info(f"Updated issue: id={issue.id}, fields={sorted(fields)}")
        await self._publish(IssueEventType.ISSUE_UPDATED, issue)
        return issue

    async def list_assignees(self) -> List[str]:
        try:
            assignees = await self.repository.distinct("assignee")
        except ConnectionFailure as exc:
            logger.warning(f"Assignee list degraded to empty: {exc}")
            return []
        return [a for a in assignees if a and a != DEFAULT_ASSIGNEE]

    async def get_stats(self) -> IssueStats:
        """대시보드용 상태/우선순위별 개수와 최근 이슈"""
        try:
            recent = await self.repository.find(
                {}, ("createdAt", -1), limit=RECENT_ISSUES_LIMIT
            )
            return IssueStats(
                total=await self.repository.count({}),
                open=await self.repository.count({"status": IssueStatus.OPEN.value}),
                inProgress=await self.repository.count(
                    {"status": IssueStatus.IN_PROGRESS.value}
                ),
                closed=await self.repository.count(
                    {"status": IssueStatus.CLOSED.value}
                ),
                critical=await self.repository.count(
                    {"priority": IssuePriority.CRITICAL.value}
                ),
                recent=[IssueOut.model_validate(doc) for doc in recent],
            )
        except ConnectionFailure as exc:
            logger.warning(f"Issue stats degraded to empty: {exc}")
            return IssueStats()

    def _changed_fields(self, patch: IssueUpdate) -> dict:
        fields = {}
        title = patch.title.strip() if patch.title else ""
        if title:
            fields["title"] = title
        if patch.description:
            fields["description"] = patch.description
        if patch.status:
            fields["status"] = patch.status
        if patch.priority:
            fields["priority"] = patch.priority
        if "assignee" in patch.model_fields_set:
            fields["assignee"] = patch.assignee
        return fields

    async def _publish(self, event_type: IssueEventType, issue: IssueOut) -> None:
        await self.broadcaster.broadcast(
            event_type, issue.model_dump(mode="json", by_alias=True)
        )
