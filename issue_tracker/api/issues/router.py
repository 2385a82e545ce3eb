from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from .models import (
    IssueCreate,
    IssueFilters,
    IssueListResponse,
    IssueOut,
    IssueStats,
    IssueUpdate,
)
from .service import IssueService

issue_router = APIRouter(prefix="/issues", tags=["Issues"])
assignee_router = APIRouter(prefix="/assignees", tags=["Issues"])
stats_router = APIRouter(prefix="/stats", tags=["Issues"])


@issue_router.get("", response_model=IssueListResponse, summary="이슈 목록 조회")
async def list_issues(
    search: Optional[str] = Query(None, description="제목 검색어"),
    status_: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = Query(None),
    assignee: Optional[str] = Query(None, description="'all'이면 필터 없음"),
    sortBy: str = Query("updatedAt", description="정렬 필드"),
    sortOrder: str = Query("desc", description="asc 외에는 모두 내림차순"),
    page: int = Query(1, ge=1),
    pageSize: int = Query(10, ge=1),
    issue_service: IssueService = Depends(IssueService),
) -> IssueListResponse:
    filters = IssueFilters(
        search=search,
        status=status_,
        priority=priority,
        assignee=assignee,
        sortBy=sortBy,
        sortOrder=sortOrder,
        page=page,
        pageSize=pageSize,
    )
    return await issue_service.list_issues(filters)


@issue_router.get("/{issue_id}", response_model=IssueOut, summary="이슈 상세 조회")
async def get_issue(
    issue_id: str,
    issue_service: IssueService = Depends(IssueService),
) -> IssueOut:
    return await issue_service.get_issue(issue_id)


@issue_router.post(
    "",
    response_model=IssueOut,
    status_code=status.HTTP_201_CREATED,
    summary="이슈 생성",
)
async def create_issue(
    payload: IssueCreate,
    issue_service: IssueService = Depends(IssueService),
) -> IssueOut:
    return await issue_service.create_issue(payload)


@issue_router.put("/{issue_id}", response_model=IssueOut, summary="이슈 수정")
async def update_issue(
    issue_id: str,
    patch: IssueUpdate,
    issue_service: IssueService = Depends(IssueService),
) -> IssueOut:
    return await issue_service.update_issue(issue_id, patch)


@assignee_router.get("", response_model=List[str], summary="담당자 목록")
async def list_assignees(
    issue_service: IssueService = Depends(IssueService),
) -> List[str]:
    return await issue_service.list_assignees()


@stats_router.get("", response_model=IssueStats, summary="대시보드 통계")
async def get_issue_stats(
    issue_service: IssueService = Depends(IssueService),
) -> IssueStats:
    return await issue_service.get_stats()
