"""
Issues 관련 모델들
"""
from datetime import datetime
from typing import Optional, Annotated, List
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, BeforeValidator
from bson import ObjectId


PyObjectId = Annotated[
    str, BeforeValidator(lambda v: str(v) if isinstance(v, ObjectId) else v)
]

DEFAULT_ASSIGNEE = "Unassigned"
ALL_ASSIGNEES = "all"


class IssueStatus(str, Enum):
    """이슈 상태"""
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    CLOSED = "closed"


class IssuePriority(str, Enum):
    """이슈 우선순위"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IssueCreate(BaseModel):
    """
    이슈 생성 모델

    title/description 누락은 서비스에서 400으로 처리하므로 여기서는 선택값입니다.
    status/priority 값은 열거형으로 검증하지 않고 그대로 저장합니다.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    assignee: Optional[str] = None


class IssueUpdate(BaseModel):
    """이슈 부분 수정 모델 (보낸 필드만 반영)"""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    assignee: Optional[str] = None


class IssueOut(BaseModel):
    """이슈 출력 모델"""
    id: PyObjectId = Field(alias="_id")
    title: str
    description: str
    status: str = IssueStatus.OPEN.value
    priority: str = IssuePriority.MEDIUM.value
    assignee: Optional[str] = DEFAULT_ASSIGNEE
    createdAt: datetime
    updatedAt: datetime

    model_config = ConfigDict(populate_by_name=True)


class IssueFilters(BaseModel):
    """목록 조회 파라미터"""
    search: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    assignee: Optional[str] = None
    sortBy: str = "updatedAt"
    sortOrder: str = "desc"
    page: int = Field(1, ge=1)
    pageSize: int = Field(10, ge=1)


class Pagination(BaseModel):
    page: int
    pageSize: int
    total: int
    totalPages: int


class IssueListResponse(BaseModel):
    issues: List[IssueOut]
    pagination: Pagination


class IssueStats(BaseModel):
    """대시보드 통계"""
    total: int = 0
    open: int = 0
    inProgress: int = 0
    closed: int = 0
    critical: int = 0
    recent: List[IssueOut] = []
