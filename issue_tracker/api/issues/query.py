"""
목록 조회 파라미터 -> MongoDB 쿼리 변환
"""
import math
import re
from typing import Any, Dict, NamedTuple, Tuple

from .models import ALL_ASSIGNEES, IssueFilters

DEFAULT_SORT_FIELD = "updatedAt"


class IssueQuery(NamedTuple):
    filter: Dict[str, Any]
    sort: Tuple[str, int]
    skip: int
    limit: int


def build_issue_query(filters: IssueFilters) -> IssueQuery:
    """
    조회 파라미터로 필터, 정렬, skip/limit을 만듭니다.

    값이 없거나 빈 파라미터는 조건에 넣지 않고, 넣은 조건끼리는 AND로 묶입니다.
    """
    query: Dict[str, Any] = {}

    # 제목 검색 (대소문자 무시 부분 일치)
    if filters.search:
        query["title"] = {"$regex": re.escape(filters.search), "$options": "i"}

    if filters.status:
        query["status"] = filters.status
    if filters.priority:
        query["priority"] = filters.priority
    if filters.assignee and filters.assignee != ALL_ASSIGNEES:
        query["assignee"] = filters.assignee

    sort_field = filters.sortBy or DEFAULT_SORT_FIELD
    direction = 1 if filters.sortOrder == "asc" else -1

    skip = (filters.page - 1) * filters.pageSize
    return IssueQuery(query, (sort_field, direction), skip, filters.pageSize)


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size)
