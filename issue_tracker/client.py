"""
Issue Tracker REST API 비동기 클라이언트
"""
from typing import Any, Dict, List, Optional

import httpx

DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 10.0


class IssueTrackerError(Exception):
    """API가 2xx 이외의 응답을 돌려준 경우"""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class IssueTrackerClient:
    """
    사용 예:

        async with IssueTrackerClient("http://localhost:5000") as api:
            page = await api.get_issues(status="open", pageSize=20)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "IssueTrackerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        response = await self._client.request(method, url, **kwargs)
        if response.is_error:
            try:
                message = response.json().get("error", response.text)
            except ValueError:
                message = response.text
            raise IssueTrackerError(response.status_code, message)
        return response.json()

    async def health(self) -> Dict[str, Any]:
        return await self._request("GET", "/health")

    async def get_issues(self, **filters: Any) -> Dict[str, Any]:
        # 빈 값은 쿼리스트링에서 뺍니다
        params = {
            key: str(value)
            for key, value in filters.items()
            if value is not None and value != ""
        }
        return await self._request("GET", "/issues", params=params)

    async def get_issue(self, issue_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/issues/{issue_id}")

    async def create_issue(
        self,
        title: str,
        description: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        assignee: Optional[str] = None,
    ) -> Dict[str, Any]:
        body = {"title": title, "description": description}
        if status is not None:
            body["status"] = status
        if priority is not None:
            body["priority"] = priority
        if assignee is not None:
            body["assignee"] = assignee
        return await self._request("POST", "/issues", json=body)

    async def update_issue(self, issue_id: str, **fields: Any) -> Dict[str, Any]:
        return await self._request("PUT", f"/issues/{issue_id}", json=fields)

    async def get_assignees(self) -> List[str]:
        return await self._request("GET", "/assignees")

    async def get_stats(self) -> Dict[str, Any]:
        return await self._request("GET", "/stats")
