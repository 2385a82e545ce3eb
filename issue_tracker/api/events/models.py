"""
라이브 이벤트 모델
"""
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class IssueEventType(str, Enum):
    """이벤트 타입"""
    CONNECTED = "connected"  # 스트림 연결 직후 1회
    PING = "ping"  # 연결 유지 확인
    ISSUE_CREATED = "issue-created"
    ISSUE_UPDATED = "issue-updated"

    def __str__(self) -> str:
        return self.value


class EventStats(BaseModel):
    """이벤트 스트림 통계"""
    total_connections: int = Field(alias="totalConnections")
    active_connections: int = Field(alias="activeConnections")
    total_events_sent: int = Field(alias="totalEventsSent")
    dropped_listeners: int = Field(alias="droppedListeners")

    model_config = ConfigDict(populate_by_name=True)
