"""
이슈 라이브 이벤트 SSE 엔드포인트
"""
import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import AsyncIterator, Dict

from fastapi import APIRouter
from sse_starlette.sse import EventSourceResponse

from issue_tracker.config.env import SSE_PING_INTERVAL
from ..deps import BroadcasterDep
from .broadcaster import EventBroadcaster
from .models import EventStats, IssueEventType

events_router = APIRouter(prefix="/events", tags=["Events"])
logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


async def issue_event_stream(
    broadcaster: EventBroadcaster,
    ping_interval: float = SSE_PING_INTERVAL,
) -> AsyncIterator[Dict[str, str]]:
    """
    새 구독자 채널을 열어 SSE 이벤트 스트림으로 바꿉니다.

    연결 직후 connected 이벤트를 한 번 보내고, 이벤트 수신 여부와 관계없이
    ping_interval마다 ping을 보냅니다. 스트림이 어떤 이유로 끝나든 채널은 구독 해제됩니다.
    """
    queue = broadcaster.subscribe()
    try:
        yield {
            "event": str(IssueEventType.CONNECTED),
            "data": json.dumps(
                {"message": "Connected to issue events", "timestamp": _now()}
            ),
        }

        loop = asyncio.get_running_loop()
        next_ping = loop.time() + ping_interval

        while True:
            timeout = next_ping - loop.time()
            if timeout <= 0:
                # 큐가 가득 차 레지스트리에서 빠진 채널이면 스트림을 끝내 재연결을 유도
                if not broadcaster.is_subscribed(queue):
                    logger.info("Event channel was dropped, closing stream")
                    break
                yield {
                    "event": str(IssueEventType.PING),
                    "data": json.dumps({"timestamp": _now()}),
                }
                next_ping = loop.time() + ping_interval
                continue

            try:
                event_data = await asyncio.wait_for(queue.get(), timeout=timeout)
            except asyncio.TimeoutError:
                continue

            yield {
                "event": event_data.get("event", "message"),
                "data": json.dumps(
                    event_data.get("data", {}), ensure_ascii=False, default=str
                ),
            }

    except asyncio.CancelledError:
        logger.info("Issue event stream cancelled")
        raise
    finally:
        broadcaster.unsubscribe(queue)


@events_router.get("")
async def issue_events(broadcaster: BroadcasterDep):
    """
    이슈 생성/수정 이벤트를 SSE로 스트리밍

    Event Types:
    - connected: 연결 직후 1회
    - ping: 연결 유지 확인 (기본 15초)
    - issue-created: 이슈 생성
    - issue-updated: 이슈 수정

    Event Data Format:
    {
        "eventType": "issue-updated",
        "payload": { ...issue },
        "timestamp": "2024-01-01T00:00:00+00:00"
    }
    """
    return EventSourceResponse(issue_event_stream(broadcaster))


@events_router.get("/stats", response_model=EventStats)
async def get_event_stats(broadcaster: BroadcasterDep) -> EventStats:
    """이벤트 스트림 통계 조회"""
    return broadcaster.snapshot()
