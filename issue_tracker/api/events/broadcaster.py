"""
이슈 변경 이벤트 브로드캐스터
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Set

from .models import EventStats, IssueEventType

logger = logging.getLogger(__name__)


class EventBroadcaster:
    """
    열린 SSE 연결(구독자) 레지스트리

    구독자마다 크기가 제한된 asyncio.Queue 하나를 채널로 가집니다.
    애플리케이션당 하나만 만들어 app.state에 두고 의존성으로 주입합니다.
    이벤트 루프 단일 스레드에서만 접근하므로 별도의 락은 두지 않습니다.
    """

    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._channels: Set[asyncio.Queue] = set()
        self.stats = {
            "total_connections": 0,
            "total_events_sent": 0,
            "dropped_listeners": 0,
        }

    @property
    def listener_count(self) -> int:
        return len(self._channels)

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        self._channels.add(queue)
        self.stats["total_connections"] += 1
        logger.info(f"New event subscriber. Total listeners: {len(self._channels)}")
        return queue

    def is_subscribed(self, queue: asyncio.Queue) -> bool:
        return queue in self._channels

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._channels:
            self._channels.discard(queue)
            logger.info(
                f"Event subscriber removed. Remaining listeners: {len(self._channels)}"
            )

    async def broadcast(
        self, event_type: IssueEventType, payload: Dict[str, Any]
    ) -> int:
        """
        모든 구독자 채널에 이벤트를 넣습니다.

        전송에 실패한 채널(큐가 가득 참)은 죽은 연결로 보고 레지스트리에서
        제거하며, 나머지 채널로의 전송은 계속합니다. 늦게 연결된 구독자에게
        지난 이벤트를 다시 보내지는 않습니다.

        Args:
            event_type: 이벤트 타입
            payload: 직렬화 가능한 이벤트 본문 (이슈 문서)

        Returns:
            이벤트를 받은 채널 수
        """
        event = {
            "event": str(event_type),
            "data": {
                "eventType": str(event_type),
                "payload": payload,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        }

        listeners = list(self._channels)
        dead_queues = []
        for queue in listeners:
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning("Queue full for event listener, marking as dead")
                dead_queues.append(queue)

        for dead_queue in dead_queues:
            self._channels.discard(dead_queue)
        self.stats["dropped_listeners"] += len(dead_queues)

        delivered = len(listeners) - len(dead_queues)
        self.stats["total_events_sent"] += delivered
        logger.info(f"Broadcasting {event_type} to {delivered} listeners")
        if dead_queues:
            logger.debug(f"Removed {len(dead_queues)} dead connections")
        return delivered

    def snapshot(self) -> EventStats:
        return EventStats(
            total_connections=self.stats["total_connections"],
            active_connections=len(self._channels),
            total_events_sent=self.stats["total_events_sent"],
            dropped_listeners=self.stats["dropped_listeners"],
        )
