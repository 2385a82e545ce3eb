from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from issue_tracker.middleware.middleware import LoggingMiddleware
from issue_tracker.config.env import origins as allowed_origins, EVENT_QUEUE_SIZE
from issue_tracker.config.db import ping_db
from issue_tracker.config.lifespan import lifespan
from issue_tracker.errors import register_exception_handlers
from issue_tracker.api.deps import DbDep
from issue_tracker.api.events.broadcaster import EventBroadcaster
from issue_tracker.api.main import api_router


def create_app() -> FastAPI:
    app = FastAPI(
        title="Issue Tracker",
        description="이슈 트래커 API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.broadcaster = EventBroadcaster(queue_size=EVENT_QUEUE_SIZE)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router)

    # 서버 상태 확인용
    @app.get("/health", tags=["Status"])
    async def health(db: DbDep):
        return {"status": "ok", "dbConnected": await ping_db(db)}

    return app


app = create_app()
