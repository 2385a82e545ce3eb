"""
로컬 개발용 샘플 이슈 시드 스크립트

실행: issue-tracker-seed [--keep]
"""
import argparse
import logging
import os
import sys
from datetime import datetime, timezone
from typing import List

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from issue_tracker.config.db import ISSUES_COLLECTION, mongo_uri
from issue_tracker.config.env import DB_NAME

logger = logging.getLogger(__name__)

SAMPLE_ISSUES = [
    {
        "title": "Welcome to Issue Tracker Pro!",
        "description": "This is a seeded issue to get you started. Feel free to edit or delete it.",
        "status": "open",
        "priority": "medium",
        "assignee": "Demo User",
    },
    {
        "title": "Set up your first real project",
        "description": "Create your first issue by clicking the Create Issue button.",
        "status": "in-progress",
        "priority": "high",
        "assignee": "Project Manager",
    },
    {
        "title": "Explore dashboard analytics",
        "description": "Check out the dashboard with real-time statistics.",
        "status": "closed",
        "priority": "low",
        "assignee": "Analytics Team",
    },
]


def get_database() -> Database:
    uri, options = mongo_uri()
    client = MongoClient(uri, **options)
    return client[DB_NAME]


def sample_issues(now: datetime) -> List[dict]:
    return [{**issue, "createdAt": now, "updatedAt": now} for issue in SAMPLE_ISSUES]


def seed(db: Database, keep_existing: bool = False) -> int:
    """
    샘플 이슈를 넣고 컬렉션의 전체 문서 수를 반환합니다.

    Args:
        db: 대상 데이터베이스
        keep_existing: True면 기존 이슈를 지우지 않습니다
    """
    collection = db[ISSUES_COLLECTION]
    if not keep_existing:
        collection.delete_many({})
    collection.insert_many(sample_issues(datetime.now(timezone.utc)))
    return collection.count_documents({})


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Seed sample issues")
    parser.add_argument(
        "--keep", action="store_true", help="기존 이슈를 지우지 않고 추가"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        db = get_database()
    except (KeyError, PyMongoError) as exc:
        logger.error(f"Seeding failed, cannot connect: {exc!r}")
        return 1

    try:
        logger.info(f"Seeding issues into db={db.name}")
        count = seed(db, keep_existing=args.keep)
    except PyMongoError as exc:
        logger.error(f"Seeding failed: {exc}")
        return 1
    finally:
        db.client.close()

    logger.info(f"Seeded. {count} issues in collection")
    return 0


if __name__ == "__main__":
    sys.exit(main())
