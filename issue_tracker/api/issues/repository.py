"""
issues 컬렉션 접근 계층
"""
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from issue_tracker.config.db import ISSUES_COLLECTION
from ..deps import DbDep


class IssueRepository:
    """
    Motor 컬렉션을 감싼 이슈 저장소

    pymongo 예외는 그대로 올려보냅니다. DB에 닿지 못하면
    ConnectionFailure(ServerSelectionTimeoutError 포함)가 발생합니다.
    """

    def __init__(self, db: DbDep):
        self.db = db
        self.collection = db.get_collection(ISSUES_COLLECTION)

    async def find(
        self,
        query: Dict[str, Any],
        sort: Tuple[str, int],
        skip: int = 0,
        limit: int = 0,
    ) -> List[dict]:
        cursor = self.collection.find(query).sort(*sort).skip(skip).limit(limit)
        return await cursor.to_list(length=None)

    async def count(self, query: Dict[str, Any]) -> int:
        return await self.collection.count_documents(query)

    async def distinct(self, field: str) -> List[Any]:
        return await self.collection.distinct(field)

    async def get_by_id(self, issue_id: str) -> Optional[dict]:
        try:
            issue_oid = ObjectId(issue_id)
        except (InvalidId, TypeError):
            return None
        return await self.collection.find_one({"_id": issue_oid})

    async def insert(self, doc: Dict[str, Any]) -> dict:
        result = await self.collection.insert_one(doc)
        return {**doc, "_id": result.inserted_id}

    async def update(self, issue_id: str, fields: Dict[str, Any]) -> Optional[dict]:
        try:
            issue_oid = ObjectId(issue_id)
        except (InvalidId, TypeError):
            return None
        return await self.collection.find_one_and_update(
            {"_id": issue_oid},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
