# File: infrastructure/database/mongodb/repository.py

from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from common.exceptions.base_exception import StorageUnavailableException
from common.logging.logger import log_info, log_debug, log_error


class MongoRepository:
    """
    Thin async wrapper over one Motor collection.

    Every failure is logged and re-raised as StorageUnavailableException so callers
    deal with a single storage error type.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str):
        self.db = db
        self.collection = db[collection_name]

    @staticmethod
    def _convert_to_objectid(value: Any) -> Any:
        if isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        return value

    def _normalize_query(self, query: Dict[str, Any]) -> Dict[str, Any]:
        query = dict(query)
        if "_id" in query:
            query["_id"] = self._convert_to_objectid(query["_id"])
        return query

    @staticmethod
    def _stringify_id(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if document and "_id" in document:
            document["_id"] = str(document["_id"])
        return document

    async def insert_one(self, document: Dict[str, Any]) -> str:
        try:
            document = self._normalize_query(document)
            result = await self.collection.insert_one(document)
            inserted_id = str(result.inserted_id)
            log_info("Mongo insert_one", extra={"collection": self.collection.name, "id": inserted_id})
            return inserted_id
        except Exception as e:
            log_error("Mongo insert_one failed", extra={"collection": self.collection.name, "error": str(e)}, exc_info=True)
            raise StorageUnavailableException("Failed to insert document: Internal DB error")

    async def insert_if_absent(self, document: Dict[str, Any]) -> Optional[str]:
        """Insert relying on a unique index; returns None when an equal key already exists."""
        try:
            document = self._normalize_query(document)
            result = await self.collection.insert_one(document)
            inserted_id = str(result.inserted_id)
            log_info("Mongo insert_if_absent", extra={"collection": self.collection.name, "id": inserted_id})
            return inserted_id
        except DuplicateKeyError:
            log_info("Mongo insert_if_absent skipped existing key", extra={"collection": self.collection.name})
            return None
        except Exception as e:
            log_error("Mongo insert_if_absent failed", extra={"collection": self.collection.name, "error": str(e)}, exc_info=True)
            raise StorageUnavailableException("Failed to insert document: Internal DB error")

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            query = self._normalize_query(query)
            result = self._stringify_id(await self.collection.find_one(query))
            log_debug("Mongo find_one", extra={"collection": self.collection.name, "query": str(query), "found": bool(result)})
            return result
        except Exception as e:
            log_error("Mongo find_one failed", extra={"collection": self.collection.name, "error": str(e)}, exc_info=True)
            raise StorageUnavailableException("Failed to find document: Internal DB error")

    async def find_by_id(self, document_id: str) -> Optional[Dict[str, Any]]:
        return await self.find_one({"_id": document_id})

    async def find(
        self,
        query: Dict[str, Any],
        sort: Optional[List[Tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        try:
            query = self._normalize_query(query)
            cursor = self.collection.find(query)
            if sort:
                cursor = cursor.sort(sort)
            if skip:
                cursor = cursor.skip(skip)
            if limit:
                cursor = cursor.limit(limit)
            result = await cursor.to_list(length=limit or None)
            for doc in result:
                self._stringify_id(doc)
            log_debug("Mongo find", extra={"collection": self.collection.name, "query": str(query), "skip": skip, "limit": limit, "sort": sort, "count": len(result)})
            return result
        except Exception as e:
            log_error("Mongo find failed", extra={"collection": self.collection.name, "error": str(e)}, exc_info=True)
            raise StorageUnavailableException("Failed to fetch documents: Internal DB error")

    async def count(self, query: Dict[str, Any]) -> int:
        try:
            query = self._normalize_query(query)
            total = await self.collection.count_documents(query)
            log_debug("Mongo count", extra={"collection": self.collection.name, "query": str(query), "count": total})
            return total
        except Exception as e:
            log_error("Mongo count failed", extra={"collection": self.collection.name, "error": str(e)}, exc_info=True)
            raise StorageUnavailableException("Failed to count documents: Internal DB error")

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any]) -> int:
        return await self.update_with_operators(query, {"$set": update})

    async def update_with_operators(self, query: Dict[str, Any], operators: Dict[str, Any], upsert: bool = False) -> int:
        """Apply raw update operators ($set, $inc, $addToSet, $setOnInsert) in a single atomic write."""
        try:
            query = self._normalize_query(query)
            result = await self.collection.update_one(query, operators, upsert=upsert)
            affected = result.modified_count + (1 if result.upserted_id is not None else 0)
            log_info("Mongo update_one", extra={"collection": self.collection.name, "query": str(query), "operators": list(operators), "modified": affected})
            return affected
        except Exception as e:
            log_error("Mongo update_one failed", extra={"collection": self.collection.name, "error": str(e)}, exc_info=True)
            raise StorageUnavailableException("Failed to update document: Internal DB error")

    async def increment(self, query: Dict[str, Any], field: str, amount: int) -> int:
        return await self.update_with_operators(query, {"$inc": {field: amount}})

    async def find_one_and_upsert(self, query: Dict[str, Any], operators: Dict[str, Any]) -> Dict[str, Any]:
        """Upsert and return the resulting document."""
        try:
            query = self._normalize_query(query)
            result = await self.collection.find_one_and_update(
                query, operators, upsert=True, return_document=ReturnDocument.AFTER
            )
            log_debug("Mongo find_one_and_upsert", extra={"collection": self.collection.name, "query": str(query)})
            return self._stringify_id(result)
        except Exception as e:
            log_error("Mongo find_one_and_upsert failed", extra={"collection": self.collection.name, "error": str(e)}, exc_info=True)
            raise StorageUnavailableException("Failed to upsert document: Internal DB error")

    async def count_by(self, query: Dict[str, Any], field: str) -> Dict[Any, int]:
        """Count matching documents grouped by the value of ``field``."""
        try:
            query = self._normalize_query(query)
            pipeline = [
                {"$match": query},
                {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
            ]
            groups = await self.collection.aggregate(pipeline).to_list(length=None)
            log_debug("Mongo count_by", extra={"collection": self.collection.name, "query": str(query), "field": field, "groups": len(groups)})
            return {group["_id"]: group["count"] for group in groups}
        except Exception as e:
            log_error("Mongo count_by failed", extra={"collection": self.collection.name, "error": str(e)}, exc_info=True)
            raise StorageUnavailableException("Failed to count documents: Internal DB error")
