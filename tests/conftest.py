import os
import tempfile

os.environ.setdefault("ACCESS_SECRET", "test-secret")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="civic-logs-"))
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="civic-uploads-"))

import copy  # noqa: E402
import re  # noqa: E402
from collections import Counter  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import Any, Dict, Iterable, List, Optional, Tuple  # noqa: E402

import pytest  # noqa: E402
from bson import ObjectId  # noqa: E402
from redis.exceptions import ConnectionError as RedisConnectionError  # noqa: E402

from common.exceptions.base_exception import StorageUnavailableException  # noqa: E402
from domain.badges.services.badge_engine import BadgeEngine  # noqa: E402
from domain.gamification.services.points_ledger import PointsLedger  # noqa: E402
from domain.reports.services.duplicate_detector import DuplicateWindow  # noqa: E402
from domain.reports.services.intake_service import ReportIntakeService  # noqa: E402

_MISSING = object()


def _resolve(document: Dict[str, Any], path: str) -> Any:
    value: Any = document
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _matches_condition(value: Any, condition: Any) -> bool:
    if isinstance(condition, dict) and condition and all(key.startswith("$") for key in condition):
        for operator, operand in condition.items():
            if operator == "$ne":
                if value is not _MISSING and value == operand:
                    return False
            elif operator == "$in":
                if value is _MISSING or value not in operand:
                    return False
            elif value is _MISSING or value is None:
                return False
            elif operator == "$gt" and not value > operand:
                return False
            elif operator == "$gte" and not value >= operand:
                return False
            elif operator == "$lt" and not value < operand:
                return False
            elif operator == "$regex" and not re.search(operand, str(value), re.IGNORECASE if "i" in condition.get("$options", "") else 0):
                return False
            elif operator == "$lte" and not value <= operand:
                return False
        return True
    return value is not _MISSING and value == condition


def matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    for path, condition in query.items():
        if path == "$or":
            if not any(matches(document, branch) for branch in condition):
                return False
        elif not _matches_condition(_resolve(document, path), condition):
            return False
    return True


class InMemoryRepository:
    """
    Stand-in for MongoRepository covering the subset of query and update
    operators the services use.

    ``unique_keys`` mimics a unique index for insert_if_absent; method names in
    ``fail_on`` raise StorageUnavailableException.
    """

    def __init__(self, name: str, unique_keys: Optional[Tuple[str, ...]] = None):
        self.name = name
        self.unique_keys = unique_keys
        self.documents: List[Dict[str, Any]] = []
        self.fail_on: set = set()

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StorageUnavailableException(f"{self.name}.{operation} unavailable")

    def _insert(self, document: Dict[str, Any]) -> str:
        stored = copy.deepcopy(document)
        stored["_id"] = str(stored.get("_id") or ObjectId())
        self.documents.append(stored)
        return stored["_id"]

    def _matching(self, query: Dict[str, Any]) -> List[Dict[str, Any]]:
        return [doc for doc in self.documents if matches(doc, query)]

    @staticmethod
    def _apply(document: Dict[str, Any], operators: Dict[str, Any]) -> None:
        for field, value in operators.get("$set", {}).items():
            document[field] = copy.deepcopy(value)
        for field, amount in operators.get("$inc", {}).items():
            document[field] = document.get(field, 0) + amount
        for field, value in operators.get("$addToSet", {}).items():
            values = document.setdefault(field, [])
            if value not in values:
                values.append(value)

    async def insert_one(self, document: Dict[str, Any]) -> str:
        self._check("insert_one")
        return self._insert(document)

    async def insert_if_absent(self, document: Dict[str, Any]) -> Optional[str]:
        self._check("insert_if_absent")
        if self.unique_keys:
            key = {field: document.get(field) for field in self.unique_keys}
            if self._matching(key):
                return None
        return self._insert(document)

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self._check("find_one")
        found = self._matching(query)
        return copy.deepcopy(found[0]) if found else None

    async def find_by_id(self, document_id: str) -> Optional[Dict[str, Any]]:
        return await self.find_one({"_id": document_id})

    async def find(
        self,
        query: Dict[str, Any],
        sort: Optional[List[Tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        self._check("find")
        result = self._matching(query)
        for field, direction in reversed(sort or []):
            result = sorted(result, key=lambda doc: doc.get(field), reverse=direction < 0)
        result = result[skip:]
        if limit:
            result = result[:limit]
        return copy.deepcopy(result)

    async def count(self, query: Dict[str, Any]) -> int:
        self._check("count")
        return len(self._matching(query))

    async def count_by(self, query: Dict[str, Any], field: str) -> Dict[Any, int]:
        self._check("count_by")
        return dict(Counter(_resolve(doc, field) for doc in self._matching(query)))

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any]) -> int:
        return await self.update_with_operators(query, {"$set": update})

    async def update_with_operators(self, query: Dict[str, Any], operators: Dict[str, Any], upsert: bool = False) -> int:
        self._check("update_with_operators")
        found = self._matching(query)
        if not found:
            if not upsert:
                return 0
            self._upsert(query, operators)
            return 1

        document = found[0]
        before = copy.deepcopy(document)
        self._apply(document, operators)
        return 0 if document == before else 1

    async def increment(self, query: Dict[str, Any], field: str, amount: int) -> int:
        return await self.update_with_operators(query, {"$inc": {field: amount}})

    async def find_one_and_upsert(self, query: Dict[str, Any], operators: Dict[str, Any]) -> Dict[str, Any]:
        self._check("find_one_and_upsert")
        found = self._matching(query)
        if found:
            self._apply(found[0], operators)
            return copy.deepcopy(found[0])
        return copy.deepcopy(self._upsert(query, operators))

    def _upsert(self, query: Dict[str, Any], operators: Dict[str, Any]) -> Dict[str, Any]:
        document = {key: value for key, value in query.items() if not isinstance(value, dict)}
        document.update(copy.deepcopy(operators.get("$setOnInsert", {})))
        self._apply(document, operators)
        self._insert(document)
        return self.documents[-1]


class RecordingBroadcaster:
    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []
        self.fail = False

    async def publish(self, topic: str, payload: Dict[str, Any]) -> int:
        if self.fail:
            raise RedisConnectionError("redis down")
        self.events.append((topic, payload))
        return 1

    def topics(self) -> List[str]:
        return [topic for topic, _ in self.events]


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now = self.now + timedelta(**delta)


CITIZEN_ID = "user-citizen"
POTHOLE_TITLE = "Large pothole on Main Road"
POTHOLE_DESCRIPTION = "Deep pothole causing issues for cyclists"


def make_user(user_id: str = CITIZEN_ID, email: str = "citizen@example.com", **overrides) -> Dict[str, Any]:
    document = {
        "_id": user_id,
        "email": email,
        "name": email.split("@")[0],
        "points": 0,
        "badges": [],
        "is_admin": False,
        "created_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
        "last_active": None,
    }
    document.update(overrides)
    return document


def spread_coordinates(count: int, start: float = 10.0, step: float = 0.01) -> Iterable[Tuple[float, float]]:
    """Coordinates far enough apart that none of them duplicate each other."""
    return [(start + index * step, start + index * step) for index in range(count)]


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def reports_repo():
    return InMemoryRepository("reports")


@pytest.fixture
def users_repo():
    repo = InMemoryRepository("users")
    repo.documents.append(make_user())
    return repo


@pytest.fixture
def badges_repo():
    return InMemoryRepository("badges", unique_keys=("user_id", "badge_type"))


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture
def ledger(users_repo):
    return PointsLedger(users_repo)


@pytest.fixture
def badge_engine(reports_repo, badges_repo, ledger, clock):
    return BadgeEngine(reports_repo, badges_repo, ledger, clock=clock, timezone_name="UTC")


@pytest.fixture
def intake_service(reports_repo, ledger, badge_engine, broadcaster, clock):
    return ReportIntakeService(
        reports_repo=reports_repo,
        ledger=ledger,
        badge_engine=badge_engine,
        broadcaster=broadcaster,
        clock=clock,
        duplicate_window=DuplicateWindow(hours=24, radius_degrees=0.001),
    )


def user_points(users_repo: InMemoryRepository, user_id: str = CITIZEN_ID) -> int:
    return next(doc for doc in users_repo.documents if doc["_id"] == user_id)["points"]
