# File: domain/users/services/user_service.py

import re
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Optional

from common.exceptions.base_exception import NotFoundException
from common.logging.logger import log_info
from common.translations.messages import get_message
from common.utils.date_utils import utc_now
from common.utils.pagination import page_offset, paginate_response
from domain.reports.entities.report_entity import ReportStatus
from domain.users.entities.user_entity import CallerIdentity, User, UserProfile
from infrastructure.database.mongodb.repository import MongoRepository


def _badge_view(document: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": document["_id"],
        "badge_type": document["badge_type"],
        "badge_name": document["badge_name"],
        "description": document["description"],
        "icon": document["icon"],
        "points": document["points"],
        "earned_at": document["earned_at"],
    }


class UserService:
    def __init__(
        self,
        users_repo: MongoRepository,
        badges_repo: MongoRepository,
        reports_repo: MongoRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.users_repo = users_repo
        self.badges_repo = badges_repo
        self.reports_repo = reports_repo
        self.clock = clock

    async def ensure_user(self, identity: CallerIdentity) -> Dict[str, Any]:
        """Create the user record on first sight of a verified identity and refresh last_active."""
        now = self.clock()
        new_user = User(email=identity.email.lower(), name=identity.display_name, created_at=now)
        document = await self.users_repo.find_one_and_upsert(
            {"_id": identity.user_id},
            {
                "$setOnInsert": new_user.model_dump(exclude={"id", "last_active"}),
                "$set": {"last_active": now},
            },
        )
        log_info("User resolved", extra={"user_id": identity.user_id})
        return document

    async def get_profile(self, user_id: str) -> UserProfile:
        document = await self._require_user(user_id)
        badges = await self.badges_repo.find({"user_id": user_id}, sort=[("earned_at", -1)])
        return UserProfile(
            id=document["_id"],
            email=document["email"],
            name=document["name"],
            points=document.get("points", 0),
            badge_count=len(badges),
            badges=[_badge_view(badge) for badge in badges],
            is_admin=document.get("is_admin", False),
            created_at=document["created_at"],
            last_active=document.get("last_active"),
        )

    async def get_badges(self, user_id: str) -> Dict[str, Any]:
        badges = [_badge_view(doc) for doc in await self.badges_repo.find({"user_id": user_id}, sort=[("earned_at", -1)])]
        return {
            "badges": badges,
            "stats": {
                "total_badges": len(badges),
                "total_badge_points": sum(badge["points"] for badge in badges),
                "unique_badge_types": len({badge["badge_type"] for badge in badges}),
            },
        }

    async def get_leaderboard(self, page: int = 1, page_size: int = 10) -> Dict[str, Any]:
        skip = page_offset(page, page_size)
        total = await self.users_repo.count({})
        documents = await self.users_repo.find({}, sort=[("points", -1), ("created_at", 1)], skip=skip, limit=page_size)
        leaderboard = [
            {
                "rank": skip + index + 1,
                "id": doc["_id"],
                "name": doc["name"],
                "points": doc.get("points", 0),
                "badge_count": len(doc.get("badges", [])),
            }
            for index, doc in enumerate(documents)
        ]
        return paginate_response(leaderboard, total=total, page=page, page_size=page_size)

    async def _require_user(self, user_id: str) -> Dict[str, Any]:
        document = await self.users_repo.find_by_id(user_id)
        if not document:
            raise NotFoundException(get_message("user.not_found"), error_code="USER_NOT_FOUND")
        return document

    async def update_profile(self, user_id: str, name: str) -> UserProfile:
        await self._require_user(user_id)
        await self.users_repo.update_one({"_id": user_id}, {"name": name})
        log_info("Profile updated", extra={"user_id": user_id})
        return await self.get_profile(user_id)

    async def get_stats(self, user_id: str) -> Dict[str, Any]:
        """Report counts per status and per category for one user, plus badge totals."""
        document = await self._require_user(user_id)
        badges = await self.badges_repo.find({"user_id": user_id})
        by_status = await self.reports_repo.count_by({"author_id": user_id}, "status")
        by_category = await self.reports_repo.count_by({"author_id": user_id}, "category")

        total = sum(by_status.values())
        resolved = by_status.get(ReportStatus.RESOLVED.value, 0)
        return {
            "user": {
                "name": document["name"],
                "email": document["email"],
                "points": document.get("points", 0),
                "total_badges": len(badges),
                "total_badge_points": sum(badge["points"] for badge in badges),
                "member_since": document["created_at"],
                "last_active": document.get("last_active"),
            },
            "reports": {
                "total": total,
                "pending": by_status.get(ReportStatus.PENDING.value, 0),
                "in_progress": by_status.get(ReportStatus.IN_PROGRESS.value, 0),
                "resolved": resolved,
                "resolution_rate": round(resolved / total * 100, 1) if total else 0.0,
            },
            "categories": [
                {"category": category, "count": count}
                for category, count in sorted(by_category.items(), key=lambda item: (-item[1], item[0]))
            ],
        }

    async def list_users(self, search: Optional[str] = None, page: int = 1, page_size: int = 20) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if search and search.strip():
            pattern = re.escape(search.strip())
            query["$or"] = [
                {"name": {"$regex": pattern, "$options": "i"}},
                {"email": {"$regex": pattern, "$options": "i"}},
            ]

        total = await self.users_repo.count(query)
        documents = await self.users_repo.find(
            query,
            sort=[("points", -1), ("created_at", 1)],
            skip=page_offset(page, page_size),
            limit=page_size,
        )

        user_ids = [doc["_id"] for doc in documents]
        submitted, resolved = {}, {}
        if user_ids:
            authored = {"author_id": {"$in": user_ids}}
            submitted = await self.reports_repo.count_by(authored, "author_id")
            resolved = await self.reports_repo.count_by({**authored, "status": ReportStatus.RESOLVED.value}, "author_id")

        users = [
            {
                "id": doc["_id"],
                "name": doc["name"],
                "email": doc["email"],
                "points": doc.get("points", 0),
                "badge_count": len(doc.get("badges", [])),
                "is_admin": doc.get("is_admin", False),
                "created_at": doc["created_at"],
                "last_active": doc.get("last_active"),
                "reports": {"total": submitted.get(doc["_id"], 0), "resolved": resolved.get(doc["_id"], 0)},
            }
            for doc in documents
        ]
        return paginate_response(users, total=total, page=page, page_size=page_size)

    async def set_admin(self, user_id: str, is_admin: bool) -> Dict[str, Any]:
        document = await self._require_user(user_id)
        await self.users_repo.update_one({"_id": user_id}, {"is_admin": is_admin})
        log_info("Admin flag changed", extra={"user_id": user_id, "is_admin": is_admin})
        return {"id": document["_id"], "name": document["name"], "email": document["email"], "is_admin": is_admin}

    async def is_admin(self, user_id: str) -> bool:
        document = await self.users_repo.find_by_id(user_id)
        return bool(document and document.get("is_admin"))

    async def flag_admins(self, emails: Iterable[str]) -> int:
        flagged = 0
        for email in emails:
            flagged += await self.users_repo.update_one({"email": email.lower()}, {"is_admin": True})
        log_info("Admin flags applied", extra={"flagged": flagged})
        return flagged
