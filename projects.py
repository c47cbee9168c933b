"""
Project catalog: listings users swipe on.

Owners create, edit and archive their listings; archiving is a soft delete
(``isActive`` false) so interests and matches keep pointing at a real document.
"""

from typing import Any, Dict, List, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from config import MAX_ACTIVE_PROJECTS
from counters import increment_view_count
from database import create_document, get_documents, now_utc, serialize, to_object_id
from errors import ForbiddenError, LimitExceededError, NotFoundError
from logging_config import get_logger
from schemas import Project, ProjectCreate, ProjectUpdate

logger = get_logger(__name__)

COLLECTION = "project"
STATUSES = ("draft", "active", "in-progress", "completed", "archived")


def get_project(db: Database, project_id: str) -> Dict[str, Any]:
    project = db[COLLECTION].find_one({"_id": to_object_id(project_id, "Project")})
    if not project:
        raise NotFoundError("Project", project_id)
    return project


def get_active_project(db: Database, project_id: str) -> Dict[str, Any]:
    project = get_project(db, project_id)
    if not project.get("isActive", False):
        raise NotFoundError("Project", project_id)
    return project


def _owned(project: Dict[str, Any], user_id: str) -> bool:
    return project.get("createdBy") == user_id


def _require_owner(project: Dict[str, Any], user_id: str, action: str) -> None:
    if not _owned(project, user_id):
        raise ForbiddenError(f"Not authorized to {action} this project")


def count_active_owned(db: Database, user_id: str) -> int:
    return db[COLLECTION].count_documents({"createdBy": user_id, "isActive": True})


def view_project(db: Database, project_id: str, user_id: str) -> Dict[str, Any]:
    """Fetch one project; a non-owner's fetch counts as a view."""
    project = get_project(db, project_id)
    if _owned(project, user_id):
        return serialize(project)
    if not project.get("isActive", False):
        raise NotFoundError("Project", project_id)

    increment_view_count(db, project_id)
    return serialize(db[COLLECTION].find_one({"_id": project["_id"]}) or project)


def create_project(db: Database, user_id: str, payload: ProjectCreate) -> Dict[str, Any]:
    # The active-project cap is a count-then-insert, so concurrent creates may overshoot it by a few.
    if count_active_owned(db, user_id) >= MAX_ACTIVE_PROJECTS:
        raise LimitExceededError(MAX_ACTIVE_PROJECTS)

    doc = Project(**payload.model_dump(), createdBy=user_id).model_dump()
    project_id = create_document(db, COLLECTION, doc)
    logger.info("Project created", project_id=project_id, user_id=user_id)
    return serialize(get_project(db, project_id))


def update_project(db: Database, project_id: str, user_id: str, payload: ProjectUpdate) -> Dict[str, Any]:
    project = get_project(db, project_id)
    _require_owner(project, user_id, "update")

    fields = payload.model_dump(exclude_none=True)
    if "status" in fields:
        fields["isActive"] = fields["status"] != "archived"
        reactivating = fields["isActive"] and not project.get("isActive", False)
        if reactivating and count_active_owned(db, user_id) >= MAX_ACTIVE_PROJECTS:
            raise LimitExceededError(MAX_ACTIVE_PROJECTS)
    if not fields:
        return serialize(project)

    fields["updatedAt"] = now_utc()
    updated = db[COLLECTION].find_one_and_update(
        {"_id": project["_id"]}, {"$set": fields}, return_document=ReturnDocument.AFTER
    )
    logger.info("Project updated", project_id=project_id, fields=sorted(fields))
    return serialize(updated)


def archive_project(db: Database, project_id: str, user_id: str) -> None:
    project = get_project(db, project_id)
    _require_owner(project, user_id, "delete")
    db[COLLECTION].update_one(
        {"_id": project["_id"]},
        {"$set": {"isActive": False, "status": "archived", "updatedAt": now_utc()}},
    )
    logger.info("Project archived", project_id=project_id, user_id=user_id)


def list_owned_projects(db: Database, user_id: str, status: Optional[str] = None) -> List[Dict[str, Any]]:
    query: Dict[str, Any] = {"createdBy": user_id}
    if status and status != "all":
        query["status"] = status
    return get_documents(db, COLLECTION, query, sort=[("createdAt", DESCENDING), ("_id", DESCENDING)])


def _rate(numerator: int, denominator: int) -> str:
    return f"{numerator / denominator * 100:.1f}" if denominator > 0 else "0"


def owner_stats(db: Database, user_id: str) -> Dict[str, Any]:
    """Counts per status, counter totals, most viewed listings and recent interest."""
    owned = {"createdBy": user_id}
    by_status = {status: 0 for status in STATUSES}
    for row in db[COLLECTION].aggregate([{"$match": owned}, {"$group": {"_id": "$status", "n": {"$sum": 1}}}]):
        if row["_id"] in by_status:
            by_status[row["_id"]] = row["n"]

    grouped = list(
        db[COLLECTION].aggregate([
            {"$match": owned},
            {"$group": {
                "_id": None,
                "totalViews": {"$sum": "$viewCount"},
                "totalInterests": {"$sum": "$interestCount"},
                "totalMatches": {"$sum": "$matchCount"},
            }},
        ])
    )
    totals = grouped[0] if grouped else {"totalViews": 0, "totalInterests": 0, "totalMatches": 0}

    popular = [
        serialize(p)
        for p in db[COLLECTION]
        .find(owned, {"title": 1, "viewCount": 1, "interestCount": 1, "matchCount": 1})
        .sort("viewCount", DESCENDING)
        .limit(5)
    ]

    titles = {str(p["_id"]): p["title"] for p in db[COLLECTION].find(owned, {"title": 1})}
    recent = list(
        db["interest"]
        .find({"projectId": {"$in": list(titles)}, "interested": True})
        .sort("updatedAt", DESCENDING)
        .limit(10)
    )
    people = {
        str(u["_id"]): u
        for u in db["user"].find(
            {"_id": {"$in": [to_object_id(i["userId"], "User") for i in recent]}}, {"name": 1, "email": 1}
        )
    }
    activity = [
        {
            "projectId": i["projectId"],
            "projectTitle": titles.get(i["projectId"]),
            "userName": people.get(i["userId"], {}).get("name"),
            "userEmail": people.get(i["userId"], {}).get("email"),
            "at": i.get("updatedAt"),
        }
        for i in recent
    ]

    return {
        "total": sum(by_status.values()),
        "active": by_status["active"],
        "completed": by_status["completed"],
        "archived": by_status["archived"],
        "inProgress": by_status["in-progress"],
        "draft": by_status["draft"],
        "totalViews": totals["totalViews"],
        "totalInterests": totals["totalInterests"],
        "totalMatches": totals["totalMatches"],
        "popularProjects": popular,
        "recentActivity": activity,
        "conversionRates": {
            "viewToInterest": _rate(totals["totalInterests"], totals["totalViews"]),
            "interestToMatch": _rate(totals["totalMatches"], totals["totalInterests"]),
        },
    }
