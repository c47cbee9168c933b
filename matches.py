"""
Match Store: one match per (project, unordered user pair).

The pair is stored twice over: ``user1Id``/``user2Id`` keep who completed the
pair and who was first, ``pairKey`` is the order-independent form the unique
index is built on, so (A, B) and (B, A) collide at the storage layer.
"""

from typing import Any, Dict, List, Optional, Tuple

from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from database import now_utc, serialize, to_object_id
from errors import ForbiddenError, NotFoundError, ValidationError
from logging_config import get_logger
from schemas import Match, MatchUpdate

logger = get_logger(__name__)

COLLECTION = "match"

# target status -> statuses it may be reached from
TRANSITIONS = {
    "active": ("pending",),
    "completed": ("active",),
    "cancelled": ("pending",),
}


def pair_key(user_a: str, user_b: str) -> str:
    return ":".join(sorted((user_a, user_b)))


def other_participant(match: Dict[str, Any], known_user_id: str) -> str:
    return match["user2Id"] if match["user1Id"] == known_user_id else match["user1Id"]


def is_participant(match: Dict[str, Any], user_id: str) -> bool:
    return user_id in (match["user1Id"], match["user2Id"])


def _participant_filter(user_id: str) -> Dict[str, Any]:
    return {"$or": [{"user1Id": user_id}, {"user2Id": user_id}]}


def find_match_between(db: Database, project_id: str, user_a: str, user_b: str) -> Optional[Dict[str, Any]]:
    return db[COLLECTION].find_one({"projectId": project_id, "pairKey": pair_key(user_a, user_b)})


def create_match(db: Database, project_id: str, user1_id: str, user2_id: str) -> Tuple[Dict[str, Any], bool]:
    """
    Insert a pending match. Returns (match, created).

    When the insert loses a race against another request for the same pair,
    the unique index rejects it and the existing row is returned with
    ``created=False``.
    """
    if user1_id == user2_id:
        raise ValidationError("A match needs two distinct users", field="user2Id")

    stamp = now_utc()
    doc = Match(
        projectId=project_id,
        user1Id=user1_id,
        user2Id=user2_id,
        pairKey=pair_key(user1_id, user2_id),
        matchedAt=stamp,
    ).model_dump()
    doc["createdAt"] = stamp
    doc["updatedAt"] = stamp

    try:
        doc["_id"] = db[COLLECTION].insert_one(doc).inserted_id
    except DuplicateKeyError:
        existing = find_match_between(db, project_id, user1_id, user2_id)
        logger.info("Match already exists", project_id=project_id, pair_key=doc["pairKey"])
        return existing, False

    logger.info("Match created", match_id=str(doc["_id"]), project_id=project_id, user1_id=user1_id, user2_id=user2_id)
    return doc, True


def get_match(db: Database, match_id: str) -> Dict[str, Any]:
    match = db[COLLECTION].find_one({"_id": to_object_id(match_id, "Match")})
    if not match:
        raise NotFoundError("Match", match_id)
    return match


def list_for_user(db: Database, user_id: str, status: Optional[str] = None) -> List[Dict[str, Any]]:
    """The user's matches, newest first, with project and other-user details attached."""
    query = _participant_filter(user_id)
    if status:
        query["status"] = status
    rows = list(db[COLLECTION].find(query).sort([("matchedAt", DESCENDING), ("_id", DESCENDING)]))

    project_ids = {to_object_id(m["projectId"], "Project") for m in rows}
    other_ids = {to_object_id(other_participant(m, user_id), "User") for m in rows}
    projects = {
        str(p["_id"]): p
        for p in db["project"].find(
            {"_id": {"$in": list(project_ids)}},
            {"title": 1, "description": 1, "techStack": 1, "category": 1, "difficulty": 1},
        )
    }
    users = {
        str(u["_id"]): u
        for u in db["user"].find(
            {"_id": {"$in": list(other_ids)}},
            {"name": 1, "email": 1, "image": 1, "skills": 1, "contactPreferences": 1, "githubProfile": 1},
        )
    }

    out = []
    for m in rows:
        item = serialize(m)
        item["project"] = serialize(projects.get(m["projectId"]))
        item["otherUser"] = serialize(users.get(other_participant(m, user_id)))
        out.append(item)
    return out


def stats_for_user(db: Database, user_id: str) -> Dict[str, int]:
    base = _participant_filter(user_id)
    counts = {status: 0 for status in ("pending", "active", "completed", "cancelled")}
    for row in db[COLLECTION].aggregate([{"$match": base}, {"$group": {"_id": "$status", "n": {"$sum": 1}}}]):
        counts[row["_id"]] = row["n"]
    return {
        "total": sum(counts.values()),
        **counts,
        "conversationsStarted": db[COLLECTION].count_documents({**base, "conversationStarted": True}),
    }


def _transition(db: Database, match: Dict[str, Any], target: str) -> Dict[str, Any]:
    if match["status"] == target:
        return match
    sources = TRANSITIONS.get(target, ())
    if match["status"] not in sources:
        raise ValidationError(f"Cannot move a {match['status']} match to {target}", field="status")

    # compare-and-set on the status we validated against
    updated = db[COLLECTION].find_one_and_update(
        {"_id": match["_id"], "status": {"$in": list(sources)}},
        {"$set": {"status": target, "updatedAt": now_utc()}},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        current = db[COLLECTION].find_one({"_id": match["_id"]})
        if current and current["status"] == target:
            return current
        raise ValidationError(
            f"Cannot move a {current['status'] if current else 'missing'} match to {target}", field="status"
        )
    logger.info("Match status changed", match_id=str(match["_id"]), old=match["status"], new=target)
    return updated


def update_match(db: Database, match_id: str, user_id: str, update: MatchUpdate) -> Dict[str, Any]:
    """Apply a participant's change: status transition, conversation flag, notes."""
    match = get_match(db, match_id)
    if not is_participant(match, user_id):
        raise ForbiddenError("Not a participant of this match")

    if update.conversationStarted is False and match.get("conversationStarted"):
        raise ValidationError("conversationStarted cannot be unset", field="conversationStarted")

    if update.status is not None:
        match = _transition(db, match, update.status)

    fields: Dict[str, Any] = {}
    if update.conversationStarted:
        fields["conversationStarted"] = True
    if update.notes is not None:
        fields["notes"] = update.notes
    if fields:
        fields["updatedAt"] = now_utc()
        match = db[COLLECTION].find_one_and_update(
            {"_id": match["_id"]}, {"$set": fields}, return_document=ReturnDocument.AFTER
        )
    return match
