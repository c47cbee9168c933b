"""
Interest Ledger: the current swipe decision of every user on every project.

Exactly one document per (userId, projectId); re-swiping overwrites the
decision in place. The unique index on that pair (see database.ensure_indexes)
serializes concurrent upserts.
"""

from typing import Any, Dict, List, Optional, Tuple

from pymongo import ASCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from database import now_utc
from errors import ConflictError
from logging_config import get_logger
from schemas import Interest

logger = get_logger(__name__)

COLLECTION = "interest"


def record_interest(
    db: Database, user_id: str, project_id: str, interested: bool
) -> Tuple[Dict[str, Any], Optional[bool]]:
    """
    Upsert the decision of ``user_id`` on ``project_id``.

    Returns the stored record and the previous decision (None on first swipe).
    The caller is responsible for checking that the project exists and is active.
    """
    key = {"userId": user_id, "projectId": project_id}
    fields = Interest(userId=user_id, projectId=project_id, interested=interested).model_dump()
    stamp = now_utc()
    update = {
        "$set": {"interested": fields["interested"], "updatedAt": stamp},
        "$setOnInsert": {"createdAt": stamp},
    }

    # Two first swipes racing on the same key: the loser's upsert hits the
    # unique index and the retry then finds the winner's row and updates it.
    for attempt in range(2):
        try:
            previous = db[COLLECTION].find_one_and_update(
                key, update, upsert=True, return_document=ReturnDocument.BEFORE
            )
            break
        except DuplicateKeyError:
            logger.warning("Interest upsert raced", user_id=user_id, project_id=project_id, attempt=attempt)
    else:
        raise ConflictError("Could not record interest, please retry")

    record = db[COLLECTION].find_one(key)
    previous_interested = previous.get("interested") if previous else None
    logger.info(
        "Interest recorded",
        user_id=user_id,
        project_id=project_id,
        interested=interested,
        previous=previous_interested,
    )
    return record, previous_interested


def interested_users(db: Database, project_id: str, exclude_user_id: str) -> List[str]:
    """Other users currently interested in the project, first-recorded first."""
    cursor = db[COLLECTION].find(
        {"projectId": project_id, "userId": {"$ne": exclude_user_id}, "interested": True},
        {"userId": 1},
    ).sort([("createdAt", ASCENDING), ("_id", ASCENDING)])
    return [doc["userId"] for doc in cursor]


def swiped_project_ids(db: Database, user_id: str) -> List[str]:
    """Every project the user has decided on, left or right."""
    return db[COLLECTION].distinct("projectId", {"userId": user_id})


def count_for_user(db: Database, user_id: str, interested: Optional[bool] = None) -> int:
    query: Dict[str, Any] = {"userId": user_id}
    if interested is not None:
        query["interested"] = interested
    return db[COLLECTION].count_documents(query)
