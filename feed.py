"""Recommendation Feed: the next projects a user has not decided on yet."""

from typing import Any, Dict, List

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.database import Database

import ledger
from config import FEED_BATCH_LIMIT, FEED_MAX_LIMIT
from database import serialize


def next_batch(db: Database, user_id: str, limit: int = FEED_BATCH_LIMIT) -> List[Dict[str, Any]]:
    """
    Active projects the user neither owns nor has swiped on, newest first.

    Pure read: view counts are only bumped on a single-project fetch.
    """
    limit = max(1, min(limit, FEED_MAX_LIMIT))
    swiped = [ObjectId(pid) for pid in ledger.swiped_project_ids(db, user_id) if ObjectId.is_valid(pid)]

    cursor = (
        db["project"]
        .find({"_id": {"$nin": swiped}, "isActive": True, "createdBy": {"$ne": user_id}})
        .sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
        .limit(limit)
    )
    return [serialize(p) for p in cursor]
