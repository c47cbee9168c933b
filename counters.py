"""
Aggregate counters cached on the project document.

Each call is a single atomic ``$inc``; counts are approximate display
statistics (revoking interest never decrements) and not a source of truth.
"""

from pymongo.database import Database

from database import to_object_id
from logging_config import get_logger

logger = get_logger(__name__)


def _increment(db: Database, project_id: str, field: str) -> bool:
    result = db["project"].update_one({"_id": to_object_id(project_id, "Project")}, {"$inc": {field: 1}})
    if result.matched_count == 0:
        logger.warning("Counter target missing", project_id=project_id, counter=field)
    return result.matched_count == 1


def increment_view_count(db: Database, project_id: str) -> bool:
    return _increment(db, project_id, "viewCount")


def increment_interest_count(db: Database, project_id: str) -> bool:
    return _increment(db, project_id, "interestCount")


def increment_match_count(db: Database, project_id: str) -> bool:
    return _increment(db, project_id, "matchCount")
