# matcher.py
"""
Match Deriver: turns an "interested" swipe into at most one new match.

The other interested users on the project are scanned in the order their
interest was first recorded; the first one not already matched with the
swiping user gets the match and the scan stops.
"""

from typing import Any, Dict, Optional

from pymongo.database import Database

import ledger
import matches
from counters import increment_match_count
from database import to_object_id
from logging_config import get_logger

logger = get_logger(__name__)

FALLBACK_NAME = "Another developer"


def derive_match(db: Database, project: Dict[str, Any], swiping_user_id: str) -> Optional[Dict[str, Any]]:
    """
    Create the match completed by ``swiping_user_id``'s interest in ``project``.

    Must only run after the ledger stores ``interested=True`` for that user.
    Returns the new match with display data for the other user, or None when
    nobody else is interested or every pair is already matched.
    """
    project_id = str(project["_id"])

    for candidate_id in ledger.interested_users(db, project_id, exclude_user_id=swiping_user_id):
        if matches.find_match_between(db, project_id, swiping_user_id, candidate_id):
            continue

        match, created = matches.create_match(db, project_id, swiping_user_id, candidate_id)
        if not created:
            # a concurrent swipe already matched this pair
            return None

        increment_match_count(db, project_id)
        other = db["user"].find_one({"_id": to_object_id(candidate_id, "User")}, {"name": 1, "email": 1}) or {}
        return {
            "matchId": str(match["_id"]),
            "match": match,
            "projectTitle": project.get("title", ""),
            "otherUserId": candidate_id,
            "otherUserName": other.get("name") or FALLBACK_NAME,
            "otherUserEmail": other.get("email"),
        }

    logger.debug("No match derived", project_id=project_id, user_id=swiping_user_id)
    return None
