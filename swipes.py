"""
Swipe orchestration: ledger upsert, counters, match derivation.

Every step runs synchronously inside the request; a retried swipe is safe
because the ledger upsert is idempotent and match creation is unique per pair.
"""

from typing import Any, Dict

from pymongo.database import Database

import ledger
import matches
from counters import increment_interest_count
from logging_config import get_logger
from matcher import derive_match
from projects import get_active_project
from schemas import SwipeMatch, SwipeRequest, SwipeResponse

logger = get_logger(__name__)


def handle_swipe(db: Database, user: Dict[str, Any], payload: SwipeRequest) -> SwipeResponse:
    user_id = str(user["_id"])
    project = get_active_project(db, payload.projectId)
    project_id = str(project["_id"])

    _, previous = ledger.record_interest(db, user_id, project_id, payload.interested)

    match = None
    if payload.interested:
        if previous is not True:
            increment_interest_count(db, project_id)
        derived = derive_match(db, project, user_id)
        if derived:
            match = SwipeMatch(
                matchId=derived["matchId"],
                projectTitle=derived["projectTitle"],
                otherUserName=derived["otherUserName"],
                otherUserEmail=derived["otherUserEmail"],
            )

    logger.info(
        "Swipe handled",
        user_id=user_id,
        project_id=project_id,
        interested=payload.interested,
        matched=match is not None,
    )
    return SwipeResponse(
        success=True,
        match=match,
        message="Interest recorded!" if payload.interested else "Marked as not interested",
    )


def user_stats(db: Database, user: Dict[str, Any]) -> Dict[str, Any]:
    """Swipe and match totals scoped to the caller."""
    user_id = str(user["_id"])
    match_stats = matches.stats_for_user(db, user_id)
    return {
        "totalProjects": ledger.count_for_user(db, user_id),
        "interestedCount": ledger.count_for_user(db, user_id, interested=True),
        "matchesCount": match_stats["total"],
        "pendingMatches": match_stats["pending"],
        "activeMatches": match_stats["active"],
        "profileCompleted": bool(user.get("profileCompleted")),
    }
