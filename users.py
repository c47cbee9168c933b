"""
Identity bridge and profiles.

The OAuth handshake lives with the identity provider; once it has verified a
sign-in it hands us the email/name and receives a session token. Every other
request resolves ``Authorization: Bearer <token>`` back to a user document.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from config import SESSION_TTL_DAYS
from database import now_utc, serialize, to_object_id
from errors import NotFoundError, UnauthorizedError
from logging_config import get_logger
from schemas import ContactPreferences, ProfileSetup, Session, User

logger = get_logger(__name__)


def upsert_identity_user(db: Database, email: str, name: str, image: Optional[str] = None) -> Dict[str, Any]:
    """Return the user for a verified identity, creating it on first sign-in."""
    email = email.strip().lower()
    existing = db["user"].find_one({"email": email})
    if existing:
        return existing

    stamp = now_utc()
    doc = User(
        email=email,
        name=name.strip(),
        image=image or "",
        contactPreferences=ContactPreferences(email=email),
    ).model_dump()
    doc["createdAt"] = stamp
    doc["updatedAt"] = stamp
    try:
        doc["_id"] = db["user"].insert_one(doc).inserted_id
    except DuplicateKeyError:
        # concurrent first sign-in of the same identity
        return db["user"].find_one({"email": email})
    logger.info("User created", user_id=str(doc["_id"]))
    return doc


def _as_utc(value: datetime) -> datetime:
    # pymongo hands back naive UTC datetimes unless the client is tz_aware
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def create_session(db: Database, user_id: str) -> Dict[str, Any]:
    session = Session(
        user_id=user_id,
        token=secrets.token_urlsafe(32),
        expires_at=now_utc() + timedelta(days=SESSION_TTL_DAYS),
    ).model_dump()
    db["session"].insert_one(dict(session))
    return session


def resolve_session_user(db: Database, token: str) -> Dict[str, Any]:
    session = db["session"].find_one({"token": token})
    if not session or _as_utc(session["expires_at"]) <= now_utc():
        raise UnauthorizedError("Invalid or expired token")
    user = db["user"].find_one({"_id": to_object_id(session["user_id"], "User")})
    if not user:
        raise UnauthorizedError("User not found")
    user["id"] = str(user["_id"])
    return user


def public_profile(user: Dict[str, Any]) -> Dict[str, Any]:
    return serialize(user)


def complete_profile(db: Database, user_id: str, payload: ProfileSetup) -> Dict[str, Any]:
    fields = payload.model_dump()
    fields["profileCompleted"] = True
    fields["updatedAt"] = now_utc()
    updated = db["user"].find_one_and_update(
        {"_id": to_object_id(user_id, "User")}, {"$set": fields}, return_document=ReturnDocument.AFTER
    )
    if not updated:
        raise NotFoundError("User", user_id)
    logger.info("Profile completed", user_id=user_id)
    return serialize(updated)
