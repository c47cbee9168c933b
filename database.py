"""
MongoDB access for the DevDost API.

- ``db`` is the module-level database handle (None when DATABASE_URL / DATABASE_NAME are unset)
- ``get_db`` is the FastAPI dependency handed to every route
- ``ensure_indexes`` creates the unique indexes the matching engine relies on
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from config import DATABASE_NAME, DATABASE_URL
from errors import InternalError, NotFoundError
from logging_config import get_logger

logger = get_logger(__name__)

_client: Optional[MongoClient] = None
db: Optional[Database] = None

if DATABASE_URL and DATABASE_NAME:
    _client = MongoClient(DATABASE_URL)
    db = _client[DATABASE_NAME]
else:
    logger.warning("Database not configured", database_url_set=bool(DATABASE_URL))


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def get_db() -> Database:
    if db is None:
        raise InternalError("Database is not configured")
    return db


def ensure_indexes(database: Database) -> None:
    """Create the indexes backing the uniqueness invariants. Safe to call repeatedly."""
    database["user"].create_index("email", unique=True)
    database["session"].create_index("token", unique=True)

    # one decision per (user, project)
    database["interest"].create_index([("userId", ASCENDING), ("projectId", ASCENDING)], unique=True)
    database["interest"].create_index([("projectId", ASCENDING), ("interested", ASCENDING)])

    # one match per (project, unordered pair)
    database["match"].create_index([("projectId", ASCENDING), ("pairKey", ASCENDING)], unique=True)
    database["match"].create_index("user1Id")
    database["match"].create_index("user2Id")

    database["project"].create_index([("isActive", ASCENDING), ("createdAt", DESCENDING)])
    database["project"].create_index("createdBy")
    logger.info("Indexes ensured", database=database.name)


def to_object_id(value: str, resource: str = "Document") -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise NotFoundError(resource, value)


def serialize(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Copy of a stored document with ``_id`` replaced by a string ``id``."""
    if doc is None:
        return None
    out = {k: v for k, v in doc.items() if k != "_id"}
    if "_id" in doc:
        out["id"] = str(doc["_id"])
    return out


def create_document(database: Database, collection_name: str, data: Dict[str, Any]) -> str:
    """Insert a document stamped with createdAt/updatedAt and return its id."""
    doc = dict(data)
    stamp = now_utc()
    doc.setdefault("createdAt", stamp)
    doc.setdefault("updatedAt", stamp)
    return str(database[collection_name].insert_one(doc).inserted_id)


def get_documents(
    database: Database,
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    sort: Optional[List[tuple]] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    cursor = database[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if limit:
        cursor = cursor.limit(limit)
    return [serialize(d) for d in cursor]
