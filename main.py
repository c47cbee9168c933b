import hmac
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from pymongo.errors import PyMongoError

import database
import feed
import matches
import projects
import seed
import swipes
import users
from config import CORS_ORIGINS, FEED_BATCH_LIMIT, FEED_MAX_LIMIT, IDENTITY_PROVIDER_SECRET, LOG_LEVEL, PORT
from database import get_db, serialize
from errors import DevDostError, UnauthorizedError
from logging_config import get_logger, setup_logging
from schemas import (
    IdentitySignIn,
    MatchStatus,
    MatchUpdate,
    ProfileSetup,
    ProjectCreate,
    ProjectStatus,
    ProjectUpdate,
    SwipeRequest,
    SwipeResponse,
)

setup_logging(log_level=LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if database.db is not None:
        try:
            database.ensure_indexes(database.db)
        except PyMongoError as e:
            logger.error("Failed to ensure indexes", error=str(e))
            raise
    yield


app = FastAPI(title="DevDost Matching API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error handlers

@app.exception_handler(DevDostError)
async def devdost_error_handler(request: Request, exc: DevDostError):
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(p) for p in err["loc"] if p != "body"), "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "validation_error", "detail": "Invalid request", "fields": details},
    )


@app.exception_handler(PyMongoError)
async def storage_error_handler(request: Request, exc: PyMongoError):
    logger.error("Storage failure", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"error": "internal_error", "detail": "Internal server error"})


# Auth helpers

def get_current_user(
    authorization: Optional[str] = Header(None), db: Database = Depends(get_db)
) -> Dict[str, Any]:
    if not authorization:
        raise UnauthorizedError("Missing authorization header")
    token = authorization.replace("Bearer ", "")
    return users.resolve_session_user(db, token)


def require_identity_provider(x_identity_secret: Optional[str] = Header(None)) -> None:
    if not IDENTITY_PROVIDER_SECRET or not x_identity_secret:
        raise UnauthorizedError("Identity provider not authorized")
    if not hmac.compare_digest(x_identity_secret.encode(), IDENTITY_PROVIDER_SECRET.encode()):
        raise UnauthorizedError("Identity provider not authorized")


@app.get("/")
def root():
    return {"message": "DevDost matching API running"}


@app.get("/test")
def test_database():
    response = {
        "backend": "Running",
        "database": "Not Available",
        "database_name": None,
        "connection_status": "Not Connected",
        "collections": [],
    }
    try:
        if database.db is not None:
            response["database"] = "Connected & Working"
            response["database_name"] = database.db.name
            response["connection_status"] = "Connected"
            response["collections"] = database.db.list_collection_names()
    except PyMongoError as e:
        response["database"] = f"Error: {str(e)[:80]}"
    return response


# Identity endpoints
@app.post("/auth/session", dependencies=[Depends(require_identity_provider)])
def open_session(payload: IdentitySignIn, db: Database = Depends(get_db)):
    user = users.upsert_identity_user(db, payload.email, payload.name, payload.image)
    session = users.create_session(db, str(user["_id"]))
    return {"token": session["token"], "expires_at": session["expires_at"], "user": users.public_profile(user)}


# Profile endpoints
@app.get("/me")
def get_me(user=Depends(get_current_user)):
    return users.public_profile(user)


@app.put("/me")
def complete_me(payload: ProfileSetup, user=Depends(get_current_user), db: Database = Depends(get_db)):
    return {"message": "Profile completed successfully", "user": users.complete_profile(db, user["id"], payload)}


@app.get("/user/stats")
def my_stats(user=Depends(get_current_user), db: Database = Depends(get_db)):
    return swipes.user_stats(db, user)


# Discovery and swipes
@app.get("/projects/for-user")
def projects_for_user(
    limit: int = Query(FEED_BATCH_LIMIT, ge=1, le=FEED_MAX_LIMIT),
    user=Depends(get_current_user),
    db: Database = Depends(get_db),
):
    batch = feed.next_batch(db, user["id"], limit)
    return {"projects": batch, "count": len(batch)}


@app.post("/swipe", response_model=SwipeResponse)
@app.post("/projects/swipe", response_model=SwipeResponse)
def swipe(payload: SwipeRequest, user=Depends(get_current_user), db: Database = Depends(get_db)):
    return swipes.handle_swipe(db, user, payload)


# Project catalog
@app.post("/projects", status_code=201)
def create_project(payload: ProjectCreate, user=Depends(get_current_user), db: Database = Depends(get_db)):
    return {"message": "Project created successfully", "project": projects.create_project(db, user["id"], payload)}


@app.get("/projects/mine")
def my_projects(
    status: Optional[ProjectStatus] = None, user=Depends(get_current_user), db: Database = Depends(get_db)
):
    owned = projects.list_owned_projects(db, user["id"], status)
    return {"projects": owned, "count": len(owned)}


@app.get("/projects/stats")
def my_project_stats(user=Depends(get_current_user), db: Database = Depends(get_db)):
    return projects.owner_stats(db, user["id"])


@app.get("/projects/{project_id}")
def get_project(project_id: str, user=Depends(get_current_user), db: Database = Depends(get_db)):
    return {"project": projects.view_project(db, project_id, user["id"])}


@app.patch("/projects/{project_id}")
def update_project(
    project_id: str, payload: ProjectUpdate, user=Depends(get_current_user), db: Database = Depends(get_db)
):
    updated = projects.update_project(db, project_id, user["id"], payload)
    return {"message": "Project updated successfully", "project": updated}


@app.delete("/projects/{project_id}")
def delete_project(project_id: str, user=Depends(get_current_user), db: Database = Depends(get_db)):
    projects.archive_project(db, project_id, user["id"])
    return {"message": "Project deleted successfully"}


# Matches
@app.get("/matches")
def list_matches(
    status: Optional[MatchStatus] = None, user=Depends(get_current_user), db: Database = Depends(get_db)
):
    return {"matches": matches.list_for_user(db, user["id"], status)}


@app.get("/matches/stats")
def match_stats(user=Depends(get_current_user), db: Database = Depends(get_db)):
    return matches.stats_for_user(db, user["id"])


@app.patch("/matches/{match_id}")
def update_match(
    match_id: str, payload: MatchUpdate, user=Depends(get_current_user), db: Database = Depends(get_db)
):
    updated = matches.update_match(db, match_id, user["id"], payload)
    return {"message": "Match updated", "match": serialize(updated)}


# Seeding
@app.post("/seed")
def seed_database(db: Database = Depends(get_db)):
    return seed.seed_projects(db)


@app.get("/seed")
def seed_counts(db: Database = Depends(get_db)):
    return seed.seed_status(db)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
