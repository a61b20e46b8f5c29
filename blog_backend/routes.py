"""
HTTP routes for the blog API.

Paths, verbs and status codes follow the contract the existing web client
was built against, including the 201 responses for "exists" and "Invalid"
(see ``Settings.strict_status_codes`` for the normalized variant).
"""

from __future__ import annotations

import logging

from bson import ObjectId
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from blog_backend.blogs import BlogCollection
from blog_backend.config import Settings
from blog_backend.dependencies import (
    get_app_settings,
    get_blog_collection,
    get_user_directory,
)
from blog_backend.errors import BlogBackendError
from blog_backend.schemas import (
    CreateBlogRequest,
    DeleteEntryRequest,
    FetchEntryRequest,
    MessageResponse,
    SetPublicRequest,
    SigninRequest,
    SignupRequest,
    UpdateEntryRequest,
    UpdateProfileRequest,
    UpdatedResponse,
)
from blog_backend.users import SignupResult, UserDirectory

logger = logging.getLogger(__name__)

router = APIRouter()


def to_public(doc: dict) -> dict:
    """Render ObjectIds as hex strings so the document is JSON-safe."""
    return {
        key: str(value) if isinstance(value, ObjectId) else value
        for key, value in doc.items()
    }


def _error(exc: BlogBackendError) -> JSONResponse:
    return JSONResponse(exc.as_body(), status_code=exc.status_code)


def _server_error(key: str, message: str) -> JSONResponse:
    return JSONResponse({key: message}, status_code=500)


@router.get("/")
def read_root():
    return {"message": "Blog API running"}


@router.get("/test")
def test_database(
    request: Request, settings: Settings = Depends(get_app_settings)
):
    response = {
        "backend": "Running",
        "database": "Not Available",
        "database_url": (
            "In-memory" if settings.use_in_memory_backends
            else "Set" if settings.mongodb_url else "Not Set"
        ),
        "database_name": None,
        "connection_status": "Not Connected",
        "collections": [],
    }
    store = getattr(request.app.state, "store", None)
    if store is None:
        return response
    response["database_name"] = store.name
    response["connection_status"] = "Connected"
    try:
        response["collections"] = store.list_collection_names()[:10]
        response["database"] = "Connected & Working"
    except PyMongoError as e:
        response["database"] = f"Connected but Error: {str(e)[:80]}"
    return response


@router.post("/signup", response_model=MessageResponse, status_code=201)
def signup(
    payload: SignupRequest,
    users: UserDirectory = Depends(get_user_directory),
    settings: Settings = Depends(get_app_settings),
):
    profile = payload.model_dump(exclude={"username", "password"})
    try:
        result = users.signup(payload.username, payload.password, **profile)
    except BlogBackendError as exc:
        return _error(exc)
    except PyMongoError:
        logger.exception("Error adding user details")
        return _server_error("message", "Could not add the user details")

    if result is SignupResult.EXISTS:
        status = 409 if settings.strict_status_codes else 201
        return JSONResponse({"message": "exists"}, status_code=status)
    return {"message": "User details added successfully"}


@router.post("/signin", response_model=MessageResponse)
def signin(
    payload: SigninRequest,
    users: UserDirectory = Depends(get_user_directory),
    settings: Settings = Depends(get_app_settings),
):
    try:
        valid = users.signin(payload.username, payload.password)
    except PyMongoError:
        logger.exception("Error signing in")
        return _server_error("message", "Server error")

    if valid:
        return {"message": "Valid"}
    status = 401 if settings.strict_status_codes else 201
    return JSONResponse({"message": "Invalid"}, status_code=status)


@router.get("/view")
def view(
    username: str = Query(...),
    blogs: BlogCollection = Depends(get_blog_collection),
):
    try:
        entries = blogs.view_all(username)
    except PyMongoError:
        logger.exception("Error fetching data")
        return _server_error("error", "Internal Server Error")
    return [to_public(entry) for entry in entries]


@router.get("/viewuserdetails")
def view_user_details(
    username: str = Query(...),
    users: UserDirectory = Depends(get_user_directory),
):
    try:
        records = users.view_user_details(username)
    except BlogBackendError as exc:
        return _error(exc)
    except PyMongoError:
        logger.exception("Error fetching user data")
        return _server_error("error", "Internal server error")
    return [to_public(record) for record in records]


@router.post("/createblog", response_model=MessageResponse, status_code=201)
def create_blog(
    payload: CreateBlogRequest,
    blogs: BlogCollection = Depends(get_blog_collection),
):
    try:
        blogs.create_blog(payload.username, payload.title, payload.content)
    except BlogBackendError as exc:
        return _error(exc)
    except PyMongoError:
        logger.exception("Error creating blog")
        return _server_error("message", "Server error")
    return {"message": "Blog created successfully"}


@router.delete("/delete", response_model=MessageResponse)
def delete_entry(
    payload: DeleteEntryRequest,
    blogs: BlogCollection = Depends(get_blog_collection),
):
    try:
        blogs.delete_entry(payload.username, payload.id)
    except BlogBackendError as exc:
        return _error(exc)
    except PyMongoError:
        logger.exception("Error deleting entry")
        return _server_error("error", "An error occurred while deleting the entry")
    return {"message": "Entry deleted successfully"}


@router.post("/fetchData")
def fetch_data(
    payload: FetchEntryRequest,
    blogs: BlogCollection = Depends(get_blog_collection),
):
    try:
        entry = blogs.fetch_one(payload.username, payload.object_id)
    except BlogBackendError as exc:
        return _error(exc)
    except PyMongoError:
        logger.exception("Error fetching data")
        return _server_error("error", "Internal Server Error")
    return to_public(entry)


@router.post("/updateData", response_model=UpdatedResponse)
def update_data(
    payload: UpdateEntryRequest,
    blogs: BlogCollection = Depends(get_blog_collection),
):
    try:
        entry = blogs.update_entry(
            payload.username, payload.entry_id, payload.title, payload.content
        )
    except BlogBackendError as exc:
        return _error(exc)
    except PyMongoError as exc:
        logger.exception("Error updating entry")
        return JSONResponse(
            {"message": "Error updating entry", "error": str(exc)}, status_code=500
        )
    return {"message": "Updated successfully", "data": to_public(entry)}


@router.post("/setPublic", response_model=MessageResponse)
def set_public(
    payload: SetPublicRequest,
    blogs: BlogCollection = Depends(get_blog_collection),
):
    try:
        blogs.set_public(payload.username, payload.object_id, payload.public)
    except BlogBackendError as exc:
        logger.error("Failed to update public status for %s", payload.object_id)
        return _error(exc)
    except PyMongoError:
        logger.exception("Error updating public status")
        return _server_error("error", "Internal server error")
    logger.info("Public status updated for %s", payload.object_id)
    return {"message": "Public status updated successfully"}


@router.post("/updateProfile", response_model=UpdatedResponse)
def update_profile(
    payload: UpdateProfileRequest,
    users: UserDirectory = Depends(get_user_directory),
):
    fields = payload.model_dump(exclude={"username"})
    try:
        record = users.update_profile(payload.username, **fields)
    except BlogBackendError as exc:
        return _error(exc)
    except PyMongoError as exc:
        logger.exception("Error updating profile")
        return JSONResponse(
            {"message": "Error updating profile", "error": str(exc)}, status_code=500
        )
    return {"message": "Updated successfully", "data": to_public(record)}
