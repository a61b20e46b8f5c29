"""
Dependency wiring for the FastAPI app.

The store handle lives on ``app.state`` (set by the lifespan in
``blog_backend.app``) and is handed to each request through ``Depends``.
"""

from __future__ import annotations

from fastapi import Depends, Request

from blog_backend.blogs import BlogCollection
from blog_backend.config import Settings
from blog_backend.errors import NotConnected
from blog_backend.store import DocumentStore
from blog_backend.users import UserDirectory


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> DocumentStore:
    """
    Return the shared store handle, or fail if startup has not connected yet.
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise NotConnected()
    return store


def get_user_directory(
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> UserDirectory:
    return UserDirectory(store, bcrypt_rounds=settings.bcrypt_rounds)


def get_blog_collection(store: DocumentStore = Depends(get_store)) -> BlogCollection:
    return BlogCollection(store)
