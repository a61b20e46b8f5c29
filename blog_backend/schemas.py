"""
Pydantic schemas for the blog API.

Request bodies keep the field names the existing web client sends
(``objectId``, ``_id``), so some models use aliases.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProfileFields(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    about_me: Optional[str] = None
    hobby: Optional[str] = None
    skills: Optional[str] = None
    avatar: Optional[str] = None


class SignupRequest(ProfileFields):
    # Presence is checked by the directory so the legacy 400 message is kept.
    username: Optional[str] = None
    password: Optional[str] = None


class SigninRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UpdateProfileRequest(ProfileFields):
    username: str


class CreateBlogRequest(BaseModel):
    title: str
    content: str
    username: str


class DeleteEntryRequest(BaseModel):
    id: str
    username: str


class FetchEntryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    object_id: str = Field(..., alias="objectId")


class UpdateEntryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    entry_id: str = Field(..., alias="_id")
    title: str
    content: str


class SetPublicRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    object_id: str = Field(..., alias="objectId")
    public: Optional[bool] = None


class MessageResponse(BaseModel):
    message: str


class UpdatedResponse(BaseModel):
    message: str = "Updated successfully"
    data: dict
