"""
Response schemas for Bistro Boss API

Stored documents (users, menu items, reviews, cart items) are schema-free
and pass through as plain dicts. The models below describe the fixed-shape
bodies the API answers with.
"""

from typing import Optional

from pydantic import BaseModel, Field


# Auth
class TokenResponse(BaseModel):
    token: str = Field(..., description="Signed bearer token, valid for one hour")


class AdminStatus(BaseModel):
    admin: bool = Field(..., description="Whether the user has the admin role")


# Generic bodies
class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: bool = True
    message: str


# Write results, shaped like the MongoDB driver's acknowledgements
class InsertResult(BaseModel):
    acknowledged: bool
    insertedId: str


class UpdateResult(BaseModel):
    acknowledged: bool
    modifiedCount: int
    upsertedId: Optional[str] = None
    upsertedCount: int = 0
    matchedCount: int


class DeleteResult(BaseModel):
    acknowledged: bool
    deletedCount: int
