"""
Pydantic models for request/response validation.
"""

from typing import Any, List, Literal, Optional
from pydantic import BaseModel, Field
from datetime import datetime


class ChatRequest(BaseModel):
    """Request model for chat messages."""
    content: str = Field(..., min_length=1, max_length=10000, description="User's question")


class ChatMessageResponse(BaseModel):
    """A persisted chat message."""
    id: int = Field(..., description="Message ID")
    content: str = Field(..., description="Message text")
    sender: Literal["user", "ai"] = Field(..., description="Who wrote the message")
    user_id: str = Field(..., alias="userId", description="Owning user")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp")
    updated_at: datetime = Field(..., alias="updatedAt", description="Last update timestamp")

    class Config:
        from_attributes = True
        populate_by_name = True


class FileRecordResponse(BaseModel):
    """Metadata of an uploaded file."""
    id: int = Field(..., description="File ID")
    name: str = Field(..., description="Stored file name")
    size: int = Field(..., description="File size in bytes")
    type: Optional[str] = Field(default=None, description="MIME type")
    user_id: str = Field(..., alias="userId", description="Owning user")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp")
    updated_at: datetime = Field(..., alias="updatedAt", description="Last update timestamp")

    class Config:
        from_attributes = True
        populate_by_name = True


class ApiResponse(BaseModel):
    """Uniform response envelope."""
    data: Any = Field(default=None, description="Payload")
    success: bool = Field(..., description="Whether the request succeeded")
    message: str = Field(..., description="Human readable status message")
    status_code: int = Field(..., alias="statusCode", description="HTTP status code")

    class Config:
        populate_by_name = True


class ChatEnvelope(ApiResponse):
    data: Optional[ChatMessageResponse] = None


class ChatListEnvelope(ApiResponse):
    data: Optional[List[ChatMessageResponse]] = None


class FileListEnvelope(ApiResponse):
    data: Optional[List[FileRecordResponse]] = None


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str = Field(..., description="Health status")
    message: str = Field(..., description="Status message")
    version: str = Field(..., description="Application version")
    timestamp: str = Field(..., description="Current timestamp")


class ProcessingResult(BaseModel):
    """Model for ingestion results."""
    status: str = Field(..., description="Processing status")
    file_name: str = Field(..., description="Stored file name")
    pages_extracted: int = Field(..., description="Number of non-empty pages")
    chunks_created: int = Field(..., description="Number of chunks created")
    namespace: str = Field(..., description="Vector namespace the chunks were written to")
    processing_time: Optional[float] = Field(default=None, description="Processing time in seconds")
