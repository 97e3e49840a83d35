"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

Design Principles:
- Request models: Define input shape (unknown fields are rejected)
- Response models: Define output structure
- URL validation happens in the service layer, so the request model accepts
  any string and the service reports INVALID urls with its own error code
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateURLRequest(BaseModel):
    """Request model for the /shorten and /lengthen endpoints."""
    model_config = ConfigDict(extra="forbid", strict=True)

    url: str = Field(..., description="The destination URL")


class URLResponse(BaseModel):
    """Response model for a newly created link."""
    token: str = Field(..., description="The generated token")
    target_url: str = Field(..., description="The destination URL")
    qr_code: str = Field(..., description="Link to a QR code of the destination URL")


class VisitsResponse(BaseModel):
    """Response model for the visits endpoint."""
    visits: int


class LinkDetails(BaseModel):
    """A stored link, as listed by the development-only enumeration endpoint."""
    token: str
    target_url: str
    visits: int
    created_at: datetime


class ErrorResponse(BaseModel):
    """Body of every error response."""
    type: str
    code: str
    message: str
    action: Optional[str] = None
