"""Pydantic models for API responses."""
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class SubscribeResponse(BaseModel):
    success: bool = True
    message: str


class SendEmailResponse(BaseModel):
    success: bool = True
    messageId: str | None = None
    status: str


class HealthResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: str
