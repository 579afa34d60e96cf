"""Pydantic models for incoming form submissions."""
from pydantic import BaseModel


class SubscriptionRequest(BaseModel):
    """Newsletter subscription form."""
    email: str


class ContactRequest(BaseModel):
    """Contact form submission."""
    name: str
    email: str
    subject: str
    message: str
