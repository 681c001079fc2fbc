"""
API schemas of the hsnweb project.

Request bodies accepted by the contact and newsletter endpoints and the
shapes returned by the admin endpoints. Keys are camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from hsn_api.server.schemas import BaseSchema, EmailText, OptionalText, RequiredText

from .entities import ContactStatus


class ContactCreate(BaseSchema):
    """Contact form submission."""

    name: RequiredText = Field(max_length=100, examples=["Jane Doe"])
    email: EmailText = Field(max_length=255, examples=["jane@example.com"])
    inquiry: RequiredText = Field(max_length=50, description="Inquiry category", examples=["consulting"])
    subject: RequiredText = Field(max_length=255)
    message: RequiredText
    phone: OptionalText = Field(default=None, max_length=20)
    company: OptionalText = Field(default=None, max_length=200)


class NewsletterCreate(BaseSchema):
    """Newsletter sign-up."""

    email: EmailText = Field(max_length=255)
    name: OptionalText = Field(default=None, max_length=100)
    source: OptionalText = Field(default=None, max_length=50, description="Where the form was shown", examples=["footer"])


class ContactUpdate(BaseSchema):
    """Admin update of a contact submission. Only the given fields change."""

    status: Optional[ContactStatus] = None
    notes: Optional[str] = None


class ContactSubmissionRead(BaseSchema):
    """Stored contact submission as returned by the admin endpoints."""

    id: int
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    inquiry_type: str
    subject: str
    message: str
    status: ContactStatus
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    email_sent: bool
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class NewsletterSubscriptionRead(BaseSchema):
    """Stored newsletter subscription as returned by the admin endpoints."""

    id: int
    email: str
    name: Optional[str] = None
    source: Optional[str] = None
    is_active: bool
    unsubscribed_at: Optional[datetime] = None
    ip_address: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class Pagination(BaseSchema):
    total: int
    page: int
    limit: int
    total_pages: int


class ContactSubmissionPage(BaseSchema):
    submissions: List[ContactSubmissionRead]
    pagination: Pagination


class NewsletterSubscriberPage(BaseSchema):
    subscribers: List[NewsletterSubscriptionRead]
    pagination: Pagination
