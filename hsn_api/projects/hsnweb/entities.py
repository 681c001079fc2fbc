"""
Database entities of the hsnweb project.

This module defines the SQLModel tables storing contact-form submissions and
newsletter subscriptions of the HSN website.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Enum as SAEnum
from sqlmodel import Column, Field, SQLModel, Text


class ContactStatus(str, Enum):
    """Processing status of a contact submission."""

    NEW = "new"
    READ = "read"
    REPLIED = "replied"
    CLOSED = "closed"


class ContactSubmission(SQLModel, table=True):
    """Persistent contact-form submission."""

    __tablename__ = "contact_submissions"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, description="Sender name")
    email: str = Field(max_length=255, index=True, description="Sender email address")
    phone: Optional[str] = Field(default=None, max_length=20)
    company: Optional[str] = Field(default=None, max_length=200)
    inquiry_type: str = Field(max_length=50, index=True, description="Inquiry category chosen on the form")
    subject: str = Field(max_length=255)
    message: str = Field(sa_column=Column(Text, nullable=False))
    status: ContactStatus = Field(
        default=ContactStatus.NEW,
        sa_column=Column(
            SAEnum(
                ContactStatus,
                name="contact_status",
                values_callable=lambda enum: [member.value for member in enum],
            ),
            nullable=False,
            index=True,
            default=ContactStatus.NEW,
        ),
    )
    ip_address: Optional[str] = Field(default=None, max_length=45, description="Client IP (IPv4 or IPv6)")
    user_agent: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    email_sent: bool = Field(default=False, description="Whether the notification email went out")
    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True, description="Creation timestamp")
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column_kwargs={"onupdate": datetime.utcnow},
        description="Last update timestamp",
    )


class NewsletterSubscription(SQLModel, table=True):
    """Persistent newsletter subscription."""

    __tablename__ = "newsletter_subscriptions"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(max_length=255, unique=True, description="Subscriber email address")
    name: Optional[str] = Field(default=None, max_length=100)
    # footer, popup, ...
    source: Optional[str] = Field(default=None, max_length=50, description="Where the subscription came from")
    is_active: bool = Field(default=True, index=True)
    unsubscribed_at: Optional[datetime] = Field(default=None)
    ip_address: Optional[str] = Field(default=None, max_length=45)
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Creation timestamp")
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column_kwargs={"onupdate": datetime.utcnow},
        description="Last update timestamp",
    )
