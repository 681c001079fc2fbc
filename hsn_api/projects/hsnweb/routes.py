"""
HSN Web API endpoints.

Base path: ``/api/hsnweb``.

Public endpoints accept contact-form submissions and newsletter sign-ups.
Admin endpoints list and update what was stored.
"""

from __future__ import annotations

import math
from typing import Optional

from fastapi import APIRouter, Path, Query, Request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from hsn_api.core.database import DatabaseError, ProjectModel
from hsn_api.core.logging_config import get_logger
from hsn_api.core.monitoring import log_error, log_submission
from hsn_api.server import responses
from hsn_api.server.api.deps import MailerDep, ManagerDep
from hsn_api.server.schemas import ApiResponse
from hsn_api.utils.mailer import EmailDeliveryError

from .entities import ContactStatus, ContactSubmission, NewsletterSubscription
from .models import PROJECT_NAME
from .schemas import (
    ContactCreate,
    ContactSubmissionPage,
    ContactSubmissionRead,
    ContactUpdate,
    NewsletterCreate,
    NewsletterSubscriberPage,
    NewsletterSubscriptionRead,
    Pagination,
)

logger = get_logger(__name__)

router = APIRouter(tags=["hsnweb"])

CONTACT_THANKS = "Thank you! Your message has been received. We'll get back to you within 24 hours."


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def _pagination(total: int, page: int, limit: int) -> Pagination:
    return Pagination(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit))


# ==========================================
# PUBLIC ROUTES
# ==========================================


@router.post(
    "/contact",
    response_model=ApiResponse[dict],
    summary="Submit Contact Form",
    description="Store a contact form submission and notify the site owner by email.",
    responses={
        400: {"description": "Missing required fields or invalid email"},
        503: {"description": "Database not available"},
    },
)
async def submit_contact(payload: ContactCreate, request: Request, manager: ManagerDep, mailer: MailerDep):
    """
    Handle a contact form submission.

    The notification email is sent first. A failed email is logged and
    recorded as ``email_sent=false``; the submission is stored regardless.
    """
    logger.info(f"Contact form submission: inquiry={payload.inquiry} subject={payload.subject!r}")

    email_sent = False
    try:
        await mailer.send_contact_notification(payload.model_dump())
        email_sent = True
    except EmailDeliveryError as e:
        logger.error(f"Failed to send email notification: {e}")

    try:
        contacts: ProjectModel[ContactSubmission] = manager.get_model(PROJECT_NAME, "ContactSubmission")
        submission = await contacts.create(
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
            company=payload.company,
            inquiry_type=payload.inquiry,
            subject=payload.subject,
            message=payload.message,
            ip_address=_client_ip(request),
            user_agent=request.headers.get("user-agent"),
            email_sent=email_sent,
            status=ContactStatus.NEW,
        )
    except (SQLAlchemyError, DatabaseError) as e:
        logger.error(f"Contact submission error: {e}", exc_info=True)
        log_error("ContactSubmissionError", str(e), {"project": PROJECT_NAME})
        return responses.server_error("Failed to submit contact form. Please try again.")

    logger.info(f"Contact submission saved with ID: {submission.id}")
    log_submission(PROJECT_NAME, "contact", submission.id, email_sent=email_sent)
    return responses.success(
        {"submitted": True, "id": submission.id, "timestamp": submission.created_at},
        CONTACT_THANKS,
    )


@router.post(
    "/newsletter",
    response_model=ApiResponse[dict],
    summary="Subscribe to Newsletter",
    description="Subscribe an email address, or reactivate a previous subscription.",
    responses={
        400: {"description": "Missing or invalid email"},
        503: {"description": "Database not available"},
    },
)
async def subscribe_newsletter(payload: NewsletterCreate, request: Request, manager: ManagerDep):
    """Handle a newsletter subscription."""
    try:
        subscriptions: ProjectModel[NewsletterSubscription] = manager.get_model(
            PROJECT_NAME, "NewsletterSubscription"
        )
        existing = await subscriptions.find_one(email=payload.email)
        if existing is not None:
            if existing.is_active:
                return responses.success(
                    {"subscribed": True, "email": payload.email, "alreadyExists": True},
                    "You're already subscribed to our newsletter!",
                )
            await subscriptions.update(existing, is_active=True, unsubscribed_at=None)
            return responses.success(
                {"subscribed": True, "email": payload.email, "reactivated": True},
                "Welcome back! Your subscription has been reactivated.",
            )

        try:
            subscription = await subscriptions.create(
                email=payload.email,
                name=payload.name,
                source=payload.source or "website",
                ip_address=_client_ip(request),
                is_active=True,
            )
        except IntegrityError:
            # A concurrent request stored the same address first.
            return responses.success(
                {"subscribed": True, "email": payload.email, "alreadyExists": True},
                "You're already subscribed to our newsletter!",
            )
    except (SQLAlchemyError, DatabaseError) as e:
        logger.error(f"Newsletter subscription error: {e}", exc_info=True)
        log_error("NewsletterSubscriptionError", str(e), {"project": PROJECT_NAME})
        return responses.server_error("Failed to subscribe. Please try again.")

    logger.info(f"Newsletter subscription saved with ID: {subscription.id}")
    log_submission(PROJECT_NAME, "newsletter", subscription.id, source=subscription.source)
    return responses.success(
        {"subscribed": True, "email": payload.email, "id": subscription.id},
        "Successfully subscribed to newsletter!",
    )


# ==========================================
# ADMIN ROUTES
# ==========================================


@router.get(
    "/admin/contacts",
    response_model=ApiResponse[ContactSubmissionPage],
    summary="List Contact Submissions",
    description="List stored contact submissions, newest first.",
)
async def list_contact_submissions(
    manager: ManagerDep,
    status: Optional[ContactStatus] = Query(default=None, description="Only submissions with this status"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
):
    try:
        contacts: ProjectModel[ContactSubmission] = manager.get_model(PROJECT_NAME, "ContactSubmission")
        total, rows = await contacts.find_and_count(
            filters={"status": status},
            order_by=ContactSubmission.created_at,
            limit=limit,
            offset=(page - 1) * limit,
        )
    except (SQLAlchemyError, DatabaseError) as e:
        logger.error(f"Get contacts error: {e}", exc_info=True)
        return responses.server_error("Failed to retrieve contact submissions.")

    return responses.success(
        ContactSubmissionPage(
            submissions=[ContactSubmissionRead.model_validate(row) for row in rows],
            pagination=_pagination(total, page, limit),
        )
    )


@router.put(
    "/admin/contacts/{submission_id}",
    response_model=ApiResponse[ContactSubmissionRead],
    summary="Update Contact Submission",
    description="Change the status and/or notes of a contact submission.",
    responses={404: {"description": "Contact submission not found"}},
)
async def update_contact_submission(
    payload: ContactUpdate,
    manager: ManagerDep,
    submission_id: int = Path(..., description="Contact submission ID"),
):
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("status") is None:
        changes.pop("status", None)

    try:
        contacts: ProjectModel[ContactSubmission] = manager.get_model(PROJECT_NAME, "ContactSubmission")
        submission = await contacts.get(submission_id)
        if submission is None:
            return responses.not_found("Contact submission not found.")
        submission = await contacts.update(submission, **changes)
    except (SQLAlchemyError, DatabaseError) as e:
        logger.error(f"Update contact error: {e}", exc_info=True)
        return responses.server_error("Failed to update contact submission.")

    return responses.success(ContactSubmissionRead.model_validate(submission), "Contact submission updated.")


@router.get(
    "/admin/newsletter",
    response_model=ApiResponse[NewsletterSubscriberPage],
    summary="List Newsletter Subscribers",
    description="List newsletter subscriptions, newest first.",
)
async def list_newsletter_subscribers(
    manager: ManagerDep,
    active: Optional[bool] = Query(default=None, description="Only active (true) or inactive (false) subscriptions"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=100),
):
    try:
        subscriptions: ProjectModel[NewsletterSubscription] = manager.get_model(
            PROJECT_NAME, "NewsletterSubscription"
        )
        total, rows = await subscriptions.find_and_count(
            filters={"is_active": active},
            order_by=NewsletterSubscription.created_at,
            limit=limit,
            offset=(page - 1) * limit,
        )
    except (SQLAlchemyError, DatabaseError) as e:
        logger.error(f"Get newsletter subscribers error: {e}", exc_info=True)
        return responses.server_error("Failed to retrieve newsletter subscribers.")

    return responses.success(
        NewsletterSubscriberPage(
            subscribers=[NewsletterSubscriptionRead.model_validate(row) for row in rows],
            pagination=_pagination(total, page, limit),
        )
    )
