"""
Email notification utility.

Sends plain-text + HTML messages over SMTP with aiosmtplib. Port 465 style
servers are reached with implicit TLS (``SMTP_SECURE=true``); on other servers
the connection is upgraded with STARTTLS when the server offers it.
"""

from __future__ import annotations

from datetime import datetime
from email.errors import MessageError
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate, make_msgid
from html import escape
from typing import Any, Dict, List, Optional, Tuple

import aiosmtplib

from hsn_api.core.logging_config import get_logger
from hsn_api.server.core.config import EmailConfig

logger = get_logger(__name__)

_CELL_STYLE = "padding: 10px; border: 1px solid #ddd;"
_LABEL_STYLE = _CELL_STYLE + " font-weight: bold;"


class EmailDeliveryError(Exception):
    """Raised when the SMTP server could not be reached or refused the message."""


class Mailer:
    """SMTP client bound to one ``EmailConfig``."""

    def __init__(self, config: EmailConfig) -> None:
        self.config = config

    async def send_email(
        self,
        to: str,
        subject: str,
        text: str,
        html: Optional[str] = None,
        from_: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Send an email.

        Args:
            to: Recipient address
            subject: Email subject
            text: Plain text body
            html: HTML body; the text body is used when omitted
            from_: Sender address, defaults to ``EMAIL_FROM``

        Returns:
            ``{"success": True, "message_id": ...}``

        Raises:
            EmailDeliveryError: Building the message, connecting, authenticating
                or sending failed
        """
        sender = from_ or self.config.sender
        domain = sender.rsplit("@", 1)[-1]

        msg = MIMEMultipart("alternative")
        msg["Subject"] = single_line(subject)
        msg["From"] = sender
        msg["To"] = to
        msg["Date"] = formatdate(localtime=True)
        msg["Message-ID"] = make_msgid(domain=domain)
        msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html or text, "html", "utf-8"))

        smtp = aiosmtplib.SMTP(
            hostname=self.config.host,
            port=self.config.port,
            timeout=self.config.timeout,
            use_tls=self.config.secure,
            start_tls=False,
        )
        try:
            await smtp.connect()
            if not self.config.secure:
                await smtp.ehlo()
                if smtp.supports_extension("starttls"):
                    await smtp.starttls()
            if self.config.user and self.config.password:
                await smtp.login(self.config.user, self.config.password)
            await smtp.send_message(msg)
            await smtp.quit()
        except aiosmtplib.SMTPResponseException as e:
            logger.error(f"Email error: {e.code} {e.message}")
            raise EmailDeliveryError(f"{e.code} {e.message}") from e
        except (aiosmtplib.SMTPException, MessageError, OSError) as e:
            logger.error(f"Email error: {e}")
            raise EmailDeliveryError(str(e)) from e
        finally:
            if smtp.is_connected:
                smtp.close()

        logger.info(f"Email sent: {msg['Message-ID']}")
        return {"success": True, "message_id": msg["Message-ID"]}

    async def send_contact_notification(self, form: Dict[str, Any]) -> Dict[str, Any]:
        """
        Notify the site owner about a new contact form submission.

        Args:
            form: Submitted fields ``name``, ``email``, ``inquiry``, ``subject``,
                ``message`` and the optional ``phone`` and ``company``
        """
        submitted_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        rows = _contact_rows(form)
        return await self.send_email(
            to=self.config.recipient,
            subject=f"[HSN Website] {single_line(form['inquiry'])}: {single_line(form['subject'])}",
            text=render_contact_text(rows, submitted_at),
            html=render_contact_html(rows, submitted_at),
        )


def _contact_rows(form: Dict[str, Any]) -> List[Tuple[str, str]]:
    rows = [("Name", form["name"]), ("Email", form["email"])]
    if form.get("phone"):
        rows.append(("Phone", form["phone"]))
    if form.get("company"):
        rows.append(("Company", form["company"]))
    rows += [
        ("Inquiry Type", form["inquiry"]),
        ("Subject", form["subject"]),
        ("Message", form["message"]),
    ]
    return [(label, str(value)) for label, value in rows]


def render_contact_html(rows: List[Tuple[str, str]], submitted_at: str) -> str:
    """Render the HTML notification body. Every value is HTML-escaped."""
    table_rows = "\n".join(
        f'<tr><td style="{_LABEL_STYLE}">{label}</td><td style="{_CELL_STYLE}">{escape(value)}</td></tr>'
        for label, value in rows
    )
    return (
        "<h2>New Contact Form Submission</h2>\n"
        '<table style="border-collapse: collapse; width: 100%; max-width: 600px;">\n'
        f"{table_rows}\n"
        "</table>\n"
        f'<p style="margin-top: 20px; color: #666; font-size: 12px;">Submitted at: {submitted_at}</p>'
    )


def render_contact_text(rows: List[Tuple[str, str]], submitted_at: str) -> str:
    """Render the plain text notification body."""
    separator = "-" * 28
    lines = ["New Contact Form Submission", separator]
    lines += [f"{label}: {value}" for label, value in rows]
    lines += [separator, f"Submitted at: {submitted_at}"]
    return "\n".join(lines)


def single_line(value: str) -> str:
    """Collapse line breaks so ``value`` can be used as a header."""
    return " ".join(part.strip() for part in value.splitlines() if part.strip())
