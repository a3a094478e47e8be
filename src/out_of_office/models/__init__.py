"""Data models for the Out-of-Office agent.

This module contains Pydantic models for data validation and serialization.
"""

import base64
from datetime import datetime, timezone
from email.mime.text import MIMEText
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from out_of_office.models.email_header import EmailHeader


class ThreadStatus(str, Enum):
    """Classification of a conversation."""

    NEW = "new"
    ANSWERED = "answered"


class TickOutcome(str, Enum):
    """What a single poll of the inbox ended up doing."""

    REPLIED = "replied"
    SKIPPED = "skipped"
    NO_UNREAD = "no_unread"
    FAILED = "failed"


class StoredToken(BaseModel):
    """Normalized token file contents for an installed-app OAuth client."""

    type: str = Field(default="authorized_user", description="Google credential type")
    client_id: str = Field(description="OAuth client ID")
    client_secret: str = Field(description="OAuth client secret")
    refresh_token: str = Field(description="Long-lived refresh token")


class AutoReply(BaseModel):
    """A composed plain-text auto-reply."""

    sender: str = Field(description="From header of the reply")
    recipient: str = Field(description="To header of the reply")
    subject: str = Field(description="Subject header of the reply")
    body: str = Field(min_length=1, description="Plain-text body")
    in_reply_to: Optional[str] = Field(
        default=None,
        description="Message-ID of the message being answered",
    )

    def to_mime(self) -> MIMEText:
        """Render the reply as a MIME message."""
        message = MIMEText(self.body, "plain", "utf-8")
        message["From"] = self.sender
        message["To"] = self.recipient
        message["Subject"] = self.subject
        if self.in_reply_to:
            message["In-Reply-To"] = self.in_reply_to
            message["References"] = self.in_reply_to
        return message

    def encode(self) -> str:
        """Encode the reply as the base64url ``raw`` value Gmail expects."""
        return base64.urlsafe_b64encode(self.to_mime().as_bytes()).decode("ascii")


class TickResult(BaseModel):
    """Result of one poll of the inbox."""

    outcome: TickOutcome = Field(description="What the tick did")
    message_id: Optional[str] = Field(default=None, description="Triggering Gmail message ID")
    thread_id: Optional[str] = Field(default=None, description="Gmail thread ID")
    error: Optional[str] = Field(default=None, description="Error message if failed")
    started_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Tick start timestamp",
    )
    duration_ms: float = Field(default=0.0, description="Tick duration in milliseconds")

    @property
    def failed(self) -> bool:
        return self.outcome is TickOutcome.FAILED


__all__ = [
    "AutoReply",
    "EmailHeader",
    "StoredToken",
    "ThreadStatus",
    "TickOutcome",
    "TickResult",
]
