"""Header-only view of a Gmail message.

The auto-responder never needs message bodies: classification looks at the
From header and the reply is built from From, To and Subject.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class EmailHeader(BaseModel):
    """A minimal representation of an email message without the body."""

    gmail_id: str = Field(description="Gmail message ID")
    thread_id: str | None = Field(default=None, description="Gmail thread ID")

    # Raw header values, display names included. None when the header is absent.
    from_raw: str | None = Field(default=None, description="Raw From header")
    to_raw: str | None = Field(default=None, description="Raw To header")
    subject: str | None = Field(default=None, description="Subject header")
    message_id: str | None = Field(default=None, description="RFC 822 Message-ID header")
