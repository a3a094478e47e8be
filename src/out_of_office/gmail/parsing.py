"""Helpers for parsing Gmail messages and threads into internal models."""

from __future__ import annotations

from typing import Any

from out_of_office.models import EmailHeader


def _header_map(message: dict[str, Any]) -> dict[str, str]:
    payload = message.get("payload") or {}
    headers = payload.get("headers") or []
    result: dict[str, str] = {}
    for h in headers:
        name = h.get("name")
        value = h.get("value")
        if isinstance(name, str) and isinstance(value, str):
            # Gmail can include duplicates; keep the first.
            result.setdefault(name.lower(), value)
    return result


def message_to_email_header(message: dict[str, Any]) -> EmailHeader:
    """Convert a Gmail API message (format=full or metadata) to EmailHeader.

    Args:
        message: Gmail API message dict.

    Returns:
        EmailHeader: Parsed header-only model.
    """

    hm = _header_map(message)

    return EmailHeader(
        gmail_id=str(message.get("id") or ""),
        thread_id=str(message.get("threadId") or "") or None,
        from_raw=hm.get("from"),
        to_raw=hm.get("to"),
        subject=hm.get("subject"),
        message_id=hm.get("message-id"),
    )


def thread_to_email_headers(thread: dict[str, Any]) -> list[EmailHeader]:
    """Convert a Gmail API thread into its ordered list of message headers."""
    messages = thread.get("messages") or []
    return [message_to_email_header(m) for m in messages if isinstance(m, dict)]
