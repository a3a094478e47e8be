"""Composes and sends the out-of-office reply."""

from __future__ import annotations

from typing import Any

import structlog

from out_of_office.agent.session import MailboxSession
from out_of_office.config import Settings
from out_of_office.exceptions import MissingHeaderError
from out_of_office.models import AutoReply, EmailHeader

logger = structlog.get_logger()


def compose_reply(trigger: EmailHeader, settings: Settings) -> AutoReply:
    """Build the auto-reply for a message.

    The reply goes back to the original sender from the address the message
    was sent to, which also signs the body.

    Args:
        trigger: Headers of the message being answered.
        settings: Provides the subject prefix and body template.

    Returns:
        AutoReply: The composed reply.

    Raises:
        MissingHeaderError: If From, To or Subject is absent.
    """
    required = (
        ("From", trigger.from_raw),
        ("To", trigger.to_raw),
        ("Subject", trigger.subject),
    )
    for name, value in required:
        if value is None:
            raise MissingHeaderError(name, trigger.gmail_id)

    return AutoReply(
        sender=trigger.to_raw,
        recipient=trigger.from_raw,
        subject=f"{settings.reply_subject_prefix}{trigger.subject}",
        body=settings.reply_body_template.format(signature=trigger.to_raw),
        in_reply_to=trigger.message_id,
    )


class Responder:
    """Sends auto-replies into the original conversation."""

    def __init__(self, session: MailboxSession) -> None:
        self.session = session

    async def reply(self, trigger: EmailHeader, thread_id: str) -> dict[str, Any]:
        """Send the auto-reply for ``trigger`` into ``thread_id``.

        The sent copy keeps the INBOX label so the owner sees it.
        """
        reply = compose_reply(trigger, self.session.settings)
        sent = await self.session.gmail_client.send_message(
            reply.encode(),
            thread_id=thread_id,
            label_ids=["INBOX"],
        )
        logger.info(
            "auto_reply_sent",
            thread_id=thread_id,
            recipient=reply.recipient,
            sent_message_id=sent.get("id"),
        )
        return sent
