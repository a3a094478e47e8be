"""Decides whether a conversation still needs an auto-reply."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from out_of_office.agent.session import MailboxSession
from out_of_office.models import EmailHeader, ThreadStatus

logger = structlog.get_logger()


def is_new_conversation(headers: Sequence[EmailHeader], owner_address: str | None) -> bool:
    """Return True when the owner has not written any message of the thread.

    A single-message thread is always new. Otherwise the owner counts as a
    participant when their address occurs anywhere in a message's raw From
    header, display name included.
    """
    if len(headers) == 1:
        return True
    if not owner_address:
        return True
    return not any(owner_address in (h.from_raw or "") for h in headers)


class ThreadClassifier:
    """Classifies threads, resolving the owner address only when needed."""

    def __init__(self, session: MailboxSession) -> None:
        self.session = session

    async def classify(self, headers: Sequence[EmailHeader]) -> ThreadStatus:
        if len(headers) == 1:
            return ThreadStatus.NEW

        owner_address = await self.session.resolve_owner_address()
        status = (
            ThreadStatus.NEW
            if is_new_conversation(headers, owner_address)
            else ThreadStatus.ANSWERED
        )
        logger.debug("thread_classified", message_count=len(headers), status=status.value)
        return status
