"""Label bookkeeping that keeps handled threads out of the next poll."""

from __future__ import annotations

import structlog

from out_of_office.agent.session import MailboxSession
from out_of_office.exceptions import GmailAPIError

logger = structlog.get_logger()


class Labeler:
    """Applies the out-of-office label or hides skipped threads."""

    def __init__(self, session: MailboxSession) -> None:
        self.session = session

    async def ensure_label(self) -> str:
        """Return the label id, looking it up by name or creating it once.

        Raises:
            GmailAPIError: If the created label comes back without an id.
        """
        if self.session.label_id is not None:
            return self.session.label_id

        name = self.session.settings.label_name
        gmail = self.session.gmail_client

        labels = await gmail.list_labels()
        label_id = next((lbl.get("id") for lbl in labels if lbl.get("name") == name), None)
        if label_id is None:
            created = await gmail.create_label(
                name,
                label_list_visibility="labelShow",
                message_list_visibility="show",
            )
            label_id = created.get("id")
            if not label_id:
                raise GmailAPIError(f"Gmail did not return an id for label {name!r}")
            logger.info("label_created", name=name, label_id=label_id)
        else:
            logger.info("label_found", name=name, label_id=label_id)

        self.session.label_id = label_id
        return label_id

    async def mark_answered(self, thread_id: str) -> None:
        """Tag an answered thread and mark it read."""
        label_id = await self.ensure_label()
        await self.session.gmail_client.modify_thread(
            thread_id,
            add_label_ids=[label_id],
            remove_label_ids=["UNREAD"],
        )
        logger.info("thread_marked_answered", thread_id=thread_id, label_id=label_id)

    async def hide(self, thread_id: str) -> None:
        """Move a thread out of the inbox without labelling it."""
        await self.session.gmail_client.modify_thread(
            thread_id,
            add_label_ids=[],
            remove_label_ids=["INBOX"],
        )
        logger.info("thread_hidden", thread_id=thread_id)
