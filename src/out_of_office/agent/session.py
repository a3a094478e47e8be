"""Long-lived mailbox session shared by the agent components."""

from __future__ import annotations

import structlog

from out_of_office.config import Settings
from out_of_office.exceptions import GmailAPIError
from out_of_office.gmail.client import GmailClient

logger = structlog.get_logger()


class MailboxSession:
    """Holds the Gmail client and the per-process lookups made through it.

    ``owner_address`` and ``label_id`` are memoized for the lifetime of the
    session and never invalidated. Recomputing either is idempotent.
    """

    def __init__(self, gmail_client: GmailClient, settings: Settings | None = None) -> None:
        from out_of_office.config import get_settings

        self.settings = settings or get_settings()
        self.gmail_client = gmail_client
        self.owner_address: str | None = None
        self.label_id: str | None = None

    async def resolve_owner_address(self) -> str:
        """Return the authenticated user's address, fetching it on first use."""
        if self.owner_address is None:
            profile = await self.gmail_client.get_profile()
            address = profile.get("emailAddress")
            if not address:
                raise GmailAPIError("Gmail profile has no emailAddress")
            self.owner_address = address
            logger.info("owner_address_resolved", owner_address=address)
        return self.owner_address
