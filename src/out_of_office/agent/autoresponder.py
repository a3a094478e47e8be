"""Out-of-office agent implementation.

This module provides the polling agent that ties the classifier, responder
and labeler together.
"""

from __future__ import annotations

import asyncio
import time

import structlog

from out_of_office.agent.classifier import ThreadClassifier
from out_of_office.agent.labeler import Labeler
from out_of_office.agent.responder import Responder
from out_of_office.agent.session import MailboxSession
from out_of_office.config import Settings
from out_of_office.exceptions import GmailAPIError
from out_of_office.gmail.client import GmailClient
from out_of_office.gmail.parsing import thread_to_email_headers
from out_of_office.models import ThreadStatus, TickOutcome, TickResult

logger = structlog.get_logger()


class OutOfOfficeAgent:
    """Polls the inbox and answers new conversations.

    Each tick handles at most the single most recent unread inbox message.
    Messages arriving between ticks wait for the next one.
    """

    def __init__(
        self,
        gmail_client: GmailClient | None = None,
        settings: Settings | None = None,
        session: MailboxSession | None = None,
    ) -> None:
        """Initialize the agent.

        Args:
            gmail_client: Gmail API client. If None, creates a new one.
            settings: Application settings. If None, uses default settings.
            session: Mailbox session to reuse. If None, creates a new one.
        """
        from out_of_office.config import get_settings

        self.settings = settings or get_settings()
        self.gmail_client = gmail_client or GmailClient(self.settings)
        self.session = session or MailboxSession(self.gmail_client, self.settings)
        self.classifier = ThreadClassifier(self.session)
        self.responder = Responder(self.session)
        self.labeler = Labeler(self.session)

        self.tick_count = 0
        self.last_result: TickResult | None = None
        self._stop_event = asyncio.Event()
        logger.info("out_of_office_agent_initialized", label_name=self.settings.label_name)

    async def run_tick(self) -> TickResult:
        """Handle the most recent unread inbox message, if any.

        Never raises: failures are logged and reported as a FAILED result.
        """
        self.tick_count += 1
        started = time.perf_counter()
        message_id: str | None = None
        thread_id: str | None = None

        try:
            messages = await self.gmail_client.list_messages(
                max_results=1,
                query=self.settings.unread_query,
                include_spam_trash=False,
            )
            if not messages:
                logger.info("no_unread_messages", tick=self.tick_count)
                result = TickResult(outcome=TickOutcome.NO_UNREAD)
            else:
                message_id = messages[0].get("id")
                thread_id = messages[0].get("threadId")
                result = await self._handle_thread(message_id, thread_id)
        except Exception as exc:  # noqa: BLE001
            logger.exception(
                "tick_failed",
                tick=self.tick_count,
                message_id=message_id,
                thread_id=thread_id,
                error=str(exc),
            )
            result = TickResult(
                outcome=TickOutcome.FAILED,
                message_id=message_id,
                thread_id=thread_id,
                error=str(exc) or type(exc).__name__,
            )

        result.duration_ms = (time.perf_counter() - started) * 1000
        self.last_result = result
        return result

    async def _handle_thread(self, message_id: str | None, thread_id: str | None) -> TickResult:
        if not thread_id:
            raise GmailAPIError(f"Message {message_id} has no thread id")

        thread = await self.gmail_client.get_thread(thread_id)
        headers = thread_to_email_headers(thread)
        if not headers:
            raise GmailAPIError(f"Thread {thread_id} has no messages")

        status = await self.classifier.classify(headers)
        if status is ThreadStatus.ANSWERED:
            await self.labeler.hide(thread_id)
            logger.info("thread_skipped", thread_id=thread_id, message_count=len(headers))
            return TickResult(
                outcome=TickOutcome.SKIPPED,
                message_id=message_id,
                thread_id=thread_id,
            )

        trigger = next((h for h in headers if h.gmail_id == message_id), headers[-1])
        await self.responder.reply(trigger, thread_id)
        await self.labeler.mark_answered(thread_id)
        logger.info("thread_replied", thread_id=thread_id, message_id=message_id)
        return TickResult(
            outcome=TickOutcome.REPLIED,
            message_id=message_id,
            thread_id=thread_id,
        )

    def stop(self) -> None:
        """Signal the agent to finish the current tick and stop polling."""
        logger.info("out_of_office_agent_stop_requested")
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    async def run(self) -> None:
        """Poll until stop() is called."""
        interval = self.settings.poll_interval_seconds
        logger.info("out_of_office_agent_started", poll_interval_seconds=interval)

        while not self._stop_event.is_set():
            result = await self.run_tick()
            logger.debug("tick_completed", tick=self.tick_count, outcome=result.outcome.value)
            await self._interruptible_sleep(interval)

        logger.info("out_of_office_agent_stopped", ticks=self.tick_count)

    async def _interruptible_sleep(self, seconds: float) -> None:
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
