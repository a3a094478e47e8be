"""Gmail API client implementation.

This module provides a client for the handful of Gmail API calls the
auto-responder needs.

Notes:
    The Google API client is synchronous. This project wraps those calls using
    `asyncio.to_thread` so the rest of the codebase can remain async-friendly.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import structlog

from out_of_office.config import Settings
from out_of_office.exceptions import AuthenticationError, ConfigurationError, GmailAPIError
from out_of_office.gmail.credentials import CredentialStore

logger = structlog.get_logger()

USER_ID = "me"


def build_service(credentials: Any) -> Any:
    """Build a Gmail v1 service handle from OAuth credentials."""
    # Imported lazily to keep import-time cost low and tests fast.
    from googleapiclient.discovery import build

    # cache_discovery=False prevents writing discovery docs to disk.
    return build("gmail", "v1", credentials=credentials, cache_discovery=False)


class GmailClient:
    """Gmail API client for the auto-responder.

    This client handles authentication, message and thread retrieval,
    labels, and sending.
    """

    def __init__(self, settings: Settings | None = None, service: Any | None = None) -> None:
        """Initialize Gmail client.

        Args:
            settings: Application settings. If None, uses default settings.
            service: Pre-built Gmail service. If None, one is built by authenticate().
        """
        from out_of_office.config import get_settings

        self.settings = settings or get_settings()
        self._service: Any | None = service
        logger.info("gmail_client_initialized")

    async def authenticate(self) -> None:
        """Authenticate with Gmail API using OAuth2.

        Raises:
            ConfigurationError: If the client-secret file is needed but missing.
            AuthenticationError: If authentication fails.
        """

        if self._service is not None:
            return

        logger.info(
            "gmail_authentication_started",
            credentials_path=str(self.settings.gmail_credentials_path),
            token_path=str(self.settings.gmail_token_path),
            scope=self.settings.gmail_scope,
        )

        store = CredentialStore(self.settings)
        try:
            credentials = await asyncio.to_thread(store.authorize)
            self._service = await asyncio.to_thread(build_service, credentials)
        except (ConfigurationError, AuthenticationError):
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_authentication_failed", error=str(exc))
            raise AuthenticationError(str(exc)) from exc

        logger.info("gmail_authentication_completed")

    async def list_messages(
        self,
        max_results: int | None = None,
        query: str | None = None,
        *,
        include_spam_trash: bool = False,
    ) -> list[dict[str, Any]]:
        """List messages from Gmail, newest first.

        Args:
            max_results: Maximum number of messages to return.
            query: Gmail search query string.
            include_spam_trash: Whether to include SPAM and TRASH.

        Returns:
            List of ``{"id", "threadId"}`` dictionaries.

        Raises:
            GmailAPIError: If the API request fails.
        """

        logger.debug("listing_messages", max_results=max_results or "all", query=query)
        return await self._execute(
            "gmail_list_messages_failed",
            self._list_messages_sync,
            max_results,
            query,
            include_spam_trash,
        )

    async def get_thread(self, thread_id: str, *, format: str = "full") -> dict[str, Any]:
        """Get a thread with all of its messages.

        Raises:
            GmailAPIError: If the API request fails.
        """

        logger.debug("getting_thread", thread_id=thread_id, format=format)
        return await self._execute(
            "gmail_get_thread_failed",
            lambda service: service.users()
            .threads()
            .get(userId=USER_ID, id=thread_id, format=format)
            .execute(),
            thread_id=thread_id,
        )

    async def list_labels(self) -> list[dict[str, Any]]:
        """List all labels of the mailbox.

        Raises:
            GmailAPIError: If the API request fails.
        """

        logger.debug("listing_labels")
        response = await self._execute(
            "gmail_list_labels_failed",
            lambda service: service.users().labels().list(userId=USER_ID).execute(),
        )
        return response.get("labels", []) or []

    async def create_label(
        self,
        name: str,
        *,
        label_list_visibility: str = "labelShow",
        message_list_visibility: str = "show",
    ) -> dict[str, Any]:
        """Create a user label.

        Raises:
            GmailAPIError: If the API request fails.
        """

        body = {
            "name": name,
            "labelListVisibility": label_list_visibility,
            "messageListVisibility": message_list_visibility,
        }
        logger.info("creating_label", name=name)
        return await self._execute(
            "gmail_create_label_failed",
            lambda service: service.users().labels().create(userId=USER_ID, body=body).execute(),
            name=name,
        )

    async def modify_thread(
        self,
        thread_id: str,
        *,
        add_label_ids: list[str] | None = None,
        remove_label_ids: list[str] | None = None,
    ) -> dict[str, Any]:
        """Add and remove labels on every message of a thread.

        Raises:
            GmailAPIError: If the API request fails.
        """

        body = {
            "addLabelIds": list(add_label_ids or []),
            "removeLabelIds": list(remove_label_ids or []),
        }
        logger.info("modifying_thread", thread_id=thread_id, **body)
        return await self._execute(
            "gmail_modify_thread_failed",
            lambda service: service.users()
            .threads()
            .modify(userId=USER_ID, id=thread_id, body=body)
            .execute(),
            thread_id=thread_id,
        )

    async def send_message(
        self,
        raw: str,
        *,
        thread_id: str | None = None,
        label_ids: list[str] | None = None,
    ) -> dict[str, Any]:
        """Send a base64url-encoded RFC 822 message.

        Args:
            raw: The encoded message.
            thread_id: Thread the message belongs to.
            label_ids: Labels to apply to the sent copy.

        Raises:
            GmailAPIError: If the API request fails.
        """

        body: dict[str, Any] = {"raw": raw}
        if thread_id:
            body["threadId"] = thread_id
        if label_ids:
            body["labelIds"] = list(label_ids)

        logger.info("sending_message", thread_id=thread_id, label_ids=label_ids)
        return await self._execute(
            "gmail_send_message_failed",
            lambda service: service.users().messages().send(userId=USER_ID, body=body).execute(),
            thread_id=thread_id,
        )

    async def get_profile(self) -> dict[str, Any]:
        """Get the profile of the authenticated user.

        Raises:
            GmailAPIError: If the API request fails.
        """

        logger.debug("getting_profile")
        return await self._execute(
            "gmail_get_profile_failed",
            lambda service: service.users().getProfile(userId=USER_ID).execute(),
        )

    async def _execute(
        self,
        failure_event: str,
        func: Callable[..., Any],
        *args: Any,
        **log_context: Any,
    ) -> Any:
        service = self._ensure_authenticated()
        try:
            return await asyncio.to_thread(func, service, *args)
        except Exception as exc:  # noqa: BLE001
            logger.exception(failure_event, error=str(exc), **log_context)
            raise GmailAPIError(str(exc)) from exc

    def _ensure_authenticated(self) -> Any:
        if self._service is None:
            raise AuthenticationError(
                "Gmail client is not authenticated. Call await GmailClient.authenticate() first."
            )
        return self._service

    @staticmethod
    def _list_messages_sync(
        service: Any,
        max_results: int | None,
        query: str | None,
        include_spam_trash: bool,
    ) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = []

        page_token: str | None = None
        while True:
            if max_results is not None and len(messages) >= max_results:
                break

            remaining = None if max_results is None else max_results - len(messages)
            per_page = 500 if remaining is None else min(500, remaining)

            request = (
                service.users()
                .messages()
                .list(
                    userId=USER_ID,
                    maxResults=per_page,
                    q=query,
                    includeSpamTrash=include_spam_trash,
                    pageToken=page_token,
                )
            )
            response = request.execute()
            messages.extend(response.get("messages", []) or [])
            page_token = response.get("nextPageToken")
            if page_token is None:
                break

        return messages if max_results is None else messages[:max_results]
