"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any

import pytest


def make_message(
    message_id: str,
    thread_id: str,
    *,
    sender: str | None = "alice@x.com",
    to: str | None = "bob@y.com",
    subject: str | None = "Hello",
    label_ids: list[str] | None = None,
) -> dict[str, Any]:
    """Build a Gmail API message dict with the given headers."""
    headers = []
    if sender is not None:
        headers.append({"name": "From", "value": sender})
    if to is not None:
        headers.append({"name": "To", "value": to})
    if subject is not None:
        headers.append({"name": "Subject", "value": subject})
    headers.append({"name": "Message-ID", "value": f"<{message_id}@mail.x.com>"})
    return {
        "id": message_id,
        "threadId": thread_id,
        "labelIds": label_ids if label_ids is not None else ["INBOX", "UNREAD"],
        "payload": {"headers": headers, "body": {"data": "SGVsbG8="}},
    }


class FakeGmailClient:
    """In-memory stand-in for GmailClient recording every mutating call."""

    def __init__(
        self,
        *,
        unread: list[dict[str, Any]] | None = None,
        threads: dict[str, dict[str, Any]] | None = None,
        labels: list[dict[str, Any]] | None = None,
        owner_address: str = "bob@y.com",
    ) -> None:
        self.unread = list(unread or [])
        self.threads = dict(threads or {})
        self.labels = list(labels or [])
        self.owner_address = owner_address

        self.failures: dict[str, Exception] = {}
        self.on_list_messages = None

        self.list_messages_calls: list[dict[str, Any]] = []
        self.sent: list[dict[str, Any]] = []
        self.modified: list[dict[str, Any]] = []
        self.created_labels: list[str] = []
        self.list_labels_calls = 0
        self.profile_calls = 0

    def _maybe_fail(self, operation: str) -> None:
        exc = self.failures.get(operation)
        if exc is not None:
            raise exc

    async def list_messages(
        self,
        max_results: int | None = None,
        query: str | None = None,
        *,
        include_spam_trash: bool = False,
    ) -> list[dict[str, Any]]:
        self.list_messages_calls.append(
            {"max_results": max_results, "query": query, "include_spam_trash": include_spam_trash}
        )
        if self.on_list_messages is not None:
            self.on_list_messages()
        self._maybe_fail("list_messages")
        return self.unread[:max_results]

    async def get_thread(self, thread_id: str, *, format: str = "full") -> dict[str, Any]:
        self._maybe_fail("get_thread")
        return self.threads[thread_id]

    async def list_labels(self) -> list[dict[str, Any]]:
        self.list_labels_calls += 1
        self._maybe_fail("list_labels")
        return list(self.labels)

    async def create_label(
        self,
        name: str,
        *,
        label_list_visibility: str = "labelShow",
        message_list_visibility: str = "show",
    ) -> dict[str, Any]:
        self._maybe_fail("create_label")
        label = {
            "id": f"Label_{len(self.labels) + 1}",
            "name": name,
            "labelListVisibility": label_list_visibility,
            "messageListVisibility": message_list_visibility,
        }
        self.labels.append(label)
        self.created_labels.append(name)
        return label

    async def modify_thread(
        self,
        thread_id: str,
        *,
        add_label_ids: list[str] | None = None,
        remove_label_ids: list[str] | None = None,
    ) -> dict[str, Any]:
        self._maybe_fail("modify_thread")
        self.modified.append(
            {
                "thread_id": thread_id,
                "add": list(add_label_ids or []),
                "remove": list(remove_label_ids or []),
            }
        )
        return {"id": thread_id}

    async def send_message(
        self,
        raw: str,
        *,
        thread_id: str | None = None,
        label_ids: list[str] | None = None,
    ) -> dict[str, Any]:
        self._maybe_fail("send_message")
        self.sent.append({"raw": raw, "thread_id": thread_id, "label_ids": label_ids})
        return {"id": f"sent{len(self.sent)}", "threadId": thread_id}

    async def get_profile(self) -> dict[str, Any]:
        self.profile_calls += 1
        self._maybe_fail("get_profile")
        return {"emailAddress": self.owner_address}


@pytest.fixture
def mock_settings(tmp_path):
    """Provide settings pointing at temporary credential files."""
    from out_of_office.config import Settings

    return Settings(
        gmail_credentials_path=tmp_path / "credentials.json",
        gmail_token_path=tmp_path / "token.json",
        poll_interval_seconds=0.01,
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def client_secrets() -> dict[str, Any]:
    """Provide an installed-app client-secret file body."""
    return {
        "installed": {
            "client_id": "client-123.apps.googleusercontent.com",
            "client_secret": "s3cret",
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": ["http://localhost"],
        }
    }


@pytest.fixture
def sample_message() -> dict[str, Any]:
    """Provide a single unread inbox message."""
    return make_message("msg1", "thread1")


@pytest.fixture
def fake_gmail() -> FakeGmailClient:
    """Provide an empty fake Gmail mailbox owned by bob@y.com."""
    return FakeGmailClient()


@pytest.fixture
def message_factory():
    """Provide the Gmail message builder."""
    return make_message


@pytest.fixture
def gmail_factory():
    """Provide the fake Gmail client class for tests that need custom mailboxes."""
    return FakeGmailClient
