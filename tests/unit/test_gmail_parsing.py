"""Unit tests for Gmail message parsing helpers."""

from out_of_office.gmail.parsing import message_to_email_header, thread_to_email_headers


def test_message_to_email_header_parses_basic_fields(sample_message) -> None:
    header = message_to_email_header(sample_message)

    assert header.gmail_id == "msg1"
    assert header.thread_id == "thread1"
    assert header.from_raw == "alice@x.com"
    assert header.to_raw == "bob@y.com"
    assert header.subject == "Hello"
    assert header.message_id == "<msg1@mail.x.com>"


def test_header_names_are_case_insensitive_and_first_wins() -> None:
    message = {
        "id": "m",
        "threadId": "t",
        "payload": {
            "headers": [
                {"name": "FROM", "value": "Alice <alice@x.com>"},
                {"name": "from", "value": "other@x.com"},
                {"name": "subject", "value": ""},
            ]
        },
    }

    header = message_to_email_header(message)

    assert header.from_raw == "Alice <alice@x.com>"
    assert header.subject == ""
    assert header.to_raw is None


def test_thread_to_email_headers_keeps_order(message_factory) -> None:
    thread = {
        "id": "t1",
        "messages": [
            message_factory("m1", "t1", sender="alice@x.com"),
            message_factory("m2", "t1", sender="bob@y.com", to="alice@x.com"),
        ],
    }

    headers = thread_to_email_headers(thread)

    assert [h.gmail_id for h in headers] == ["m1", "m2"]
    assert headers[1].from_raw == "bob@y.com"


def test_thread_without_messages() -> None:
    assert thread_to_email_headers({"id": "t1"}) == []


def test_email_header_carries_only_reply_headers(sample_message) -> None:
    header = message_to_email_header(sample_message)

    assert set(header.model_dump()) == {
        "gmail_id",
        "thread_id",
        "from_raw",
        "to_raw",
        "subject",
        "message_id",
    }
