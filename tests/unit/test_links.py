from __future__ import annotations

from urllib.parse import parse_qs, unquote, urlsplit

import pytest

from walink.services.links import build_message_link, encode_message, normalize_link


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("", ""),
        (None, ""),
        ("   ", ""),
        ("ikf.co.in/careers/frontend", "https://ikf.co.in/careers/frontend"),
        ("  https://x.example/jd  ", "https://x.example/jd"),
        ("HTTP://X.example/jd", "HTTP://X.example/jd"),
        ("http://x.example/a b", "http://x.example/ab"),
        ("www.example.com/ job", "https://www.example.com/job"),
    ],
)
def test_normalize_link(raw, expected):
    assert normalize_link(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["", "example.com", "https://a.b", "ftp://files.example", " x y ", "Http://mixed.case"],
)
def test_normalize_link_is_idempotent(raw):
    once = normalize_link(raw)
    assert normalize_link(once) == once


def test_encode_message_newline_and_space():
    assert encode_message("a b\nc") == "a%20b%0Ac"


def test_encode_message_keeps_bold_markers():
    assert encode_message("*bold*") == "*bold*"


def test_build_message_link_empty_phone():
    assert build_message_link("", "hello") == ""


def test_build_message_link_shape():
    link = build_message_link("919876543210", "Hi there")
    assert link == "https://wa.me/919876543210?text=Hi%20there"


@pytest.mark.parametrize(
    "message",
    [
        "Dear *Ava*,\nline two\n\nBest regards,",
        "plus + ampersand & equals = hash # percent % question ?",
        "unicode – dash, émoji 🙂",
        "",
    ],
)
def test_link_text_round_trips(message):
    link = build_message_link("919876543210", message)
    parts = urlsplit(link)
    assert parts.netloc == "wa.me"
    assert parts.path == "/919876543210"
    raw_text = parts.query[len("text="):]
    assert unquote(raw_text) == message
    if message:
        assert parse_qs(parts.query)["text"] == [message]
