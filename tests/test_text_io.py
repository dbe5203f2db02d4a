# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

import io

import pytest

from drv_core.driver import Driver

INJECTION = "' OR 1=1 --"
TEMPLATE = "SELECT * FROM users WHERE name = '%s';"


def test_read_line_strips_terminator(fake_driver: Driver, fake, capsys) -> None:
    fake.stdin = io.BytesIO(b"bob\n")
    assert fake_driver.read_line("Enter username to look up: ", 256) == "bob"
    assert capsys.readouterr().out == "Enter username to look up: "


def test_read_line_end_of_input_is_none(fake_driver: Driver, fake) -> None:
    fake.stdin = io.BytesIO(b"")
    line = fake_driver.read_line("> ", 256)
    assert line is None


def test_read_line_empty_line_is_not_end_of_input(fake_driver: Driver, fake) -> None:
    fake.stdin = io.BytesIO(b"\n")
    assert fake_driver.read_line("> ", 256) == ""


def test_read_line_crlf_and_bounded(fake_driver: Driver, fake) -> None:
    fake.stdin = io.BytesIO(b"alice\r\nabcdefgh\n")
    assert fake_driver.read_line("> ", 256) == "alice"
    # 4-byte buffer holds 3 bytes + NUL
    assert fake_driver.read_line("> ", 4) == "abc"


def test_read_line_uses_policy_default(fake_driver: Driver, fake) -> None:
    fake.stdin = io.BytesIO(b"x" * 300 + b"\n")
    assert fake_driver.read_line("> ") == "x" * 255


def test_read_line_rejects_tiny_buffer(fake_driver: Driver) -> None:
    with pytest.raises(ValueError):
        fake_driver.read_line("> ", 1)


def test_format_string_does_not_escape(fake_driver: Driver) -> None:
    out = fake_driver.format_string(TEMPLATE, INJECTION, 512)
    assert out == "SELECT * FROM users WHERE name = '' OR 1=1 --';"


def test_format_string_truncates_to_bound(fake_driver: Driver) -> None:
    assert fake_driver.format_string("name=%s", "abcdefgh", 8) == "name=ab"


def test_format_string_rejects_bad_size(fake_driver: Driver) -> None:
    with pytest.raises(ValueError):
        fake_driver.format_string(TEMPLATE, "bob", 0)


def test_format_string_drops_split_multibyte_char(fake_driver: Driver) -> None:
    # "é" is two bytes; a 4-byte bound keeps "ab" and half of it
    assert fake_driver.format_string("%s", "abé", 4) == "ab"
    assert fake_driver.format_string("%s", "abé", 5) == "abé"
