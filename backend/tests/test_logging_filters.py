"""Sensitive log scrubbing."""
from __future__ import annotations

import logging

from ayambil.security.logging_filters import SensitiveFilter, install, scrub


def test_scrub_redacts_tokens_and_masks_numbers() -> None:
    assert "abc.def" not in scrub("Authorization: Bearer abc.def")
    assert scrub('{"password": "hunter2"}') == "{**REDACTED**}"
    assert scrub("UPI 9876543210 booked") == "UPI ******3210 booked"
    assert scrub("booking 2030-03-12") == "booking 2030-03-12"


def test_filter_scrubs_message_arguments() -> None:
    record = logging.LogRecord(
        "ayambil", logging.INFO, __file__, 1, "Booking from %s", ("9123456789",), None
    )
    assert SensitiveFilter().filter(record)
    assert record.getMessage() == "Booking from ******6789"


def test_install_is_idempotent() -> None:
    install(("ayambil.test",))
    install(("ayambil.test",))
    target = logging.getLogger("ayambil.test")
    assert sum(isinstance(flt, SensitiveFilter) for flt in target.filters) == 1
