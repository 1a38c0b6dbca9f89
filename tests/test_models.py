"""Tests for the data objects."""
from datetime import datetime, timezone

from phrase_sync.models import Locale, Upload


def test_locale_from_dict(locale_payload):
    locale = Locale.from_dict(locale_payload)

    assert locale.id == "loc-en"
    assert locale.default
    assert locale.plural_forms == ("zero", "one", "other")
    assert locale.source_locale.name == "source"
    assert locale.created_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_locale_from_minimal_dict():
    locale = Locale.from_dict({"id": "loc-de", "name": "de", "created_at": "yesterday"})

    assert locale.source_locale is None
    assert locale.created_at is None
    assert not locale.rtl


def test_upload_terminal_states():
    assert Upload("U1", "P1", "success").is_terminal
    assert Upload("U1", "P1", "error").is_terminal
    assert not Upload("U1", "P1", "pending").is_terminal
    assert not Upload("U1", "P1").is_terminal
