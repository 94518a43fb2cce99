"""Tests for guest message text helpers."""

from concierge.utils.text import sanitize_input, contains_sensitive_data, extract_entities


class TestSanitizeInput:
    """SUT: sanitize_input"""

    def test_trims_and_collapses_whitespace(self):
        assert sanitize_input("  need   a \n towel  ") == "need a towel"

    def test_blank_becomes_empty(self):
        assert sanitize_input("   \t ") == ""
        assert sanitize_input("") == ""


class TestContainsSensitiveData:
    """SUT: contains_sensitive_data"""

    def test_card_number(self):
        assert contains_sensitive_data("my card is 4111 1111 1111 1111") is True

    def test_email(self):
        assert contains_sensitive_data("mail me at guest@example.com") is True

    def test_phone(self):
        assert contains_sensitive_data("call 555-123-4567") is True

    def test_plain_text(self):
        assert contains_sensitive_data("I'd like to book a room for 2 guests") is False


class TestExtractEntities:
    """SUT: extract_entities"""

    def test_numbers_and_dates(self):
        entities = extract_entities("Room for 2 guests tomorrow until 12/24/2025")
        assert 2 in entities["numbers"]
        assert "tomorrow" in entities["dates"]
        assert "12/24/2025" in entities["dates"]

    def test_no_entities(self):
        assert extract_entities("hello there") == {}

    def test_long_digit_run_is_not_a_number(self):
        """Huge digit runs are skipped rather than converted."""
        assert "numbers" not in extract_entities("9" * 5000)
        assert extract_entities("room 123456789 or 1234567890")["numbers"] == [123456789]
