"""Guest message text helpers: sanitation, sensitive data and entity extraction."""

import re
from typing import Dict, Any, List


_WHITESPACE = re.compile(r"\s+")

SENSITIVE_PATTERNS = [
    re.compile(r"\b\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}\b"),  # card number
    re.compile(r"\b\d{3}-\d{2}-\d{4}\b"),  # SSN
    re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b"),  # phone number
    re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),  # e-mail
]

# Standalone numbers of up to 9 digits; longer digit runs are not quantities
_NUMBER = re.compile(r"\b\d{1,9}\b")

DATE_PATTERNS = [
    re.compile(r"\b\d{1,2}[-/]\d{1,2}[-/]\d{4}\b"),
    re.compile(r"\b\d{4}[-/]\d{1,2}[-/]\d{1,2}\b"),
    re.compile(r"\b(?:today|tomorrow|yesterday)\b"),
    re.compile(r"\b(?:monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b"),
]


def sanitize_input(text: str) -> str:
    """Trim and collapse whitespace runs into single spaces."""
    if not text or not text.strip():
        return ""
    return _WHITESPACE.sub(" ", text.strip())


def contains_sensitive_data(text: str) -> bool:
    """Whether the text looks like it carries card, SSN, phone or e-mail data."""
    if not text:
        return False
    return any(pattern.search(text) for pattern in SENSITIVE_PATTERNS)


def extract_entities(text: str) -> Dict[str, Any]:
    """
    Extract numbers and simple date expressions from a guest message.

    Args:
        text: Guest message

    Returns:
        Dict with optional "numbers" (ints) and "dates" (matched strings) keys
    """
    entities: Dict[str, Any] = {}
    if not text:
        return entities

    numbers = [int(match) for match in _NUMBER.findall(text)]
    if numbers:
        entities["numbers"] = numbers

    lowered = text.lower()
    dates: List[str] = []
    for pattern in DATE_PATTERNS:
        dates.extend(pattern.findall(lowered))
    if dates:
        entities["dates"] = dates

    return entities
