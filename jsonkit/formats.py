"""Format validators for the JSON Schema `format` keyword.

Each entry pairs an optional regex with an optional semantic check; a value
must pass both. Unknown format names are not validated at all.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional
from urllib.parse import urljoin, urlsplit


@dataclass(frozen=True)
class FormatValidator:
    regex: Optional[re.Pattern] = None
    validator: Optional[Callable[[str], bool]] = None

    def check(self, value: str) -> bool:
        if self.regex is not None and not self.regex.fullmatch(value):
            return False
        if self.validator is not None:
            return self.validator(value)
        return True


def _valid_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
        return True
    except ValueError:
        return False


def _valid_date_time(value: str) -> bool:
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
        return True
    except ValueError:
        return False


def _valid_uri(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme) and not any(ch.isspace() for ch in value)


def _valid_uri_reference(value: str) -> bool:
    try:
        return _valid_uri(urljoin("http://example.com", value))
    except ValueError:
        return False


_PHONE = re.compile(r"^[+]?[1-9][\d]{0,15}$")


def _valid_phone(value: str) -> bool:
    return bool(_PHONE.fullmatch(re.sub(r"[\s\-()]", "", value)))


def _luhn(value: str) -> bool:
    cleaned = re.sub(r"\s", "", value)
    if not re.fullmatch(r"\d{13,19}", cleaned):
        return False
    total = 0
    for position, char in enumerate(reversed(cleaned)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


_POSTAL_CODES = [
    re.compile(r"^\d{5}(-\d{4})?$"),                   # US ZIP
    re.compile(r"^[A-Z]\d[A-Z] \d[A-Z]\d$"),           # Canada
    re.compile(r"^\d{4,5}$"),                          # EU
    re.compile(r"^[A-Z]{1,2}\d[A-Z\d]? \d[A-Z]{2}$"),  # UK
]


def _valid_postal_code(value: str) -> bool:
    return any(pattern.fullmatch(value) for pattern in _POSTAL_CODES)


def _valid_json_pointer(value: str) -> bool:
    if value == "":
        return True
    return bool(re.fullmatch(r"(?:/(?:[^/~]|~[01])*)+", value))


FORMAT_VALIDATORS: dict[str, FormatValidator] = {
    "email": FormatValidator(regex=re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")),
    "date": FormatValidator(
        regex=re.compile(r"^\d{4}-\d{2}-\d{2}$"),
        validator=_valid_date,
    ),
    "date-time": FormatValidator(
        regex=re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{3})?Z?$"),
        validator=_valid_date_time,
    ),
    "time": FormatValidator(regex=re.compile(r"^\d{2}:\d{2}:\d{2}$")),
    "uri": FormatValidator(validator=_valid_uri),
    "uri-reference": FormatValidator(validator=_valid_uri_reference),
    "uri-template": FormatValidator(regex=re.compile(r"^(?:[^{}]|\{[^{}]+\})*$")),
    "url": FormatValidator(validator=_valid_uri),
    "uuid": FormatValidator(regex=re.compile(
        r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
        re.IGNORECASE,
    )),
    "ipv4": FormatValidator(regex=re.compile(
        r"^(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
        r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)$"
    )),
    "ipv6": FormatValidator(regex=re.compile(r"^(?:[0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}$")),
    "hostname": FormatValidator(regex=re.compile(
        r"^[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
        r"(\.[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
    )),
    "phone": FormatValidator(regex=_PHONE, validator=_valid_phone),
    "credit-card": FormatValidator(validator=_luhn),
    "postal-code": FormatValidator(validator=_valid_postal_code),
    "semantic-version": FormatValidator(regex=re.compile(
        r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
        r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
        r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
        r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
    )),
    "json-pointer": FormatValidator(validator=_valid_json_pointer),
    "color-hex": FormatValidator(regex=re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")),
    "mime-type": FormatValidator(regex=re.compile(
        r"^[a-zA-Z][a-zA-Z0-9][a-zA-Z0-9!#$&\-^_]*/[a-zA-Z0-9][a-zA-Z0-9!#$&\-^_]*$"
    )),
}

FORMAT_SUGGESTIONS: dict[str, str] = {
    "email": "Use a valid email format like 'user@example.com'",
    "date": "Use ISO date format like '2024-01-15'",
    "date-time": "Use ISO date-time format like '2024-01-15T10:30:00Z'",
    "time": "Use time format like '10:30:00'",
    "uri": "Use a valid URI format like 'https://example.com'",
    "uri-reference": "Use a valid URI reference",
    "uri-template": "Use a valid URI template format",
    "url": "Use a valid URL format like 'https://example.com'",
    "uuid": "Use a valid UUID format like '123e4567-e89b-12d3-a456-426614174000'",
    "ipv4": "Use a valid IPv4 address like '192.168.1.1'",
    "ipv6": "Use a valid IPv6 address",
    "hostname": "Use a valid hostname format",
    "phone": "Use a valid phone number format like '+1234567890'",
    "credit-card": "Use a valid credit card number format",
    "postal-code": "Use a valid postal code format for your region",
    "semantic-version": "Use semantic versioning format like '1.2.3' or '1.0.0-alpha.1'",
    "json-pointer": "Use JSON Pointer format like '/path/to/property'",
    "color-hex": "Use hex color format like '#FF0000' or '#F00'",
    "mime-type": "Use MIME type format like 'application/json'",
}


def check_format(value: str, name: str) -> bool:
    """
    Check a string against a named format.

    Unknown formats always pass.
    """
    validator = FORMAT_VALIDATORS.get(name)
    if validator is None:
        return True
    return validator.check(value)


def format_suggestion(name: str) -> str:
    return FORMAT_SUGGESTIONS.get(
        name, f"Ensure the value matches the '{name}' format requirements"
    )
