"""Domain helpers for registration input."""
from __future__ import annotations

from typing import Mapping

REGISTRATION_FIELDS = ("username", "password", "first_name", "last_name", "phone")
USERNAME_MAX_LENGTH = 64


def clean_registration(data: Mapping[str, str | None]) -> dict[str, str]:
    """Strip every field except the password, which is kept verbatim."""
    cleaned: dict[str, str] = {}
    for name in REGISTRATION_FIELDS:
        value = data.get(name)
        if not isinstance(value, str):
            value = ""
        cleaned[name] = value if name == "password" else value.strip()
    return cleaned


def missing_fields(data: Mapping[str, str]) -> list[str]:
    """Return the names of required fields that are empty."""
    return [name for name in REGISTRATION_FIELDS if not data.get(name)]
