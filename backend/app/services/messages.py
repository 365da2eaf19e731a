"""
User-facing message catalog.

Keys mirror the translation keys used by the CMS admin so that a locale file can
override any of them; values are the default English templates with `{name}` style
placeholders.
"""
from __future__ import annotations
from typing import Dict, Optional

PREFIX = "HistoryItemRequest"

DEFAULT_MESSAGES: Dict[str, str] = {
    "VERSION_NOT_PROVIDED": "No version provided",
    "RECORD_NOT_VERSIONED": "The record is not versioned",
    "NO_ACCESS": "You do not have access to this record",
    "FORBIDDEN": "Forbidden",
    "VERSION_NOT_FOUND": "No version #{version} found for this record",
    "RECORD_NOT_FOUND": "Record #{record_id} not found",
    "VIEWINGLATEST": "Currently viewing the latest version, created {created}",
    "VIEWINGVERSION": "Currently viewing version {version}, created {created}",
    "CANNOT_ROLLBACK_LATEST_VERSION": "You cannot roll back to this version, as it is the latest version",
    "RolledBack": "Rolled back {name} to version {version} {link}",
    "ROLLBACK_FAILED": "Rolling back to version {version} failed",
    "REVERT": "Revert to this version",
    "BUTTONREVERTDESC": "Publish this record to the draft site",
    "Position": "Position",
    "Version": "Version",
    "Title": "Title",
    "Back": "Back to list",
}

# Overrides loaded from a locale file, keyed without the prefix
_overrides: Dict[str, str] = {}


def load_overrides(messages: Optional[Dict[str, str]]) -> None:
    """Replace the active overrides; accepts keys with or without the class prefix."""
    _overrides.clear()
    for key, template in (messages or {}).items():
        _overrides[key.split(".", 1)[1] if key.startswith(PREFIX + ".") else key] = template


def translate(key: str, **params) -> str:
    template = _overrides.get(key) or DEFAULT_MESSAGES[key]
    return template.format(**params) if params else template
