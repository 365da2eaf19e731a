"""
Resolution of a requested version number against a record's history.

The resolver never raises for expected outcomes: every failure comes back as a
typed value on the `Resolution` so the caller decides how to surface it.
"""
from __future__ import annotations
import logging
from typing import Any, Optional

from backend.app.models.versioning import Principal, Resolution, VersionedEntity
from backend.app.services.authorization import Authorizer
from backend.app.services.exceptions import (
    AccessDenied,
    RecordHistoryError,
    RecordNotVersioned,
    VersionNotFound,
    VersionNotProvided,
)
from backend.app.services.messages import translate

logger = logging.getLogger(__name__)


def parse_version(raw: Any) -> Optional[int]:
    """Return the positive version number in `raw`, or None when it is not one."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    text = str(raw).strip()
    if not text.isdecimal():
        return None
    value = int(text)
    return value if value > 0 else None


class VersionResolver:
    def __init__(self, authorizer: Authorizer):
        self._authorizer = authorizer

    def resolve(self, record: Any, requested_version: Any, principal: Principal) -> Resolution:
        """
        Validate `requested_version` and return the matching snapshot of `record`.

        Checks run in order: version supplied, record versioned, principal may view,
        snapshot exists. The first failing check decides the failure type.
        """
        version = parse_version(requested_version)
        if version is None:
            return self._fail(record, VersionNotProvided(translate("VERSION_NOT_PROVIDED")))

        if not isinstance(record, VersionedEntity):
            return self._fail(record, RecordNotVersioned(translate("RECORD_NOT_VERSIONED")))

        if not self._authorizer.can_view(principal, record):
            return self._fail(record, AccessDenied(translate("NO_ACCESS"), {"principal": principal.id}))

        matches = [s for s in record.history() if s.version == version]
        if len(matches) != 1:
            return self._fail(
                record,
                VersionNotFound(translate("VERSION_NOT_FOUND", version=version), {"version": version}),
            )
        return Resolution(snapshot=matches[0])

    @staticmethod
    def _fail(record: Any, failure: RecordHistoryError) -> Resolution:
        logger.info(
            "Version resolution failed for record %s: %s (%s)",
            getattr(record, "id", None), type(failure).__name__, failure.message,
        )
        return Resolution(failure=failure)
