"""
Concrete record types backed by the local JSON store.

`VersionedRecord` implements the `VersionedEntity` capability; `PlainRecord` is
a record whose type keeps no history and therefore does not.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Union

from shared.config import settings
from storage import local_store
from backend.app.models.versioning import VersionSnapshot


class PlainRecord:
    """A stored record without version history."""

    def __init__(self, data: Dict[str, Any]):
        self.id: int = int(data["id"])
        self.record_type: str = data.get("type", "Record")
        self.singular_name: str = data.get("singular_name") or self.record_type
        self.title: str = data.get("title", "")
        self.fields: Dict[str, Any] = dict(data.get("fields", {}))
        self.sort: Optional[int] = data.get("sort")
        self.view_permissions: List[str] = list(data.get("view_permissions", []))
        self.edit_permissions: List[str] = list(data.get("edit_permissions", []))

    @property
    def has_sort(self) -> bool:
        return self.sort is not None

    def edit_link(self) -> str:
        return f"{settings.admin_base_path.rstrip('/')}/{self.id}/edit"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id}, type={self.record_type!r})"


class VersionedRecord(PlainRecord):
    """A stored record with a version history and a current-version pointer."""

    def __init__(self, data: Dict[str, Any]):
        super().__init__(data)
        self._version: int = int(data.get("version", 0))

    def current_version(self) -> int:
        return self._version

    def history(self) -> List[VersionSnapshot]:
        return [_to_snapshot(self.id, v) for v in local_store.list_versions(self.id)]

    def is_latest(self, version: int) -> bool:
        return version == self._version

    def restore_recursive(self, version: int) -> bool:
        ok = local_store.restore_recursive(self.id, version)
        if ok:
            self._version = version
        return ok


def _to_snapshot(record_id: int, data: Dict[str, Any]) -> VersionSnapshot:
    return VersionSnapshot(
        record_id=record_id,
        version=int(data["version"]),
        created=data.get("created", ""),
        title=data.get("title", ""),
        fields=dict(data.get("fields", {})),
        sort=data.get("sort"),
    )


def load_record(record_id: int) -> Optional[Union[VersionedRecord, PlainRecord]]:
    data = local_store.get_record(record_id)
    if data is None:
        return None
    return VersionedRecord(data) if data.get("versioned") else PlainRecord(data)
