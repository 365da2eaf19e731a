"""
Domain value objects for viewing and rolling back record versions.

No HTTP or storage dependency: these are the types the resolver and controller
exchange with the request layer.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Protocol, runtime_checkable

from backend.app.services.exceptions import RecordHistoryError


@dataclass(frozen=True)
class VersionSnapshot:
    """An immutable copy of a record at one version.

    Unique per (record_id, version). `fields` holds the business fields in the
    order they were written; `sort` is the position index when the record type
    has one.
    """
    record_id: int
    version: int
    created: str
    title: str
    fields: Dict[str, Any] = field(default_factory=dict)
    sort: Optional[int] = None


@runtime_checkable
class VersionedEntity(Protocol):
    """Capability implemented by every record type that keeps a version history."""

    id: int
    title: str
    singular_name: str

    def current_version(self) -> int: ...

    def history(self) -> List[VersionSnapshot]: ...

    def is_latest(self, version: int) -> bool: ...

    def restore_recursive(self, version: int) -> bool: ...

    def edit_link(self) -> str: ...


@dataclass(frozen=True)
class Principal:
    id: str
    permissions: FrozenSet[str] = frozenset()

    @classmethod
    def anonymous(cls) -> "Principal":
        return cls(id="anonymous")


@dataclass
class RollbackRequest:
    """One inbound view/rollback request. `requested_version` is the raw `v` value."""
    record_id: int
    requested_version: Any
    principal: Principal
    ajax: bool = False


@dataclass(frozen=True)
class NoticeMessage:
    severity: str  # notice | good | bad
    html: str
    text: str


@dataclass(frozen=True)
class FormField:
    name: str
    title: str
    value: Any
    readonly: bool = True
    hidden: bool = False


@dataclass(frozen=True)
class FormAction:
    name: str
    title: str
    description: str
    enabled: bool = True
    use_button_tag: bool = True
    extra_classes: str = ""


@dataclass
class ViewResult:
    back_link: str
    fields: List[FormField]
    notice: NoticeMessage
    actions: List[FormAction]
    fragment: str
    body: str


@dataclass
class RollbackResult:
    success: bool
    version: int
    notice: Optional[NoticeMessage]
    redirect_to: Optional[str]


@dataclass
class Resolution:
    """Outcome of resolving a requested version: a snapshot or a typed failure."""
    snapshot: Optional[VersionSnapshot] = None
    failure: Optional[RecordHistoryError] = None

    @property
    def ok(self) -> bool:
        return self.failure is None and self.snapshot is not None

    def unwrap(self) -> VersionSnapshot:
        if self.failure is not None:
            raise self.failure
        if self.snapshot is None:
            raise ValueError("Resolution carries neither a snapshot nor a failure")
        return self.snapshot
