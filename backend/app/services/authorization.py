from __future__ import annotations
from typing import Any, Protocol

from backend.app.models.versioning import Principal

VIEW = "records.view"
EDIT = "records.edit"
ADMIN = "admin"


class Authorizer(Protocol):
    def can_view(self, principal: Principal, record: Any) -> bool: ...

    def can_edit(self, principal: Principal, record: Any) -> bool: ...


class PermissionAuthorizer:
    """
    Permission-code based access checks.

    - `admin` grants everything.
    - View needs `records.view` (edit implies view); edit needs `records.edit`.
    - A record may list extra codes (`view_permissions` / `edit_permissions`)
      that the principal must also hold.
    """

    def can_view(self, principal: Principal, record: Any) -> bool:
        perms = principal.permissions
        if ADMIN in perms:
            return True
        if not (VIEW in perms or EDIT in perms):
            return False
        return set(getattr(record, "view_permissions", [])) <= perms

    def can_edit(self, principal: Principal, record: Any) -> bool:
        perms = principal.permissions
        if ADMIN in perms:
            return True
        if EDIT not in perms:
            return False
        return set(getattr(record, "edit_permissions", [])) <= perms
