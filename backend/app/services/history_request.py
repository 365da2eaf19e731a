"""
Request-handling adapter for historical versions of one record.

Holds a VersionResolver and a RollbackController and looks records up through
an injected loader; routes talk to this class only.
"""
from __future__ import annotations
from typing import Any, Callable, List, Optional

from backend.app.models.records import load_record
from backend.app.models.versioning import FormAction, Principal, RollbackRequest, RollbackResult, ViewResult
from backend.app.services.authorization import Authorizer, PermissionAuthorizer
from backend.app.services.exceptions import RecordNotFound
from backend.app.services.messages import translate
from backend.app.services.rollback_controller import RollbackController
from backend.app.services.version_resolver import VersionResolver

RecordLoader = Callable[[int], Optional[Any]]


class HistoryItemRequest:
    def __init__(self, resolver: VersionResolver, controller: RollbackController,
                 loader: RecordLoader = load_record):
        self.resolver = resolver
        self.controller = controller
        self._loader = loader

    def _record(self, record_id: int) -> Any:
        record = self._loader(record_id)
        if record is None:
            raise RecordNotFound(translate("RECORD_NOT_FOUND", record_id=record_id), {"record_id": record_id})
        return record

    def view(self, record_id: int, version: Any, principal: Principal, ajax: bool = False) -> ViewResult:
        request = RollbackRequest(record_id=record_id, requested_version=version, principal=principal, ajax=ajax)
        return self.controller.view(self._record(record_id), request)

    def rollback(self, record_id: int, version: Any, principal: Principal) -> RollbackResult:
        request = RollbackRequest(record_id=record_id, requested_version=version, principal=principal)
        return self.controller.do_rollback(self._record(record_id), request)

    def form_actions(self, record_id: int, version: Any, principal: Principal) -> List[FormAction]:
        """Actions for the version form; a record or version that cannot be shown has none."""
        record = self._loader(record_id)
        if record is None:
            return []
        resolution = self.resolver.resolve(record, version, principal)
        return self.controller.available_actions(record, resolution.snapshot, principal)


def build_history_request(authorizer: Optional[Authorizer] = None,
                          loader: RecordLoader = load_record) -> HistoryItemRequest:
    authorizer = authorizer or PermissionAuthorizer()
    resolver = VersionResolver(authorizer)
    return HistoryItemRequest(resolver, RollbackController(resolver, authorizer), loader)
