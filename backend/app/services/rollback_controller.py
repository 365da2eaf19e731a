"""
View and rollback workflows for a single historical version of a record.

The controller raises `RecordHistoryError` subclasses for every rejected request;
each carries the HTTP status the request layer should answer with. Success paths
return value objects, and notices are handed back instead of being written to a
session.
"""
from __future__ import annotations
import logging
from html import escape
from typing import Any, List, Optional

from shared.config import settings
from backend.app.models.versioning import (
    FormAction,
    NoticeMessage,
    Principal,
    RollbackRequest,
    RollbackResult,
    VersionSnapshot,
    VersionedEntity,
    ViewResult,
)
from backend.app.services.authorization import Authorizer
from backend.app.services.exceptions import (
    AccessDenied,
    CannotRollbackLatest,
    RestoreFailed,
    StoreError,
)
from backend.app.services.langsmith_logger import traceable
from backend.app.services.messages import translate
from backend.app.services.rendering import (
    build_readonly_fields,
    render_form,
    render_fragment,
    render_page,
)
from backend.app.services.version_resolver import VersionResolver

logger = logging.getLogger(__name__)

ROLLBACK_ACTION = "doRollback"


class RollbackController:
    def __init__(self, resolver: VersionResolver, authorizer: Authorizer, back_link: Optional[str] = None):
        self._resolver = resolver
        self._authorizer = authorizer
        self._back_link = back_link or settings.admin_base_path

    @traceable("history_view")
    def view(self, record: Any, request: RollbackRequest) -> ViewResult:
        """
        Render `request.requested_version` of `record` read-only.

        Raises the resolver's failure when the version cannot be shown, and
        `AccessDenied` when the principal may not view the record.
        """
        snapshot = self._resolver.resolve(record, request.requested_version, request.principal).unwrap()
        if not self._authorizer.can_view(request.principal, record):
            raise AccessDenied(translate("FORBIDDEN"), {"principal": request.principal.id})

        fields = build_readonly_fields(record, snapshot)
        notice = self._viewing_notice(record, snapshot)
        actions = self.available_actions(record, snapshot, request.principal)
        fragment = render_fragment(self._back_link, render_form(fields, notice, actions))
        body = fragment if request.ajax else render_page(fragment, title=snapshot.title)
        return ViewResult(
            back_link=self._back_link,
            fields=fields,
            notice=notice,
            actions=actions,
            fragment=fragment,
            body=body,
        )

    @staticmethod
    def _viewing_notice(record: VersionedEntity, snapshot: VersionSnapshot) -> NoticeMessage:
        if record.is_latest(snapshot.version):
            text = translate("VIEWINGLATEST", version=snapshot.version, created=snapshot.created)
        else:
            text = translate("VIEWINGVERSION", version=snapshot.version, created=snapshot.created)
        return NoticeMessage(severity="notice", html=escape(text), text=text)

    @traceable("history_rollback")
    def do_rollback(self, record: Any, request: RollbackRequest) -> RollbackResult:
        """
        Restore `record` to the requested version.

        Guards, in order: the version must resolve, it must not be the latest
        version, and the principal must be allowed to edit. The store's restore
        runs only after all guards pass; the notice and redirect are produced
        only after it reports success.
        """
        snapshot = self._resolver.resolve(record, request.requested_version, request.principal).unwrap()
        version = snapshot.version

        if record.is_latest(version):
            raise CannotRollbackLatest(translate("CANNOT_ROLLBACK_LATEST_VERSION"), {"version": version})

        if not self._authorizer.can_edit(request.principal, record):
            raise AccessDenied(translate("FORBIDDEN"), {"principal": request.principal.id})

        try:
            restored = record.restore_recursive(version)
        except StoreError as e:
            logger.error("Restoring record %s to version %s failed: %s", record.id, version, e)
            raise RestoreFailed(translate("ROLLBACK_FAILED", version=version), {"version": version}) from e
        if not restored:
            logger.error("Store refused to restore record %s to version %s", record.id, version)
            raise RestoreFailed(translate("ROLLBACK_FAILED", version=version), {"version": version})

        edit_link = record.edit_link()
        link = f'<a href="{escape(edit_link)}">"{escape(snapshot.title)}"</a>'
        html = translate("RolledBack", name=escape(record.singular_name), version=version, link=link)
        text = translate("RolledBack", name=record.singular_name, version=version, link=f'"{snapshot.title}"')
        logger.info("Rolled back record %s to version %s by %s", record.id, version, request.principal.id)
        return RollbackResult(
            success=True,
            version=version,
            notice=NoticeMessage(severity="good", html=html, text=text),
            redirect_to=edit_link,
        )

    def available_actions(self, record: Any, snapshot: Optional[VersionSnapshot],
                          principal: Principal) -> List[FormAction]:
        if record is None or not isinstance(record, VersionedEntity):
            return []
        # rolling back to the latest version makes no sense
        if snapshot is None or record.is_latest(snapshot.version):
            return []
        return [
            FormAction(
                name=ROLLBACK_ACTION,
                title=translate("REVERT"),
                description=translate("BUTTONREVERTDESC"),
                enabled=self._authorizer.can_edit(principal, record),
                use_button_tag=True,
                extra_classes="btn-warning font-icon-back-in-time",
            )
        ]
