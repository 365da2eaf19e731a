from dataclasses import asdict
from typing import Optional
from urllib.parse import quote
from fastapi import APIRouter, Depends, Form, Header, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from shared.config import settings
from backend.app.models.schemas import FormActionOut, FormActionsResponse, NoticeOut
from backend.app.models.versioning import Principal
from backend.app.services.exceptions import RecordHistoryError
from backend.app.services.history_request import HistoryItemRequest, build_history_request

router = APIRouter(prefix=settings.admin_base_path.rstrip("/"))

FLASH_COOKIE = "flash"

history_request = build_history_request()

def get_history_request() -> HistoryItemRequest:
    return history_request

def get_principal(x_principal: Optional[str] = Header(default=None),
                  x_permissions: Optional[str] = Header(default=None)) -> Principal:
    if not x_principal:
        return Principal.anonymous()
    perms = frozenset(p.strip() for p in (x_permissions or "").split(",") if p.strip())
    return Principal(id=x_principal, permissions=perms)

def _is_ajax(request: Request, ajax: bool) -> bool:
    return ajax or request.headers.get("x-requested-with", "").lower() == "xmlhttprequest"

@router.get("/{record_id}/history/view", response_class=HTMLResponse)
def view_version(record_id: int, request: Request, v: Optional[str] = None, ajax: bool = False,
                 principal: Principal = Depends(get_principal),
                 handler: HistoryItemRequest = Depends(get_history_request)):
    try:
        result = handler.view(record_id, v, principal, ajax=_is_ajax(request, ajax))
    except RecordHistoryError as e:
        raise HTTPException(e.status_code, e.message)
    return HTMLResponse(result.body)

@router.post("/{record_id}/history/rollback")
def rollback_version(record_id: int, v: Optional[str] = Form(default=None),
                     principal: Principal = Depends(get_principal),
                     handler: HistoryItemRequest = Depends(get_history_request)):
    try:
        result = handler.rollback(record_id, v, principal)
    except RecordHistoryError as e:
        raise HTTPException(e.status_code, e.message)
    response = RedirectResponse(result.redirect_to, status_code=303)
    # percent-encoded so the JSON survives cookie quoting
    notice = NoticeOut(**asdict(result.notice))
    response.set_cookie(FLASH_COOKIE, quote(notice.model_dump_json(), safe=""), httponly=True)
    return response

@router.get("/{record_id}/history/actions", response_model=FormActionsResponse)
def form_actions(record_id: int, v: Optional[str] = None,
                 principal: Principal = Depends(get_principal),
                 handler: HistoryItemRequest = Depends(get_history_request)):
    actions = handler.form_actions(record_id, v, principal)
    return FormActionsResponse(
        record_id=record_id,
        version=v,
        actions=[FormActionOut(**asdict(a)) for a in actions],
    )
