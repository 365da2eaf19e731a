"""
Read-only form construction and HTML rendering for historical versions.
"""
from __future__ import annotations
from html import escape
from typing import Any, List

from shared.config import settings
from backend.app.models.versioning import FormAction, FormField, NoticeMessage, VersionSnapshot
from backend.app.services.messages import translate


def build_readonly_fields(record: Any, snapshot: VersionSnapshot) -> List[FormField]:
    """Every field of `snapshot`, plus position and the hidden version marker, all read-only."""
    fields = [FormField(name="Title", title=translate("Title"), value=snapshot.title)]
    for name, value in snapshot.fields.items():
        fields.append(FormField(name=name, title=_label(name), value=value))
    if getattr(record, "has_sort", False) or snapshot.sort is not None:
        fields.append(FormField(name="Sort", title=translate("Position"), value=snapshot.sort))
    fields.append(FormField(name="v", title=translate("Version"), value=snapshot.version, hidden=True))
    return fields


def _label(name: str) -> str:
    # "publish_date" / "PublishDate" -> "Publish date"
    spaced = name.replace("_", " ")
    spaced = "".join(" " + c.lower() if c.isupper() and i else c for i, c in enumerate(spaced))
    spaced = " ".join(spaced.split())
    return spaced[:1].upper() + spaced[1:]


def _render_value(value: Any) -> str:
    if value is None:
        return "<em>(none)</em>"
    if isinstance(value, (list, tuple)):
        return ", ".join(escape(str(v)) for v in value)
    return escape(str(value))


def render_form(fields: List[FormField], notice: NoticeMessage, actions: List[FormAction]) -> str:
    parts = ['<form class="cms-edit-form readonly" method="post" action="rollback">']
    # notice html is built from escaped parts by the controller
    parts.append(f'<p class="message {escape(notice.severity)}">{notice.html}</p>')
    for f in fields:
        if f.hidden:
            parts.append(f'<input type="hidden" name="{escape(f.name)}" value="{escape(str(f.value))}" />')
            continue
        parts.append(
            f'<div class="field readonly" id="{escape(f.name)}">'
            f'<label>{escape(f.title)}</label>'
            f'<span class="readonly">{_render_value(f.value)}</span>'
            f'</div>'
        )
    for a in actions:
        disabled = "" if a.enabled else ' disabled="disabled"'
        classes = escape(f"action {a.extra_classes}".strip())
        if a.use_button_tag:
            parts.append(
                f'<button type="submit" name="action_{escape(a.name)}" class="{classes}" '
                f'title="{escape(a.description)}"{disabled}>{escape(a.title)}</button>'
            )
        else:
            parts.append(
                f'<input type="submit" name="action_{escape(a.name)}" class="{classes}" '
                f'value="{escape(a.title)}" title="{escape(a.description)}"{disabled} />'
            )
    parts.append("</form>")
    return "\n".join(parts)


def render_fragment(back_link: str, form_html: str) -> str:
    return (
        f'<div class="history-item">\n'
        f'<a class="backlink" href="{escape(back_link)}">{escape(translate("Back"))}</a>\n'
        f'{form_html}\n'
        f'</div>'
    )


def render_page(content: str, title: str | None = None) -> str:
    page_title = escape(title or settings.site_title)
    return (
        "<!DOCTYPE html>\n"
        f"<html>\n<head><meta charset=\"utf-8\"><title>{page_title}</title></head>\n"
        f"<body>\n<main class=\"cms-content\">\n{content}\n</main>\n</body>\n</html>"
    )
