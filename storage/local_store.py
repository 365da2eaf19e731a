import json, os, logging, threading
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional, Set
from shared.config import settings
from backend.app.services.exceptions import StoreError

logger = logging.getLogger(__name__)

RECORDS_FILE = os.path.join(settings.data_dir, settings.records_file)

# Serialises read-modify-write cycles on the index file
_LOCK = threading.RLock()

def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")

def _load_index() -> Dict[str, Any]:
    if not os.path.exists(RECORDS_FILE):
        return {"records": {}}
    try:
        with open(RECORDS_FILE, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise StoreError(f"Could not read record index {RECORDS_FILE}: {e}") from e

def _save_index(idx: Dict[str, Any]) -> None:
    try:
        os.makedirs(os.path.dirname(RECORDS_FILE) or ".", exist_ok=True)
        with open(RECORDS_FILE, "w", encoding="utf-8") as f:
            json.dump(idx, f, ensure_ascii=False, indent=2)
    except OSError as e:
        raise StoreError(f"Could not write record index {RECORDS_FILE}: {e}") from e

def _snapshot(idx: Dict[str, Any], rec: Dict[str, Any], version: int) -> Dict[str, Any]:
    # Store-wide write order; timestamps are too coarse to order writes
    idx["seq"] = idx.get("seq", 0) + 1
    return {
        "version": version,
        "seq": idx["seq"],
        "created": _now(),
        "title": rec["title"],
        "fields": dict(rec["fields"]),
        "sort": rec.get("sort"),
    }

def put_record(record_id: int, record_type: str, title: str, fields: Optional[dict] = None, *,
               sort: Optional[int] = None, versioned: bool = True, owns: Optional[List[int]] = None,
               singular_name: Optional[str] = None, view_permissions: Optional[List[str]] = None,
               edit_permissions: Optional[List[str]] = None) -> Dict[str, Any]:
    """Create (or replace) a record. Versioned records start with version 1."""
    with _LOCK:
        idx = _load_index()
        rec = {
            "id": record_id,
            "type": record_type,
            "singular_name": singular_name or record_type,
            "title": title,
            "fields": fields or {},
            "sort": sort,
            "versioned": versioned,
            "version": 0,
            "owns": owns or [],
            "view_permissions": view_permissions or [],
            "edit_permissions": edit_permissions or [],
            "versions": [],
        }
        if versioned:
            rec["versions"].append(_snapshot(idx, rec, 1))
            rec["version"] = 1
        idx.setdefault("records", {})[str(record_id)] = rec
        _save_index(idx)
        return rec

def write_record(record_id: int, title: Optional[str] = None, fields: Optional[dict] = None,
                 sort: Optional[int] = None) -> int:
    """Apply an edit and, for versioned records, append a new snapshot. Returns the new version."""
    with _LOCK:
        idx = _load_index()
        rec = idx.get("records", {}).get(str(record_id))
        if rec is None:
            raise StoreError(f"Record #{record_id} does not exist")
        if title is not None:
            rec["title"] = title
        if fields is not None:
            rec["fields"].update(fields)
        if sort is not None:
            rec["sort"] = sort
        if rec["versioned"]:
            # Numbers stay unique even after a rollback moved the pointer backwards
            new_version = max((v["version"] for v in rec["versions"]), default=0) + 1
            rec["versions"].append(_snapshot(idx, rec, new_version))
            rec["version"] = new_version
        _save_index(idx)
        return rec["version"]

def get_record(record_id: int) -> Optional[Dict[str, Any]]:
    with _LOCK:
        return _load_index().get("records", {}).get(str(record_id))

def list_versions(record_id: int) -> List[Dict[str, Any]]:
    rec = get_record(record_id)
    return list((rec or {}).get("versions", []))

def get_version(record_id: int, version: int) -> Optional[Dict[str, Any]]:
    matches = [v for v in list_versions(record_id) if v["version"] == version]
    return matches[0] if len(matches) == 1 else None

def _restore(records: Dict[str, Any], record_id: int, version: int, visited: Set[int]) -> bool:
    rec = records.get(str(record_id))
    if rec is None or not rec.get("versioned"):
        return False
    snap = next((v for v in rec["versions"] if v["version"] == version), None)
    if snap is None:
        return False
    visited.add(record_id)
    rec["title"] = snap["title"]
    rec["fields"] = dict(snap["fields"])
    rec["sort"] = snap.get("sort")
    rec["version"] = version

    # Owned records go back to whatever version they had when the snapshot was taken
    for child_id in rec.get("owns", []):
        if child_id in visited:
            continue
        child = records.get(str(child_id))
        if child is None or not child.get("versioned"):
            continue
        candidates = [v for v in child["versions"] if v["seq"] <= snap["seq"]]
        if not candidates:
            logger.info("Owned record #%s has no version before %s; left unchanged", child_id, snap["created"])
            continue
        target = max(candidates, key=lambda v: v["seq"])
        if not _restore(records, child_id, target["version"], visited):
            return False
    return True

def restore_recursive(record_id: int, version: int) -> bool:
    """
    Point the record back at `version` and cascade to the records it owns.
    Nothing is written unless the whole cascade succeeds.
    """
    with _LOCK:
        idx = _load_index()
        records = idx.get("records", {})
        if not _restore(records, record_id, version, set()):
            return False
        _save_index(idx)
        return True
