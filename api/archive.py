"""
Archive endpoints.

Soft-deleted records live in the archive until they are restored into their
original collection or permanently deleted.  Archived records can be edited
in place; the edit is carried back on restore.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from saher.dashboard import matches
from saher.session import StoreSession
from api.deps import get_session

router = APIRouter(prefix="/archive", tags=["archive"])


@router.get("", response_model=List[Dict[str, Any]])
def list_archive(
    q: Optional[str] = Query(None, description="Case-insensitive text filter"),
    session: StoreSession = Depends(get_session),
):
    """Archived records, most recently deleted first."""
    return [item.to_dict() for item in session.store.archived if not q or matches(item, q)]


@router.post("/{record_id}/restore")
def restore_record(record_id: int, session: StoreSession = Depends(get_session)):
    """
    Move an archived record back to its live collection.

    An archived record whose original type is unknown cannot be restored; it
    is dropped from the archive and 409 is returned.
    """
    result = session.restore(record_id)
    if not result.ok:
        raise HTTPException(status_code=409, detail=str(result.error))
    if not result.changed:
        raise HTTPException(status_code=404, detail="Archived record not found")
    return {"restored": result.record.to_dict(), "saveError": session.last_error}


@router.patch("/{record_id}")
def edit_archived(
    record_id: int,
    changes: Dict[str, Any] = Body(...),
    session: StoreSession = Depends(get_session),
):
    """Merge field changes into an archived record without restoring it."""
    result = session.edit_archived(record_id, changes)
    if not result.ok:
        raise HTTPException(status_code=422, detail=f"Invalid record: {result.error}")
    if not result.changed:
        raise HTTPException(status_code=404, detail="Archived record not found")
    return {"archived": result.record.to_dict(), "saveError": session.last_error}


@router.delete("/{record_id}")
def purge_record(record_id: int, session: StoreSession = Depends(get_session)):
    """Permanently delete an archived record."""
    result = session.purge(record_id)
    if not result.changed:
        raise HTTPException(status_code=404, detail="Archived record not found")
    return {"deleted": record_id, "saveError": session.last_error}
