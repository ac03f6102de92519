"""
Backup, save and notification endpoints.

* ``GET /backup``  downloads the whole store as ``SAHER_Backup_<date>.json``
* ``POST /backup`` replaces the whole store with an uploaded backup
* ``POST /save``   forces a save of the current store
* ``GET /notifications`` / ``POST /notifications/dismiss`` drive the expiry banner
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool

from saher.errors import SnapshotImportError
from saher.session import StoreSession
from api.deps import get_session

router = APIRouter(tags=["backup"])


@router.get("/backup")
def download_backup(session: StoreSession = Depends(get_session)):
    filename, blob = session.export_backup()
    return Response(
        content=blob,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/backup")
async def upload_backup(request: Request, session: StoreSession = Depends(get_session)):
    """Restore from a backup sent as the raw JSON request body."""
    blob = await request.body()
    try:
        saved = await run_in_threadpool(session.restore_backup, blob)
    except SnapshotImportError as e:
        raise HTTPException(status_code=400, detail=f"Backup rejected: {e}")
    return {"restored": len(session.store), "saved": saved, "saveError": session.last_error}


@router.post("/save")
def save_now(session: StoreSession = Depends(get_session)):
    saved = session.save_now()
    return {"saved": saved, "saveError": session.last_error}


@router.get("/notifications")
def notifications(session: StoreSession = Depends(get_session)):
    result = session.check_notifications()
    return {
        "shouldShow": result.should_show,
        "expiring": [rec.to_dict() for rec in result.expiring],
    }


@router.post("/notifications/dismiss", status_code=204)
def dismiss_notifications(session: StoreSession = Depends(get_session)):
    session.dismiss_notifications()
    return Response(status_code=204)
