from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from saher.dashboard import due_on, overview, search, sort_records, tab_counts, unified_records
from saher.models import Category, LifecycleStatus, record_from_dict
from saher.session import StoreSession
from saher.settings import API_DEBUG
from saher.status import parse_iso_date, remaining_days
from .deps import get_category, get_session

app = FastAPI(
    title="SAHER API",
    version="0.1.0",
    description="Local HTTP layer over the SAHER record store: records, archive, backups and expiry alerts.",
    debug=API_DEBUG,
)

# --- CORS ----------------------------------------------------------
# The front end is served from a local dev server.
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept"],
)

# --- Include Routers ----------------------------------------------------------
from .archive import router as archive_router
from .backup import router as backup_router

app.include_router(archive_router)
app.include_router(backup_router)


def _parse_record(category: Category, data: Dict[str, Any]):
    try:
        return record_from_dict(category, data)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"Invalid record: {e}")


# ---------- health-check ----------
@app.get("/")
def root():
    return {"status": "ok", "msg": "SAHER API is alive"}


# ---------- GET /status ----------
@app.get("/status")
def status_snapshot(session: StoreSession = Depends(get_session)):
    counts: dict[str, int] = {}
    for rec in session.store:
        counts[rec.status.value] = counts.get(rec.status.value, 0) + 1
    # ensure zeroes appear
    for s in LifecycleStatus:
        counts.setdefault(s.value, 0)
    return counts


# ---------- GET /overview ----------
@app.get("/overview")
def dashboard_overview(
    q: Optional[str] = Query(None, description="Only count records matching this text"),
    session: StoreSession = Depends(get_session),
):
    store = search(session.store, q) if q else session.store
    data = overview(store).as_dict()
    data["tabCounts"] = tab_counts(store)
    return data


# ---------- GET /records ----------
@app.get("/records", response_model=List[Dict[str, Any]])
def all_records(
    q: Optional[str] = Query(None, description="Case-insensitive text filter"),
    status: Optional[str] = Query(None, description="Active, SoonToExpire or Expired"),
    session: StoreSession = Depends(get_session),
):
    """Every status-bearing record in one shape, most urgent first."""
    store = search(session.store, q) if q else session.store
    wanted = LifecycleStatus.parse(status) if status else None
    if status and wanted is None:
        raise HTTPException(status_code=422, detail=f"Unknown status '{status}'")
    today = store.today()
    rows = []
    for row in sort_records(unified_records(store)):
        if wanted is not None and row.status is not wanted:
            continue
        item = row.as_dict()
        item["remainingDays"] = remaining_days(row.expiry_date, today)
        rows.append(item)
    return rows


# ---------- GET /calendar/{day} ----------
@app.get("/calendar/{day}", response_model=List[Dict[str, Any]])
def calendar_day(day: str, session: StoreSession = Depends(get_session)):
    parsed = parse_iso_date(day)
    if parsed is None:
        raise HTTPException(status_code=422, detail="day must be YYYY-MM-DD")
    return [row.as_dict() for row in due_on(session.store, parsed)]


# ---------- /records/{category} ----------
@app.get("/records/{category}", response_model=List[Dict[str, Any]])
def list_records(
    category: Category = Depends(get_category),
    q: Optional[str] = Query(None),
    session: StoreSession = Depends(get_session),
):
    store = search(session.store, q) if q else session.store
    return [rec.to_dict() for rec in store.records(category)]


@app.get("/records/{category}/{record_id}")
def get_record(
    record_id: int,
    category: Category = Depends(get_category),
    session: StoreSession = Depends(get_session),
):
    rec = session.store.get(category, record_id)
    if rec is None:
        raise HTTPException(status_code=404, detail="Record not found")
    return rec.to_dict()


@app.post("/records/{category}", status_code=201)
def create_record(
    payload: Dict[str, Any] = Body(...),
    category: Category = Depends(get_category),
    session: StoreSession = Depends(get_session),
):
    record = _parse_record(category, payload)
    result = session.create(category, record)
    return {"record": result.record.to_dict(), "saveError": session.last_error}


@app.put("/records/{category}/{record_id}")
def update_record(
    record_id: int,
    payload: Dict[str, Any] = Body(...),
    category: Category = Depends(get_category),
    session: StoreSession = Depends(get_session),
):
    record = _parse_record(category, {**payload, "id": record_id})
    result = session.update(category, record)
    if not result.changed:
        raise HTTPException(status_code=404, detail="Record not found")
    return {"record": result.record.to_dict(), "saveError": session.last_error}


@app.delete("/records/{category}/{record_id}")
def archive_record(
    record_id: int,
    category: Category = Depends(get_category),
    session: StoreSession = Depends(get_session),
):
    """Soft delete: the record moves to the archive."""
    result = session.archive_record(category, record_id)
    if not result.changed:
        raise HTTPException(status_code=404, detail="Record not found")
    return {"archived": result.record.to_dict(), "saveError": session.last_error}
