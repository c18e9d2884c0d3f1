import json
import logging
from typing import List, Optional

from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.responses import Response

from .cards import build_cards
from .decode import decode_fragment, decode_roster_bytes
from .errors import RosterDecodeError
from .models import CardsResponse, FragmentRequest, HealthResponse, NormalizeResponse, UnitRecord
from .normalize import normalize, summarize
from .rules import DOWNLOAD_FILENAME

logger = logging.getLogger(__name__)

app = FastAPI(
    title="roster-cards",
    description="Normalizes list-builder roster exports into unit cards",
    version="0.1.0",
)

# Last normalized roster; replaced by every successful normalization.
app.state.roster = None


def _store(records: List[UnitRecord]) -> NormalizeResponse:
    app.state.roster = records
    summary = summarize(records)
    logger.info("Normalized roster: %d units, %d weapons", summary.units, summary.weapons)
    return NormalizeResponse(units=records, summary=summary)


def _last_roster() -> List[UnitRecord]:
    roster: Optional[List[UnitRecord]] = app.state.roster
    if roster is None:
        raise HTTPException(status_code=404, detail="No roster has been normalized yet")
    return roster


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/normalize", response_model=NormalizeResponse)
async def normalize_upload(file: UploadFile = File(...)):
    if not (file.filename or "").lower().endswith(".json"):
        raise HTTPException(status_code=422, detail="Only JSON roster exports are supported")

    raw = await file.read()
    try:
        root = decode_roster_bytes(raw)
    except RosterDecodeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _store(normalize(root))


@app.post("/normalize/fragment", response_model=NormalizeResponse)
def normalize_fragment(body: FragmentRequest):
    try:
        root = decode_fragment(body.fragment)
    except RosterDecodeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _store(normalize(root))


@app.get("/roster", response_model=List[UnitRecord])
def get_roster():
    return _last_roster()


@app.get("/roster/cards", response_model=CardsResponse)
def get_cards():
    return CardsResponse(cards=build_cards(_last_roster()))


@app.get("/roster/download")
def download_roster():
    records = _last_roster()
    body = json.dumps([r.model_dump(by_alias=True) for r in records], indent=2, ensure_ascii=False)
    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{DOWNLOAD_FILENAME}"'},
    )
