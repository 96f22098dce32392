"""Dossier — FastAPI application entry point."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from dossier.backends.base import ReportGenerator
from dossier.backends.gemini import GeminiBackend
from dossier.citations.ledger import ProbeTicket
from dossier.citations.probe import HttpxProbe
from dossier.config import settings
from dossier.models.citation import Citation
from dossier.models.research import ResearchResult, ResearchStatus
from dossier.orchestrator.session import ReportSession, SessionStore

logger = logging.getLogger(__name__)

store = SessionStore(probe=HttpxProbe())


def make_generator() -> ReportGenerator:
    return GeminiBackend()


app = FastAPI(
    title="Dossier",
    description="Intelligence report rendering and citation verification",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Strong references to in-flight background tasks
_tasks: set[asyncio.Task] = set()


def _spawn(coro) -> None:
    task = asyncio.create_task(coro)
    _tasks.add(task)
    task.add_done_callback(_tasks.discard)


# --- Request / Response models ---


class ResearchRequest(BaseModel):
    query: str


class ReportRequest(BaseModel):
    report: str
    query: str = ""


class ReportTextRequest(BaseModel):
    report: str


class IntakeRequest(BaseModel):
    title: str | None = None
    url: str | None = None


class SessionResponse(BaseModel):
    report_id: str
    status: str


class ReportResponse(BaseModel):
    report_id: str
    query: str
    status: str
    error: str | None
    scratchpad: str
    report: str
    source_urls: list[str]
    blocks: list[dict]
    citations: list[dict]
    stats: dict


class CitationResponse(BaseModel):
    citation: dict
    stats: dict


class IntakeResponse(BaseModel):
    title: str
    url: str
    status: str


# --- Helpers ---


def _get_session(report_id: str) -> ReportSession:
    session = store.get(report_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Report not found")
    return session


def _encode_citation(citation: Citation) -> dict:
    return jsonable_encoder(asdict(citation))


def _report_payload(session: ReportSession) -> dict:
    return {
        "report_id": session.id,
        "query": session.query,
        "status": session.status.value,
        "error": session.error,
        "scratchpad": session.scratchpad,
        "report": session.report,
        "source_urls": session.source_urls,
        "blocks": [jsonable_encoder(asdict(b)) for b in session.blocks],
        "citations": [_encode_citation(c) for c in session.ledger.citations],
        "stats": asdict(session.ledger.stats()),
    }


def _citation_payload(session: ReportSession, citation: Citation) -> dict:
    return {
        "citation": _encode_citation(citation),
        "stats": asdict(session.ledger.stats()),
    }


def _intake_payload(session: ReportSession) -> dict:
    intake = session.intake
    return {"title": intake.title, "url": intake.url, "status": intake.status.value}


# --- Routes ---


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/api/research", response_model=SessionResponse)
async def create_research(req: ResearchRequest):
    """Start generating a report.

    Returns report_id immediately.  Connect to the WebSocket at
    /ws/reports/{report_id} to follow progress and citation checks.
    """
    session = store.create(query=req.query)
    session.status = ResearchStatus.LOADING
    _spawn(_run_pipeline(session))
    return SessionResponse(report_id=session.id, status=session.status.value)


@app.post("/api/reports", response_model=ReportResponse)
async def create_report(req: ReportRequest):
    """Create a session from report text produced elsewhere."""
    session = store.create(query=req.query)
    session.apply_result(ResearchResult(scratchpad="", report=req.report))
    return _report_payload(session)


@app.get("/api/reports/{report_id}", response_model=ReportResponse)
async def get_report(report_id: str):
    return _report_payload(_get_session(report_id))


@app.put("/api/reports/{report_id}/report", response_model=ReportResponse)
async def update_report_text(report_id: str, req: ReportTextRequest):
    """Replace the report text; blocks and extracted citations are rebuilt."""
    session = _get_session(report_id)
    session.set_report(req.report)
    await _broadcast(report_id, {"type": "report", "report": session.report})
    return _report_payload(session)


@app.post("/api/reports/{report_id}/citations/{citation_id}/check", response_model=CitationResponse)
async def check_citation(report_id: str, citation_id: str):
    """Mark a citation as checking and probe it in the background."""
    session = _get_session(report_id)
    ticket = session.ledger.begin_check(citation_id)
    if ticket is None:
        raise HTTPException(status_code=404, detail="Citation not found")
    _spawn(_run_probe(session, ticket))
    return _citation_payload(session, session.ledger.get(citation_id))


@app.post("/api/reports/{report_id}/citations/{citation_id}/verify", response_model=CitationResponse)
async def toggle_citation(report_id: str, citation_id: str):
    session = _get_session(report_id)
    citation = session.ledger.toggle_verified(citation_id)
    if citation is None:
        raise HTTPException(status_code=404, detail="Citation not found")
    return _citation_payload(session, citation)


@app.put("/api/reports/{report_id}/intake", response_model=IntakeResponse)
async def edit_intake(report_id: str, req: IntakeRequest):
    session = _get_session(report_id)
    session.intake.edit(title=req.title, url=req.url)
    return _intake_payload(session)


@app.post("/api/reports/{report_id}/intake/commit-url", response_model=IntakeResponse)
async def commit_intake_url(report_id: str, req: IntakeRequest):
    """URL field committed: probe it and suggest a title."""
    session = _get_session(report_id)
    await session.intake.commit_url(req.url)
    return _intake_payload(session)


@app.post("/api/reports/{report_id}/citations", response_model=CitationResponse)
async def add_citation(report_id: str, req: IntakeRequest):
    session = _get_session(report_id)
    session.intake.edit(title=req.title, url=req.url)
    citation = session.intake.submit(session.ledger)
    if citation is None:
        raise HTTPException(status_code=422, detail="Title and URL are required")
    payload = _citation_payload(session, citation)
    await _broadcast(report_id, {"type": "citation", **payload})
    return payload


# --- WebSocket ---

# Active WS connections keyed by report_id
_ws_connections: dict[str, list[WebSocket]] = {}


@app.websocket("/ws/reports/{report_id}")
async def report_ws(websocket: WebSocket, report_id: str):
    """Stream status, report and citation updates for a report."""
    await websocket.accept()
    _ws_connections.setdefault(report_id, []).append(websocket)
    try:
        while True:
            # Inbound messages are ignored; reading detects disconnects.
            await websocket.receive_text()
    except WebSocketDisconnect:
        connections = _ws_connections.get(report_id, [])
        if websocket in connections:
            connections.remove(websocket)


async def _broadcast(report_id: str, message: dict) -> None:
    """Send a message to all WebSocket clients watching a report."""
    connections = _ws_connections.get(report_id, [])
    for ws in list(connections):
        try:
            await ws.send_json(message)
        except Exception as exc:
            logger.debug("Dropping WebSocket for %s: %s", report_id, exc)
            if ws in connections:
                connections.remove(ws)


# --- Background work ---


async def _run_probe(session: ReportSession, ticket: ProbeTicket) -> None:
    try:
        reachable = await session.ledger.probe.check(ticket.url)
    except Exception:
        logger.exception("Probe raised for %s", ticket.url)
        reachable = False
    citation = session.ledger.complete_check(ticket, reachable)
    if citation is not None:
        await _broadcast(session.id, {"type": "citation", **_citation_payload(session, citation)})


async def _run_pipeline(session: ReportSession) -> None:
    """Generate the report and broadcast the result."""
    await _broadcast(session.id, {"type": "status", "stage": "generating"})
    try:
        await session.run(make_generator())
    except Exception:
        logger.exception("Report generation failed for %s", session.id)
        await _broadcast(session.id, {"type": "error", "detail": session.error})
        return

    await _broadcast(session.id, {"type": "report", "report": session.report})
    await _broadcast(session.id, {"type": "status", "stage": "done"})
