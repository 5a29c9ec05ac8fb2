from __future__ import annotations

import os
import secrets
from typing import Any

from fastapi import FastAPI, Depends, HTTPException, status
from fastapi import Body
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from harustep import (
    ViewRouter,
    load_config,
    setup_logging,
)


app = FastAPI(title="HaruStep", version="0.1.0")

security = HTTPBasic(auto_error=False)

_router: ViewRouter | None = None


# ── Session ───────────────────────────────────────────────────

def get_router() -> ViewRouter:
    """The single in-memory app session, built on first use."""
    global _router
    if _router is None:
        config = load_config()
        setup_logging(config.log_level)
        _router = ViewRouter.from_config(config)
    return _router


def _with_level_ups(router: ViewRouter, body: dict[str, Any]) -> dict[str, Any]:
    events = router.pop_level_ups()
    if events:
        body["levelUps"] = [e.to_dict() for e in events]
    return body


# ── Auth ──────────────────────────────────────────────────────

def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("HARUSTEP_USERNAME", "")
    expected_password = os.environ.get("HARUSTEP_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# ── Endpoints ─────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/api/state")
def api_get_state(router: ViewRouter = Depends(get_router), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Full session snapshot."""
    return router.snapshot()


@app.post("/api/view")
async def api_navigate(payload: dict[str, Any] = Body(...), router: ViewRouter = Depends(get_router), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        view = router.navigate(str(payload.get("view", "")))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "view": view.value}


# ── Quests ────────────────────────────────────────────────────

@app.post("/api/quests/mood")
async def api_select_mood(payload: dict[str, Any] = Body(...), router: ViewRouter = Depends(get_router), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        router.quests.select_mood(str(payload.get("mood", "")))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "mood": router.quests.mood}


@app.post("/api/quests/generate")
async def api_generate_quests(payload: dict[str, Any] = Body(default={}), router: ViewRouter = Depends(get_router), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Ask for a fresh batch of quests (falls back to built-in quests on failure)."""
    mood = payload.get("mood")
    energy = payload.get("energyLevel")
    try:
        quests = await router.quests.request_quests(
            mood=str(mood) if mood is not None else None,
            energy_level=int(energy) if energy is not None else None,
        )
    except (ValueError, TypeError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "ok": True,
        "state": router.quests.state.value,
        "mood": router.quests.mood,
        "quests": [q.to_dict() for q in quests],
    }


@app.post("/api/quests/{quest_id}/complete")
async def api_complete_quest(quest_id: str, router: ViewRouter = Depends(get_router), username: str = Depends(get_current_user)) -> dict[str, Any]:
    if router.quests.find(quest_id) is None:
        raise HTTPException(status_code=404, detail=f"Quest not found: {quest_id}")
    quest = router.quests.toggle_complete(quest_id)
    body = {
        "ok": True,
        "changed": quest is not None,
        "quest": router.quests.find(quest_id).to_dict(),
        "allComplete": router.quests.all_complete,
        "user": router.user_state.to_dict(),
    }
    return _with_level_ups(router, body)


# ── Coach ─────────────────────────────────────────────────────

@app.get("/api/chat")
def api_chat_messages(router: ViewRouter = Depends(get_router), username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {
        "pending": router.chat.pending,
        "messages": [m.to_dict() for m in router.chat.messages],
    }


@app.post("/api/chat")
async def api_send_chat(payload: dict[str, Any] = Body(...), router: ViewRouter = Depends(get_router), username: str = Depends(get_current_user)) -> dict[str, Any]:
    reply = await router.chat.send_message(str(payload.get("text", "")))
    return {
        "ok": reply is not None,
        "reply": reply.to_dict() if reply else None,
        "messages": [m.to_dict() for m in router.chat.messages],
    }


# ── Focus ─────────────────────────────────────────────────────

@app.get("/api/focus")
def api_focus(router: ViewRouter = Depends(get_router), username: str = Depends(get_current_user)) -> dict[str, Any]:
    return router.timer.state.to_dict()


@app.post("/api/focus/toggle")
async def api_focus_toggle(router: ViewRouter = Depends(get_router), username: str = Depends(get_current_user)) -> dict[str, Any]:
    router.toggle_timer()
    return router.timer.state.to_dict()


@app.post("/api/focus/reset")
async def api_focus_reset(router: ViewRouter = Depends(get_router), username: str = Depends(get_current_user)) -> dict[str, Any]:
    router.reset_timer()
    return router.timer.state.to_dict()


@app.post("/api/focus/custom")
async def api_focus_custom(payload: dict[str, Any] = Body(...), router: ViewRouter = Depends(get_router), username: str = Depends(get_current_user)) -> dict[str, Any]:
    minutes = payload.get("minutes")
    try:
        router.set_timer_minutes(minutes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return router.timer.state.to_dict()
