"""
FastAPI application — the PocketPM history service.

The chat client posts finished transcripts here; the history screen reads
them back filtered by category chip or free-text search.

    POST   /api/v1/conversations                 save a transcript
    GET    /api/v1/conversations                 list (?category= / ?q=)
    GET    /api/v1/conversations/{id}            one record
    DELETE /api/v1/conversations/{id}            delete one
    DELETE /api/v1/conversations                 clear a user's history
    POST   /api/v1/conversations/regenerate      recompute all metadata
    GET    /api/v1/categories                    filter chips
    GET    /api/v1/stats                         per-category counts
    GET    /pocketpm/health

Every endpoint takes ?user_id= (defaults to history.default_user).
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pocketpm import __version__
from pocketpm.config import get_config
from pocketpm.metadata import ALL_CATEGORIES, CATEGORY_FILTERS
from pocketpm.reporting import category_counts, format_relative_date
from pocketpm.repository import ConversationRepository

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Globals — initialized at startup
# ---------------------------------------------------------------------------
repository: ConversationRepository | None = None
default_user: str = "default"


def _setup_logging(cfg: dict):
    log_cfg = cfg.get("logging", {})
    level = getattr(logging, str(log_cfg.get("level", "INFO")).upper(), logging.INFO)
    log_file = log_cfg.get("file")

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        from pathlib import Path
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    global repository, default_user

    cfg = get_config()
    _setup_logging(cfg)

    repository = ConversationRepository.from_config(cfg)
    default_user = cfg.get("history", {}).get("default_user", "default")
    logger.info(
        "PocketPM history v%s ready (backend=%s)",
        __version__, cfg.get("storage", {}).get("backend", "sqlite"),
    )
    yield
    logger.info("PocketPM history shutting down")


app = FastAPI(title="PocketPM History", version=__version__, lifespan=lifespan)


def _user(user_id: str | None) -> str:
    return user_id or default_user


def _serialize(record) -> dict:
    data = record.to_dict()
    data["dateLabel"] = format_relative_date(record.date)
    return data


def _storage_error(action: str, e: Exception) -> JSONResponse:
    return JSONResponse(
        {"error": f"failed to {action}", "detail": str(e)},
        status_code=500,
    )


# ---------------------------------------------------------------------------
# Conversations
# ---------------------------------------------------------------------------

@app.get("/api/v1/conversations")
async def list_conversations(
    user_id: str | None = None,
    category: str | None = None,
    q: str | None = None,
):
    """List a user's history, newest first. `q` searches, `category` filters."""
    uid = _user(user_id)
    if q:
        records = repository.search_conversations(q, uid)
        if category and category != ALL_CATEGORIES:
            records = [r for r in records if r.category == category]
    else:
        records = repository.get_conversations_by_category(category or ALL_CATEGORIES, uid)
    return JSONResponse({
        "user_id": uid,
        "conversations": [_serialize(r) for r in records],
        "count": len(records),
    })


@app.post("/api/v1/conversations")
async def save_conversation(request: Request):
    try:
        body = await request.json()
    except Exception:
        return JSONResponse({"error": "invalid JSON"}, status_code=400)

    if not isinstance(body, dict) or not isinstance(body.get("messages"), list):
        return JSONResponse({"error": "messages must be a list"}, status_code=400)

    uid = _user(body.get("userId") or body.get("user_id"))
    try:
        record = repository.save_conversation(body["messages"], uid)
    except (TypeError, ValueError, AttributeError) as e:
        return JSONResponse({"error": "invalid message", "detail": str(e)}, status_code=400)
    except Exception as e:
        return _storage_error("save conversation", e)

    if record is None:
        return JSONResponse({"saved": False, "reason": "transcript too short"})
    return JSONResponse({"saved": True, "conversation": _serialize(record)}, status_code=201)


@app.post("/api/v1/conversations/regenerate")
async def regenerate_conversations(user_id: str | None = None):
    uid = _user(user_id)
    try:
        records = repository.regenerate_conversation_data(uid)
    except Exception as e:
        return _storage_error("regenerate conversations", e)
    return JSONResponse({
        "user_id": uid,
        "conversations": [_serialize(r) for r in records],
        "count": len(records),
    })


@app.get("/api/v1/conversations/{conversation_id}")
async def get_conversation(conversation_id: str, user_id: str | None = None):
    record = repository.get_conversation(conversation_id, _user(user_id))
    if record is None:
        return JSONResponse({"error": "conversation not found"}, status_code=404)
    return JSONResponse(_serialize(record))


@app.delete("/api/v1/conversations/{conversation_id}")
async def delete_conversation(conversation_id: str, user_id: str | None = None):
    uid = _user(user_id)
    try:
        remaining = repository.delete_conversation(conversation_id, uid)
    except Exception as e:
        return _storage_error("delete conversation", e)
    return JSONResponse({"ok": True, "count": len(remaining)})


@app.delete("/api/v1/conversations")
async def clear_conversations(user_id: str | None = None):
    uid = _user(user_id)
    try:
        repository.clear_all_conversations(uid)
    except Exception as e:
        return _storage_error("clear conversations", e)
    return JSONResponse({"ok": True, "user_id": uid})


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------

@app.get("/api/v1/categories")
async def categories():
    return JSONResponse({"categories": list(CATEGORY_FILTERS)})


@app.get("/api/v1/stats")
async def stats(user_id: str | None = None):
    uid = _user(user_id)
    records = repository.get_conversations(uid)
    return JSONResponse({"user_id": uid, "categories": category_counts(records)})


@app.get("/pocketpm/health")
async def health():
    return JSONResponse({"status": "ok", "version": __version__})
