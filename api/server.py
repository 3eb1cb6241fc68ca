"""FastAPI server exposing the site rules engine."""

import json
import os
from contextlib import asynccontextmanager
from typing import Dict, List, Union

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from drop_rules.config import AppConfig, load_config
from drop_rules.engine import RuleEngine
from drop_rules.logger import setup_logger
from drop_rules.models import Drop

load_dotenv()

_engine = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if _engine is not None:
        _engine.close()


app = FastAPI(
    title="Drop Rules API",
    version="0.1.0",
    description="Runs the per-site enrichment rule matching a fetched document's domain.",
    lifespan=lifespan,
)

# --- Rate limiting ---
limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return Response(
        content=json.dumps({"error": "Rate limit exceeded. Please slow down."}),
        status_code=429,
        media_type="application/json",
    )


# --- CORS ---
default_origins = "http://localhost:3000,http://127.0.0.1:3000"
cors_origins = os.environ.get("CORS_ORIGINS", default_origins).split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in cors_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_engine() -> RuleEngine:
    global _engine
    if _engine is None:
        config_path = os.environ.get("DROP_RULES_CONFIG", "config.yaml")
        config = load_config(config_path) if os.path.exists(config_path) else AppConfig()
        setup_logger(os.environ.get("LOG_DIR", config.log_dir), config.log_level)
        _engine = RuleEngine(config)
    return _engine


# --- Models ---

class DropRequest(BaseModel):
    url: str
    domain: str = ""
    title: str = ""
    description: str = ""
    authors: List[str] = []
    document_type: str = ""
    meta: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)


# --- Routes ---

@app.get("/api/health")
async def health():
    return {"status": "ok", "service": "drop-rules"}


@app.get("/api/rules")
@limiter.limit("60/minute")
async def list_rules(request: Request):
    """List the registered rules by domain."""
    registry = get_engine().registry
    return [{"domain": d, "rule": registry.dispatch(d).name} for d in registry.domains()]


@app.post("/api/enrich")
@limiter.limit("30/minute")
def enrich(request: Request, req: DropRequest):
    """Run the matching rule. A failing rule still returns 200 with the partial drop."""
    try:
        drop = Drop.from_dict(req.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    outcome = get_engine().run(drop)
    return {"drop": drop.to_dict(), "outcome": outcome.to_dict()}
