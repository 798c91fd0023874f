from __future__ import annotations

"""
FastAPI application for commune-scoped address suggestions.

- GET  /api/contrib/addresses/search   autocomplete (engine: pipeline.py)
- POST /api/contrib/addresses/reverse  geolocation -> nearest address
- Errors are always {"error": "<message in French>"} with the status
  carried by the AddressSuggestError subclass.
"""

import math
import re
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from . import _singletons
from .ban_client import BanClient
from .communes import CommuneDirectory
from .config import (
    RESULT_MAX,
    RESULT_MIN,
    ErrorResponse,
    HealthResponse,
    ReverseRequest,
    ReverseResponse,
    SuggestResponse,
    configure_logging,
)
from .errors import AddressSuggestError, InvalidRequestError
from .pipeline import run_suggest_pipeline, validate_query
from .reverse import reverse_geocode


_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


# -----------------------
# Request parsing
# -----------------------

def _parse_limit(raw: Optional[str]) -> Optional[int]:
    if raw is None or raw == "":
        return None
    # leading integer only: "5abc" -> 5, "3.5" -> 3
    m = _LEADING_INT_RE.match(raw)
    if m is None:
        raise InvalidRequestError("Limite invalide.")
    value = int(m.group(1))
    if value < RESULT_MIN or value > RESULT_MAX:
        raise InvalidRequestError(f"La limite doit être comprise entre {RESULT_MIN} et {RESULT_MAX}.")
    return value


def _require_commune_id(raw: Optional[str]) -> str:
    commune_id = (raw or "").strip()
    if not commune_id:
        raise InvalidRequestError("Commune manquante.")
    return commune_id


# -----------------------
# FastAPI app + startup
# -----------------------

app = FastAPI(title="address-suggest")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup_event() -> None:
    configure_logging()
    logger.info("Starting app warmup...")
    directory = _singletons.get_directory()
    logger.info("Commune directory ready with {} communes", len(directory))
    _singletons.get_ban_client()
    logger.info("Warmup complete.")


@app.on_event("shutdown")
def shutdown_event() -> None:
    _singletons.get_ban_client().close()
    _singletons.get_ban_client.cache_clear()


@app.exception_handler(AddressSuggestError)
def handle_address_error(request: Request, exc: AddressSuggestError) -> JSONResponse:
    return JSONResponse(ErrorResponse(error=exc.message).model_dump(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(ErrorResponse(error="Paramètres invalides.").model_dump(), status_code=400)


def get_directory() -> CommuneDirectory:
    return _singletons.get_directory()


def get_ban_client() -> BanClient:
    return _singletons.get_ban_client()


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.get("/api/contrib/addresses/search", response_model=SuggestResponse)
def search_addresses(
    communeId: Optional[str] = Query(None),
    q: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    directory: CommuneDirectory = Depends(get_directory),
    client: BanClient = Depends(get_ban_client),
):
    commune_id = _require_commune_id(communeId)
    query = validate_query(q)
    max_results = _parse_limit(limit)

    geo = directory.resolve(commune_id).to_geo_context()
    try:
        return run_suggest_pipeline(query, geo, client, limit=max_results)
    except AddressSuggestError:
        raise
    except Exception as e:
        logger.exception("BAN search failed for commune {}: {}", commune_id, e)
        raise AddressSuggestError()


@app.post("/api/contrib/addresses/reverse", response_model=ReverseResponse)
def reverse_address(
    req: ReverseRequest,
    directory: CommuneDirectory = Depends(get_directory),
    client: BanClient = Depends(get_ban_client),
):
    commune_id = _require_commune_id(req.communeId)
    if not (math.isfinite(req.latitude) and math.isfinite(req.longitude)):
        raise InvalidRequestError("Données de géolocalisation invalides.")

    geo = directory.resolve(commune_id).to_geo_context()
    try:
        address = reverse_geocode(req.latitude, req.longitude, geo, client)
    except AddressSuggestError:
        raise
    except Exception as e:
        logger.exception("BAN reverse failed for commune {}: {}", commune_id, e)
        raise AddressSuggestError("La conversion des coordonnées en adresse a échoué.")
    return ReverseResponse(address=address)
