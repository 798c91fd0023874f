from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from pydantic import BaseModel


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_DIR = PROJECT_ROOT / "data"
COMMUNES_PATH = Path(os.getenv("COMMUNES_PATH", str(DATA_DIR / "communes.json")))


# ---------------------------
# BAN provider (api-adresse.data.gouv.fr)
# ---------------------------

BAN_BASE_URL = os.getenv("BAN_BASE_URL", "https://api-adresse.data.gouv.fr/search/")
BAN_REVERSE_URL = os.getenv("BAN_REVERSE_URL", "https://api-adresse.data.gouv.fr/reverse/")

DEFAULT_USER_AGENT = "Contribcit/1.0 (+https://contribcit.fr)"
HTTP_USER_AGENT = os.getenv("BAN_USER_AGENT", DEFAULT_USER_AGENT)
HTTP_ACCEPT_LANGUAGE = "fr"

HTTP_CONNECT_TIMEOUT = float(os.getenv("BAN_CONNECT_TIMEOUT", "3.0"))
HTTP_READ_TIMEOUT = float(os.getenv("BAN_READ_TIMEOUT", "7.0"))

# Result classes allowed on the primary attempt only
PRIMARY_RESULT_TYPES: List[str] = ["housenumber", "street", "locality"]


# ---------------------------
# Containment
# ---------------------------

COORDINATE_TOLERANCE = 0.01   # ~1 km, absorbs BAN / registry boundary drift
REVERSE_TOLERANCE = 0.001     # ~100 m, geolocation must really be in town


# ---------------------------
# Result size policy
# ---------------------------

RESULT_MIN = 1
RESULT_MAX = 10
RESULT_DEFAULT = 7

QUERY_MIN_CHARS = 2


# ---------------------------
# Scoring
# ---------------------------

TOKEN_MIN_CHARS = 3  # shorter tokens are kept only when they carry a digit

SCORE_TOKEN_WEIGHT = 10
SCORE_PREFIX_WEIGHT = 5
SCORE_NUMERIC_WEIGHT = 3


# ---------------------------
# Logging / observability
# ---------------------------

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: str | None = None) -> None:
    """Replace loguru's default sink with a stderr sink at LOG_LEVEL."""
    logger.remove()
    logger.add(sys.stderr, level=(level or LOG_LEVEL).upper())


# ---------------------------
# Pydantic models shared around the app
# ---------------------------

class AddressSuggestionItem(BaseModel):
    """
    Public shape of a single address suggestion.
    The internal provenance tag never appears here.
    """

    id: str
    label: str
    name: str
    context: Optional[str] = None
    latitude: float
    longitude: float
    postcode: Optional[str] = None
    city: Optional[str] = None


class SuggestResponse(BaseModel):
    """
    Response body for GET /api/contrib/addresses/search.
    """

    suggestions: List[AddressSuggestionItem]


class ReverseAddress(BaseModel):
    label: str
    name: str
    context: Optional[str] = None
    postcode: Optional[str] = None
    city: Optional[str] = None
    latitude: float
    longitude: float


class ReverseResponse(BaseModel):
    """
    Response body for POST /api/contrib/addresses/reverse.
    """

    address: ReverseAddress


class ReverseRequest(BaseModel):
    communeId: str = ""
    latitude: float
    longitude: float


class HealthResponse(BaseModel):
    """
    Response body for GET /health.
    """

    status: str


class ErrorResponse(BaseModel):
    error: str
