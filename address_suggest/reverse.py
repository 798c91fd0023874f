from __future__ import annotations

from loguru import logger

from . import config
from .ban_client import BanClient
from .config import ReverseAddress
from .containment import is_within_bbox
from .errors import (
    AddressNotFoundError,
    GeocoderError,
    GeocoderUnavailableError,
    MalformedResponseError,
    OutsideCommuneError,
)
from .mapping import parse_feature
from .pipeline_types import CommuneGeoContext, finite_number


def reverse_geocode(
    latitude: float,
    longitude: float,
    geo: CommuneGeoContext,
    client: BanClient,
) -> ReverseAddress:
    """
    Turn a citizen's geolocation into the nearest BAN address of the commune.

    The point must fall inside the commune box (tight tolerance) both before
    asking BAN and for the address BAN returns.
    """
    if not is_within_bbox(latitude, longitude, geo.bounding_box, tolerance=config.REVERSE_TOLERANCE):
        raise OutsideCommuneError()

    try:
        features = client.reverse(
            latitude,
            longitude,
            postcode=geo.first_postal_code or None,
            city=geo.name,
        )
    except MalformedResponseError as e:
        logger.warning("BAN reverse for commune {} returned an unreadable body: {}", geo.id, e)
        raise AddressNotFoundError() from e
    except GeocoderError as e:
        logger.warning("BAN reverse failed for commune {}: {}", geo.id, e)
        raise GeocoderUnavailableError("Le service de géocodage est indisponible.") from e

    if not features:
        raise AddressNotFoundError()

    feature = features[0]
    geometry = feature.get("geometry") if isinstance(feature, dict) else None
    coords = geometry.get("coordinates") if isinstance(geometry, dict) else None
    if (
        not isinstance(coords, (list, tuple))
        or len(coords) < 2
        or finite_number(coords[0]) is None
        or finite_number(coords[1]) is None
    ):
        raise GeocoderUnavailableError("Les données de géolocalisation sont incomplètes.")

    lon, lat = float(coords[0]), float(coords[1])
    if not is_within_bbox(lat, lon, geo.bounding_box, tolerance=config.REVERSE_TOLERANCE):
        raise OutsideCommuneError("L’adresse trouvée n’appartient pas à la commune.")

    parsed = parse_feature(feature)
    if parsed is None:
        raise GeocoderUnavailableError("Impossible de déterminer l’adresse correspondante.")

    return ReverseAddress(
        label=parsed.label,
        name=parsed.name or parsed.label,
        context=parsed.context,
        postcode=parsed.postcode,
        city=parsed.city,
        latitude=parsed.latitude,
        longitude=parsed.longitude,
    )
