"""Error taxonomy for the address suggestion service.

Each exception carries the French message shown to citizens and the HTTP
status the API layer answers with. Feature-level malformation and fallback
provider failures are deliberately absent: neither is ever raised.
"""

from __future__ import annotations


class AddressSuggestError(Exception):
    status_code: int = 500
    default_message: str = "La recherche d’adresse a échoué. Veuillez réessayer."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequestError(AddressSuggestError):
    status_code = 400
    default_message = "Paramètres de recherche invalides."


class CommuneNotFoundError(AddressSuggestError):
    status_code = 404
    default_message = "Commune introuvable ou indisponible."


class GeocoderUnavailableError(AddressSuggestError):
    status_code = 502
    default_message = "Le service d’autocomplétion est indisponible."


class OutsideCommuneError(AddressSuggestError):
    status_code = 400
    default_message = "Les coordonnées sont en dehors de la commune sélectionnée."


class AddressNotFoundError(AddressSuggestError):
    status_code = 404
    default_message = "Aucune adresse trouvée pour ces coordonnées."


class GeocoderError(Exception):
    """Low-level provider failure raised by the BAN client."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(GeocoderError):
    """BAN answered 2xx with a body that is not JSON."""
