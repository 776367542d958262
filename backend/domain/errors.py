"""
Error taxonomy shared by services and the API layer.

ClientError subclasses map to 4xx responses and are never retried.
ServerError subclasses map to 5xx responses and keep their cause chained.
"""
from typing import Optional


class ResolutionError(Exception):
    """Base for errors that carry an envelope code."""

    code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ClientError(ResolutionError):
    code = 400
    default_message = "Bad request"
    status_code = 400


class ServerError(ResolutionError):
    code = 500
    default_message = "Internal Server Error"
    status_code = 500


class CafeNotFound(ClientError):
    code = 404
    default_message = "Cafe not found"
    status_code = 404


class FeatureIdExtractionError(ClientError):
    code = 4001
    default_message = "Could not extract feature ID from Google Maps URL"


class InvalidMapsUrlError(ClientError):
    code = 4002
    default_message = "Invalid Google Maps URL format"


class EmptyPlaceQuery(ClientError):
    code = 4003
    default_message = "Title or description is required to search for a place"


class NoCandidateFound(ClientError):
    code = 4004
    default_message = "No place candidates found"


class DuplicateCafeReference(ClientError):
    """Surfaced only when a client creates a cafe directly with a taken place id."""
    code = 4009
    default_message = "A cafe already references this place"
    status_code = 409


class LinkResolutionFailed(ServerError):
    code = 5001
    default_message = "Failed to resolve Google Maps URL"


class LookupUnavailable(ServerError):
    code = 5002
    default_message = "Places provider is unavailable"


class IdentifierNotFound(ServerError):
    code = 5003
    default_message = "Place identifier is no longer valid at the provider"


class DuplicateProviderReference(Exception):
    """Raised by the cafe store when the google_place unique constraint fires."""

    def __init__(self, google_place: str):
        super().__init__(f"A cafe already references {google_place}")
        self.google_place = google_place
