"""
Failure taxonomy for location resolution.

Leaf components raise these; ResolutionOrchestrator turns them into failed
ServiceResponse envelopes and the HTTP layer maps ``status_code`` onto the
response.
"""
from typing import Optional


class ResolutionError(Exception):
    """Base class for every expected resolution failure."""
    code: str = "resolution_error"
    status_code: int = 500
    default_message: str = "Unexpected error. Please try again later."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class EmptyQuery(ResolutionError):
    code = "empty_query"
    status_code = 400
    default_message = "Query cannot be empty."


class NotFound(ResolutionError):
    code = "not_found"
    status_code = 404
    default_message = "Not found."


class NoMatch(NotFound):
    """The geocoding provider answered with zero candidates."""
    code = "no_match"


class Conflict(ResolutionError):
    code = "conflict"
    status_code = 409
    default_message = "Already exists."


class MissingInput(ResolutionError):
    code = "missing_input"
    status_code = 400
    default_message = "Please provide either 'latitude' and 'longitude' or a 'query' parameter."


class Unauthorized(ResolutionError):
    code = "unauthorized"
    status_code = 401
    default_message = "User ID could not be determined."


class UpstreamUnavailable(ResolutionError):
    """Network, timeout or HTTP-status failure talking to a provider."""
    code = "upstream_unavailable"
    status_code = 502
    default_message = "Upstream provider unavailable. Please try again later."


class UpstreamMalformedResponse(ResolutionError):
    code = "upstream_malformed"
    status_code = 502
    default_message = "Upstream provider returned an unexpected response."


STATUS_BY_CODE = {
    cls.code: cls.status_code
    for cls in (
        EmptyQuery, NotFound, NoMatch, Conflict, MissingInput,
        Unauthorized, UpstreamUnavailable, UpstreamMalformedResponse,
    )
}
