"""Error taxonomy shared by the API handlers, the service clients and the Python client.

Every error carries the HTTP status it is surfaced with, so handlers can render
`{"error": message}` without a lookup table.
"""


class MovieRecsError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(MovieRecsError):
    """A required secret is missing. Fatal to the endpoint that needs it."""
    status_code = 500


class ValidationError(MovieRecsError):
    status_code = 400


class RateLimitError(MovieRecsError):
    status_code = 429


class ModerationError(MovieRecsError):
    status_code = 400

    def __init__(self, categories: list[str]):
        super().__init__(f"Content flagged as inappropriate: {', '.join(categories)}")
        self.categories = categories


class UpstreamError(MovieRecsError):
    """Non-2xx response or transport failure from a provider. Message stays generic."""
    status_code = 500


class NotFoundError(MovieRecsError):
    status_code = 404


class EnrichmentError(MovieRecsError):
    """No item in a recommendation batch could be enriched."""
    status_code = 500


def error_for_status(status_code: int, message: str) -> MovieRecsError:
    """Map an HTTP error response back to the matching exception class."""
    match status_code:
        case 400:
            return ValidationError(message)
        case 404:
            return NotFoundError(message)
        case 429:
            return RateLimitError(message)
    return UpstreamError(message)
