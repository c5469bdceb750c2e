"""Error taxonomy shared by the pipeline and the HTTP layer."""


class TraceMindError(Exception):
    """Base error. Carries the HTTP status used when it reaches the API."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InputError(TraceMindError):
    """Malformed or missing trace / prompt fields."""

    status_code = 400


class ProviderConfigError(TraceMindError):
    """Missing model, credential or endpoint for a generation backend."""

    status_code = 400


class ProviderError(TraceMindError):
    """Remote generation call failed, timed out or returned nothing usable."""

    status_code = 502


class InternalError(TraceMindError):
    """Unexpected parse failure of the generator's own structured output."""

    status_code = 500


class NotFoundError(TraceMindError):
    """Unknown connection id."""

    status_code = 404
