from typing import Optional

from .schemas import ErrorResponse


class TagGenerationError(Exception):
    """Terminal failure for one invocation, rendered as an ErrorResponse."""

    status_code = 500
    error = "internal_error"

    def __init__(self, error: Optional[str] = None, detail: Optional[str] = None):
        if error is not None:
            self.error = error
        self.detail = detail
        super().__init__(self.error)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.error, detail=self.detail)


class InvalidInput(TagGenerationError):
    status_code = 400


class ServerMisconfigured(TagGenerationError):
    status_code = 500
    error = "Server misconfiguration"


class UpstreamError(TagGenerationError):
    status_code = 502
    error = "Upstream API error"


class InternalError(TagGenerationError):
    status_code = 500
    error = "internal_error"
