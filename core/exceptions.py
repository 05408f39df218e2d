"""
Error taxonomy of the incident API.

Every client-visible failure is an ``HTTPException`` so services can raise it
directly and the handlers in ``main`` render it as ``{"error": detail}``.
A failed SMS delivery is deliberately absent: it is a recorded outcome, not
an error.
"""
from fastapi import HTTPException, status


class ValidationError(HTTPException):
    def __init__(self, detail: str = "Invalid request.") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Unauthorized(HTTPException):
    """Caller is not the owner of the resource.

    Fail-fast checks use 401; checks made after loading the resource use 403.
    """

    def __init__(
        self,
        detail: str = "Unauthorized operation.",
        status_code: int = status.HTTP_401_UNAUTHORIZED,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Resource not found.") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class TokenInvalid(HTTPException):
    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class TokenExpired(TokenInvalid):
    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(detail=detail)


class UpstreamFailure(HTTPException):
    """A collaborator (geocoding, storage) could not serve the request."""

    def __init__(self, detail: str = "Upstream service unavailable.") -> None:
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
