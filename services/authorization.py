"""
Ownership-based authorization.

Every incident operation goes through these helpers so a future policy (for
example letting share recipients in) changes here and nowhere else.

Two ways to be denied:

* ``require_access`` fails before anything is loaded, when the owner is
  already known from the request (listing a user's incidents).
* ``authorize_loaded`` first re-fetches the authoritative resource and only
  then compares its owner; ownership claims in the request body are never
  trusted.
"""
from typing import Any, Callable, Optional, TypeVar

from fastapi import status

from core.exceptions import NotFound, Unauthorized

T = TypeVar("T")


def can_access(caller_id: Any, owner_id: Any) -> bool:
    if caller_id is None or owner_id is None:
        return False
    return str(caller_id) == str(owner_id)


def require_access(
    caller_id: Any,
    owner_id: Any,
    detail: str = "Unauthorized access.",
    status_code: int = status.HTTP_401_UNAUTHORIZED,
) -> None:
    if not can_access(caller_id, owner_id):
        raise Unauthorized(detail=detail, status_code=status_code)


def authorize_loaded(
    loader: Callable[[], Optional[T]],
    owner_of: Callable[[T], Any],
    caller_id: Any,
    *,
    not_found_detail: str = "Resource not found.",
    detail: str = "Unauthorized operation.",
    status_code: int = status.HTTP_403_FORBIDDEN,
) -> T:
    """Load a resource, then return it only if ``caller_id`` owns it."""
    resource = loader()
    if resource is None:
        raise NotFound(not_found_detail)
    require_access(caller_id, owner_of(resource), detail=detail, status_code=status_code)
    return resource
