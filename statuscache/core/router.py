"""Request routing: maps method + request target to an operation and a Code.

Only targets of the exact form ``/DDD`` (three ASCII digits) are accepted.
Path shape is checked before the method, so any method on a malformed path
is a 404, while an unsupported method on a valid path is a 405.
"""

import enum
import re
from dataclasses import dataclass
from typing import Optional

from statuscache.domain.models.common import SUPPORTED_METHODS, Code, RequestTarget

_CODE_PATTERN = re.compile(r"/([0-9]{3})")


class RouteKind(enum.Enum):
    DISPATCH = "dispatch"
    INVALID_PATH = "invalid_path"
    METHOD_NOT_ALLOWED = "method_not_allowed"


@dataclass(frozen=True)
class Route:
    """Outcome of routing a single request."""
    kind: RouteKind
    method: str
    code: Optional[Code] = None


def parse_code(target: str) -> Optional[Code]:
    """Extracts the code from ``/DDD``; returns None for any other target."""
    match = _CODE_PATTERN.fullmatch(target)
    return Code(match.group(1)) if match else None


def build_target(raw_path: str, query_string: str = "") -> RequestTarget:
    """Rebuilds the request target as sent, so a query string fails validation."""
    if query_string:
        return RequestTarget(f"{raw_path}?{query_string}")
    return RequestTarget(raw_path)


def resolve(method: str, target: str) -> Route:
    code = parse_code(target)
    if code is None:
        return Route(RouteKind.INVALID_PATH, method)
    if method not in SUPPORTED_METHODS:
        return Route(RouteKind.METHOD_NOT_ALLOWED, method, code)
    return Route(RouteKind.DISPATCH, method, code)
