"""
Typed request errors raised by the upload handler.
Rendered by the exception handler registered in main.
"""

from typing import Any, Dict, List, Optional


class InvalidRequest(Exception):
    """Request failed validation at the boundary (400)."""

    status_code = 400
    error_code = "invalid_request"

    def __init__(self, detail: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(detail)
        self.detail = detail
        self.extra = extra or {}


class NamespaceNotAllowed(InvalidRequest):
    """Namespace is not in the configured allow-list."""

    error_code = "namespace_not_allowed"

    def __init__(self, namespace: str, allowed: List[str]):
        super().__init__(
            f"Invalid namespace: {namespace}",
            extra={"allowed_namespaces": allowed},
        )
