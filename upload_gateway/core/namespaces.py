"""
Namespace policy.
The allow-list is recomputed from settings on every call.
"""

from typing import List

from upload_gateway.core.config import Settings

DEFAULT_NAMESPACE = "uploads"


def allowed_namespaces(settings: Settings) -> List[str]:
    """
    Parse ALLOWED_NAMESPACES into an ordered list.

    Args:
        settings: Application settings

    Returns:
        Namespaces in configured order, or [DEFAULT_NAMESPACE] when unset
    """
    raw = settings.ALLOWED_NAMESPACES or ""
    namespaces = [ns.strip() for ns in raw.split(",") if ns.strip()]
    return namespaces or [DEFAULT_NAMESPACE]


def default_namespace(settings: Settings) -> str:
    """First allowed namespace; preselected in the upload form."""
    return allowed_namespaces(settings)[0]


def is_valid_namespace(namespace: str, settings: Settings) -> bool:
    """Exact, case-sensitive membership check."""
    return namespace in allowed_namespaces(settings)
