"""Identity module — resolves the authenticated caller for the chat surfaces."""

from src.modules.identity.auth import CallerIdentity, get_current_caller, require_admin, require_customer

__all__ = [
    "CallerIdentity",
    "get_current_caller",
    "require_admin",
    "require_customer",
]
