from .dependencies import require_access_token, verify_bearer

__all__ = ["require_access_token", "verify_bearer"]
