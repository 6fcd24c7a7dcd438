"""Admin access guard for the report routes."""

from .dependencies import API_KEY_HEADER, verify_admin_api_key


__all__ = ["API_KEY_HEADER", "verify_admin_api_key"]
