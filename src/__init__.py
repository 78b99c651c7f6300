"""API Tool Gateway - Source Package.

Note: Import `app` directly from `src.main` to avoid circular imports.
"""

__all__ = ["main", "adapters", "api", "core", "models", "services", "tools"]
