"""API Package - FastAPI routes, middleware, and dependencies.

Components:
- routes: API endpoint routers (mcp, form_submit, apis, health)
- middleware: Request/response logging
- deps: FastAPI dependency injection functions

Note: Import routers directly from src.api.routes to avoid circular imports.
"""

__all__ = ["routes", "middleware", "deps"]
