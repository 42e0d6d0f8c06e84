"""
API route modules.

Each module defines a FastAPI APIRouter mounted by api.app.create_app().
"""

from api.routes import health, themes

__all__ = ["health", "themes"]
