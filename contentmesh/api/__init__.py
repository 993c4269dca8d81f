"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from contentmesh.api import app

    uvicorn contentmesh.api:app --reload
"""

from contentmesh.api.app import app, create_app

__all__ = ["app", "create_app"]
