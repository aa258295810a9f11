"""Requests API package.

- routes: submit, fetch and retract daily requests; calendar activity
"""

from supplyhub.api.v1.requests.routes import router

__all__ = ["router"]
