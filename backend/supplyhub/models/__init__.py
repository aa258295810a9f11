"""Database models."""

from sqlmodel import SQLModel

from supplyhub.models.counter import Counter
from supplyhub.models.request import RequestHeader, RequestPosition

__all__ = [
    "SQLModel",
    "Counter",
    "RequestHeader",
    "RequestPosition",
]
