"""Named counter model backing sequential identifiers."""

from sqlmodel import Field, SQLModel


class Counter(SQLModel, table=True):
    """Monotonic counter, one row per sequence name.

    Only advanced by next_id(), never decremented. Values consumed by
    aborted transactions are rolled back with them.
    """

    __tablename__ = "counters"

    name: str = Field(primary_key=True, max_length=64)
    current_id: int = Field(default=0)
