"""Per-seller order number counter."""

from sqlalchemy import Column, ForeignKey
from sqlmodel import Field, SQLModel

from quickinvoice.models.types import ULIDType


class SequenceCounter(SQLModel, table=True):
    """Last order number issued to a seller.

    Row is created lazily with the seller's first order and only ever moves
    forward through a conditional UPDATE keyed on the previous value, so two
    concurrent writers can never both commit the same number.
    """

    __tablename__ = "sequence_counters"

    seller_id: str = Field(
        sa_column=Column(ULIDType, ForeignKey("sellers.id"), primary_key=True),
    )
    last_number: int = Field(default=0, ge=0)
