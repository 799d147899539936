"""
Event model - read-only mirror of the 'events' table.

Events are written by the monitoring collectors. The viewer service only
queries them; it never creates, updates or deletes rows.
"""

from typing import Optional

from sqlalchemy import BigInteger, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from eventviewer.core.db import Base


class Event(Base):
    """
    A single event logged by a monitored entity.

    Attributes:
        id: Primary key
        timestamp: When the event happened, in seconds since the epoch
        severity: Ordinal severity (-1 undefined, 0 OK, 1 warning, 2 critical)
        widget: Top-level entity id (optional)
        gadget: Entity id below the widget (optional)
        sampler: Entity id below the gadget (optional)
        message: Free-form event text
    """

    __tablename__ = "events"

    __table_args__ = (
        # Every endpoint filters on the time range
        Index("ix_events_timestamp", "timestamp"),
        # GET /widgets/{widget}/gadgets/{gadget}/samplers/{sampler}
        Index("ix_events_entity_timestamp", "widget", "gadget", "sampler", "timestamp"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    timestamp: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )

    # SEVERITY
    # --------
    #   -1: undefined
    #    0: OK
    #    1: warning
    #    2: critical

    severity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=-1,
    )

    # ENTITY HIERARCHY
    # ----------------
    # A sampler belongs to a gadget, which belongs to a widget.
    # Collectors may log events without a full binding, so all three are nullable.

    widget: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    gadget: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    sampler: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Event id={self.id} timestamp={self.timestamp} severity={self.severity}>"
