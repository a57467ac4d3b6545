"""Persisted winner records."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    JSON,
    Float,
    Index,
    Integer,
    String,
    UniqueConstraint,
    select,
)
from sqlalchemy.orm import Mapped, Session, mapped_column

from .base import Base
from ..db.utils import dt_iso

if TYPE_CHECKING:
    from ..prize_categories import PrizeCategory
    from ..raffle.participants import TicketedParticipant


class Winner(Base):
    """A participant who won a prize, with a snapshot of their roster data."""

    __tablename__ = "winners"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    """UUID primary key."""

    participant_id: Mapped[int] = mapped_column(Integer, nullable=False)
    """Roster id of the winning participant."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    supervisor: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    department: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    nps: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    nrpc: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    refund_percent: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    total_tickets: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    prize_category: Mapped[str] = mapped_column(String(100), nullable=False)
    """Identifier of the prize category won."""

    prize_name: Mapped[str] = mapped_column(String(255), nullable=False)
    """Display name of the prize category at the time of the draw."""

    ticket_numbers: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    """Every ticket the participant held in the draw."""

    drawn_ticket: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    """The ticket that was drawn for this win."""

    won_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        # One prize per participant across every category.
        UniqueConstraint("participant_id", name="uq_winners_participant_id"),
        Index("ix_winners_prize_category", "prize_category"),
        Index("ix_winners_won_at", "won_at"),
    )

    def __init__(
        self,
        *,
        participant_id: int,
        name: str,
        prize_category: str,
        prize_name: str,
        supervisor: Optional[str] = None,
        department: Optional[str] = None,
        nps: Optional[float] = None,
        nrpc: Optional[float] = None,
        refund_percent: Optional[float] = None,
        total_tickets: int = 0,
        ticket_numbers: Optional[list[int]] = None,
        drawn_ticket: Optional[int] = None,
        won_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        id: Optional[str] = None,
    ) -> None:
        if id is not None:
            self.id = id
        self.participant_id = participant_id
        self.name = name
        self.supervisor = supervisor
        self.department = department
        self.nps = nps
        self.nrpc = nrpc
        self.refund_percent = refund_percent
        self.total_tickets = total_tickets
        self.prize_category = prize_category
        self.prize_name = prize_name
        self.ticket_numbers = list(ticket_numbers) if ticket_numbers is not None else []
        self.drawn_ticket = drawn_ticket
        if won_at is not None:
            self.won_at = won_at
        if created_at is not None:
            self.created_at = created_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<Winner(id={id}, participant_id={pid}, prize_category={cat}, drawn_ticket={ticket})>".format(
            id=self.id,
            pid=self.participant_id,
            cat=self.prize_category,
            ticket=self.drawn_ticket,
        )

    @classmethod
    def from_draw(
        cls,
        participant: "TicketedParticipant",
        category: "PrizeCategory",
        drawn_ticket: int,
        *,
        won_at: Optional[datetime] = None,
    ) -> "Winner":
        """Build a winner record from a draw result entry.

        Raises
        ------
        ValueError
            If ``drawn_ticket`` is not one of the participant's tickets.
        """
        if not participant.owns(drawn_ticket):
            raise ValueError(
                f"Ticket {drawn_ticket} does not belong to participant {participant.id}"
            )
        now = won_at or datetime.now(timezone.utc)
        return cls(
            id=str(uuid.uuid4()),
            participant_id=participant.id,
            name=participant.name,
            supervisor=participant.supervisor,
            department=participant.department,
            nps=participant.nps,
            nrpc=participant.nrpc,
            refund_percent=participant.refund_percent,
            total_tickets=participant.total_tickets,
            prize_category=category.id,
            prize_name=category.name,
            ticket_numbers=list(participant.ticket_numbers),
            drawn_ticket=drawn_ticket,
            won_at=now,
            created_at=now,
        )

    @property
    def ticket_range(self) -> Optional[tuple[int, int]]:
        """Lowest and highest ticket held, or ``None`` without tickets."""
        if not self.ticket_numbers:
            return None
        return min(self.ticket_numbers), max(self.ticket_numbers)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "participant_id": self.participant_id,
            "name": self.name,
            "supervisor": self.supervisor,
            "department": self.department,
            "nps": self.nps,
            "nrpc": self.nrpc,
            "refund_percent": self.refund_percent,
            "total_tickets": self.total_tickets,
            "prize_category": self.prize_category,
            "prize_name": self.prize_name,
            "ticket_numbers": list(self.ticket_numbers or []),
            "drawn_ticket": self.drawn_ticket,
            "won_at": dt_iso(self.won_at),
            "created_at": dt_iso(self.created_at),
        }

    @classmethod
    def get_by_participant_id(
        cls, session: Session, participant_id: int
    ) -> Optional["Winner"]:
        """Return the winner record for ``participant_id`` if one exists."""
        return session.scalar(select(cls).where(cls.participant_id == participant_id))

    @classmethod
    def winner_participant_ids(cls, session: Session) -> set[int]:
        """Return the roster ids of every recorded winner."""
        return set(session.scalars(select(cls.participant_id)).all())


__all__ = ["Winner"]
