"""Session-scoped raffle engine that caches the ticket allocation."""

from __future__ import annotations

import logging
import os
import random
from typing import Optional, Sequence

from dotenv import load_dotenv
from sqlalchemy.orm import Session

from .allocation import AllocationRegistry, allocate, verify_allocation
from .lookup import find_owner
from .participants import Participant, TicketedParticipant
from ..models import Winner
from ..prize_categories import PrizeCategory
from ..workflows import eligible_participants, run_prize_category_draw

logger = logging.getLogger(__name__)


def default_strategy() -> str:
    """Return the allocation strategy configured through ``RAFFLE_ALLOCATION_STRATEGY``."""
    load_dotenv()
    return os.getenv("RAFFLE_ALLOCATION_STRATEGY", "shuffled")


class RaffleEngine:
    """Engine that allocates tickets once and runs prize draws against them."""

    def __init__(
        self,
        session: Session,
        roster: Sequence[Participant],
        *,
        strategy: Optional[str] = None,
        rng: Optional[random.Random] = None,
        registry: Optional[AllocationRegistry] = None,
    ) -> None:
        """Create a raffle engine bound to a SQLAlchemy session.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session used to read and record winners.
        roster : Sequence[Participant]
            Participants taking part in the raffle.
        strategy : Optional[str], default: None
            Allocation strategy key. When omitted the
            ``RAFFLE_ALLOCATION_STRATEGY`` environment variable is used,
            falling back to ``"shuffled"``.
        rng : Optional[random.Random], default: None
            Random source shared by allocation and drawing. Pass a seeded
            ``random.Random`` for reproducible sessions.
        registry : Optional[AllocationRegistry], default: None
            Custom allocation registry. Typically omitted.
        """

        self._session = session
        self._roster = list(roster)
        self._strategy = strategy or default_strategy()
        self._rng = rng
        self._registry = registry
        self._ticketed: Optional[list[TicketedParticipant]] = None

    @property
    def strategy(self) -> str:
        return self._strategy

    @property
    def ticketed_participants(self) -> list[TicketedParticipant]:
        """The allocation for this session, computed on first access."""
        if self._ticketed is None:
            ticketed = allocate(
                self._roster,
                strategy=self._strategy,
                rng=self._rng,
                registry=self._registry,
            )
            verify_allocation(ticketed)
            logger.info(
                f"Allocated tickets for {len(ticketed)} participants "
                f"with strategy '{self._strategy}'"
            )
            self._ticketed = ticketed
        return list(self._ticketed)

    def reset_allocation(self) -> None:
        """Forget the cached allocation; the next access re-allocates."""
        self._ticketed = None

    def available_participants(self) -> list[TicketedParticipant]:
        """Return participants who have not won a prize yet."""
        return eligible_participants(self._session, self.ticketed_participants)

    def find_owner(self, ticket: int) -> Optional[TicketedParticipant]:
        """Resolve ``ticket`` against the session's allocation."""
        return find_owner(ticket, self.ticketed_participants)

    def draw_category(
        self,
        category: PrizeCategory,
        *,
        allow_partial: bool = False,
    ) -> list[Winner]:
        """Draw and persist the winners of ``category``.

        See :func:`guideraffle.workflows.run_prize_category_draw` for the
        exclusion and shortfall rules.
        """
        return run_prize_category_draw(
            self._session,
            category,
            self.ticketed_participants,
            rng=self._rng,
            allow_partial=allow_partial,
        )


__all__ = ["RaffleEngine", "default_strategy"]
