import logging
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from .models import Winner
from .prize_categories import PrizeCategory
from .raffle.draw import draw
from .raffle.errors import InsufficientParticipantsError, PrizeCategoryCompletedError
from .raffle.participants import Participant, TicketedParticipant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrizeCategoryProgress:
    """How many winners a prize category has against how many it needs."""

    category: PrizeCategory
    current_winners: int

    @property
    def is_completed(self) -> bool:
        return self.current_winners >= self.category.winner_count

    @property
    def remaining(self) -> int:
        return max(self.category.winner_count - self.current_winners, 0)


@dataclass(frozen=True)
class PoolStats:
    """Summary figures for a set of participants."""

    participant_count: int
    total_tickets: int
    average_nps: float


def list_winners(
    session: Session, prize_category: Optional[str] = None
) -> list[Winner]:
    """Return recorded winners, most recent first.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session.
    prize_category : Optional[str], default: None
        Restrict the listing to one prize category id.
    """

    stmt = select(Winner)
    if prize_category is not None:
        stmt = stmt.where(Winner.prize_category == prize_category)
    stmt = stmt.order_by(Winner.won_at.desc(), Winner.id.asc())
    return list(session.scalars(stmt).all())


def winner_participant_ids(session: Session) -> set[int]:
    """Return the roster ids of participants who already won a prize."""
    return Winner.winner_participant_ids(session)


def add_winners(session: Session, winners: Iterable[Winner]) -> list[Winner]:
    """Persist ``winners`` in one flush and return them."""

    records = list(winners)
    if not records:
        return []
    session.add_all(records)
    session.flush()
    logger.info(f"Recorded {len(records)} winners")
    return records


def purge_winners(session: Session) -> int:
    """Delete every winner record.

    Returns
    -------
    int
        Number of deleted rows; ``0`` when the store was already empty.
    """

    count = session.scalar(select(func.count()).select_from(Winner)) or 0
    if count == 0:
        return 0
    session.execute(delete(Winner))
    session.flush()
    logger.info(f"Purged {count} winners")
    return count


def eligible_participants(
    session: Session, ticketed: Sequence[TicketedParticipant]
) -> list[TicketedParticipant]:
    """Return the participants in ``ticketed`` who have not won yet.

    The winner ids are read from the store at call time, so the result
    reflects draws persisted earlier in the same session.
    """

    won = winner_participant_ids(session)
    return [participant for participant in ticketed if participant.id not in won]


def prize_category_progress(
    session: Session, categories: Iterable[PrizeCategory]
) -> list[PrizeCategoryProgress]:
    """Return the winner tally for each category in ``categories``."""

    counts = dict(
        session.execute(
            select(Winner.prize_category, func.count(Winner.id)).group_by(
                Winner.prize_category
            )
        ).all()
    )
    return [
        PrizeCategoryProgress(category=category, current_winners=counts.get(category.id, 0))
        for category in categories
    ]


def pool_stats(participants: Sequence[Participant]) -> PoolStats:
    """Summarize ``participants`` for the draw dashboard."""

    count = len(participants)
    total_tickets = sum(p.total_tickets for p in participants)
    average_nps = sum(p.nps for p in participants) / count if count else 0.0
    return PoolStats(
        participant_count=count,
        total_tickets=total_tickets,
        average_nps=average_nps,
    )


def count_category_winners(session: Session, prize_category: str) -> int:
    """Return how many winners are recorded for ``prize_category``."""
    stmt = (
        select(func.count())
        .select_from(Winner)
        .where(Winner.prize_category == prize_category)
    )
    return session.scalar(stmt) or 0


def run_prize_category_draw(
    session: Session,
    category: PrizeCategory,
    ticketed: Sequence[TicketedParticipant],
    *,
    rng: Optional[random.Random] = None,
    allow_partial: bool = False,
    won_at: Optional[datetime] = None,
) -> list[Winner]:
    """Draw the remaining winners for ``category`` and persist them.

    Participants who already won in any category are excluded before the
    draw. Only the winners the category still lacks are drawn, so a category
    topped up after a partial draw never exceeds ``winner_count``. The draw
    itself is weighted by ticket count and never picks the same participant
    twice.

    Parameters
    ----------
    session : Session
        Active session used to read and record winners.
    category : PrizeCategory
        Prize category being drawn.
    ticketed : Sequence[TicketedParticipant]
        The session's full allocation. It is not modified.
    rng : Optional[random.Random], default: None
        Random source forwarded to :func:`~guideraffle.raffle.draw.draw`.
    allow_partial : bool, default: False
        When ``True`` a pool smaller than the remaining winner count yields
        as many winners as possible instead of raising.
    won_at : Optional[datetime], default: None
        Timestamp stored on every new record. Defaults to now (UTC).

    Returns
    -------
    list[Winner]
        The persisted winner records in draw order.

    Raises
    ------
    PrizeCategoryCompletedError
        If the store already holds ``category.winner_count`` winners for
        ``category``.
    InsufficientParticipantsError
        If fewer eligible participants remain than the category still needs
        and ``allow_partial`` is ``False``.
    """

    existing = count_category_winners(session, category.id)
    required = max(category.winner_count - existing, 0)
    if required == 0:
        raise PrizeCategoryCompletedError(category.id, category.winner_count)

    pool = eligible_participants(session, ticketed)
    if len(pool) < required and not allow_partial:
        raise InsufficientParticipantsError(category.id, required, len(pool))

    result = draw(pool, required, rng=rng)
    if result.shortfall and not allow_partial:
        # Participants without tickets count toward the pool but cannot win.
        raise InsufficientParticipantsError(category.id, required, len(result.winners))

    records = [
        Winner.from_draw(participant, category, ticket, won_at=won_at)
        for participant, ticket in zip(result.winners, result.drawn_tickets)
    ]
    add_winners(session, records)
    logger.info(
        f"Drew {len(records)} of {required} remaining winners for prize category "
        f"'{category.id}'"
    )
    return records


__all__ = [
    "PoolStats",
    "PrizeCategoryProgress",
    "add_winners",
    "count_category_winners",
    "eligible_participants",
    "list_winners",
    "pool_stats",
    "prize_category_progress",
    "purge_winners",
    "run_prize_category_draw",
    "winner_participant_ids",
]
