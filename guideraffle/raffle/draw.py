"""Weighted draw over allocated tickets."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from .errors import TicketAllocationError
from .lookup import find_owner
from .participants import TicketedParticipant

logger = logging.getLogger(__name__)

_SYSTEM_RANDOM = random.SystemRandom()


@dataclass(frozen=True)
class DrawResult:
    """Outcome of one :func:`draw` call.

    Attributes
    ----------
    requested : int
        Number of winners asked for.
    winners : list[TicketedParticipant]
        Winners in draw order.
    drawn_tickets : list[int]
        Ticket drawn for each winner; ``drawn_tickets[i]`` belongs to
        ``winners[i]``.
    """

    requested: int
    winners: list[TicketedParticipant] = field(default_factory=list)
    drawn_tickets: list[int] = field(default_factory=list)

    @property
    def shortfall(self) -> int:
        """How many requested winners could not be drawn."""
        return self.requested - len(self.winners)

    def __iter__(self) -> Iterator[list]:
        # Allows ``winners, tickets = draw(pool, n)``.
        yield self.winners
        yield self.drawn_tickets


def draw(
    pool: Sequence[TicketedParticipant],
    count: int,
    *,
    rng: Optional[random.Random] = None,
) -> DrawResult:
    """Draw up to ``count`` distinct winners, weighted by ticket count.

    Each round picks one ticket uniformly from every ticket still held by the
    working pool, so a participant's chance is proportional to the tickets
    they hold. The owner's whole ticket block then leaves the pool, which
    means nobody wins twice within one call.

    Parameters
    ----------
    pool : Sequence[TicketedParticipant]
        Eligible participants. The sequence itself is never modified.
    count : int
        Number of winners to draw. Must be non-negative.
    rng : Optional[random.Random], default: None
        Random source; pass a seeded ``random.Random`` for reproducible draws.

    Returns
    -------
    DrawResult
        Winners and drawn tickets in parallel order. Fewer than ``count``
        entries are returned when the pool runs out of tickets.

    Raises
    ------
    ValueError
        If ``count`` is negative.
    TicketAllocationError
        If a drawn ticket has no owner in the pool.
    """

    if count < 0:
        raise ValueError("count must be non-negative")

    source = rng or _SYSTEM_RANDOM
    available = list(pool)
    result = DrawResult(requested=count)

    for _ in range(count):
        tickets = [t for participant in available for t in participant.ticket_numbers]
        if not tickets:
            break

        ticket = tickets[source.randrange(len(tickets))]
        owner = find_owner(ticket, available)
        if owner is None:
            raise TicketAllocationError(
                f"Drawn ticket {ticket} is not owned by any participant in the pool"
            )

        result.winners.append(owner)
        result.drawn_tickets.append(ticket)
        available.remove(owner)
        logger.debug(f"Ticket {ticket} drawn for participant {owner.id}")

    if result.shortfall:
        logger.warning(
            f"Pool exhausted after {len(result.winners)} of {count} requested winners"
        )
    return result


__all__ = ["DrawResult", "draw"]
