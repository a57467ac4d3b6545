"""Ticket allocation strategies for the raffle."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from .errors import TicketAllocationError
from .participants import Participant, TicketedParticipant

logger = logging.getLogger(__name__)

_SYSTEM_RANDOM = random.SystemRandom()

Allocator = Callable[[Sequence[Participant], random.Random], list[TicketedParticipant]]


@dataclass(frozen=True)
class AllocationStrategy:
    """Definition of a ticket allocation strategy.

    Attributes
    ----------
    key : str
        Registry key used to select the strategy.
    allocator : Callable[[Sequence[Participant], random.Random], list[TicketedParticipant]]
        Callable that assigns ticket numbers to every participant. The
        returned order is not significant; :func:`allocate` re-sorts by id.
    description : Optional[str]
        Human-readable summary of the strategy.
    """

    key: str
    allocator: Allocator
    description: Optional[str] = None


class AllocationRegistry:
    """Mutable registry mapping strategy keys to definitions."""

    def __init__(self) -> None:
        self._strategies: Dict[str, AllocationStrategy] = {}

    def register(self, strategy: AllocationStrategy, *, replace: bool = False) -> None:
        """Register ``strategy`` under its key.

        Parameters
        ----------
        strategy : AllocationStrategy
            Strategy to add to the registry.
        replace : bool, default: False
            When ``True`` an existing registration with the same key is
            overwritten. Otherwise a duplicate raises :class:`ValueError`.
        """
        if not replace and strategy.key in self._strategies:
            raise ValueError(f"Allocation strategy '{strategy.key}' is already registered")
        self._strategies[strategy.key] = strategy

    def get(self, key: str) -> AllocationStrategy:
        """Return the strategy registered under ``key``."""
        try:
            return self._strategies[key]
        except KeyError as exc:
            raise KeyError(f"Unknown allocation strategy '{key}'") from exc

    def available_strategies(self) -> Dict[str, AllocationStrategy]:
        """Return a copy of the registered strategies keyed by identifier."""
        return dict(self._strategies)


def _by_quota_desc(participants: Sequence[Participant]) -> list[Participant]:
    # sorted() is stable, so equal quotas keep their roster order.
    return sorted(participants, key=lambda p: -p.total_tickets)


def _allocate_contiguous(
    participants: Sequence[Participant], rng: random.Random
) -> list[TicketedParticipant]:
    """Hand out consecutive blocks starting at 1, largest quota first."""
    allocated: list[TicketedParticipant] = []
    next_ticket = 1
    for participant in _by_quota_desc(participants):
        block = range(next_ticket, next_ticket + participant.total_tickets)
        allocated.append(TicketedParticipant.from_participant(participant, block))
        next_ticket += participant.total_tickets
    return allocated


def _allocate_shuffled(
    participants: Sequence[Participant], rng: random.Random
) -> list[TicketedParticipant]:
    """Shuffle ``1..T`` and slice it into quota-sized blocks, largest quota first."""
    total = sum(p.total_tickets for p in participants)
    tickets = list(range(1, total + 1))
    # random.shuffle is an in-place Fisher-Yates.
    rng.shuffle(tickets)

    allocated: list[TicketedParticipant] = []
    position = 0
    for participant in _by_quota_desc(participants):
        block = tickets[position : position + participant.total_tickets]
        allocated.append(TicketedParticipant.from_participant(participant, block))
        position += participant.total_tickets
    return allocated


def allocate(
    participants: Sequence[Participant],
    *,
    strategy: str = "shuffled",
    rng: Optional[random.Random] = None,
    registry: Optional[AllocationRegistry] = None,
) -> list[TicketedParticipant]:
    """Assign every participant a disjoint block of ticket numbers.

    The union of all blocks is exactly ``1..T`` where ``T`` is the sum of
    ``total_tickets`` across the roster. The output is ordered by participant
    id regardless of the order in which blocks were handed out.

    Parameters
    ----------
    participants : Sequence[Participant]
        The roster. Participant ids must be unique.
    strategy : str, default: "shuffled"
        Key of the allocation strategy to use (``"shuffled"`` or
        ``"contiguous"`` in the default registry).
    rng : Optional[random.Random], default: None
        Random source for strategies that shuffle. Pass a seeded
        ``random.Random`` for reproducible allocations.
    registry : Optional[AllocationRegistry], default: None
        Registry to resolve ``strategy`` from. Defaults to
        :data:`DEFAULT_ALLOCATION_REGISTRY`.

    Returns
    -------
    list[TicketedParticipant]
        One entry per participant, sorted by ``id`` ascending.

    Raises
    ------
    ValueError
        If two participants share an id.
    KeyError
        If ``strategy`` is not registered.
    """

    if not participants:
        return []

    seen: set[int] = set()
    for participant in participants:
        if participant.id in seen:
            raise ValueError(f"Duplicate participant id {participant.id} in roster")
        seen.add(participant.id)

    active_registry = registry or DEFAULT_ALLOCATION_REGISTRY
    definition = active_registry.get(strategy)
    allocated = definition.allocator(participants, rng or _SYSTEM_RANDOM)

    logger.debug(
        f"Allocated {sum(p.total_tickets for p in participants)} tickets to "
        f"{len(allocated)} participants using '{strategy}'"
    )
    return sorted(allocated, key=lambda p: p.id)


def verify_allocation(ticketed: Sequence[TicketedParticipant]) -> None:
    """Check coverage, quota and disjointness of an allocation.

    Raises
    ------
    TicketAllocationError
        If any participant's block has the wrong size, a ticket is owned twice,
        or the union of blocks is not exactly ``1..T``.
    """

    seen: set[int] = set()
    for participant in ticketed:
        if len(participant.ticket_numbers) != participant.total_tickets:
            raise TicketAllocationError(
                f"Participant {participant.id} holds {len(participant.ticket_numbers)} "
                f"tickets but its quota is {participant.total_tickets}"
            )
        overlap = seen.intersection(participant.ticket_numbers)
        if overlap:
            raise TicketAllocationError(
                f"Tickets {sorted(overlap)} are assigned to more than one participant"
            )
        seen.update(participant.ticket_numbers)

    total = sum(p.total_tickets for p in ticketed)
    if seen != set(range(1, total + 1)):
        raise TicketAllocationError(f"Allocated tickets do not cover 1..{total}")


DEFAULT_ALLOCATION_REGISTRY = AllocationRegistry()
DEFAULT_ALLOCATION_REGISTRY.register(
    AllocationStrategy(
        key="contiguous",
        allocator=_allocate_contiguous,
        description=(
            "Walk a counter from 1 and give each participant, largest quota "
            "first, a consecutive block of ticket numbers."
        ),
    )
)
DEFAULT_ALLOCATION_REGISTRY.register(
    AllocationStrategy(
        key="shuffled",
        allocator=_allocate_shuffled,
        description=(
            "Shuffle 1..T uniformly and give each participant, largest quota "
            "first, the next quota-sized slice of the shuffled sequence."
        ),
    )
)

__all__ = [
    "AllocationRegistry",
    "AllocationStrategy",
    "DEFAULT_ALLOCATION_REGISTRY",
    "allocate",
    "verify_allocation",
]
