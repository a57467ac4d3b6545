"""Ticket allocation and weighted drawing for the raffle."""

from .allocation import (
    AllocationRegistry,
    AllocationStrategy,
    DEFAULT_ALLOCATION_REGISTRY,
    allocate,
    verify_allocation,
)
from .draw import DrawResult, draw
from .errors import (
    InsufficientParticipantsError,
    PrizeCategoryCompletedError,
    RaffleError,
    TicketAllocationError,
)
from .lookup import find_owner, format_ticket_number
from .participants import Participant, TicketRange, TicketedParticipant

__all__ = [
    "AllocationRegistry",
    "AllocationStrategy",
    "DEFAULT_ALLOCATION_REGISTRY",
    "DrawResult",
    "InsufficientParticipantsError",
    "Participant",
    "PrizeCategoryCompletedError",
    "RaffleError",
    "TicketAllocationError",
    "TicketRange",
    "TicketedParticipant",
    "allocate",
    "draw",
    "find_owner",
    "format_ticket_number",
    "verify_allocation",
]
