"""Exceptions raised by the raffle subsystem."""

from __future__ import annotations


class RaffleError(Exception):
    """Base exception for raffle operations."""


class InsufficientParticipantsError(RaffleError):
    """Raised when fewer eligible participants remain than a prize requires."""

    def __init__(self, category_id: str, required: int, available: int) -> None:
        self.category_id = category_id
        self.required = required
        self.available = available
        super().__init__(
            f"Prize category '{category_id}' needs {required} winners but only "
            f"{available} participants are eligible"
        )


class TicketAllocationError(RaffleError):
    """Raised when ticket ownership is inconsistent with the allocation rules."""


class PrizeCategoryCompletedError(RaffleError):
    """Raised when a prize category already has all of its winners."""

    def __init__(self, category_id: str, winner_count: int) -> None:
        self.category_id = category_id
        self.winner_count = winner_count
        super().__init__(
            f"Prize category '{category_id}' already has its {winner_count} winners"
        )


__all__ = [
    "RaffleError",
    "InsufficientParticipantsError",
    "PrizeCategoryCompletedError",
    "TicketAllocationError",
]
