"""Ticket ownership lookups."""

from __future__ import annotations

from typing import Iterable, Optional

from .participants import TicketedParticipant


def find_owner(
    ticket: int, pool: Iterable[TicketedParticipant]
) -> Optional[TicketedParticipant]:
    """Return the participant in ``pool`` holding ``ticket``, or ``None``."""
    for participant in pool:
        if participant.owns(ticket):
            return participant
    return None


def format_ticket_number(ticket: int) -> str:
    """Render ``ticket`` the way winner lists show it, e.g. ``#0042``."""
    return f"#{ticket:04d}"


__all__ = ["find_owner", "format_ticket_number"]
