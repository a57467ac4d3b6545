"""Static prize category configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class PrizeCategory:
    """A prize tier and the number of winners it needs."""

    id: str
    name: str
    winner_count: int
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if self.winner_count < 0:
            raise ValueError("winner_count must be non-negative")


DEFAULT_PRIZE_CATEGORIES: tuple[PrizeCategory, ...] = (
    PrizeCategory(
        id="refrigerator",
        name="1st Prize - Refrigerator",
        winner_count=1,
        description="Premium Double Door Refrigerator",
    ),
    PrizeCategory(
        id="tablets",
        name="2nd Prize - Samsung Tablets",
        winner_count=2,
        description="Latest Samsung Galaxy Tablets",
    ),
    PrizeCategory(
        id="washing-machine",
        name="3rd Prize - Washing Machine",
        winner_count=2,
        description="Fully Automatic Washing Machine",
    ),
    PrizeCategory(
        id="soundbars",
        name="4th Prize - BOAT Sound Bars",
        winner_count=8,
        description="Premium BOAT Sound Bar System",
    ),
    PrizeCategory(
        id="iron-box",
        name="5th Prize - Iron Box",
        winner_count=15,
        description="Steam Iron with Advanced Features",
    ),
)


def get_prize_category(
    category_id: str,
    categories: Iterable[PrizeCategory] = DEFAULT_PRIZE_CATEGORIES,
) -> PrizeCategory:
    """Return the category with ``category_id``.

    Raises
    ------
    KeyError
        If no category matches.
    """
    for category in categories:
        if category.id == category_id:
            return category
    raise KeyError(f"Unknown prize category '{category_id}'")


__all__ = ["PrizeCategory", "DEFAULT_PRIZE_CATEGORIES", "get_prize_category"]
