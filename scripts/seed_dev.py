import logging

from guideraffle.db.engine import get_sessionmaker, make_engine
from guideraffle.models import Base
from guideraffle.prize_categories import DEFAULT_PRIZE_CATEGORIES
from guideraffle.raffle import format_ticket_number
from guideraffle.raffle.engine import RaffleEngine
from guideraffle.roster import load_roster
from guideraffle.workflows import pool_stats, prize_category_progress


def main() -> None:
    """Reset the development database and run a sample draw from the roster."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    engine = make_engine()

    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    Session = get_sessionmaker(engine)

    roster = load_roster()

    with Session.begin() as session:
        raffle = RaffleEngine(session, roster)
        stats = pool_stats(raffle.available_participants())
        print(
            f"{stats.participant_count} participants holding "
            f"{stats.total_tickets} tickets (average NPS {stats.average_nps:.1f})"
        )

        # The sample roster is too small for every tier; draw the top two.
        for category in DEFAULT_PRIZE_CATEGORIES[:2]:
            winners = raffle.draw_category(category)
            print(f"{category.name}:")
            for winner in winners:
                print(f"  {format_ticket_number(winner.drawn_ticket)} {winner.name}")

        for progress in prize_category_progress(session, DEFAULT_PRIZE_CATEGORIES):
            print(
                f"{progress.category.id}: "
                f"{progress.current_winners}/{progress.category.winner_count}"
            )


if __name__ == "__main__":
    main()
