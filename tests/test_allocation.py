from __future__ import annotations

import random
import unittest

from guideraffle.raffle import (
    AllocationRegistry,
    AllocationStrategy,
    DEFAULT_ALLOCATION_REGISTRY,
    Participant,
    TicketAllocationError,
    TicketRange,
    TicketedParticipant,
    allocate,
    verify_allocation,
)


def make_participant(pid: int, tickets: int, **overrides) -> Participant:
    data = dict(
        id=pid,
        name=f"Guide {pid}",
        supervisor="Supervisor",
        department="Support",
        nps=70.0,
        nrpc=85.0,
        refund_percent=2.5,
        total_tickets=tickets,
    )
    data.update(overrides)
    return Participant(**data)


class ParticipantTests(unittest.TestCase):
    def test_negative_quota_rejected(self) -> None:
        with self.assertRaises(ValueError):
            make_participant(1, -1)

    def test_non_integer_quota_rejected(self) -> None:
        with self.assertRaises(TypeError):
            make_participant(1, 2.5)  # type: ignore[arg-type]

    def test_from_json_rejects_fractional_quota(self) -> None:
        with self.assertRaises(TypeError):
            Participant.from_json({"id": 1, "totalTickets": 2.9})

    def test_from_json_accepts_whole_float_quota(self) -> None:
        participant = Participant.from_json({"id": 1, "totalTickets": 3.0})
        self.assertEqual(participant.total_tickets, 3)
        self.assertIsInstance(participant.total_tickets, int)

    def test_from_json_accepts_camel_case(self) -> None:
        participant = Participant.from_json(
            {
                "id": 7,
                "name": "Arjun",
                "supervisor": "Meera",
                "department": "Billing",
                "nps": 79.4,
                "nrpc": 89.9,
                "refundPercent": 2.5,
                "totalTickets": 9,
            }
        )
        self.assertEqual(participant.id, 7)
        self.assertEqual(participant.refund_percent, 2.5)
        self.assertEqual(participant.total_tickets, 9)
        self.assertEqual(participant.to_json()["total_tickets"], 9)

    def test_ticketed_participant_range_and_membership(self) -> None:
        ticketed = TicketedParticipant.from_participant(make_participant(1, 3), [9, 2, 5])
        self.assertEqual(ticketed.ticket_numbers, (2, 5, 9))
        self.assertEqual(ticketed.ticket_range, TicketRange(2, 9))
        self.assertTrue(ticketed.owns(5))
        self.assertFalse(ticketed.owns(4))
        self.assertFalse(ticketed.owns(10))
        self.assertEqual(ticketed.as_participant(), make_participant(1, 3))
        self.assertEqual(ticketed.to_json()["ticket_range"], {"start": 2, "end": 9})


class AllocationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.roster = [
            make_participant(3, 4),
            make_participant(1, 3),
            make_participant(2, 2),
            make_participant(5, 4),
            make_participant(4, 1),
        ]

    def assert_partition(self, ticketed: list[TicketedParticipant], total: int) -> None:
        union: set[int] = set()
        count = 0
        for participant in ticketed:
            self.assertEqual(len(participant.ticket_numbers), participant.total_tickets)
            union.update(participant.ticket_numbers)
            count += len(participant.ticket_numbers)
        self.assertEqual(count, total)
        self.assertEqual(union, set(range(1, total + 1)))

    def test_both_strategies_partition_ticket_space(self) -> None:
        for strategy in ("shuffled", "contiguous"):
            with self.subTest(strategy=strategy):
                ticketed = allocate(self.roster, strategy=strategy, rng=random.Random(3))
                self.assert_partition(ticketed, 14)
                verify_allocation(ticketed)

    def test_output_sorted_by_id(self) -> None:
        for strategy in ("shuffled", "contiguous"):
            with self.subTest(strategy=strategy):
                ticketed = allocate(self.roster, strategy=strategy, rng=random.Random(1))
                self.assertEqual([p.id for p in ticketed], [1, 2, 3, 4, 5])

    def test_contiguous_blocks_follow_quota_then_roster_order(self) -> None:
        ticketed = {p.id: p for p in allocate(self.roster, strategy="contiguous")}
        # Equal quotas (ids 3 and 5) keep their roster order.
        self.assertEqual(ticketed[3].ticket_numbers, (1, 2, 3, 4))
        self.assertEqual(ticketed[5].ticket_numbers, (5, 6, 7, 8))
        self.assertEqual(ticketed[1].ticket_numbers, (9, 10, 11))
        self.assertEqual(ticketed[2].ticket_numbers, (12, 13))
        self.assertEqual(ticketed[4].ticket_numbers, (14,))
        self.assertEqual(ticketed[1].ticket_range, TicketRange(9, 11))

    def test_shuffled_is_reproducible_with_seed(self) -> None:
        first = allocate(self.roster, strategy="shuffled", rng=random.Random(42))
        second = allocate(self.roster, strategy="shuffled", rng=random.Random(42))
        self.assertEqual(first, second)

    def test_shuffled_numbers_sorted_and_range_matches(self) -> None:
        for participant in allocate(self.roster, rng=random.Random(7)):
            numbers = participant.ticket_numbers
            self.assertEqual(list(numbers), sorted(numbers))
            self.assertEqual(participant.ticket_range, TicketRange(numbers[0], numbers[-1]))

    def test_shuffled_scatters_tickets(self) -> None:
        roster = [make_participant(i, 10) for i in range(1, 6)]
        ticketed = allocate(roster, strategy="shuffled", rng=random.Random(0))
        contiguous = [
            p
            for p in ticketed
            if p.ticket_numbers == tuple(range(p.ticket_numbers[0], p.ticket_numbers[-1] + 1))
        ]
        self.assertLess(len(contiguous), len(ticketed))

    def test_example_roster(self) -> None:
        roster = [make_participant(1, 3), make_participant(2, 2)]
        ticketed = allocate(roster, rng=random.Random(5))
        self.assertEqual(len(ticketed[0].ticket_numbers), 3)
        self.assertEqual(len(ticketed[1].ticket_numbers), 2)
        self.assertEqual(
            set(ticketed[0].ticket_numbers) | set(ticketed[1].ticket_numbers),
            {1, 2, 3, 4, 5},
        )

    def test_zero_quota_gets_no_tickets(self) -> None:
        ticketed = allocate([make_participant(1, 0)])
        self.assertEqual(ticketed[0].ticket_numbers, ())
        self.assertIsNone(ticketed[0].ticket_range)

    def test_empty_roster(self) -> None:
        self.assertEqual(allocate([]), [])

    def test_duplicate_ids_rejected(self) -> None:
        with self.assertRaises(ValueError):
            allocate([make_participant(1, 1), make_participant(1, 2)])

    def test_unknown_strategy(self) -> None:
        with self.assertRaises(KeyError):
            allocate(self.roster, strategy="round-robin")

    def test_input_not_mutated(self) -> None:
        before = list(self.roster)
        allocate(self.roster, rng=random.Random(2))
        self.assertEqual(self.roster, before)


class VerifyAllocationTests(unittest.TestCase):
    def test_detects_overlap(self) -> None:
        ticketed = [
            TicketedParticipant.from_participant(make_participant(1, 2), [1, 2]),
            TicketedParticipant.from_participant(make_participant(2, 2), [2, 3]),
        ]
        with self.assertRaises(TicketAllocationError):
            verify_allocation(ticketed)

    def test_detects_gap(self) -> None:
        ticketed = [
            TicketedParticipant.from_participant(make_participant(1, 2), [1, 3]),
        ]
        with self.assertRaises(TicketAllocationError):
            verify_allocation(ticketed)

    def test_detects_quota_mismatch(self) -> None:
        ticketed = [
            TicketedParticipant.from_participant(make_participant(1, 3), [1, 2]),
        ]
        with self.assertRaises(TicketAllocationError):
            verify_allocation(ticketed)


class AllocationRegistryTests(unittest.TestCase):
    def test_default_registry_contains_both_strategies(self) -> None:
        available = DEFAULT_ALLOCATION_REGISTRY.available_strategies()
        self.assertIn("shuffled", available)
        self.assertIn("contiguous", available)

    def test_custom_registry_registration(self) -> None:
        registry = AllocationRegistry()
        with self.assertRaises(KeyError):
            registry.get("contiguous")
        registry.register(DEFAULT_ALLOCATION_REGISTRY.get("contiguous"))
        with self.assertRaises(ValueError):
            registry.register(DEFAULT_ALLOCATION_REGISTRY.get("contiguous"))

        def reverse_blocks(participants, rng):
            total = sum(p.total_tickets for p in participants)
            allocated = []
            end = total
            for participant in participants:
                start = end - participant.total_tickets + 1
                allocated.append(
                    TicketedParticipant.from_participant(participant, range(start, end + 1))
                )
                end = start - 1
            return allocated

        registry.register(AllocationStrategy(key="reverse", allocator=reverse_blocks))
        ticketed = allocate(
            [make_participant(2, 1), make_participant(1, 2)],
            strategy="reverse",
            registry=registry,
        )
        self.assertEqual([p.id for p in ticketed], [1, 2])
        self.assertEqual(ticketed[0].ticket_numbers, (1, 2))
        self.assertEqual(ticketed[1].ticket_numbers, (3,))


if __name__ == "__main__":
    unittest.main()
