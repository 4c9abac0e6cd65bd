from decimal import Decimal

from django.test import SimpleTestCase

from crash.ledger import HistoryLedger


class HistoryLedgerTests(SimpleTestCase):
    def test_newest_first_and_bounded(self):
        ledger = HistoryLedger(capacity=3)
        for point in ("1.50", "2.00", "7.25", "1.01"):
            ledger.record(Decimal(point))

        self.assertEqual(len(ledger), 3)
        self.assertEqual(
            ledger.to_list(),
            [
                {"id": 4, "crash_point": "1.01"},
                {"id": 3, "crash_point": "7.25"},
                {"id": 2, "crash_point": "2.00"},
            ],
        )

    def test_ids_keep_increasing_after_eviction(self):
        ledger = HistoryLedger(capacity=2)
        ids = [ledger.record(Decimal("1.50")).id for _ in range(5)]
        self.assertEqual(ids, [1, 2, 3, 4, 5])
        self.assertEqual([e.id for e in ledger], [5, 4])

    def test_bad_capacity(self):
        with self.assertRaises(ValueError):
            HistoryLedger(capacity=0)
