# coding: utf-8
"""
Unit tests for lotter.inventory.api
"""
# stdlib imports
import unittest
from fractions import Fraction
from datetime import date


# local imports
from lotter.amount import Amount
from lotter.errors import (
    InsufficientInventoryError,
    ParseError,
    TransactionError,
)
from lotter.inventory import (
    LIFO,
    Ledger,
    qualify,
    produce_splits,
    produce_moves,
)


def amt(value, asset):
    return Amount(asset, Fraction(value))


class QualifyTestCase(unittest.TestCase):
    def test_prune(self):
        account = "Assets:BTC:hot"
        self.assertEqual(qualify(account, 0), "")
        self.assertEqual(qualify(account, 1), "Assets")
        self.assertEqual(qualify(account, 2), "Assets:BTC")
        self.assertEqual(qualify(account, 3), account)
        self.assertEqual(qualify(account, 10), account)
        self.assertEqual(qualify(account, -1), account)


class ProduceSplitsTestCase(unittest.TestCase):
    def setUp(self):
        self.ledger = Ledger(base="USD")

    def test_trade(self):
        splitset, trade = produce_splits(
            self.ledger,
            ["    Assets:Crypto  100 ABC @ 0.02 USD", "    ; note", "    Equity:Cash"],
        )
        self.assertTrue(trade)
        # keyed by tally asset, then qualifier
        self.assertEqual(list(splitset), ["USD"])
        splits = splitset["USD"][""]
        self.assertEqual(len(splits), 2)
        self.assertEqual(splits[1].account, "Equity:Cash")
        self.assertEqual(splits[1].delta, amt(-2, "USD"))

    def test_move(self):
        splitset, trade = produce_splits(
            self.ledger, ["    Assets:Wallet  5 ABC", "    Assets:Exchange"]
        )
        self.assertFalse(trade)
        self.assertEqual(splitset["ABC"][""][1].delta, amt(-5, "ABC"))

    def test_balanced_null_split_dropped(self):
        splitset, _ = produce_splits(
            self.ledger,
            ["    Assets:A  5 ABC", "    Assets:B  -5 ABC", "    Equity:Cash"],
        )
        self.assertEqual(len(splitset["ABC"][""]), 2)

    def test_two_null_splits(self):
        with self.assertRaises(TransactionError):
            produce_splits(
                self.ledger, ["    Assets:A  5 ABC", "    Assets:B", "    Assets:C"]
            )

    def test_ambiguous_null_split(self):
        with self.assertRaises(TransactionError):
            produce_splits(
                self.ledger, ["    Assets:A  5 ABC", "    Assets:B  3 XYZ", "    Assets:C"]
            )

    def test_garbage(self):
        with self.assertRaises(ParseError):
            produce_splits(self.ledger, ["    Assets:A  five ABC"])
        with self.assertRaises(ParseError):
            produce_splits(self.ledger, ["Assets:A  5 ABC"])

    def test_produce_moves(self):
        ledger = Ledger(base="USD", prune=1)
        splitset, _ = produce_splits(
            ledger,
            [
                "    Assets:Wallet  5 ABC",
                "    Assets:Wallet  1 ABC",
                "    Equity:Exchange  -6 ABC",
            ],
        )
        moves = produce_moves(splitset)
        self.assertEqual(moves["ABC"]["Assets"], amt(6, "ABC"))
        self.assertEqual(moves["ABC"]["Equity"], amt(-6, "ABC"))


class TradeTestCase(unittest.TestCase):
    def setUp(self):
        self.ledger = Ledger(base="USD")

    def test_buy(self):
        booking = self.ledger.book(
            ["    Assets:Crypto  100 ABC @ 0.02 USD", "    Equity:Cash"],
            date(2016, 1, 1),
        )
        self.assertTrue(booking.trade)
        self.assertEqual(len(booking.entries), 1)
        entry = booking.entries[0]
        self.assertEqual(entry.lot.name, "Lot::2016-01-01:100ABC@0.02USD:1")
        self.assertEqual(entry.inventory, amt(-100, "ABC"))
        self.assertEqual(entry.basis, amt(2, "USD"))
        self.assertEqual(entry.annotation, ":BUY:")
        self.assertFalse(booking.gains.realized)
        self.assertEqual(booking.gains.total, amt(0, "USD"))

        queue = self.ledger["ABC"][""]
        self.assertEqual(queue.total(), amt(100, "ABC"))

    def test_sell(self):
        self.ledger.book(
            ["    Assets:Crypto  100 ABC @ 0.02 USD", "    Equity:Cash"],
            date(2016, 1, 1),
        )
        booking = self.ledger.book(
            ["    Assets:Crypto  -1 ABC @ 1 USD", "    Assets:Exchange"],
            date(2017, 1, 1),
        )
        entry = booking.entries[0]
        self.assertEqual(entry.annotation, ":SELL:")
        self.assertEqual(entry.inventory, amt(1, "ABC"))
        self.assertEqual(entry.basis, amt("-0.02", "USD"))
        self.assertEqual(booking.gains.total, amt("0.98", "USD"))
        self.assertEqual(booking.gains.long, amt("0.98", "USD"))
        self.assertEqual(booking.gains.short, amt(0, "USD"))
        self.assertEqual(self.ledger["ABC"][""].total(), amt(99, "ABC"))

    def test_two_lot_fifo(self):
        self.ledger.book(
            ["    Assets:Broker  10 X @ 100 USD", "    Equity:Cash"], date(2016, 1, 1)
        )
        self.ledger.book(
            ["    Assets:Broker  10 X @ 500 USD", "    Equity:Cash"], date(2017, 1, 1)
        )
        booking = self.ledger.book(
            ["    Assets:Broker  -20 X @ 500 USD", "    Assets:Cash"],
            date(2017, 6, 1),
        )
        self.assertEqual(len(booking.entries), 2)
        self.assertEqual(
            [entry.basis for entry in booking.entries],
            [amt(-1000, "USD"), amt(-5000, "USD")],
        )
        gains = booking.gains
        # proceeds 10000, basis 6000
        self.assertEqual(gains.total, amt(4000, "USD"))
        # half the inventory held long term
        self.assertEqual(gains.long, amt(2000, "USD"))
        self.assertEqual(gains.short, amt(2000, "USD"))
        self.assertEqual(gains.longinventory, amt(10, "X"))
        self.assertEqual(gains.shortinventory, amt(10, "X"))
        self.assertEqual(gains.short + gains.long, gains.total)
        self.assertEqual(len(self.ledger["X"][""]), 0)

    def test_lifo(self):
        ledger = Ledger(base="USD", sort=LIFO)
        ledger.book(["    Assets:B  10 X @ 100 USD", "    Equity:Cash"], date(2016, 1, 1))
        ledger.book(["    Assets:B  10 X @ 500 USD", "    Equity:Cash"], date(2017, 1, 1))
        booking = ledger.book(
            ["    Assets:B  -5 X @ 600 USD", "    Assets:Cash"], date(2017, 6, 1)
        )
        self.assertEqual(booking.entries[0].basis, amt(-2500, "USD"))
        self.assertEqual(booking.gains.short, amt(500, "USD"))
        self.assertEqual(booking.gains.long, amt(0, "USD"))

    def test_insufficient(self):
        with self.assertRaises(InsufficientInventoryError):
            self.ledger.book(
                ["    Assets:Crypto  -1 ABC @ 1 USD", "    Assets:Exchange"],
                date(2017, 1, 1),
            )

        self.ledger.book(
            ["    Assets:Crypto  1 ABC @ 1 USD", "    Equity:Cash"], date(2016, 1, 1)
        )
        with self.assertRaises(InsufficientInventoryError) as cm:
            self.ledger.book(
                ["    Assets:Crypto  -2 ABC @ 1 USD", "    Assets:Exchange"],
                date(2017, 1, 1),
            )
        self.assertEqual(len(cm.exception.disposals), 1)
        self.assertIn("-2 ABC", str(cm.exception))

    def test_price_in_base(self):
        with self.assertRaises(TransactionError):
            self.ledger.book(
                ["    Assets:Cash  10 USD @ 2 ABC", "    Assets:Crypto"],
                date(2017, 1, 1),
            )

    def test_sell_priced_in_non_base(self):
        self.ledger.book(
            ["    Assets:Crypto  1 ABC @ 1 USD", "    Equity:Cash"], date(2016, 1, 1)
        )
        with self.assertRaises(TransactionError):
            self.ledger.book(
                ["    Assets:Crypto  -1 ABC @ 2 XYZ", "    Assets:Crypto  2 XYZ"],
                date(2017, 1, 1),
            )

    def test_deferred_barter(self):
        self.ledger.book(
            ["    Assets:Crypto  10 ABC @ 1 USD", "    Equity:Cash"], date(2016, 1, 1)
        )
        self.ledger.book(
            ["    Assets:Crypto  10 ABC @ 3 USD", "    Equity:Cash"], date(2016, 6, 1)
        )
        booking = self.ledger.book(
            ["    Assets:Crypto  5 XYZ @ 3 ABC", "    Assets:Crypto  -15 ABC"],
            date(2017, 3, 1),
        )
        annotations = [entry.annotation for entry in booking.entries]
        self.assertEqual(annotations, [":SELL:DEFER:", ":SELL:DEFER:", ":BUY:DEFER:"])

        lotentry = booking.entries[-1]
        lot = lotentry.lot
        # basis carried over: 10 @ 1 + 5 @ 3
        self.assertEqual(lotentry.basis, amt(25, "USD"))
        self.assertEqual(lot.startcost, amt(25, "USD"))
        self.assertEqual(lot.inventory, amt(5, "XYZ"))
        # latest date of consumed inventory
        self.assertEqual(lot.date, date(2016, 6, 1))
        self.assertEqual(lot.name, "Lot::2016-06-01:5XYZ@3ABC@25USD:3")

        # no gain realized on a barter
        self.assertEqual(booking.gains.total, amt(0, "USD"))
        self.assertEqual(booking.gains.splits(), [])

        self.assertEqual(self.ledger["ABC"][""].total(), amt(5, "ABC"))
        self.assertEqual(self.ledger["XYZ"][""].total(), amt(5, "XYZ"))

    def test_zero_cost_barter(self):
        with self.assertRaises(TransactionError):
            self.ledger.book(
                ["    Assets:Crypto  5 XYZ @ 0 ABC", "    Equity:Gift"],
                date(2017, 3, 1),
            )
        self.assertNotIn("XYZ", self.ledger)


class MoveTestCase(unittest.TestCase):
    def setUp(self):
        self.ledger = Ledger(base="USD", prune=2)
        self.ledger.book(
            ["    Assets:Exchange  10 ABC @ 2 USD", "    Equity:Cash"], date(2016, 1, 1)
        )

    def test_move(self):
        booking = self.ledger.book(
            ["    Assets:Wallet  4 ABC", "    Assets:Exchange"], date(2017, 1, 1)
        )
        self.assertFalse(booking.trade)
        self.assertFalse(booking.gains.realized)
        self.assertEqual(booking.gains.splits(), [])

        out, into = booking.entries
        self.assertEqual(out.inventory, amt(4, "ABC"))
        self.assertEqual(out.basis, amt(-8, "USD"))
        self.assertEqual(
            out.annotation, ":MOVE: move 4 ABC from Assets:Exchange (1 of 1)"
        )
        self.assertEqual(into.inventory, amt(-4, "ABC"))
        self.assertEqual(into.basis, amt(8, "USD"))
        self.assertEqual(into.annotation, ":MOVE: move 4 ABC to Assets:Wallet")

        # holding period and creation order preserved
        lot = into.lot
        self.assertEqual(lot.date, date(2016, 1, 1))
        self.assertEqual(lot.weight, 1)
        self.assertEqual(lot.name, "Lot:Assets:Wallet:2016-01-01:4ABC@2USD:1")

        self.assertEqual(self.ledger["ABC"]["Assets:Exchange"].total(), amt(6, "ABC"))
        self.assertEqual(self.ledger["ABC"]["Assets:Wallet"].total(), amt(4, "ABC"))

    def test_sell_after_move(self):
        """Holding period runs from the original purchase, not the move."""
        self.ledger.book(
            ["    Assets:Wallet  4 ABC", "    Assets:Exchange"], date(2016, 12, 1)
        )
        booking = self.ledger.book(
            ["    Assets:Wallet  -4 ABC @ 4.5 USD", "    Assets:Cash"], date(2017, 1, 2)
        )
        self.assertEqual(booking.entries[0].lot.date, date(2016, 1, 1))
        # proceeds 18, basis 8
        self.assertEqual(booking.gains.total, amt(10, "USD"))
        self.assertEqual(booking.gains.long, amt(10, "USD"))
        self.assertEqual(booking.gains.short, amt(0, "USD"))

    def test_move_with_fee(self):
        booking = self.ledger.book(
            [
                "    Assets:Wallet  3 ABC",
                "    Expenses:Fees  1 ABC",
                "    Assets:Exchange  -4 ABC",
            ],
            date(2017, 1, 1),
        )
        self.assertEqual(self.ledger["ABC"]["Assets:Wallet"].total(), amt(3, "ABC"))
        self.assertEqual(self.ledger["ABC"]["Expenses:Fees"].total(), amt(1, "ABC"))
        self.assertEqual(len(booking.entries), 3)

    def test_move_within_qualifier(self):
        booking = self.ledger.book(
            ["    Assets:Exchange:Hot  4 ABC", "    Assets:Exchange:Cold"],
            date(2017, 1, 1),
        )
        self.assertEqual(booking.entries, [])

    def test_move_insufficient(self):
        with self.assertRaises(InsufficientInventoryError):
            self.ledger.book(
                ["    Assets:Wallet  11 ABC", "    Assets:Exchange"], date(2017, 1, 1)
            )

    def test_base_currency_move(self):
        booking = self.ledger.book(
            ["    Assets:Bank  100 USD", "    Equity:Cash"], date(2017, 1, 1)
        )
        self.assertEqual(booking.entries, [])


if __name__ == "__main__":
    unittest.main()
