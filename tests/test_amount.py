# coding: utf-8
"""
Unit tests for lotter.amount
"""
# stdlib imports
import unittest
from fractions import Fraction


# local imports
from lotter.amount import Amount, Precision, parse_amount, DEFAULT_PRECISION
from lotter.errors import ParseError, AssetMismatchError


class ParseAmountTestCase(unittest.TestCase):
    def test_parse(self):
        self.assertEqual(parse_amount("100 USD"), Amount("USD", Fraction(100)))
        self.assertEqual(parse_amount("-0.5 BTC"), Amount("BTC", Fraction(-1, 2)))
        self.assertEqual(parse_amount("  +.25 ABC  "), Amount("ABC", Fraction(1, 4)))
        self.assertEqual(parse_amount("1/3 XYZ"), Amount("XYZ", Fraction(1, 3)))

    def test_missing_asset(self):
        with self.assertRaises(ParseError):
            parse_amount("100")
        with self.assertRaises(ParseError):
            parse_amount("100  USD")

    def test_not_a_number(self):
        with self.assertRaises(ParseError):
            parse_amount("ten USD")
        with self.assertRaises(ParseError):
            parse_amount("$10 USD")

    def test_zero_denominator(self):
        with self.assertRaises(ParseError):
            parse_amount("1/0 USD")

    def test_observe_precision(self):
        precision = Precision()
        parse_amount("1.12345678 BTC", precision)
        parse_amount("1.1 BTC", precision)
        parse_amount("1.12 USD", precision)
        self.assertEqual(precision["BTC"], 8)
        # never below the default
        self.assertEqual(precision["USD"], DEFAULT_PRECISION)
        self.assertEqual(precision["ABC"], DEFAULT_PRECISION)


class PrecisionTestCase(unittest.TestCase):
    def test_format(self):
        precision = Precision()
        self.assertEqual(precision.format(Amount("USD", Fraction(3, 2))), "1.5 USD")
        self.assertEqual(precision.format(Amount("USD", Fraction(100))), "100 USD")
        self.assertEqual(
            precision.format(Amount("USD", Fraction(2, 3))), "0.666667 USD"
        )
        self.assertEqual(precision.compact(Amount("ABC", Fraction(-1))), "-1ABC")

    def test_round(self):
        precision = Precision()
        precision.observe("BTC", 8)
        value = Fraction(1, 3)
        self.assertEqual(
            precision.round(Amount("BTC", value)), Fraction(33333333, 10 ** 8)
        )
        self.assertEqual(
            precision.round(Amount("USD", value)), Fraction(333333, 10 ** 6)
        )

    def test_round_trip(self):
        """Parsing displayed text gives back the rounded value."""
        precision = Precision()
        precision.observe("BTC", 8)
        values = [
            Fraction(1, 3),
            Fraction(-2, 3),
            Fraction(5, 10 ** 7),
            Fraction(-1, 10 ** 9),
            Fraction(10 ** 12, 7),
        ]
        for asset in ("BTC", "USD"):
            for value in values:
                amount = Amount(asset, value)
                parsed = parse_amount(precision.format(amount))
                self.assertEqual(parsed.asset, asset)
                self.assertEqual(parsed.value, precision.round(amount))

        # half a unit in the last place rounds away from zero
        self.assertEqual(
            precision.round(Amount("USD", Fraction(5, 10 ** 7))), Fraction(1, 10 ** 6)
        )
        # tiny negatives display as zero
        self.assertEqual(precision.format(Amount("USD", Fraction(-1, 10 ** 9))), "0 USD")

    def test_observe_only_increases(self):
        precision = Precision()
        precision.observe("BTC", 8)
        precision.observe("BTC", 2)
        self.assertEqual(precision["BTC"], 8)


class AmountTestCase(unittest.TestCase):
    def test_arithmetic(self):
        a = Amount("USD", Fraction(5))
        b = Amount("USD", Fraction(3))
        self.assertEqual(a + b, Amount("USD", Fraction(8)))
        self.assertEqual(a - b, Amount("USD", Fraction(2)))
        self.assertEqual(-a, Amount("USD", Fraction(-5)))
        self.assertEqual(abs(-a), a)
        self.assertEqual(a * Fraction(1, 2), Amount("USD", Fraction(5, 2)))
        self.assertEqual(2 * a, Amount("USD", Fraction(10)))

    def test_mismatch(self):
        with self.assertRaises(AssetMismatchError):
            Amount("USD", Fraction(1)) + Amount("BTC", Fraction(1))
        with self.assertRaises(AssetMismatchError):
            Amount("USD", Fraction(1)) - Amount("BTC", Fraction(1))

    def test_sign(self):
        self.assertEqual(Amount("USD", Fraction(-2)).sign, -1)
        self.assertEqual(Amount("USD", Fraction(0)).sign, 0)
        self.assertEqual(Amount("USD", Fraction(2)).zero().sign, 0)

    def test_str(self):
        self.assertEqual(str(Amount("BTC", Fraction(-1, 4))), "-0.25 BTC")

    def test_exact(self):
        third = Amount("ABC", Fraction(1, 3))
        self.assertEqual((third + third + third).value, 1)


if __name__ == "__main__":
    unittest.main()
