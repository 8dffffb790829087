"""Tests for calendar <-> Julian Date conversion."""
import math
import unittest
from datetime import date, datetime, timedelta, timezone

from orrery.clock import SimulationClock
from orrery.errors import InvalidDate
from orrery.time_base import (
    check_julian_date,
    date_to_julian,
    datetime_to_julian,
    days_since_j2000,
    format_date,
    julian_to_date,
    julian_to_datetime,
    now,
    parse_date,
)


class TestDateToJulian(unittest.TestCase):

    def test_reference_dates(self):
        """Known Julian Dates at 00:00 UTC."""
        self.assertEqual(date_to_julian(date(2000, 1, 1)), 2451544.5)
        self.assertEqual(date_to_julian(date(1858, 11, 17)), 2400000.5)  # MJD 0
        self.assertEqual(date_to_julian(date(1970, 1, 1)), 2440587.5)  # Unix epoch
        self.assertEqual(date_to_julian(date(1582, 10, 15)), 2299160.5)  # first Gregorian day

    def test_string_input(self):
        self.assertEqual(date_to_julian('2000-01-01'), 2451544.5)
        self.assertEqual(date_to_julian(' 2024-03-20 '), date_to_julian(date(2024, 3, 20)))

    def test_datetime_keeps_fraction(self):
        self.assertEqual(date_to_julian(datetime(2000, 1, 1, 12)), 2451545.0)
        self.assertEqual(datetime_to_julian(datetime(2000, 1, 1, 18, tzinfo=timezone.utc)), 2451545.25)

    def test_datetime_with_offset(self):
        plus_two = timezone(timedelta(hours=2))
        self.assertEqual(datetime_to_julian(datetime(2000, 1, 1, 14, tzinfo=plus_two)), 2451545.0)

    def test_j2000_offset(self):
        self.assertEqual(days_since_j2000(date_to_julian(datetime(2000, 1, 1, 12))), 0.0)

    def test_malformed_dates_rejected(self):
        for bad in ['2023-02-29', '2024-13-01', '2024-00-10', '2024/01/01', '20240101',
                    '0000-01-01', '24-01-01', '', 'today']:
            with self.subTest(bad=bad):
                with self.assertRaises(InvalidDate):
                    date_to_julian(bad)

    def test_wrong_type_rejected(self):
        with self.assertRaises(InvalidDate):
            date_to_julian(2451545.0)
        with self.assertRaises(InvalidDate):
            parse_date(None)

    def test_invalid_date_is_value_error(self):
        with self.assertRaises(ValueError):
            parse_date('2023-02-30')


class TestJulianToDate(unittest.TestCase):

    def test_exact_inverse_on_day_boundaries(self):
        for ordinal in range(1, date(9999, 12, 31).toordinal(), 9973):
            d = date.fromordinal(ordinal)
            with self.subTest(date=d):
                self.assertEqual(julian_to_date(date_to_julian(d)), d)

    def test_rounds_to_nearest_midnight(self):
        self.assertEqual(julian_to_date(2451544.5), date(2000, 1, 1))
        self.assertEqual(julian_to_date(2451544.2), date(2000, 1, 1))
        self.assertEqual(julian_to_date(2451544.99), date(2000, 1, 1))
        self.assertEqual(julian_to_date(2451545.01), date(2000, 1, 2))

    def test_noon_rounds_half_away_from_zero(self):
        self.assertEqual(julian_to_date(2451545.0), date(2000, 1, 2))

    def test_forward_simulation_round_trip_within_one_day(self):
        clock = SimulationClock(julian_date=2451544.5, acceleration=37.3)
        for _ in range(2000):
            jd = clock.advance(1.0 / 60.0)
            self.assertLessEqual(abs(date_to_julian(julian_to_date(jd)) - jd), 0.5)

    def test_non_finite_rejected(self):
        for bad in [math.nan, math.inf, -math.inf]:
            with self.assertRaises(InvalidDate):
                julian_to_date(bad)

    def test_check_julian_date(self):
        self.assertEqual(check_julian_date(2451545), 2451545.0)
        self.assertIsInstance(check_julian_date(2451545), float)
        for bad in [math.nan, -math.inf, 'soon', None, object()]:
            with self.subTest(julian_date=bad):
                with self.assertRaises(InvalidDate):
                    check_julian_date(bad)

    def test_out_of_range_rejected(self):
        with self.assertRaises(InvalidDate):
            julian_to_date(0.0)
        with self.assertRaises(InvalidDate):
            julian_to_date(1.0e10)

    def test_julian_to_datetime(self):
        self.assertEqual(julian_to_datetime(2451545.0), datetime(2000, 1, 1, 12, tzinfo=timezone.utc))
        self.assertEqual(julian_to_datetime(2451544.75), datetime(2000, 1, 1, 6, tzinfo=timezone.utc))


class TestFormatting(unittest.TestCase):

    def test_format_round_trip(self):
        for text in ['2000-01-01', '1986-02-09', '2024-02-29', '0987-06-05', '9999-12-31']:
            with self.subTest(text=text):
                self.assertEqual(format_date(date_to_julian(text)), text)
                self.assertEqual(parse_date(format_date(date_to_julian(text))).isoformat(), text)

    def test_now_is_read_once(self):
        first = now()
        self.assertIs(now(), first)
        self.assertIsInstance(first, date)


if __name__ == '__main__':
    unittest.main()
