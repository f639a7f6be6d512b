"""
Test cases for progress reporting.
"""

import unittest

from .progress import (
    format_interval,
    format_progress_message,
    percentage,
    progress_values,
)


class TestPercentage(unittest.TestCase):
    """Test the percentage string of a set."""

    def test_finished_is_100(self):
        """Test complete and empty sets report 100."""
        self.assertEqual(percentage(5, 5), "100")
        self.assertEqual(percentage(0, 0), "100")
        self.assertEqual(percentage(0, 3), "100")

    def test_whole_numbers(self):
        """Test small totals render without decimals."""
        self.assertEqual(percentage(4, 0), "0")
        self.assertEqual(percentage(2, 1), "50")
        self.assertEqual(percentage(3, 1), "33")
        self.assertEqual(percentage(3, 2), "67")

    def test_199_of_200_is_not_100(self):
        """Test a decimal place is added from 200 operations on."""
        self.assertEqual(percentage(200, 199), "99.5")
        self.assertEqual(percentage(200, 0), "0.0")

    def test_1999_of_2000(self):
        """Test two decimal places from 2000 operations on."""
        self.assertEqual(percentage(2000, 1999), "99.95")

    def test_fractional_current_never_rounds_to_100(self):
        """Test decimals are added while the value reads as 100."""
        self.assertEqual(percentage(1, 0.999), "99.9")
        self.assertEqual(percentage(1, 0.9999), "99.99")

    def test_never_100_before_completion(self):
        """Test no value below total renders as 100."""
        for total in (1, 3, 7, 199, 200, 201):
            for step in range(total * 4):
                current = step / 4
                with self.subTest(total=total, current=current):
                    self.assertNotEqual(float(percentage(total, current)), 100.0)

    def test_stable(self):
        """Test the same input always gives the same output."""
        self.assertEqual(percentage(3, 1.5), percentage(3, 1.5))
        self.assertEqual(percentage(3, 1.5), "50")


class TestFormatInterval(unittest.TestCase):
    """Test relative time strings."""

    def test_zero(self):
        """Test an empty interval."""
        self.assertEqual(format_interval(0), "0 sec")
        self.assertEqual(format_interval(0.4), "0 sec")
        self.assertEqual(format_interval(-3), "0 sec")

    def test_seconds_and_minutes(self):
        """Test singular and plural units."""
        self.assertEqual(format_interval(1), "1 sec")
        self.assertEqual(format_interval(59.9), "59 sec")
        self.assertEqual(format_interval(65), "1 min 5 sec")
        self.assertEqual(format_interval(130), "2 min 10 sec")

    def test_granularity(self):
        """Test only the two largest units are shown."""
        self.assertEqual(format_interval(3600), "1 hour")
        self.assertEqual(format_interval(3661), "1 hour 1 min")
        self.assertEqual(format_interval(2 * 86400 + 3 * 3600 + 5), "2 days 3 hours")
        self.assertEqual(format_interval(3661, granularity=3), "1 hour 1 min 1 sec")


class TestProgressMessage(unittest.TestCase):
    """Test progress message placeholders."""

    def test_progress_values(self):
        """Test the placeholder values of a running set."""
        values = progress_values(total=3, remaining=2, current=1, elapsed=10)

        self.assertEqual(values["@total"], 3)
        self.assertEqual(values["@remaining"], 2)
        self.assertEqual(values["@current"], 1)
        self.assertEqual(values["@percentage"], "33")
        self.assertEqual(values["@elapsed"], "10 sec")
        self.assertEqual(values["@estimate"], "20 sec")

    def test_progress_values_without_progress(self):
        """Test no estimate is given before anything was processed."""
        values = progress_values(total=3, remaining=3, current=0, elapsed=4)
        self.assertEqual(values["@estimate"], "-")

    def test_fractional_current_is_floored(self):
        """Test @current shows whole operations only."""
        values = progress_values(total=3, remaining=2, current=1.67, elapsed=0)
        self.assertEqual(values["@current"], 1)

    def test_format_progress_message(self):
        """Test replacing all placeholders."""
        values = progress_values(total=4, remaining=1, current=3, elapsed=0)
        message = format_progress_message(
            "Completed @current of @total (@percentage%), @remaining left.", values
        )
        self.assertEqual(message, "Completed 3 of 4 (75%), 1 left.")

    def test_longer_placeholder_wins(self):
        """Test placeholders sharing a prefix are replaced whole."""
        message = format_progress_message("@total @totals", {"@total": 1, "@totals": 2})
        self.assertEqual(message, "1 2")

    def test_without_values(self):
        """Test a template without values is returned as it is."""
        self.assertEqual(format_progress_message("Done.", {}), "Done.")


if __name__ == "__main__":
    unittest.main()
