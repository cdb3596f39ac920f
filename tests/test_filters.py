import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from rados_reconcile.errors import ConfigurationError, MalformedTimestamp
from rados_reconcile.filters import filter_by_cutoff, is_before_cutoff, parse_timestamp, read_cutoff
from rados_reconcile.models import ObjectRecord


class ParseTimestampTests(unittest.TestCase):
    def test_parses_zulu_and_offsets(self):
        self.assertEqual(
            datetime(2023, 7, 21, 12, 28, 10, 490000, tzinfo=timezone.utc),
            parse_timestamp("2023-07-21T12:28:10.490Z"),
        )
        parsed = parse_timestamp("2044-11-28T21:00:09+09:00")
        self.assertEqual(timedelta(hours=9), parsed.utcoffset())

    def test_accepts_any_fraction_precision_and_lowercase_separators(self):
        cases = {
            "2020-01-01T00:00:00.5Z": 500000,
            "2020-01-01T00:00:00.25+00:00": 250000,
            "2020-01-01T00:00:00.123456789Z": 123456,
            "2020-01-01t00:00:00.1z": 100000,
        }
        for text, microsecond in cases.items():
            with self.subTest(text=text):
                self.assertEqual(
                    datetime(2020, 1, 1, 0, 0, 0, microsecond, tzinfo=timezone.utc),
                    parse_timestamp(text),
                )

    def test_strips_surrounding_whitespace(self):
        self.assertEqual(
            datetime(2020, 1, 1, tzinfo=timezone.utc),
            parse_timestamp("2020-01-01T00:00:00Z\n"),
        )

    def test_passes_aware_datetimes_through(self):
        value = datetime(2020, 1, 1, tzinfo=timezone.utc)
        self.assertIs(value, parse_timestamp(value))

    def test_rejects_unparsable_and_naive_values(self):
        for value in ("yesterday", "", "2020-01-01T00:00:00", datetime(2020, 1, 1), None, 1577836800):
            with self.subTest(value=value):
                with self.assertRaises(MalformedTimestamp):
                    parse_timestamp(value)


class FilterByCutoffTests(unittest.TestCase):
    def setUp(self):
        self.cutoff = parse_timestamp("2020-01-01T00:00:00Z")

    def test_boundary_is_inclusive(self):
        self.assertTrue(is_before_cutoff("2020-01-01T00:00:00Z", self.cutoff))
        self.assertFalse(is_before_cutoff("2020-01-01T00:00:00.001Z", self.cutoff))

    def test_compares_across_offsets(self):
        # 2020-01-01T01:00:00+02:00 is 2019-12-31T23:00:00Z
        self.assertTrue(is_before_cutoff("2020-01-01T01:00:00+02:00", self.cutoff))
        # 2019-12-31T20:00:00-05:00 is 2020-01-01T01:00:00Z
        self.assertFalse(is_before_cutoff("2019-12-31T20:00:00-05:00", self.cutoff))

    def test_retains_only_records_at_or_before_cutoff(self):
        records = [
            ObjectRecord("old", 1, "2019-06-01T00:00:00Z"),
            ObjectRecord("edge", 2, datetime(2020, 1, 1, tzinfo=timezone.utc)),
            ObjectRecord("new", 3, "2020-06-01T00:00:00Z"),
        ]

        retained = list(filter_by_cutoff(records, self.cutoff))

        self.assertEqual(["old", "edge"], [record.key for record in retained])

    def test_filtering_is_idempotent(self):
        records = [
            ObjectRecord("a", 1, "2019-06-01T00:00:00Z"),
            ObjectRecord("b", 2, "2021-06-01T00:00:00Z"),
            ObjectRecord("c", 3, "2019-12-31T23:59:59+00:00"),
        ]

        once = list(filter_by_cutoff(records, self.cutoff))
        twice = list(filter_by_cutoff(once, self.cutoff))

        self.assertEqual(once, twice)

    def test_malformed_record_aborts_filtering(self):
        records = [
            ObjectRecord("a", 1, "2019-06-01T00:00:00Z"),
            ObjectRecord("b", 2, "not a date"),
        ]

        with self.assertRaises(MalformedTimestamp):
            list(filter_by_cutoff(records, self.cutoff))


class ReadCutoffTests(unittest.TestCase):
    def test_reads_timestamp_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "datetime.txt"
            path.write_text("2044-11-28T21:00:09+09:00\n", encoding="utf-8")

            cutoff = read_cutoff(path)

            self.assertEqual(datetime(2044, 11, 28, 12, 0, 9, tzinfo=timezone.utc), cutoff)

    def test_missing_file_is_a_configuration_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ConfigurationError):
                read_cutoff(Path(tmp) / "missing.txt")

    def test_garbage_content_is_malformed(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "datetime.txt"
            path.write_text("soon", encoding="utf-8")

            with self.assertRaises(MalformedTimestamp):
                read_cutoff(path)


if __name__ == "__main__":
    unittest.main()
