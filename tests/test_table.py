import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from modcompat import CompatibilityVersion, CompatibilityVersionTable, parse_version


def epoch(version: str, year: int, month: int = 1, day: int = 1) -> CompatibilityVersion:
    return CompatibilityVersion(parse_version(version), datetime(year, month, day, tzinfo=timezone.utc))


class TestCompatibilityVersionTable(unittest.TestCase):
    def setUp(self):
        self.table = CompatibilityVersionTable([epoch("2.0", 2021), epoch("1.0", 2020), epoch("3.0", 2022)])

    def test_entries_are_sorted(self):
        self.assertEqual([str(e) for e in self.table], ["1.0", "2.0", "3.0"])
        self.assertEqual(str(self.table.min), "1.0")
        self.assertEqual(str(self.table.max), "3.0")

    def test_floor_returns_greatest_entry_not_exceeding(self):
        self.assertEqual(str(self.table.floor(parse_version("2.5"))), "2.0")
        self.assertEqual(str(self.table.floor(parse_version("2.0"))), "2.0")
        self.assertEqual(str(self.table.floor(parse_version("1.99"))), "1.0")
        self.assertEqual(str(self.table.floor(parse_version("9.0"))), "3.0")

    def test_floor_below_minimum_is_absent(self):
        self.assertIsNone(self.table.floor(parse_version("0.9")))

    def test_floor_on_empty_table_is_absent(self):
        table = CompatibilityVersionTable()
        self.assertTrue(table.is_empty())
        self.assertIsNone(table.floor(parse_version("1.0")))
        self.assertIsNone(table.floor(datetime(2030, 1, 1, tzinfo=timezone.utc)))

    def test_floor_is_monotonic_in_version_order(self):
        versions = ["1.0", "1.0.1", "1.5", "2.0", "2.0.1", "2.9", "3.0", "3.1", "10.0"]
        floors = [self.table.floor(parse_version(v)) for v in versions]
        for lower, higher in zip(floors, floors[1:]):
            self.assertLessEqual(lower, higher)

    def test_floor_by_date(self):
        self.assertEqual(str(self.table.floor(datetime(2021, 6, 1, tzinfo=timezone.utc))), "2.0")
        self.assertEqual(str(self.table.floor(datetime(2021, 1, 1, tzinfo=timezone.utc))), "2.0")
        self.assertEqual(str(self.table.floor(datetime(2020, 12, 31, tzinfo=timezone.utc))), "1.0")
        self.assertIsNone(self.table.floor(datetime(2019, 6, 1, tzinfo=timezone.utc)))

    def test_floor_by_naive_date_is_treated_as_utc(self):
        self.assertEqual(str(self.table.floor(datetime(2022, 3, 1))), "3.0")

    def test_entries_are_unique_by_version(self):
        table = CompatibilityVersionTable([epoch("1.0", 2020), epoch("1.0.0", 2020, 5), epoch("2.0", 2021)])
        self.assertEqual(len(table), 2)
        self.assertEqual(table.min.effective_from.month, 5)

    def test_entries_compare_by_version_only(self):
        self.assertEqual(epoch("1.0", 2020), epoch("1.0", 2024))
        self.assertLess(epoch("1.0", 2024), epoch("2.0", 2020))

    def test_json_round_trip(self):
        data = [
            {"version": "1.0", "effectiveFrom": "2020-01-01T00:00:00Z"},
            {"version": "2.0", "effectiveFrom": "2021-01-01"},
        ]
        table = CompatibilityVersionTable.from_json(data)
        self.assertEqual(CompatibilityVersionTable.from_json(table.to_json()), table)
        self.assertEqual(table.to_json()[0], {"version": "1.0", "effectiveFrom": "2020-01-01T00:00:00+00:00"})

    def test_from_json_rejects_non_list(self):
        with self.assertRaises(ValueError):
            CompatibilityVersionTable.from_json({"version": "1.0"})


if __name__ == '__main__':
    unittest.main()
