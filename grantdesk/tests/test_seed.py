import unittest
from unittest.mock import patch

from grantdesk.db import CountryRecord, InMemoryDbClient, PostgresDbClient
from grantdesk.seed import (
    DEFAULT_COUNTRIES,
    SAMPLE_GRANTS,
    seed_countries,
    seed_reference_data,
)
from grantdesk.types import AmountType


class SeedTests(unittest.TestCase):
    def test_seed_is_idempotent(self):
        db = InMemoryDbClient()
        first = seed_reference_data(db)
        self.assertEqual(first, {"countries": 14, "grants": 8})
        self.assertEqual(len(DEFAULT_COUNTRIES), 14)
        self.assertEqual(len(SAMPLE_GRANTS), 8)

        second = seed_reference_data(db)
        self.assertEqual(second, {"countries": 0, "grants": 0})
        self.assertEqual(len(db.countries), 14)
        self.assertEqual(len(db.grants), 8)

    def test_existing_countries_are_not_topped_up(self):
        db = InMemoryDbClient()
        db.create_country(CountryRecord("usa", "United States", "USA", "USD"))
        inserted = seed_reference_data(db)
        self.assertEqual(inserted["countries"], 0)
        self.assertEqual(inserted["grants"], 8)
        self.assertEqual(list(db.countries), ["usa"])

    def test_partial_failure_is_logged_and_not_retried(self):
        db = InMemoryDbClient()
        original = db.create_country
        calls = []

        def flaky_create(country):
            if len(calls) == 3:
                raise RuntimeError("connection lost")
            calls.append(country.id)
            return original(country)

        with patch.object(db, "create_country", side_effect=flaky_create):
            with self.assertLogs("grantdesk.seed", level="ERROR"):
                self.assertEqual(seed_countries(db), 3)

        self.assertEqual(seed_countries(db), 0)
        self.assertEqual(len(db.countries), 3)

    def test_seed_sql_backend(self):
        db = PostgresDbClient("sqlite+pysqlite:///:memory:")
        self.assertEqual(seed_reference_data(db), {"countries": 14, "grants": 8})
        grants = db.get_all_grants()
        self.assertEqual(len(grants), 8)
        self.assertTrue(all(g.amount_type == AmountType.RANGE for g in grants))
        self.assertTrue(all(g.country is not None for g in grants))
        self.assertEqual(seed_reference_data(db), {"countries": 0, "grants": 0})


if __name__ == "__main__":
    unittest.main()
