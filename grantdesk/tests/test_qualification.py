import random
import unittest
from decimal import Decimal

from grantdesk.db import (
    ApplicationRecord,
    GrantAwardRecord,
    InMemoryDbClient,
    UserRecord,
    compute_success_rate,
)
from grantdesk.errors import DuplicateApplicationError, NotFoundError
from grantdesk.qualification import (
    NOT_QUALIFIED_MESSAGE,
    REFERRAL_QUALIFIED_MESSAGE,
    normalize_referral,
    submit_application,
)
from grantdesk.seed import seed_reference_data
from grantdesk.types import ApplicationStatus, GrantCategory


class FixedRandom:
    def __init__(self, value: float):
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


def _draft(grant_id: str, user_id: str, referral_name=None) -> ApplicationRecord:
    return ApplicationRecord(
        grant_id=grant_id,
        user_id=user_id,
        full_name="Applicant",
        email="a@example.com",
        phone="1",
        address="Street",
        reason_for_applying="Reason",
        referral_name=referral_name,
    )


class SubmitApplicationTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        seed_reference_data(self.db)
        self.grant = self.db.get_grants_by_category(GrantCategory.EDUCATION)[0]
        winner = self.db.upsert_user(
            UserRecord(id="winner", first_name="Jane", last_name="Smith")
        )
        application = self.db.create_application(_draft(self.grant.id, winner.id))
        self.db.create_grant_award(
            GrantAwardRecord(
                grant_id=self.grant.id,
                application_id=application.id,
                user_id=winner.id,
                amount=Decimal("30000"),
                currency="EUR",
            )
        )

    def test_matching_referral_qualifies_without_draw(self):
        rng = FixedRandom(0.0)
        result = submit_application(
            self.db, _draft(self.grant.id, "u1", referral_name="Jane Smith"), rng
        )
        self.assertTrue(result.qualified)
        self.assertEqual(result.message, REFERRAL_QUALIFIED_MESSAGE)
        self.assertTrue(result.application.has_referral)
        self.assertTrue(result.application.auto_qualified)
        self.assertEqual(result.application.status, ApplicationStatus.QUALIFIED)
        self.assertEqual(rng.calls, 0)

    def test_unmatched_referral_falls_back_to_draw(self):
        rng = FixedRandom(0.1)
        result = submit_application(
            self.db, _draft(self.grant.id, "u1", referral_name="Nobody Known"), rng
        )
        self.assertFalse(result.qualified)
        self.assertFalse(result.application.has_referral)
        self.assertEqual(result.application.status, ApplicationStatus.NOT_QUALIFIED)
        self.assertEqual(result.message, NOT_QUALIFIED_MESSAGE)
        self.assertEqual(rng.calls, 1)

    def test_blank_referral_is_ignored(self):
        self.assertIsNone(normalize_referral("   "))
        self.assertEqual(normalize_referral(" Jane "), "Jane")
        result = submit_application(
            self.db, _draft(self.grant.id, "u1", referral_name="  "), FixedRandom(0.5)
        )
        self.assertTrue(result.qualified)
        self.assertFalse(result.application.has_referral)

    def test_duplicate_submission_leaves_single_record(self):
        submit_application(self.db, _draft(self.grant.id, "u1"), FixedRandom(0.9))
        with self.assertRaises(DuplicateApplicationError):
            submit_application(self.db, _draft(self.grant.id, "u1"), FixedRandom(0.9))
        self.assertEqual(len(self.db.get_applications_by_user("u1")), 1)

    def test_storage_rejects_duplicates_directly(self):
        self.db.create_application(_draft(self.grant.id, "u1"))
        with self.assertRaises(DuplicateApplicationError):
            self.db.create_application(_draft(self.grant.id, "u1"))

    def test_unknown_grant(self):
        with self.assertRaises(NotFoundError):
            submit_application(self.db, _draft("missing", "u1"), FixedRandom(0.9))
        self.assertEqual(self.db.get_applications_by_user("u1"), [])

    def test_available_spots_unchanged(self):
        before = self.db.get_grant_by_id(self.grant.id).available_spots
        submit_application(self.db, _draft(self.grant.id, "u1"), FixedRandom(0.9))
        self.assertEqual(self.db.get_grant_by_id(self.grant.id).available_spots, before)

    def test_qualification_rate_is_roughly_seventy_percent(self):
        rng = random.Random(1234)
        trials = 2000
        qualified = sum(
            submit_application(self.db, _draft(self.grant.id, f"user-{i}"), rng).qualified
            for i in range(trials)
        )
        self.assertGreater(qualified / trials, 0.65)
        self.assertLess(qualified / trials, 0.75)


class SuccessRateTests(unittest.TestCase):
    def test_success_rate_rounding(self):
        self.assertEqual(compute_success_rate(0, 0), 0)
        self.assertEqual(compute_success_rate(1, 3), 33)
        self.assertEqual(compute_success_rate(2, 3), 67)
        self.assertEqual(compute_success_rate(1, 8), 13)
        self.assertEqual(compute_success_rate(4, 4), 100)

    def test_in_memory_stats(self):
        db = InMemoryDbClient()
        seed_reference_data(db)
        grant = db.get_all_grants()[0]
        db.create_application(_draft(grant.id, "a"))
        selected = db.create_application(_draft(grant.id, "b"))
        db.update_application(selected.id, status=ApplicationStatus.SELECTED)

        stats = db.get_grant_stats()
        self.assertEqual(stats.success_rate, 50)
        self.assertEqual(stats.total_countries, 14)
        self.assertEqual(stats.total_recipients, 0)
        self.assertEqual(stats.total_grants_distributed, 0.0)


if __name__ == "__main__":
    unittest.main()
