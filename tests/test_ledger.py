"""
Tests for the interest ledger.
"""

import pytest
from pymongo.errors import DuplicateKeyError

import ledger
from errors import ConflictError


def test_first_swipe_inserts_one_record(db, make_user, make_project):
    alice = make_user("Alice")
    project_id = make_project()

    record, previous = ledger.record_interest(db, alice, project_id, True)

    assert previous is None
    assert record["interested"] is True
    assert db["interest"].count_documents({}) == 1


def test_reswipe_overwrites_instead_of_appending(db, make_user, make_project):
    alice = make_user("Alice")
    project_id = make_project()

    ledger.record_interest(db, alice, project_id, True)
    ledger.record_interest(db, alice, project_id, True)
    record, previous = ledger.record_interest(db, alice, project_id, False)

    assert previous is True
    assert record["interested"] is False
    assert db["interest"].count_documents({"userId": alice, "projectId": project_id}) == 1


def test_reswipe_keeps_first_created_at(db, make_user, make_project):
    alice = make_user("Alice")
    project_id = make_project()

    first, _ = ledger.record_interest(db, alice, project_id, False)
    second, _ = ledger.record_interest(db, alice, project_id, True)

    assert second["_id"] == first["_id"]
    assert second["createdAt"] == first["createdAt"]


def test_interested_users_in_first_recorded_order(db, make_user, make_project):
    alice, bob, carol, dave = (make_user(n) for n in ("Alice", "Bob", "Carol", "Dave"))
    project_id = make_project()

    ledger.record_interest(db, bob, project_id, True)
    ledger.record_interest(db, alice, project_id, True)
    ledger.record_interest(db, carol, project_id, False)
    ledger.record_interest(db, dave, project_id, True)

    assert ledger.interested_users(db, project_id, exclude_user_id=dave) == [bob, alice]


def test_revoked_interest_is_not_a_candidate(db, make_user, make_project):
    alice, bob = make_user("Alice"), make_user("Bob")
    project_id = make_project()

    ledger.record_interest(db, alice, project_id, True)
    ledger.record_interest(db, alice, project_id, False)

    assert ledger.interested_users(db, project_id, exclude_user_id=bob) == []


def test_swiped_project_ids_and_counts(db, make_user, make_project):
    alice = make_user("Alice")
    first, second = make_project(title="First"), make_project(title="Second")

    ledger.record_interest(db, alice, first, True)
    ledger.record_interest(db, alice, second, False)

    assert sorted(ledger.swiped_project_ids(db, alice)) == sorted([first, second])
    assert ledger.count_for_user(db, alice) == 2
    assert ledger.count_for_user(db, alice, interested=True) == 1


class FlakyInterests:
    """Wraps the interest collection; the first `failures` upserts lose a unique-index race."""

    def __init__(self, collection, failures: int):
        self.collection = collection
        self.failures = failures
        self.upserts = 0

    def find_one_and_update(self, *args, **kwargs):
        self.upserts += 1
        if self.upserts <= self.failures:
            raise DuplicateKeyError("E11000 duplicate key error")
        return self.collection.find_one_and_update(*args, **kwargs)

    def find_one(self, *args, **kwargs):
        return self.collection.find_one(*args, **kwargs)


class FlakyDatabase:
    def __init__(self, db, failures: int):
        self.interests = FlakyInterests(db["interest"], failures)

    def __getitem__(self, name):
        assert name == "interest"
        return self.interests


def test_upsert_race_is_retried_once(db, make_user, make_project):
    alice = make_user("Alice")
    project_id = make_project()
    flaky = FlakyDatabase(db, failures=1)

    record, previous = ledger.record_interest(flaky, alice, project_id, True)

    assert flaky.interests.upserts == 2
    assert record["interested"] is True
    assert previous is None


def test_repeated_upsert_race_raises_conflict(db, make_user, make_project):
    alice = make_user("Alice")
    project_id = make_project()
    flaky = FlakyDatabase(db, failures=2)

    with pytest.raises(ConflictError) as exc_info:
        ledger.record_interest(flaky, alice, project_id, True)
    assert exc_info.value.status_code == 409
