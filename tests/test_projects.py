"""
Tests for the project catalog and its counters.
"""

import pytest

import counters
import projects
from errors import ForbiddenError, LimitExceededError, NotFoundError
from schemas import ProjectCreate, ProjectUpdate

PAYLOAD = {
    "title": "Open Source Mentoring Hub",
    "description": "Connect first-time contributors with maintainers who have beginner-friendly issues to share.",
    "techStack": ["Python", "Django"],
    "category": "fullstack",
    "difficulty": "beginner",
    "features": ["Issue board"],
    "requiredSkills": ["Python"],
}


def test_create_sets_owner_and_counters(db, make_user):
    alice = make_user("Alice")

    project = projects.create_project(db, alice, ProjectCreate(**PAYLOAD))

    assert project["createdBy"] == alice
    assert project["isActive"] is True
    assert project["isPredefined"] is False
    assert (project["viewCount"], project["interestCount"], project["matchCount"]) == (0, 0, 0)


def test_active_project_cap(db, make_user):
    alice = make_user("Alice")
    for _ in range(5):
        projects.create_project(db, alice, ProjectCreate(**PAYLOAD))

    with pytest.raises(LimitExceededError):
        projects.create_project(db, alice, ProjectCreate(**PAYLOAD))


def test_archiving_frees_a_slot(db, make_user):
    alice = make_user("Alice")
    created = [projects.create_project(db, alice, ProjectCreate(**PAYLOAD)) for _ in range(5)]

    projects.archive_project(db, created[0]["id"], alice)

    assert projects.get_project(db, created[0]["id"])["status"] == "archived"
    assert projects.create_project(db, alice, ProjectCreate(**PAYLOAD))["isActive"] is True


def test_view_counts_only_non_owner_fetches(db, make_user, make_project):
    alice, bob = make_user("Alice"), make_user("Bob")
    project_id = make_project(owner=alice)

    projects.view_project(db, project_id, alice)
    viewed = projects.view_project(db, project_id, bob)

    assert viewed["viewCount"] == 1


def test_inactive_project_hidden_from_non_owner(db, make_user, make_project):
    alice, bob = make_user("Alice"), make_user("Bob")
    project_id = make_project(owner=alice, isActive=False, status="archived")

    assert projects.view_project(db, project_id, alice)["id"] == project_id
    with pytest.raises(NotFoundError):
        projects.view_project(db, project_id, bob)
    with pytest.raises(NotFoundError):
        projects.get_active_project(db, project_id)


def test_only_owner_may_update_or_delete(db, make_user, make_project):
    alice, bob = make_user("Alice"), make_user("Bob")
    project_id = make_project(owner=alice)

    with pytest.raises(ForbiddenError):
        projects.update_project(db, project_id, bob, ProjectUpdate(status="completed"))
    with pytest.raises(ForbiddenError):
        projects.archive_project(db, project_id, bob)

    updated = projects.update_project(db, project_id, alice, ProjectUpdate(status="in-progress", teamSize=4))
    assert updated["status"] == "in-progress"
    assert updated["teamSize"] == 4
    assert updated["isActive"] is True


def test_archiving_by_status_deactivates(db, make_user, make_project):
    alice = make_user("Alice")
    project_id = make_project(owner=alice)

    updated = projects.update_project(db, project_id, alice, ProjectUpdate(status="archived"))

    assert updated["isActive"] is False


def test_counters_increment_atomically(db, make_project):
    project_id = make_project()

    counters.increment_view_count(db, project_id)
    counters.increment_interest_count(db, project_id)
    counters.increment_interest_count(db, project_id)
    counters.increment_match_count(db, project_id)

    project = projects.get_project(db, project_id)
    assert (project["viewCount"], project["interestCount"], project["matchCount"]) == (1, 2, 1)


def test_owner_stats(db, make_user, make_project):
    alice, bob = make_user("Alice"), make_user("Bob")
    project_id = make_project(owner=alice, viewCount=4, interestCount=2, matchCount=1)
    make_project(owner=alice, title="Draft idea", status="draft")
    db["interest"].insert_one({"userId": bob, "projectId": project_id, "interested": True})

    stats = projects.owner_stats(db, alice)

    assert stats["total"] == 2
    assert stats["active"] == 1
    assert stats["draft"] == 1
    assert stats["totalViews"] == 4
    assert stats["conversionRates"] == {"viewToInterest": "50.0", "interestToMatch": "50.0"}
    assert stats["popularProjects"][0]["id"] == project_id
    assert stats["recentActivity"][0]["userName"] == "Bob"


def test_view_goes_through_view_counter(db, make_user, make_project, monkeypatch):
    bob = make_user("Bob")
    project_id = make_project()
    seen = []

    def counting(database, pid):
        seen.append(pid)
        return counters.increment_view_count(database, pid)

    monkeypatch.setattr("projects.increment_view_count", counting)

    viewed = projects.view_project(db, project_id, bob)

    assert seen == [project_id]
    assert viewed["viewCount"] == 1
