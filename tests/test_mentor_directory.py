from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from career_canvas.config import get_settings
from career_canvas.core.query_builder import parse_filter_params
from career_canvas.exceptions import InternalError
from career_canvas.models import Mentor
from career_canvas.services import MentorDirectoryService
from career_canvas.utils.response_enricher import ResponseEnricher


def make_mentor(i, **overrides):
    fields = dict(
        email=f"mentor{i:03d}@company.com",
        name=f"Mentor {i:03d}",
        title="Engineer",
        department="Engineering",
        bio="Happy to help.",
        experience=5,
        availability="available",
        rating=4.0,
    )
    fields.update(overrides)
    mentor = Mentor(**fields)
    mentor.skills = ["Python"]
    mentor.interests = ["career-growth"]
    return mentor


class TestListMentors:
    """GET /api/mentors against the sample directory"""
    def test_default_listing_is_sorted_by_rating(self, client, seeded_mentors):
        response = client.get("/api/mentors")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["total"] == 10
        ratings = [m["rating"] for m in body["mentors"]]
        assert ratings == sorted(ratings, reverse=True)
        assert body["filters"]["sortBy"] == "rating"
        assert body["filters"]["sortOrder"] == "desc"

    def test_records_are_camel_case(self, client, seeded_mentors):
        mentor = client.get("/api/mentors").json()["mentors"][0]

        for key in ("menteeCount", "lastActive", "mentorshipHistory", "createdAt", "skills", "interests"):
            assert key in mentor
        assert "totalMentees" in mentor["mentorshipHistory"]

    def test_department_and_rating_filters(self, client, add_samples):
        add_samples("Sarah Johnson", "Michael Chen")

        response = client.get("/api/mentors", params={"departments": "Engineering", "minRating": "4.5"})

        body = response.json()
        assert [m["name"] for m in body["mentors"]] == ["Sarah Johnson"]
        assert body["total"] == 1
        assert body["filters"]["departments"] == ["Engineering"]
        assert body["filters"]["rating"] == {"min": 4.5, "max": 5.0}

    def test_search_matches_bio_and_skills(self, client, seeded_mentors):
        body = client.get("/api/mentors", params={"search": "cloud"}).json()

        names = [m["name"] for m in body["mentors"]]
        assert "David Park" in names
        for mentor in body["mentors"]:
            haystack = " ".join([mentor["name"], mentor["title"], mentor["department"], mentor["bio"], *mentor["skills"]])
            assert "cloud" in haystack.lower()

    def test_search_is_case_insensitive_across_skills(self, client, seeded_mentors):
        body = client.get("/api/mentors", params={"search": "REACT"}).json()

        assert [m["name"] for m in body["mentors"]] == ["Sarah Johnson"]

    def test_search_treats_wildcards_literally(self, client, seeded_mentors):
        body = client.get("/api/mentors", params={"search": "_"}).json()

        assert body["total"] == 0
        assert body["mentors"] == []

    def test_skills_filter_matches_any_requested_skill(self, client, seeded_mentors):
        body = client.get("/api/mentors", params={"skills": "Kubernetes,Figma"}).json()

        assert sorted(m["name"] for m in body["mentors"]) == ["Amanda Foster", "David Park", "Priya Patel"]

    def test_unknown_availability_tokens_are_ignored(self, client, seeded_mentors):
        body = client.get("/api/mentors", params={"availability": "busy,on-vacation"}).json()

        assert [m["name"] for m in body["mentors"]] == ["David Park"]
        assert body["filters"]["availability"] == ["busy"]

    def test_malformed_numbers_fall_back_to_defaults(self, client, seeded_mentors):
        response = client.get("/api/mentors", params={"minRating": "abc", "maxExperience": "many"})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 10
        assert body["filters"]["rating"] == {"min": 0.0, "max": 5.0}
        assert body["filters"]["experience"] == {"min": 0, "max": 50}

    def test_experience_range(self, client, seeded_mentors):
        body = client.get("/api/mentors", params={"minExperience": "12", "maxExperience": "15"}).json()

        assert sorted(m["name"] for m in body["mentors"]) == ["David Park", "James Wilson", "Jessica Rodriguez"]

    def test_user_email_returns_own_profile(self, client, seeded_mentors):
        body = client.get("/api/mentors", params={"userEmail": "priya.patel@company.com"}).json()

        assert [m["name"] for m in body["mentors"]] == ["Priya Patel"]

    def test_sort_by_name_ascending(self, client, seeded_mentors):
        body = client.get("/api/mentors", params={"sortBy": "name", "sortOrder": "asc"}).json()

        names = [m["name"] for m in body["mentors"]]
        assert names == sorted(names)
        assert names[0] == "Amanda Foster"

    def test_ties_are_broken_by_id(self, client, seeded_mentors):
        body = client.get("/api/mentors").json()

        top = [m for m in body["mentors"] if m["rating"] == 4.9]
        assert [m["id"] for m in top] == sorted(m["id"] for m in top)

    def test_listing_is_capped(self, client, db_session):
        db_session.add_all([make_mentor(i) for i in range(105)])
        db_session.commit()

        body = client.get("/api/mentors", params={"sortBy": "name", "sortOrder": "asc"}).json()

        assert body["total"] == 100
        assert len(body["mentors"]) == 100
        assert body["mentors"][0]["name"] == "Mentor 000"

    def test_empty_directory(self, client):
        body = client.get("/api/mentors").json()

        assert body["success"] is True
        assert body["mentors"] == []
        assert body["total"] == 0


class TestLastActive:
    def test_missing_last_active_is_filled_in(self, client, db_session):
        mentor = make_mentor(1, last_active=None)
        db_session.add(mentor)
        db_session.commit()

        record = client.get("/api/mentors").json()["mentors"][0]

        filled = datetime.fromisoformat(record["lastActive"].replace("Z", "+00:00"))
        now = datetime.now(timezone.utc)
        assert now - timedelta(days=7) <= filled <= now
        db_session.refresh(mentor)
        assert mentor.last_active is None

    def test_synthetic_value_depends_only_on_id(self):
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)

        first = ResponseEnricher.synthetic_last_active("abc", now)
        second = ResponseEnricher.synthetic_last_active("abc", now)

        assert first == second
        assert now - timedelta(days=7) <= first <= now

    def test_recorded_last_active_is_kept(self, db_session):
        seen = datetime(2024, 5, 30, 12, 0, tzinfo=timezone.utc)
        mentor = make_mentor(2, last_active=seen)
        db_session.add(mentor)
        db_session.commit()

        record = ResponseEnricher.serialize_mentor(mentor)

        assert record["lastActive"] == seen

    def test_sort_by_last_active_follows_displayed_values(self, client, db_session):
        stale = make_mentor(1, last_active=datetime.now(timezone.utc) - timedelta(days=30))
        unrecorded = make_mentor(2, last_active=None)
        db_session.add_all([stale, unrecorded])
        db_session.commit()

        body = client.get("/api/mentors", params={"sortBy": "lastActive", "sortOrder": "desc"}).json()

        # the filled-in value is within the last week, so it outranks a month-old one
        assert [m["email"] for m in body["mentors"]] == [unrecorded.email, stale.email]
        shown = [m["lastActive"] for m in body["mentors"]]
        parsed = [datetime.fromisoformat(v.replace("Z", "+00:00")) for v in shown]
        assert parsed == sorted(parsed, reverse=True)


class TestDirectoryService:
    def test_database_failure_raises_internal_error(self):
        db = MagicMock()
        db.scalars.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

        with pytest.raises(InternalError) as exc_info:
            MentorDirectoryService(db).list_mentors(parse_filter_params({}))

        assert exc_info.value.code == "INTERNAL_ERROR"
        assert "connection refused" in exc_info.value.details
        db.rollback.assert_called_once()


class TestSeedEndpoint:
    def test_seed_replaces_directory(self, client, db_session):
        db_session.add(make_mentor(1))
        db_session.commit()

        response = client.post("/api/mentors/seed")

        assert response.status_code == 200
        body = response.json()
        assert body["insertedCount"] == 10
        assert body["message"] == "Mentors seeded successfully"
        assert {"name": "Sarah Johnson", "department": "Engineering", "title": "Senior Software Engineer"} in body["mentors"]
        assert client.get("/api/mentors").json()["total"] == 10

    def test_seed_is_forbidden_when_disabled(self, client, monkeypatch):
        monkeypatch.setattr(get_settings(), "ALLOW_SEEDING", False)

        response = client.post("/api/mentors/seed")

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"


class TestServiceEndpoints:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy", "database": "reachable"}

    def test_connection_lists_tables(self, client):
        body = client.get("/api/testConnection").json()

        assert body["success"] is True
        assert "mentors" in body["collections"]
        assert body["collectionsCount"] == len(body["collections"])
