import uuid
from unittest.mock import patch

import pytest
from sqlalchemy import func, select

from career_canvas.exceptions import ProfileAlreadyExistsError
from career_canvas.models import Mentor
from career_canvas.schemas import TokenData
from career_canvas.services import ProfileService

EMAIL = "alex.doe@company.com"


def mentor_count(db_session, email=EMAIL):
    return db_session.scalar(select(func.count()).select_from(Mentor).where(Mentor.email == email))


class TestAuthentication:
    def test_create_requires_token(self, client, profile_payload):
        response = client.post("/api/createMentorProfile", json=profile_payload)

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "error": {"code": "AUTH_REQUIRED", "message": "Authentication required"},
        }

    def test_invalid_token_is_rejected(self, client, profile_payload):
        response = client.post(
            "/api/createMentorProfile", json=profile_payload, headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid or expired token"

    def test_delete_checks_token_before_id(self, client):
        response = client.delete("/api/deleteMentorProfile/not-a-uuid")

        assert response.status_code == 401


class TestCreateProfile:
    def test_create_sets_fresh_aggregates(self, client, auth_headers, profile_payload):
        response = client.post("/api/createMentorProfile", json=profile_payload, headers=auth_headers())

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Mentor profile created successfully"
        mentor = body["data"]
        assert body["mentorId"] == mentor["id"]
        assert mentor["email"] == EMAIL
        assert mentor["rating"] == 5.0
        assert mentor["menteeCount"] == 0
        assert mentor["availability"] == "limited"
        assert mentor["skills"] == ["Python", "System Design"]
        assert mentor["mentorshipHistory"] == {
            "totalMentees": 0,
            "completedSessions": 0,
            "averageRating": 5.0,
            "specializations": ["career-growth", "technical-skills"],
        }
        assert mentor["lastActive"] is not None

    def test_name_falls_back_to_token(self, client, auth_headers, profile_payload):
        del profile_payload["name"]

        response = client.post(
            "/api/createMentorProfile", json=profile_payload, headers=auth_headers(name="Token Name")
        )

        assert response.status_code == 201
        assert response.json()["data"]["name"] == "Token Name"

    def test_skills_accept_comma_separated_string(self, client, auth_headers, profile_payload):
        profile_payload["skills"] = "Go, Rust,,"

        response = client.post("/api/createMentorProfile", json=profile_payload, headers=auth_headers())

        assert response.json()["data"]["skills"] == ["Go", "Rust"]

    def test_duplicate_profile_conflicts(self, client, auth_headers, profile_payload, db_session):
        headers = auth_headers()
        client.post("/api/createMentorProfile", json=profile_payload, headers=headers)

        response = client.post("/api/createMentorProfile", json=profile_payload, headers=headers)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"
        assert mentor_count(db_session) == 1

    def test_missing_required_fields(self, client, auth_headers, profile_payload):
        del profile_payload["skills"]
        profile_payload["title"] = "   "

        response = client.post("/api/createMentorProfile", json=profile_payload, headers=auth_headers())

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert sorted(error["details"]["missingFields"]) == ["skills", "title"]

    def test_bio_length_is_limited(self, client, auth_headers, profile_payload):
        profile_payload["bio"] = "x" * 1001

        response = client.post("/api/createMentorProfile", json=profile_payload, headers=auth_headers())

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_unknown_availability_is_rejected(self, client, auth_headers, profile_payload):
        profile_payload["availability"] = "sometimes"

        response = client.post("/api/createMentorProfile", json=profile_payload, headers=auth_headers())

        assert response.status_code == 400

    def test_experience_above_searchable_range_is_rejected(self, client, auth_headers, profile_payload, db_session):
        profile_payload["experience"] = 60

        response = client.post("/api/createMentorProfile", json=profile_payload, headers=auth_headers())

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert mentor_count(db_session) == 0

    def test_top_of_experience_range_stays_listable(self, client, auth_headers, profile_payload):
        profile_payload["experience"] = 50
        client.post("/api/createMentorProfile", json=profile_payload, headers=auth_headers())

        body = client.get("/api/mentors", params={"userEmail": EMAIL}).json()

        assert body["total"] == 1
        assert body["mentors"][0]["experience"] == 50

    def test_lost_insert_race_is_a_conflict(self, db_session, profile_payload):
        user = TokenData(id=str(uuid.uuid4()), email=EMAIL, name="Alex Doe")
        service = ProfileService(db_session)
        service.create_mentor(user, profile_payload)

        with patch.object(ProfileService, "get_profile", return_value=None):
            with pytest.raises(ProfileAlreadyExistsError):
                service.create_mentor(user, profile_payload)

        assert mentor_count(db_session) == 1


class TestUpdateProfile:
    def test_update_without_profile_is_not_found(self, client, auth_headers, profile_payload):
        response = client.put("/api/createMentorProfile", json=profile_payload, headers=auth_headers())

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Cannot update: mentor profile not found"

    def test_update_keeps_aggregates_and_omitted_fields(self, client, auth_headers, profile_payload, db_session):
        headers = auth_headers()
        created = client.post("/api/createMentorProfile", json=profile_payload, headers=headers).json()
        mentor = db_session.get(Mentor, created["mentorId"])
        mentor.rating = 4.2
        mentor.mentee_count = 7
        mentor.mentorship_history = {"totalMentees": 9, "completedSessions": 40, "averageRating": 4.3, "specializations": []}
        db_session.commit()

        update = {
            "title": "Principal Engineer",
            "department": "Engineering",
            "bio": "Now leading the platform group.",
            "skills": ["Python", "Leadership"],
        }
        response = client.put("/api/createMentorProfile", json=update, headers=headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == created["mentorId"]
        assert data["title"] == "Principal Engineer"
        assert data["skills"] == ["Python", "Leadership"]
        assert data["name"] == "Alex Doe"
        assert data["rating"] == 4.2
        assert data["menteeCount"] == 7
        assert data["mentorshipHistory"]["completedSessions"] == 40
        assert data["experience"] == 10
        assert data["availability"] == "limited"
        assert data["interests"] == ["career-growth", "technical-skills"]
        assert mentor_count(db_session) == 1

    def test_post_with_update_flag(self, client, auth_headers, profile_payload):
        headers = auth_headers()
        client.post("/api/createMentorProfile", json=profile_payload, headers=headers)
        profile_payload["experience"] = 12

        response = client.post(
            "/api/createMentorProfile", params={"update": "true"}, json=profile_payload, headers=headers
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Mentor profile updated successfully"
        assert response.json()["data"]["experience"] == 12

    def test_update_rejects_experience_above_range(self, client, auth_headers, profile_payload):
        headers = auth_headers()
        client.post("/api/createMentorProfile", json=profile_payload, headers=headers)
        profile_payload["experience"] = 60

        response = client.put("/api/updateMentorProfile", json=profile_payload, headers=headers)

        assert response.status_code == 400
        listed = client.get("/api/mentors", params={"userEmail": EMAIL}).json()["mentors"]
        assert [m["experience"] for m in listed] == [10]

    def test_update_alias_route(self, client, auth_headers, profile_payload):
        headers = auth_headers()
        client.post("/api/createMentorProfile", json=profile_payload, headers=headers)
        profile_payload["skills"] = ["Kotlin"]

        response = client.put("/api/updateMentorProfile", json=profile_payload, headers=headers)

        assert response.status_code == 200
        assert response.json()["data"]["skills"] == ["Kotlin"]


class TestDeleteProfile:
    """Ownership checks run in order: token, id shape, existence, owner"""
    @pytest.fixture
    def mentor_id(self, client, auth_headers, profile_payload):
        return client.post("/api/createMentorProfile", json=profile_payload, headers=auth_headers()).json()["mentorId"]

    def test_malformed_id(self, client, auth_headers):
        response = client.delete("/api/deleteMentorProfile/12345", headers=auth_headers())

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid mentor ID format"

    def test_unknown_id(self, client, auth_headers):
        response = client.delete(f"/api/deleteMentorProfile/{uuid.uuid4()}", headers=auth_headers())

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Mentor profile not found"

    def test_other_users_profile_is_forbidden(self, client, auth_headers, mentor_id, db_session):
        response = client.delete(
            f"/api/deleteMentorProfile/{mentor_id}", headers=auth_headers(email="someone.else@company.com")
        )

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "You can only delete your own mentor profile"
        assert db_session.get(Mentor, mentor_id) is not None

    def test_owner_deletes_profile(self, client, auth_headers, mentor_id, db_session):
        response = client.delete(f"/api/deleteMentorProfile/{mentor_id}", headers=auth_headers())

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Mentor profile deleted successfully",
            "deletedCount": 1,
        }
        assert mentor_count(db_session) == 0
        assert client.get("/api/mentors", params={"userEmail": EMAIL}).json()["total"] == 0
