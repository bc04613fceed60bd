from sqlalchemy import func, select

from career_canvas.models import MentorshipPreferences

USER_ID = "7b0e5a7c-2f0d-4c3e-9a51-6f2d9b1e0c11"


def preferences_payload(**overrides):
    payload = {
        "mentorshipType": "career-guidance",
        "interests": ["leadership", "career-growth"],
        "preferredDepartments": ["Engineering"],
        "goals": "Move into a staff role",
        "preferences": {"careerLevels": ["senior"], "meetingFrequency": "weekly"},
        "availability": {"timezone": "Europe/Berlin", "preferredTimes": ["mornings"]},
    }
    payload.update(overrides)
    return payload


class TestSubmitPreferences:
    def test_mentorship_type_is_required(self, client, auth_headers):
        payload = preferences_payload()
        del payload["mentorshipType"]

        response = client.post("/api/submitMentorshipPreferences", json=payload, headers=auth_headers(user_id=USER_ID))

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Validation failed: mentorshipType is required"

    def test_requires_token(self, client):
        response = client.post("/api/submitMentorshipPreferences", json=preferences_payload())

        assert response.status_code == 401

    def test_submit_then_read_back_with_defaults(self, client, auth_headers):
        headers = auth_headers(user_id=USER_ID)

        saved = client.post("/api/submitMentorshipPreferences", json=preferences_payload(), headers=headers)

        assert saved.status_code == 201
        assert saved.json()["message"] == "Preferences saved successfully"
        prefs = client.get("/api/getMentorshipPreferences", headers=headers).json()["preferences"]
        assert prefs["id"] == saved.json()["preferenceId"]
        assert prefs["userId"] == USER_ID
        assert prefs["mentorshipType"] == "career-guidance"
        assert prefs["sessionFrequency"] == "bi-weekly"
        assert prefs["availabilityType"] == "flexible"
        assert prefs["isActive"] is True
        assert prefs["preferences"]["meetingFrequency"] == "weekly"
        assert prefs["preferences"]["communicationStyle"] == "casual"
        assert prefs["preferences"]["remotePreference"] == "hybrid"
        assert prefs["availability"]["timezone"] == "Europe/Berlin"
        assert prefs["availability"]["startDate"]

    def test_resubmit_replaces_the_row(self, client, auth_headers, db_session):
        headers = auth_headers(user_id=USER_ID)
        first = client.post("/api/submitMentorshipPreferences", json=preferences_payload(), headers=headers).json()

        second = client.post(
            "/api/submitMentorshipPreferences",
            json={"mentorshipType": "technical", "interests": ["design"]},
            headers=headers,
        ).json()

        assert second["preferenceId"] == first["preferenceId"]
        assert db_session.scalar(select(func.count()).select_from(MentorshipPreferences)) == 1
        prefs = client.get("/api/getMentorshipPreferences", headers=headers).json()["preferences"]
        assert prefs["mentorshipType"] == "technical"
        assert prefs["interests"] == ["design"]
        # omitted fields are reset, not merged
        assert prefs["preferredDepartments"] == []
        assert prefs["goals"] == ""

    def test_get_without_preferences(self, client, auth_headers):
        response = client.get("/api/getMentorshipPreferences", headers=auth_headers(user_id=USER_ID))

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "No preferences found for user"


class TestRecommendedMentors:
    """Ranking by interests shared with the caller's saved preferences"""
    def test_requires_token(self, client, seeded_mentors):
        assert client.get("/api/mentors/recommended").status_code == 401

    def test_starter_interests_without_preferences(self, client, auth_headers, seeded_mentors):
        body = client.get("/api/mentors/recommended", headers=auth_headers(user_id=USER_ID)).json()

        assert body["requesterInterests"] == ["career-growth", "technical-skills", "leadership"]
        assert body["mentors"][0]["name"] == "Sarah Johnson"
        assert body["mentors"][0]["relevanceScore"] == 3
        keys = [(m["relevanceScore"], m["rating"]) for m in body["mentors"]]
        assert keys == sorted(keys, reverse=True)

    def test_ranks_by_saved_interests(self, client, auth_headers, seeded_mentors):
        headers = auth_headers(user_id=USER_ID)
        client.post(
            "/api/submitMentorshipPreferences",
            json=preferences_payload(interests=["cloud-technologies", "technical-architecture"]),
            headers=headers,
        )

        body = client.get("/api/mentors/recommended", headers=headers).json()

        assert body["mentors"][0]["name"] == "David Park"
        assert body["mentors"][0]["relevanceScore"] == 2
        assert all(m["relevanceScore"] == 0 for m in body["mentors"][1:])

    def test_filters_apply_before_ranking(self, client, auth_headers, seeded_mentors):
        body = client.get(
            "/api/mentors/recommended", params={"departments": "Sales"}, headers=auth_headers(user_id=USER_ID)
        ).json()

        assert [m["name"] for m in body["mentors"]] == ["Carlos Martinez"]
        assert body["mentors"][0]["relevanceScore"] == 1
        assert body["filters"]["departments"] == ["Sales"]
