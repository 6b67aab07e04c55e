import pytest

from hospital_core.core.exceptions import ValidationError, BusinessLogicError, InvalidInputError
from hospital_core.domain.settings.service import SettingsService

pytestmark = [pytest.mark.settings, pytest.mark.integration]

API = "/api/v1/settings"


@pytest.fixture
def settings_service(db_session) -> SettingsService:
    return SettingsService(db_session)


@pytest.fixture
def valid_payload() -> dict:
    return {
        "business_start": "08:00",
        "business_end": "18:00",
        "lunch_start": "12:30",
        "lunch_end": "13:30",
        "token_prefix": "OP",
        "max_tokens_per_session": 60,
        "session_templates": [
            {"name": "Morning", "short_code": "M", "start_time": "08:00", "end_time": "12:30", "max_tokens": 60},
            {"name": "Afternoon", "short_code": "A", "start_time": "13:30", "end_time": "18:00"},
            {"name": "Evening", "short_code": "N", "start_time": "16:00", "end_time": "18:00", "is_active": False},
        ],
    }


class TestSettingsService:
    """Test stored hospital settings"""

    def test_defaults_created_on_first_read(self, settings_service):
        settings = settings_service.get_settings()
        assert settings.business_start == "09:00"
        assert settings.token_prefix == "T"
        assert [t.short_code for t in settings.session_templates] == ["S1", "S2", "S3"]

    def test_defaults_pass_validation(self, settings_service):
        settings = settings_service.get_settings()
        payload = {
            "business_start": settings.business_start,
            "business_end": settings.business_end,
            "lunch_start": settings.lunch_start,
            "lunch_end": settings.lunch_end,
            "session_templates": [
                {
                    "name": t.name,
                    "short_code": t.short_code,
                    "start_time": t.start_time,
                    "end_time": t.end_time,
                    "is_active": t.is_active,
                }
                for t in settings.session_templates
            ],
        }
        assert settings_service.validate(payload) == []

    def test_save_rejects_with_all_violations(self, settings_service, valid_payload):
        valid_payload["session_templates"][1]["start_time"] = "12:00"
        with pytest.raises(ValidationError) as exc_info:
            settings_service.save_settings(valid_payload)

        violations = exc_info.value.details["violations"]
        assert exc_info.value.message == violations[0]
        assert violations == [
            'Session "Afternoon": Cannot overlap lunch break (12:30 - 13:30).',
            'Sessions "Morning" and "Afternoon" overlap.',
        ]
        assert settings_service.get_settings().business_start == "09:00"

    def test_save_replaces_templates(self, settings_service, valid_payload):
        saved = settings_service.save_settings(valid_payload)
        assert saved.token_prefix == "OP"
        assert [t.short_code for t in saved.session_templates] == ["M", "A", "N"]
        assert saved.session_templates[1].max_tokens == 60

        active = settings_service.get_active_templates()
        assert [t.short_code for t in active] == ["M", "A"]

    def test_inactive_session_outside_hours_rejected(self, settings_service, valid_payload):
        valid_payload["session_templates"][2]["end_time"] = "21:00"
        with pytest.raises(ValidationError) as exc_info:
            settings_service.save_settings(valid_payload)

        assert exc_info.value.details["violations"] == [
            'Session "Evening": Must be within Business Hours (08:00 - 18:00).'
        ]

    def test_single_digit_hours_stored_padded(self, settings_service, valid_payload):
        """Test that times are stored as HH:MM so listing orders by start"""
        valid_payload["business_start"] = "8:00"
        valid_payload["session_templates"] = [
            {"name": "Late", "short_code": "L", "start_time": "14:00", "end_time": "17:00"},
            {"name": "Early", "short_code": "E", "start_time": "8:00", "end_time": " 12:00 "},
        ]
        saved = settings_service.save_settings(valid_payload)

        assert saved.business_start == "08:00"
        assert [(t.start_time, t.end_time) for t in saved.session_templates] == [
            ("14:00", "17:00"), ("08:00", "12:00")
        ]
        assert [t.name for t in settings_service.get_active_templates()] == ["Early", "Late"]

    def test_format_token(self, settings_service):
        assert settings_service.format_token("S1", 1) == "TS1001"
        assert settings_service.format_token("S2", 27) == "TS2027"

    def test_format_token_limits(self, settings_service):
        with pytest.raises(InvalidInputError):
            settings_service.format_token("S1", 0)
        with pytest.raises(BusinessLogicError):
            settings_service.format_token("S2", 41)
        with pytest.raises(BusinessLogicError):
            settings_service.format_token("S3", 1)

    def test_preview_token(self, settings_service):
        assert settings_service.preview_token() == "TS1001"

    def test_preview_token_skips_inactive_sessions(self, settings_service, valid_payload):
        valid_payload["session_templates"][0]["is_active"] = False
        settings_service.save_settings(valid_payload)
        assert settings_service.preview_token() == "OPA001"


class TestSettingsEndpoints:
    """Test settings endpoints"""

    def test_get_settings(self, client):
        response = client.get(f"{API}/hospital")
        assert response.status_code == 200
        data = response.json()
        assert data["lunch_start"] == "13:00"
        assert len(data["session_templates"]) == 3

    def test_update_settings(self, client, valid_payload):
        response = client.put(f"{API}/hospital", json=valid_payload)
        assert response.status_code == 200
        assert response.json()["business_end"] == "18:00"

        templates = client.get(f"{API}/session-templates").json()
        assert [t["name"] for t in templates] == ["Morning", "Afternoon"]

    def test_update_settings_invalid(self, client, valid_payload):
        valid_payload["business_start"] = None
        response = client.put(f"{API}/hospital", json=valid_payload)

        assert response.status_code == 422
        body = response.json()
        assert body["message"] == "Hospital timings must be set before configuring sessions."
        assert body["details"]["violations"] == [body["message"]]

    def test_validate_does_not_save(self, client, valid_payload):
        valid_payload["session_templates"][0]["name"] = ""
        response = client.post(f"{API}/hospital/validate", json=valid_payload)

        assert response.status_code == 200
        assert response.json() == {
            "valid": False,
            "violations": ["Session #1: Name is required."],
        }
        assert client.get(f"{API}/hospital").json()["token_prefix"] == "T"

    def test_active_templates_default(self, client):
        templates = client.get(f"{API}/session-templates").json()
        assert [t["short_code"] for t in templates] == ["S1", "S2"]

    def test_token_preview(self, client):
        response = client.get(f"{API}/tokens/preview", params={"short_code": "S2", "sequence": 7})
        assert response.json() == {"token": "TS2007"}

    def test_token_for_inactive_session(self, client):
        response = client.get(f"{API}/tokens/preview", params={"short_code": "S3"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "BUSINESS_LOGIC_ERROR"
