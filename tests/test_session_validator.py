import pytest

from hospital_core.domain.settings.validator import (
    ScheduleConfig, SessionWindow, normalize_time, time_to_minutes, validate_sessions
)

pytestmark = [pytest.mark.unit, pytest.mark.settings]


def make_config(*sessions, **overrides):
    """Schedule with 09:00-17:00 business hours and a 13:00-14:00 lunch."""
    values = {
        "business_start": "09:00",
        "business_end": "17:00",
        "lunch_start": "13:00",
        "lunch_end": "14:00",
    }
    values.update(overrides)
    return ScheduleConfig(sessions=list(sessions), **values)


def session(name, start, end, code=None, active=True):
    return SessionWindow(
        name=name,
        short_code=code if code is not None else name[:2].upper(),
        start_time=start,
        end_time=end,
        is_active=active,
    )


class TestTimeParsing:
    """Test "HH:MM" conversion"""

    @pytest.mark.parametrize("value,expected", [
        ("00:00", 0),
        ("09:00", 540),
        ("9:30", 570),
        ("13:05", 785),
        ("23:59", 1439),
    ])
    def test_valid_times(self, value, expected):
        assert time_to_minutes(value) == expected

    @pytest.mark.parametrize("value", [None, "", "9am", "24:00", "12:60", "12-30", "1230"])
    def test_invalid_times(self, value):
        assert time_to_minutes(value) is None

    @pytest.mark.parametrize("value,expected", [
        ("8:00", "08:00"),
        (" 09:30 ", "09:30"),
        ("23:59", "23:59"),
        ("7-00", None),
    ])
    def test_normalize_time(self, value, expected):
        assert normalize_time(value) == expected


class TestBusinessHours:
    """Test the business hours precondition"""

    def test_missing_business_hours_short_circuits(self):
        """Test that missing timings yield exactly one violation"""
        config = make_config(
            session("Morning", "08:00", "07:00"),
            business_start=None,
        )
        assert validate_sessions(config) == [
            "Hospital timings must be set before configuring sessions."
        ]

    def test_unparseable_business_hours(self):
        config = make_config(business_end="5pm")
        assert validate_sessions(config) == [
            "Hospital timings must be set before configuring sessions."
        ]


class TestLunchBreak:
    """Test lunch break checks"""

    def test_lunch_start_after_end(self):
        config = make_config(lunch_start="14:00", lunch_end="13:00")
        assert validate_sessions(config) == [
            "Invalid lunch break: must be within Business Hours and start before end."
        ]

    def test_lunch_outside_business_hours(self):
        config = make_config(lunch_start="16:30", lunch_end="17:30")
        assert validate_sessions(config) == [
            "Invalid lunch break: must be within Business Hours and start before end."
        ]

    def test_single_lunch_bound_is_ignored(self):
        config = make_config(session("Morning", "09:00", "14:00"), lunch_end=None)
        assert validate_sessions(config) == []

    def test_invalid_lunch_skips_overlap_check(self):
        """Test that a reversed lunch window is not used for session overlap"""
        config = make_config(
            session("Morning", "09:00", "15:00"),
            lunch_start="14:00",
            lunch_end="13:00",
        )
        assert validate_sessions(config) == [
            "Invalid lunch break: must be within Business Hours and start before end."
        ]


class TestSessionRules:
    """Test per-session rules"""

    def test_default_schedule_is_valid(self):
        config = make_config(
            session("Morning", "09:00", "13:00", code="S1"),
            session("Afternoon", "14:00", "17:00", code="S2"),
            session("Evening", "17:00", "20:00", code="S3", active=False),
            business_end="20:00",
        )
        assert validate_sessions(config) == []

    def test_required_fields(self):
        config = make_config(
            session("Morning", "09:00", "13:00"),
            SessionWindow(name="  ", short_code="", start_time="14:00", end_time=None),
        )
        assert validate_sessions(config) == [
            "Session #2: Name is required.",
            "Session #2: Short code is required.",
            "Session #2: Start and end time are required.",
        ]

    def test_required_fields_checked_on_inactive_sessions(self):
        config = make_config(SessionWindow(name="Night", short_code="N", is_active=False))
        assert validate_sessions(config) == ["Session #1: Start and end time are required."]

    def test_start_must_precede_end(self):
        config = make_config(session("Morning", "11:00", "10:00"))
        assert validate_sessions(config) == [
            'Session "Morning": Start time must be before end time.'
        ]

    def test_zero_length_session(self):
        config = make_config(session("Blip", "10:00", "10:00"))
        assert validate_sessions(config) == [
            'Session "Blip": Start time must be before end time.'
        ]

    def test_session_outside_business_hours(self):
        config = make_config(session("Early", "08:30", "10:00"))
        assert validate_sessions(config) == [
            'Session "Early": Must be within Business Hours (09:00 - 17:00).'
        ]

    def test_session_overlapping_lunch(self):
        config = make_config(session("Midday", "12:00", "13:30"))
        assert validate_sessions(config) == [
            'Session "Midday": Cannot overlap lunch break (13:00 - 14:00).'
        ]

    def test_session_touching_lunch_is_allowed(self):
        config = make_config(
            session("Morning", "09:00", "13:00"),
            session("Afternoon", "14:00", "17:00"),
        )
        assert validate_sessions(config) == []

    def test_inactive_sessions_get_timing_rules(self):
        config = make_config(
            session("Morning", "09:00", "13:00"),
            session("Evening", "17:00", "20:00", active=False),
            session("Lunchtime", "12:30", "13:30", active=False),
        )
        assert validate_sessions(config) == [
            'Session "Evening": Must be within Business Hours (09:00 - 17:00).',
            'Session "Lunchtime": Cannot overlap lunch break (13:00 - 14:00).',
        ]

    def test_inactive_sessions_do_not_overlap_active_ones(self):
        config = make_config(
            session("Morning", "09:00", "13:00"),
            session("Standby", "10:00", "11:00", active=False),
        )
        assert validate_sessions(config) == []

    def test_reversed_session_reports_every_violation(self):
        """Test that a session ending before it starts is still checked against business hours"""
        config = make_config(session("Night", "20:00", "18:00"))
        assert validate_sessions(config) == [
            'Session "Night": Start time must be before end time.',
            'Session "Night": Must be within Business Hours (09:00 - 17:00).',
        ]

    def test_reversed_session_is_left_out_of_overlap(self):
        config = make_config(
            session("Morning", "09:00", "12:00"),
            session("Backwards", "11:00", "10:00"),
        )
        assert validate_sessions(config) == [
            'Session "Backwards": Start time must be before end time.'
        ]


class TestSessionOverlap:
    """Test pairwise overlap between active sessions"""

    def test_adjacent_sessions_overlap(self):
        config = make_config(
            session("B", "10:00", "12:00"),
            session("A", "09:00", "11:00"),
        )
        assert validate_sessions(config) == ['Sessions "A" and "B" overlap.']

    def test_back_to_back_sessions_do_not_overlap(self):
        config = make_config(
            session("A", "09:00", "10:00"),
            session("B", "10:00", "11:00"),
        )
        assert validate_sessions(config) == []

    def test_non_adjacent_overlap_is_reported(self):
        """Test that a long session overlapping two later ones is reported for both"""
        config = make_config(
            session("Long", "09:00", "12:00"),
            session("First", "10:00", "10:30"),
            session("Second", "11:00", "11:30"),
        )
        assert validate_sessions(config) == [
            'Sessions "Long" and "First" overlap.',
            'Sessions "Long" and "Second" overlap.',
        ]

    def test_equal_starts_keep_input_order(self):
        config = make_config(
            session("Second", "09:00", "10:00"),
            session("First", "09:00", "11:00"),
        )
        assert validate_sessions(config) == ['Sessions "Second" and "First" overlap.']


class TestViolationCollection:
    """Test that every violation is reported together"""

    def test_all_violations_returned(self):
        config = make_config(
            session("Early", "08:00", "10:00"),
            session("Midday", "09:30", "13:30"),
            SessionWindow(name="", short_code="X", start_time="15:00", end_time="16:00"),
        )
        assert validate_sessions(config) == [
            'Session "Early": Must be within Business Hours (09:00 - 17:00).',
            'Session "Midday": Cannot overlap lunch break (13:00 - 14:00).',
            "Session #3: Name is required.",
            'Sessions "Early" and "Midday" overlap.',
        ]

    def test_validation_is_deterministic(self):
        config = make_config(
            session("A", "09:00", "12:00"),
            session("B", "11:00", "12:30"),
            session("C", "12:00", "15:00"),
        )
        assert validate_sessions(config) == validate_sessions(config)

    def test_empty_session_list_is_valid(self):
        assert validate_sessions(make_config()) == []
