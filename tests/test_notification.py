"""
Tests for upcoming-period alerts.
"""
import pytest
from datetime import date

from src.models.profile import ProfileParameters
from src.services.notification import build_period_alert, next_expected_period


def test_next_expected_period(cycle_params):
    assert next_expected_period(cycle_params) == date(2024, 1, 29)
    assert next_expected_period(ProfileParameters()) is None


def test_alert_on_expected_day(cycle_params):
    alert = build_period_alert(cycle_params, today=date(2024, 1, 29))
    assert alert.title == "Period Alert"
    assert alert.days_until == 0
    assert alert.message == "Your period is expected today! Make sure you're prepared."


def test_alert_days_ahead(cycle_params):
    alert = build_period_alert(cycle_params, today=date(2024, 1, 26))
    assert alert.days_until == 3
    assert alert.expected_date == date(2024, 1, 29)
    assert alert.message == "Your period is coming in 3 day(s). Consider preparing necessary items."


@pytest.mark.parametrize("today", [date(2024, 1, 25), date(2024, 1, 30)])
def test_no_alert_outside_horizon(cycle_params, today):
    assert build_period_alert(cycle_params, today=today) is None


def test_no_alert_without_last_period():
    assert build_period_alert(ProfileParameters(), today=date(2024, 1, 1)) is None
