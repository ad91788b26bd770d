from datetime import date, timedelta

import pytest

from fittrack.core import progress
from fittrack.core.errors import ValidationError
from fittrack.core.state import DietDay, MacroTotals, ProfileData, QuickEntry, SetLogRow, WeightEntry

TODAY = date(2026, 3, 15)


def ago(days):
    return TODAY - timedelta(days=days)


def with_calories(data, on, calories):
    entry = QuickEntry(id=f"q{on}", label="x", macros=MacroTotals(calories=calories))
    data.diet_log[on.isoformat()] = DietDay(entries=[entry], totals=entry.macros)


def set_row(on, muscle="chest"):
    return SetLogRow(date=on, exercise_id="x", exercise_name="X", muscle_group=muscle, weight=100, reps=8)


def test_average_calories_over_logged_days_in_window():
    data = ProfileData()
    with_calories(data, TODAY, 2000)
    with_calories(data, ago(3), 2400)
    with_calories(data, ago(6), 1600)
    with_calories(data, ago(7), 9000)  # outside the window
    assert progress.average_calories(data, TODAY) == 2000.0

def test_average_calories_with_nothing_logged():
    assert progress.average_calories(ProfileData(), TODAY) == 0.0

def test_weight_delta_uses_last_seven_entries_in_date_order():
    data = ProfileData()
    weights = [200, 199, 198.4, 198, 197.5, 197, 196.8, 196.2]
    # logged out of order on purpose
    for i in reversed(range(len(weights))):
        data.weight_history.append(WeightEntry(date=ago(len(weights) - i), weight=weights[i]))
    # last 7 by date: 199 .. 196.2
    assert progress.weight_delta(data) == pytest.approx(-2.8)

def test_weight_delta_needs_two_entries():
    data = ProfileData(weight_history=[WeightEntry(date=TODAY, weight=180)])
    assert progress.weight_delta(data) is None

def test_weekly_windows_trail_from_today():
    data = ProfileData(sets_log=[
        set_row(TODAY),
        set_row(ago(6), "back"),
        set_row(ago(7)),
        set_row(ago(13)),
        set_row(ago(14), "legs"),
        set_row(TODAY + timedelta(days=1)),  # future rows are ignored
    ])
    windows = progress.weekly_set_counts(data, TODAY, weeks=3)
    assert [w["total"] for w in windows] == [2, 2, 1]
    assert windows[0]["start"] == ago(6) and windows[0]["end"] == TODAY
    assert windows[0]["by_muscle"] == {"chest": 1, "back": 1}
    assert windows[2]["by_muscle"] == {"legs": 1}

def test_streak_counts_back_from_today():
    data = ProfileData(sets_log=[set_row(TODAY), set_row(TODAY), set_row(ago(1)), set_row(ago(3))])
    assert progress.streak(data, TODAY) == 2
    assert progress.streak(ProfileData(sets_log=[set_row(ago(1))]), TODAY) == 0

def test_log_weight_and_water():
    data = ProfileData()
    progress.log_weight(data, TODAY, 181.5)
    assert data.weight_history == [WeightEntry(date=TODAY, weight=181.5)]
    assert progress.log_water(data, TODAY) == 1
    assert progress.log_water(data, TODAY, 2) == 3
    with pytest.raises(ValidationError):
        progress.log_weight(data, TODAY, 0)
    with pytest.raises(ValidationError):
        progress.log_water(data, TODAY, 0)

def test_summary():
    data = ProfileData(sets_log=[set_row(TODAY), set_row(TODAY)])
    with_calories(data, TODAY, 1800)
    s = progress.summary(data, TODAY)
    assert s["calories_today"] == 1800
    assert s["streak"] == 1
    assert s["total_sets"] == 2
    assert s["total_volume"] == 1600
    assert s["weekly_sets"][0]["total"] == 2
