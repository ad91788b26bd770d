"""Progress aggregations over the sets log, diet log and weight history.

Weekly set counts use trailing 7-day windows anchored to today: window 0
is today and the six days before it, window 1 the seven days before that,
and so on. Calendar weeks are not used anywhere.
"""
from __future__ import annotations

import math
from collections import Counter
from datetime import date, timedelta
from typing import Optional

from fittrack.core.errors import ValidationError
from fittrack.core.state import ProfileData, WeightEntry

WINDOW_DAYS = 7


def average_calories(data: ProfileData, today: date, days: int = WINDOW_DAYS) -> float:
    """Mean daily calories over the trailing window, counting logged days only."""
    totals = []
    for offset in range(days):
        day = data.diet_log.get((today - timedelta(days=offset)).isoformat())
        if day is not None and day.entries:
            totals.append(day.totals.calories)
    if not totals:
        return 0.0
    return round(sum(totals) / len(totals), 1)


def weight_delta(data: ProfileData, count: int = WINDOW_DAYS) -> Optional[float]:
    """Last minus first of the latest ``count`` weigh-ins, by entry not by day."""
    recent = sorted(data.weight_history, key=lambda w: w.date)[-count:]
    if len(recent) < 2:
        return None
    return round(recent[-1].weight - recent[0].weight, 1)


def weekly_set_counts(data: ProfileData, today: date, weeks: int = 4) -> list[dict]:
    windows = []
    for k in range(weeks):
        end = today - timedelta(days=WINDOW_DAYS * k)
        start = end - timedelta(days=WINDOW_DAYS - 1)
        rows = [r for r in data.sets_log if start <= r.date <= end]
        windows.append({
            "start": start,
            "end": end,
            "total": len(rows),
            "by_muscle": dict(Counter(r.muscle_group for r in rows)),
        })
    return windows


def streak(data: ProfileData, today: date) -> int:
    """Consecutive days, ending today, with at least one logged set."""
    trained = {r.date for r in data.sets_log}
    count = 0
    day = today
    while day in trained:
        count += 1
        day -= timedelta(days=1)
    return count


def log_weight(data: ProfileData, on: date, weight) -> WeightEntry:
    if isinstance(weight, bool) or not isinstance(weight, (int, float)) or not math.isfinite(weight) or weight <= 0:
        raise ValidationError("Weight must be greater than 0")
    entry = WeightEntry(date=on, weight=float(weight))
    data.weight_history.append(entry)
    return entry


def log_water(data: ProfileData, on: date, cups: int = 1) -> int:
    if isinstance(cups, bool) or not isinstance(cups, int) or cups <= 0:
        raise ValidationError("Cups must be a whole number greater than 0")
    key = on.isoformat()
    data.water_log[key] = data.water_log.get(key, 0) + cups
    return data.water_log[key]


def summary(data: ProfileData, today: date) -> dict:
    key = today.isoformat()
    day = data.diet_log.get(key)
    return {
        "today": today,
        "calories_today": day.totals.calories if day else 0,
        "calorie_goal": data.settings.calorie_goal,
        "water_today": data.water_log.get(key, 0),
        "water_goal": data.settings.water_goal,
        "avg_calories_7d": average_calories(data, today),
        "weight_delta_7": weight_delta(data),
        "weekly_sets": weekly_set_counts(data, today),
        "streak": streak(data, today),
        "total_sets": len(data.sets_log),
        "total_volume": round(sum(r.weight * r.reps for r in data.sets_log), 1),
    }
