from fastapi.testclient import TestClient
from fittrack.main import app
import datetime as dt

client = TestClient(app)

def new_profile(name="Sam"):
    r = client.post("/profiles", json={"name": name})
    assert r.status_code == 201
    return {"X-Profile-ID": r.json()["id"]}

def build_push_day(H):
    assert client.post("/templates/draft", headers=H, json={}).status_code == 201
    assert client.patch("/templates/draft", headers=H, json={"name": "Push Day"}).status_code == 200
    for ex in ("bench_press", "lateral_raise"):
        assert client.post("/templates/draft/items", headers=H, json={"exercise_id": ex}).status_code == 200
    r = client.post("/templates/draft/save", headers=H)
    assert r.status_code == 201
    assert r.json()["messages"] == ["Saved Push Day"]
    return r.json()["state"]["templates"][0]["id"]

def test_profile_header_is_required():
    assert client.get("/profiles/current/state").status_code == 400
    r = client.get("/profiles/current/state", headers={"X-Profile-ID": "nope"})
    assert r.status_code == 404

def test_profile_created_with_defaults():
    H = new_profile("Alex")
    r = client.get("/profiles/current/state", headers=H)
    assert r.status_code == 200
    state = r.json()["state"]
    assert state["settings"]["name"] == "Alex"
    assert state["rest_defaults"] == {"compound_sec": 150, "accessory_sec": 90, "auto_adjust": True}
    assert state["active_workout"] is None

def test_workout_flow(ticker):
    H = new_profile()
    template_id = build_push_day(H)

    r = client.post("/workout/start", headers=H, json={"template_id": template_id})
    assert r.status_code == 201
    assert r.json()["state"]["active_workout"]["rest"]["state"] == "idle"

    r = client.post("/workout/start", headers=H, json={"template_id": template_id})
    assert r.status_code == 409

    r = client.post("/workout/sets", headers=H, json={"weight": 135, "reps": 8, "rir": 2})
    assert r.status_code == 201
    body = r.json()
    rest = body["state"]["active_workout"]["rest"]
    assert rest["state"] == "running" and rest["duration_sec"] == 150
    assert 0 < body["rest_remaining_ms"] <= 150_000
    assert body["messages"] == ["Set logged: 135 x 8"]
    assert ticker.started == [H["X-Profile-ID"]]

    r = client.post("/workout/sets", headers=H, json={"weight": 135, "reps": 0})
    assert r.status_code == 422
    assert r.json()["detail"] == "Reps must be a whole number greater than 0"

    r = client.post("/rest/pause", headers=H)
    assert r.json()["state"]["active_workout"]["rest"]["state"] == "paused"
    assert ticker.running == set()

    r = client.post("/workout/next", headers=H)
    assert r.json()["state"]["active_workout"]["current_exercise_index"] == 1
    assert r.json()["state"]["active_workout"]["rest"]["duration_sec"] == 90

    r = client.post("/workout/finish", headers=H)
    assert r.status_code == 200
    state = r.json()["state"]
    assert state["active_workout"] is None
    assert [row["exercise_name"] for row in state["sets_log"]] == ["Bench Press"]

    r = client.get("/progress", headers=H)
    assert r.json()["total_sets"] == 1
    assert r.json()["streak"] == 1

def test_template_builder_rejections():
    H = new_profile()
    client.post("/templates/draft", headers=H, json={})
    r = client.post("/templates/draft/save", headers=H)
    assert r.status_code == 422
    assert r.json()["detail"] == "Template needs a name"

    client.post("/templates/draft/items", headers=H, json={"exercise_id": "bench_press"})
    r = client.patch("/templates/draft/items/0", headers=H, json={"sets": 40, "rest_sec": 5})
    item = r.json()["state"]["template_draft"]["items"][0]
    assert (item["sets"], item["rest_mode"], item["rest_sec"]) == (10, "custom", 30)

    r = client.post("/templates/draft/items/0/move", headers=H, json={"direction": -1})
    assert r.status_code == 200
    assert client.delete("/templates/draft/items/3", headers=H).status_code == 409

def test_template_delete_needs_confirm():
    H = new_profile()
    template_id = build_push_day(H)
    assert client.delete(f"/templates/{template_id}", headers=H).status_code == 409
    r = client.delete(f"/templates/{template_id}", headers=H, params={"confirm": True})
    assert r.status_code == 200
    assert r.json()["state"]["templates"] == []

def test_diet_and_meals_flow():
    H = new_profile()
    day = "2026-03-02"

    r = client.post(f"/diet/{day}/foods", headers=H, json={"food_id": "chicken_breast", "qty": 150, "unit": "g"})
    assert r.status_code == 201
    assert r.json()["state"]["diet_log"][day]["totals"] == {"calories": 248, "protein": 47, "carbs": 0, "fat": 5}

    r = client.post(f"/diet/{day}/foods", headers=H, json={"food_id": "chicken_breast", "qty": -1})
    assert r.status_code == 422

    r = client.post("/meals", headers=H, json={"name": "Oats Bowl", "items": [
        {"food_id": "oats", "qty": 1, "unit_key": "cup"},
        {"food_id": "whole_milk", "qty": 1, "unit_key": "cup"},
        {"food_id": "banana", "qty": 1, "unit_key": "medium"},
    ]})
    assert r.status_code == 201
    meal = r.json()["state"]["meals"][0]
    assert meal["per_serving_totals"]["calories"] == 569

    r = client.post(f"/diet/{day}/meals", headers=H, json={"meal_id": meal["id"]})
    assert r.status_code == 201
    r = client.post(f"/diet/{day}/quick", headers=H, json={"label": "Coffee", "calories": 5})
    assert r.status_code == 201

    r = client.get(f"/diet/{day}", headers=H)
    body = r.json()
    assert body["day"]["totals"]["calories"] == 248 + 569 + 5
    assert body["goals"]["calories"] == 2000

    entry_id = body["day"]["entries"][-1]["id"]
    r = client.delete(f"/diet/{day}/entries/{entry_id}", headers=H)
    assert r.json()["state"]["diet_log"][day]["totals"]["calories"] == 248 + 569

    r = client.post(f"/diet/{day}/water", headers=H, json={"cups": 2})
    assert r.json()["state"]["water_log"][day] == 2

def test_settings_and_weight():
    H = new_profile()
    r = client.put("/settings", headers=H, json={"calorie_goal": 2500})
    assert r.json()["state"]["settings"]["calorie_goal"] == 2500
    assert client.put("/settings", headers=H, json={"calorie_goal": 0}).status_code == 422

    today = dt.date.today().isoformat()
    r = client.post("/progress/weight", headers=H, json={"weight": 180.2, "date": today})
    assert r.status_code == 201
    assert client.post("/progress/weight", headers=H, json={"weight": -3}).status_code == 422

def test_reference_endpoints():
    r = client.get("/reference/exercises", params={"muscle_group": "legs"})
    assert {e["muscle_group"] for e in r.json()} == {"legs"}
    r = client.get("/reference/foods", params={"q": "oat"})
    assert [f["id"] for f in r.json()] == ["oats"]
    assert client.get("/reference/foods/nope").status_code == 404

def test_null_settings_fields_are_left_unchanged():
    H = new_profile()
    r = client.put("/settings", headers=H, json={"calorie_goal": None, "water_goal": 10})
    assert r.status_code == 200
    settings = r.json()["state"]["settings"]
    assert (settings["calorie_goal"], settings["water_goal"]) == (2000, 10)
    r = client.put("/settings", headers=H, json={"name": None})
    assert r.status_code == 200
    assert r.json()["state"]["settings"]["name"] == "Sam"

def test_profile_name_is_stripped_and_required():
    assert client.post("/profiles", json={"name": "   "}).status_code == 422
    r = client.post("/profiles", json={"name": "  Jo  "})
    assert r.status_code == 201
    assert r.json()["name"] == "Jo"
