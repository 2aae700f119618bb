import pytest

from app.config import settings
from app.modules.preferences.selection import CategorySelection
from app.modules.preferences.service import is_onboarding_complete


def test_category_catalog(client):
    resp = client.get("/api/v1/categories")
    assert resp.status_code == 200
    ids = [c["id"] for c in resp.json()]
    assert len(ids) == 7
    assert ids[0] == "physical-activity"
    assert client.get("/api/v1/categories/rules").json() == {"required_count": 2, "total": 7}


def test_selection_caps_at_two():
    selection = CategorySelection(["relationships", "physical-activity"])
    assert selection.add("mindful-awareness") is False
    assert selection.toggle("mindful-awareness") is False
    assert selection.selected == ["relationships", "physical-activity"]
    assert selection.is_complete


def test_selection_toggle_deselects():
    selection = CategorySelection(["relationships"])
    assert selection.toggle("relationships") is True
    assert selection.selected == []
    assert not selection.is_complete


def test_selection_rejects_unknown_category():
    with pytest.raises(ValueError):
        CategorySelection(["astrology"])


def test_toggle_endpoint_ignores_third_pick(client, reader):
    _, headers = reader
    resp = client.post("/api/v1/categories/selection/toggle", headers=headers, json={
        "selected_categories": ["relationships", "physical-activity"],
        "category_id": "nutrition-lifestyle",
    })
    assert resp.status_code == 200
    assert resp.json() == {
        "selected_categories": ["relationships", "physical-activity"],
        "can_continue": True,
    }


def test_save_and_read_selection(client, reader, backend):
    user, headers = reader
    before = client.get("/api/v1/categories/selection", headers=headers).json()
    assert before == {"selected_categories": [], "onboarding_complete": False, "redirect_to": None}

    resp = client.put("/api/v1/categories/selection", headers=headers, json={
        "selected_categories": ["financial-wellbeing", "relationships"],
    })
    assert resp.status_code == 200
    assert resp.json()["redirect_to"] == "/dashboard"
    assert backend.rows("user_preferences", user_id=user.id)[0]["selected_categories"] == [
        "financial-wellbeing", "relationships"
    ]

    after = client.get("/api/v1/categories/selection", headers=headers).json()
    assert after["selected_categories"] == ["financial-wellbeing", "relationships"]
    assert after["onboarding_complete"] is True
    assert after["redirect_to"] == "/dashboard"

    dashboard = client.get("/api/v1/dashboard", headers=headers).json()
    assert dashboard["first_name"] == "Rita"
    assert dashboard["category_names"] == ["Financial well-being", "Relationships"]


def test_saving_again_replaces_selection(client, reader, backend):
    user, headers = reader
    for picks in (["relationships", "physical-activity"], ["mindful-awareness", "career-development"]):
        resp = client.put("/api/v1/categories/selection", headers=headers, json={"selected_categories": picks})
        assert resp.status_code == 200
    rows = backend.rows("user_preferences", user_id=user.id)
    assert len(rows) == 1
    assert rows[0]["selected_categories"] == ["mindful-awareness", "career-development"]


def test_save_requires_exactly_two(client, reader):
    _, headers = reader
    resp = client.put("/api/v1/categories/selection", headers=headers, json={"selected_categories": ["relationships"]})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please select exactly 2 categories"

    resp = client.put("/api/v1/categories/selection", headers=headers, json={
        "selected_categories": ["relationships", "relationships"],
    })
    assert resp.status_code == 400


def test_save_failure_is_reported(client, reader, backend):
    _, headers = reader
    backend.fail("user_preferences", op="upsert")
    resp = client.put("/api/v1/categories/selection", headers=headers, json={
        "selected_categories": ["relationships", "physical-activity"],
    })
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to save preferences. Please try again."


@pytest.mark.parametrize("rule,count,expected", [
    ("exact", 0, False),
    ("exact", 1, False),
    ("exact", 2, True),
    ("exact", 3, False),
    ("at_least_one", 0, False),
    ("at_least_one", 1, True),
    ("at_least_one", 3, True),
])
def test_onboarding_rules(rule, count, expected):
    assert is_onboarding_complete(count, rule) is expected


def test_onboarding_rule_follows_settings(client, reader, backend, monkeypatch):
    user, headers = reader
    backend.insert("user_preferences", user_id=user.id, selected_categories=["relationships"])
    assert client.get("/api/v1/categories/selection", headers=headers).json()["onboarding_complete"] is False

    monkeypatch.setattr(settings, "onboarding_completion_rule", "at_least_one")
    body = client.get("/api/v1/debug", headers=headers).json()
    assert body["onboarding_complete"] is True
    assert body["preferences"]["selected_categories"] == ["relationships"]
