"""End-to-end checks of the HTTP layer: status codes, error_code bodies, auth."""
from coachdesk.core.config import settings
from coachdesk.core.utils import get_local_date


def _create_client(api_client, auth_headers, name="Carla"):
    response = api_client.post("/clients/", json={"name": name, "goals": [" strength ", "Strength", "", "mobility"]},
                               headers=auth_headers)
    assert response.status_code == 201, response.text
    return response.json()


def _create_training_plan(api_client, auth_headers, client_id, exercise_ids):
    response = api_client.post("/training-plans/", json={
        "client_id": client_id,
        "name": "Base",
        "sessions": [
            {"name": "Monday", "day_of_week": 1, "exercises": [{"exercise_id": i} for i in exercise_ids[:2]]},
            {"name": "Thursday", "day_of_week": 4, "exercises": [{"exercise_id": exercise_ids[2]}]},
        ],
    }, headers=auth_headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_register_login_and_me(api_client):
    response = api_client.post("/trainers/register", json={
        "name": "Paula", "email": "Paula@Example.com", "password": "secret123", "specializations": ["HIIT", "hiit"],
    })
    assert response.status_code == 201, response.text
    assert response.json()["specializations"] == ["HIIT"]

    duplicate = api_client.post("/trainers/register", json={
        "name": "Paula 2", "email": "paula@example.com", "password": "secret123",
    })
    assert duplicate.status_code == 422

    login = api_client.post("/auth/login", json={"email": "paula@example.com", "password": "secret123"})
    assert login.status_code == 200, login.text
    token = login.json()["access_token"]

    me = api_client.get("/trainers/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "paula@example.com"


def test_bad_login_and_missing_token(api_client, trainer):
    bad = api_client.post("/auth/login", json={"email": trainer.email, "password": "wrong-password"})
    assert bad.status_code == 401
    assert bad.json()["error_code"] == "UNAUTHORIZED"

    assert api_client.get("/clients/").status_code == 401
    garbage = api_client.get("/clients/", headers={"Authorization": "Bearer not-a-jwt"})
    assert garbage.status_code == 401


def test_client_crud_and_quota(api_client, auth_headers):
    created = _create_client(api_client, auth_headers)
    assert created["goals"] == ["strength", "mobility"]
    assert created["handle"] == "100001"

    quota = api_client.get("/clients/quota", headers=auth_headers).json()
    assert quota["active_clients"] == 1
    assert quota["on_free_tier"] is True

    updated = api_client.patch(f"/clients/{created['id']}", json={"phone": "+55 21 5555-0000"}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.json()["phone"] == "+55 21 5555-0000"

    deleted = api_client.delete(f"/clients/{created['id']}", headers=auth_headers)
    assert deleted.json()["active"] is False
    assert api_client.get("/clients/", headers=auth_headers).json() == []
    assert len(api_client.get("/clients/?include_inactive=true", headers=auth_headers).json()) == 1


def test_quota_exceeded_is_402(api_client, auth_headers):
    for i in range(settings.FREE_TIER_CLIENT_LIMIT):
        _create_client(api_client, auth_headers, name=f"Client {i}")

    response = api_client.post("/clients/", json={"name": "One too many"}, headers=auth_headers)
    assert response.status_code == 402
    assert response.json()["error_code"] == "QUOTA_EXCEEDED"


def test_other_trainers_client_is_forbidden(api_client, auth_headers, other_trainer, make_client):
    foreign = make_client(other_trainer)
    response = api_client.get(f"/clients/{foreign.id}", headers=auth_headers)
    assert response.status_code == 403
    assert response.json()["error_code"] == "FORBIDDEN"


def test_tree_replace_duplicate_day_is_409(api_client, auth_headers, exercises):
    client = _create_client(api_client, auth_headers)
    plan = _create_training_plan(api_client, auth_headers, client["id"], [e.id for e in exercises])
    monday, thursday = plan["sessions"]

    response = api_client.put(f"/training-plans/{plan['id']}/tree", json={"sessions": [
        {"id": monday["id"], "name": "Monday", "day_of_week": 4, "exercises": []},
        {"id": thursday["id"], "name": "Thursday", "day_of_week": 4, "exercises": []},
    ]}, headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["error_code"] == "DUPLICATE_DAY"

    swapped = api_client.put(f"/training-plans/{plan['id']}/tree", json={"sessions": [
        {"id": monday["id"], "name": "Monday", "day_of_week": 4, "exercises": monday["exercises"]},
        {"id": thursday["id"], "name": "Thursday", "day_of_week": 1, "exercises": thursday["exercises"]},
    ]}, headers=auth_headers)
    assert swapped.status_code == 200, swapped.text
    assert [s["day_of_week"] for s in swapped.json()["sessions"]] == [4, 1]

    current = api_client.get(f"/training-plans/clients/{client['id']}/current", headers=auth_headers)
    assert current.json()["id"] == plan["id"]


def test_student_page_and_toggle(api_client, auth_headers, exercises):
    client = _create_client(api_client, auth_headers)
    plan = _create_training_plan(api_client, auth_headers, client["id"], [e.id for e in exercises])
    item_id = plan["sessions"][0]["exercises"][0]["id"]
    handle, token = client["handle"], client["access_token"]

    page = api_client.get(f"/student/{handle}", params={"token": token})
    assert page.status_code == 200, page.text
    body = page.json()
    assert body["client"]["name"] == "Carla"
    assert "access_token" not in body["client"]
    assert body["training_plan"]["id"] == plan["id"]
    assert body["nutrition_plan"] is None
    assert body["completed_exercise_ids"] == []

    toggled = api_client.post(f"/student/{handle}/toggle",
                              json={"token": token, "item_id": item_id, "item_kind": "exercise"})
    assert toggled.status_code == 200, toggled.text
    assert toggled.json() == {
        "item_id": item_id, "item_kind": "exercise", "day": get_local_date().isoformat(), "completed": True,
    }
    assert api_client.get(f"/student/{handle}", params={"token": token}).json()["completed_exercise_ids"] == [item_id]

    untoggled = api_client.post(f"/student/{handle}/toggle",
                                json={"token": token, "item_id": item_id, "item_kind": "exercise"})
    assert untoggled.json()["completed"] is False

    by_token = api_client.get(f"/student/t/{token}")
    assert by_token.status_code == 200
    assert by_token.json()["client"]["handle"] == handle


def test_bad_links_are_indistinguishable(api_client, auth_headers):
    client = _create_client(api_client, auth_headers)

    wrong_token = api_client.get(f"/student/{client['handle']}", params={"token": "guess"})
    wrong_handle = api_client.get("/student/100999", params={"token": client["access_token"]})
    toggle = api_client.post(f"/student/{client['handle']}/toggle",
                             json={"token": "guess", "item_id": 1, "item_kind": "meal"})

    assert wrong_token.status_code == wrong_handle.status_code == toggle.status_code == 404
    assert wrong_token.json() == wrong_handle.json() == toggle.json()
    assert wrong_token.json()["error_code"] == "INVALID_LINK"


def test_report_endpoint(api_client, auth_headers, exercises):
    client = _create_client(api_client, auth_headers)
    plan = _create_training_plan(api_client, auth_headers, client["id"], [e.id for e in exercises])
    item_id = plan["sessions"][1]["exercises"][0]["id"]
    api_client.post(f"/student/{client['handle']}/toggle",
                    json={"token": client["access_token"], "item_id": item_id, "item_kind": "exercise"})
    today = get_local_date().isoformat()

    response = api_client.post("/reports/", json={"start_date": today, "end_date": today}, headers=auth_headers)
    assert response.status_code == 200, response.text
    [row] = response.json()
    assert row["exercises_completed"] == 1
    assert row["total_exercises"] == 3
    assert round(row["completion_rate"], 4) == round(1 / 3, 4)

    inverted = api_client.post("/reports/", json={"start_date": today, "end_date": "2000-01-01"},
                               headers=auth_headers)
    assert inverted.status_code == 422


def test_nutrition_plan_routes(api_client, auth_headers):
    client = _create_client(api_client, auth_headers)
    created = api_client.post("/nutrition-plans/", json={
        "client_id": client["id"], "name": "Lean", "daily_calories": 1800,
        "meals": [{"name": "Breakfast", "time_of_day": "07:00", "foods": [{"food_name": "Yogurt", "quantity": 170}]}],
    }, headers=auth_headers)
    assert created.status_code == 201, created.text
    plan = created.json()

    patched = api_client.patch(f"/nutrition-plans/{plan['id']}", json={"daily_calories": 1700}, headers=auth_headers)
    assert patched.json()["daily_calories"] == 1700

    listed = api_client.get(f"/nutrition-plans/clients/{client['id']}", headers=auth_headers).json()
    assert [p["id"] for p in listed] == [plan["id"]]

    assert api_client.delete(f"/nutrition-plans/{plan['id']}", headers=auth_headers).status_code == 204
    assert api_client.get(f"/nutrition-plans/{plan['id']}", headers=auth_headers).status_code == 404


def test_billing_routes(api_client, auth_headers, admin_headers, trainer, db_session):
    from coachdesk.models.subscription import SubscriptionPlan

    db_session.add(SubscriptionPlan(name="Pro", student_limit=50, price_cents=5990))
    db_session.commit()

    plans = api_client.get("/billing/plans").json()
    assert [p["name"] for p in plans] == ["Pro"]
    assert api_client.get("/billing/subscription", headers=auth_headers).json() is None

    assigned = api_client.post("/billing/assign", json={"trainer_id": trainer.id, "plan_id": plans[0]["id"], "months": 1},
                               headers=admin_headers)
    assert assigned.status_code == 201, assigned.text
    assert assigned.json()["plan"]["student_limit"] == 50

    quota = api_client.get("/clients/quota", headers=auth_headers).json()
    assert quota["limit"] == 50
    assert quota["subscription"]["id"] == assigned.json()["id"]

    webhook = api_client.post("/billing/webhook", json={"type": "ping", "data": {}})
    assert webhook.json() == {"received": True, "handled": False}


def test_trainer_cannot_grant_themselves_a_plan(api_client, auth_headers, trainer, db_session):
    from coachdesk.models.subscription import SubscriptionPlan

    studio = SubscriptionPlan(name="Studio", student_limit=200, price_cents=12990)
    db_session.add(studio)
    db_session.commit()
    for i in range(settings.FREE_TIER_CLIENT_LIMIT):
        _create_client(api_client, auth_headers, name=f"Client {i}")

    response = api_client.post("/billing/assign", json={"trainer_id": trainer.id, "plan_id": studio.id},
                               headers=auth_headers)
    assert response.status_code == 403
    assert response.json()["error_code"] == "FORBIDDEN"

    assert api_client.get("/billing/subscription", headers=auth_headers).json() is None
    blocked = api_client.post("/clients/", json={"name": "One too many"}, headers=auth_headers)
    assert blocked.status_code == 402


def test_patch_null_required_plan_field_is_422(api_client, auth_headers, exercises):
    client = _create_client(api_client, auth_headers)
    plan = _create_training_plan(api_client, auth_headers, client["id"], [e.id for e in exercises])

    for field in ("duration_weeks", "sessions_per_week"):
        response = api_client.patch(f"/training-plans/{plan['id']}", json={field: None}, headers=auth_headers)
        assert response.status_code == 422
        assert response.json()["error_code"] == f"VALIDATION_ERROR_{field.upper()}"

    unchanged = api_client.get(f"/training-plans/{plan['id']}", headers=auth_headers).json()
    assert unchanged["duration_weeks"] == 4
    assert unchanged["sessions_per_week"] == 3
