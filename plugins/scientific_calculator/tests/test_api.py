from app import create_app

BASE = "/api/scientific_calculator"


def _client():
    app = create_app("TestingConfig")
    return app.test_client()


def _new_session(client, **payload):
    resp = client.post(f"{BASE}/sessions", json=payload)
    assert resp.status_code == 201
    return resp.get_json()["data"]


def test_evaluate_endpoint():
    client = _client()
    resp = client.post(f"{BASE}/evaluate", json={"expression": "3*4+5"})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["success"] is True
    assert data["data"]["result"] == "17"
    assert data["data"]["angle_unit"] == "radian"


def test_evaluate_endpoint_with_degrees_and_answer():
    client = _client()
    resp = client.post(
        f"{BASE}/evaluate",
        json={"expression": "sin(90)+Ans", "angle_unit": "degree", "last_answer": "2"},
    )
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["result"] == "3"
    assert data["sanitized"] == "sin(90)+(2)"


def test_evaluate_rejects_invalid_expressions():
    client = _client()
    resp = client.post(f"{BASE}/evaluate", json={"expression": "(2+3"})
    assert resp.status_code == 400
    error = resp.get_json()["error"]
    assert error["code"] == "sci_calc.invalid_expression"

    resp = client.post(f"{BASE}/evaluate", json={"expression": ""})
    assert resp.status_code == 400


def test_evaluate_rejects_malformed_payloads():
    client = _client()
    resp = client.post(f"{BASE}/evaluate", json={"expression": "1", "variables": []})
    assert resp.status_code == 400
    error = resp.get_json()["error"]
    assert error["code"] == "sci_calc.invalid_request"
    assert error["details"]

    resp = client.post(f"{BASE}/evaluate", json={"expression": "1", "angle_unit": "gradian"})
    assert resp.status_code == 400

    resp = client.post(f"{BASE}/evaluate", data="not json", content_type="text/plain")
    assert resp.status_code == 400


def test_keypad_layout():
    client = _client()
    resp = client.get(f"{BASE}/keypad")
    assert resp.status_code == 200
    rows = resp.get_json()["data"]["rows"]
    assert len(rows) == 9
    assert rows[0][0]["label"] == "AC"


def test_session_flow():
    client = _client()
    session = _new_session(client)
    session_id = session["session_id"]
    assert session["expression"] == "0"
    assert session["angle_label"] == "RAD"

    for token in ["2", "+", "2"]:
        resp = client.post(f"{BASE}/sessions/{session_id}/tokens", json={"token": token})
        assert resp.status_code == 200
    assert resp.get_json()["data"]["expression"] == "2+2"

    resp = client.post(f"{BASE}/sessions/{session_id}/evaluate")
    data = resp.get_json()["data"]
    assert data["outcome"] == {"ok": True, "value": "4", "reason": None}
    assert data["result"] == "4"
    assert data["last_answer"] == "4"
    assert data["history"] == [{"expression": "2+2", "value": "4"}]

    client.post(f"{BASE}/sessions/{session_id}/reset")
    client.post(f"{BASE}/sessions/{session_id}/answer")
    client.post(f"{BASE}/sessions/{session_id}/tokens", json={"token": "*"})
    client.post(f"{BASE}/sessions/{session_id}/tokens", json={"token": "3"})
    resp = client.post(f"{BASE}/sessions/{session_id}/evaluate")
    assert resp.get_json()["data"]["result"] == "12"

    resp = client.post(f"{BASE}/sessions/{session_id}/history/1/select")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["expression"] == "4"

    resp = client.get(f"{BASE}/sessions/{session_id}")
    assert resp.get_json()["data"]["expression"] == "4"


def test_session_failed_evaluation_reports_error():
    client = _client()
    session_id = _new_session(client)["session_id"]
    client.post(f"{BASE}/sessions/{session_id}/tokens", json={"token": "("})
    client.post(f"{BASE}/sessions/{session_id}/tokens", json={"token": "2"})
    resp = client.post(f"{BASE}/sessions/{session_id}/evaluate")
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["outcome"]["ok"] is False
    assert data["error"] == "Invalid expression"
    assert data["expression"] == "(2"

    resp = client.post(f"{BASE}/sessions/{session_id}/delete")
    data = resp.get_json()["data"]
    assert data["expression"] == "("
    assert data["error"] is None


def test_session_press_and_angle_mode():
    client = _client()
    session_id = _new_session(client, angle_unit="degree")["session_id"]
    for label in ["sin", "9", "0", ")", "="]:
        resp = client.post(f"{BASE}/sessions/{session_id}/press", json={"label": label})
        assert resp.status_code == 200
    assert resp.get_json()["data"]["result"] == "1"

    resp = client.post(f"{BASE}/sessions/{session_id}/press", json={"label": "DRG"})
    assert resp.get_json()["data"]["angle_mode"] == "radian"
    resp = client.post(f"{BASE}/sessions/{session_id}/angle-mode")
    assert resp.get_json()["data"]["angle_label"] == "DEG"

    resp = client.post(f"{BASE}/sessions/{session_id}/press", json={"label": "sinh"})
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "sci_calc.unknown_button"


def test_unknown_session_and_history_index():
    client = _client()
    resp = client.get(f"{BASE}/sessions/missing")
    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "sci_calc.session_not_found"

    resp = client.post(f"{BASE}/sessions/missing/tokens", json={"token": "1"})
    assert resp.status_code == 404

    session_id = _new_session(client)["session_id"]
    resp = client.post(f"{BASE}/sessions/{session_id}/history/0/select")
    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "sci_calc.history_not_found"

    resp = client.post(f"{BASE}/sessions/{session_id}/tokens", json={"token": ""})
    assert resp.status_code == 400


def test_delete_session():
    client = _client()
    session_id = _new_session(client)["session_id"]
    resp = client.delete(f"{BASE}/sessions/{session_id}")
    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"session_id": session_id, "deleted": True}
    assert client.get(f"{BASE}/sessions/{session_id}").status_code == 404
    assert client.delete(f"{BASE}/sessions/{session_id}").status_code == 404


def test_apps_do_not_share_sessions():
    session_id = _new_session(_client())["session_id"]
    assert _client().get(f"{BASE}/sessions/{session_id}").status_code == 404


def test_request_id_is_echoed():
    client = _client()
    resp = client.get(f"{BASE}/keypad", headers={"X-Request-ID": "abc123"})
    assert resp.headers["X-Request-ID"] == "abc123"
