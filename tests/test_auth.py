from tests.conftest import PASSWORD, auth_headers, sign_in


def signup_payload(email, role="reader", **overrides):
    payload = {
        "email": email,
        "password": PASSWORD,
        "confirm_password": PASSWORD,
        "first_name": "Sam",
        "last_name": "Smith",
        "role": role,
    }
    payload.update(overrides)
    return payload


def test_signup_then_signin_keeps_chosen_role(client, backend):
    resp = client.post("/api/v1/auth/signup", json=signup_payload("new@example.com", role="publisher"))
    assert resp.status_code == 201
    body = resp.json()
    assert body["session_token"] is None
    assert body["redirect_to"] == "/signin"
    assert backend.rows("user_roles", user_id=body["user_id"])[0]["role"] == "publisher"

    session = sign_in(client, "new@example.com")
    assert session["role"] == "publisher"
    assert session["is_publisher"] is True
    assert session["redirect_to"] == "/"


def test_signup_with_autoconfirm_returns_session(client, backend):
    backend.autoconfirm = True
    resp = client.post("/api/v1/auth/signup", json=signup_payload("auto@example.com", role="publisher"))
    assert resp.status_code == 201
    body = resp.json()
    assert body["session_token"]
    assert body["redirect_to"] == "/"

    me = client.get("/api/v1/auth/me", headers=auth_headers(body["session_token"])).json()
    assert me["role"] == "publisher"
    assert me["first_name"] == "Sam"
    # Only the chosen role is written, never a default reader row first
    assert len(backend.rows("user_roles", user_id=body["user_id"])) == 1


def test_failed_role_write_heals_to_reader(client, backend):
    backend.fail("user_roles", times=1, op="insert")
    resp = client.post("/api/v1/auth/signup", json=signup_payload("heal@example.com", role="publisher"))
    assert resp.status_code == 201
    user_id = resp.json()["user_id"]
    assert backend.rows("user_roles", user_id=user_id) == []

    session = sign_in(client, "heal@example.com")
    assert session["role"] == "reader"
    assert backend.rows("user_roles", user_id=user_id)[0]["role"] == "reader"


def test_signup_validation(client):
    resp = client.post("/api/v1/auth/signup", json=signup_payload("a@example.com", confirm_password="other123"))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Passwords do not match"

    resp = client.post("/api/v1/auth/signup", json=signup_payload("a@example.com", password="abc", confirm_password="abc"))
    assert resp.status_code == 400

    resp = client.post("/api/v1/auth/signup", json=signup_payload("a@example.com", first_name="  "))
    assert resp.status_code == 400


def test_signup_existing_user(client, backend):
    backend.create_user("taken@example.com", PASSWORD)
    resp = client.post("/api/v1/auth/signup", json=signup_payload("taken@example.com"))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "User already exists"


def test_signin_wrong_password(client, backend, registry):
    backend.create_user("who@example.com", PASSWORD, role="reader")
    resp = client.post("/api/v1/auth/signin", json={"email": "who@example.com", "password": "nope123"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid email or password"
    assert len(registry) == 0


def test_role_lookup_retries_then_succeeds(client, backend):
    backend.create_user("retry@example.com", PASSWORD, role="publisher")
    backend.fail("user_roles", times=2, op="select")

    session = sign_in(client, "retry@example.com")
    assert session["role"] == "publisher"
    assert session["role_error"] is None
    assert backend.count_calls("user_roles", "select") == 3


def test_role_lookup_exhausted_keeps_user_signed_in(client, backend):
    backend.create_user("norole@example.com", PASSWORD, role="publisher")
    backend.fail("user_roles", times=3, op="select")

    session = sign_in(client, "norole@example.com")
    assert session["role"] is None
    assert session["is_publisher"] is False
    assert session["role_error"]
    assert backend.count_calls("user_roles", "select") == 3

    headers = auth_headers(session["session_token"])
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 200
    resp = client.get("/api/v1/publisher-dashboard", headers=headers)
    assert resp.status_code == 403


def test_signout_drops_session(client, reader, registry, backend):
    _, headers = reader
    resp = client.post("/api/v1/auth/signout", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["redirect_to"] == "/signin"
    assert len(registry) == 0
    assert backend.count_calls("auth", "sign_out") == 1

    resp = client.get("/api/v1/auth/me", headers=headers)
    assert resp.status_code == 401


def test_root_redirects_by_session(client, reader):
    _, headers = reader
    assert client.get("/").json()["redirect_to"] == "/signin"
    assert client.get("/", headers=headers).json()["redirect_to"] == "/feeds"
