from conftest import login, register


def test_register_stores_hashed_password(client, db):
    response = register(client, "alice", "pw1", "Alice")

    assert response.status_code == 200
    assert "Registered! Please login." in response.text
    user = db.users.find_one({"username": "alice"})
    assert user["name"] == "Alice"
    assert user["password"] != "pw1"
    assert user["userId"].startswith("u")


def test_register_does_not_log_in(client):
    register(client, "alice")

    response = client.get("/list", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_register_duplicate_username_conflicts(client, db):
    register(client, "alice", "pw1", "Alice")
    response = register(client, "alice", "other", "Someone Else")

    assert "Username exists" in response.text
    assert db.users.count_documents({"username": "alice"}) == 1


def test_register_username_is_case_sensitive(client, db):
    register(client, "alice")
    register(client, "Alice")

    assert db.users.count_documents({}) == 2


def test_register_requires_all_fields(client, db):
    response = client.post("/register", data={"username": "alice", "password": "pw1"})

    assert "All fields required" in response.text
    assert db.users.count_documents({}) == 0


def test_register_rejects_blank_fields(client, db):
    response = client.post("/register", data={"username": "alice", "password": "pw1", "name": "   "})

    assert "All fields required" in response.text
    assert db.users.count_documents({}) == 0


def test_login_success_sets_session_cookie(client, settings):
    register(client, "alice", "pw1", "Alice")
    response = login(client, "alice", "pw1")

    assert response.status_code == 303
    assert response.headers["location"] == "/list"
    assert settings.session_cookie_name in response.cookies

    page = client.get("/list")
    assert "Welcome, Alice" in page.text


def test_login_failures_are_indistinguishable(client):
    register(client, "alice", "pw1", "Alice")

    wrong_password = login(client, "alice", "wrong")
    unknown_user = login(client, "mallory", "pw1")

    assert wrong_password.status_code == unknown_user.status_code == 200
    assert "Invalid credentials" in wrong_password.text
    assert wrong_password.text == unknown_user.text


def test_logout_destroys_session(alice, db):
    assert db.sessions.count_documents({}) == 1

    response = alice.get("/logout", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert db.sessions.count_documents({}) == 0
    assert alice.get("/list", follow_redirects=False).status_code == 303


def test_stale_cookie_is_treated_as_logged_out(client, settings):
    client.cookies.set(settings.session_cookie_name, "not-a-real-session")

    response = client.get("/list", follow_redirects=False)
    assert response.headers["location"] == "/login"


def test_home_redirects_by_login_state(client):
    assert client.get("/", follow_redirects=False).headers["location"] == "/login"

    register(client, "alice")
    login(client, "alice")
    assert client.get("/", follow_redirects=False).headers["location"] == "/list"


def test_protected_pages_redirect_to_login(client):
    for path in ("/list", "/search", "/details?_id=x", "/edit?_id=x", "/api-test"):
        response = client.get(path, follow_redirects=False)
        assert response.status_code == 303, path
        assert response.headers["location"] == "/login"
