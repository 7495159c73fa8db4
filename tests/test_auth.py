def test_login_success(client, make_account):
    make_account(user_id="alice", password="s3cret", admin=True)

    r = client.post("/login", json={"user_id": "alice", "password": "s3cret"})
    assert r.status_code == 200
    assert r.json() == {"user_id": "alice", "admin": True, "email": "alice@example.com"}


def test_login_wrong_password(client, make_account):
    make_account(user_id="alice", password="s3cret")

    r = client.post("/login", json={"user_id": "alice", "password": "nope"})
    assert r.status_code == 200
    assert r.json() == {"error": "Login failed"}


def test_login_unknown_user(client):
    r = client.post("/login", json={"user_id": "ghost", "password": "x"})
    assert r.json() == {"error": "Login failed"}


def test_root(client):
    assert client.get("/").json() == {"ok": True, "service": "facility-booking-api"}
