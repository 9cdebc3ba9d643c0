from conftest import auth_headers

from jobboard import models


def register(client, **overrides):
    payload = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "password": "analytical",
        "password_confirmation": "analytical",
        "role": "candidate",
    }
    payload.update(overrides)
    return client.post("/auth/register", json=payload)


def login(client, email, password):
    return client.post("/auth/login", data={"username": email, "password": password})


def test_register_returns_tokens_and_user(client):
    response = register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"] and body["refresh_token"]
    assert body["user"]["email"] == "ada@example.com"
    assert body["user"]["role"] == "candidate"


def test_register_validation(client, make_user):
    make_user(email="taken@example.com")

    mismatch = register(client, password_confirmation="different")
    short = register(client, password="short", password_confirmation="short")
    taken = register(client, email="taken@example.com")
    bad_role = register(client, role="superuser")
    unknown_skill = register(client, skills=[999])

    assert mismatch.status_code == 422
    assert short.status_code == 422
    assert taken.status_code == 422
    assert taken.json()["detail"] == {"email": ["The email has already been taken."]}
    assert bad_role.status_code == 422
    assert unknown_skill.status_code == 422
    assert "skills.999" in unknown_skill.json()["detail"]


def test_register_attaches_skills(client, db):
    python = models.Skill(name="Python")
    db.add(python)
    db.commit()

    token = register(client, skills=[python.id]).json()["access_token"]

    me = client.get("/auth/user", headers={"Authorization": f"Bearer {token}"})
    assert [skill["name"] for skill in me.json()["skills"]] == ["Python"]


def test_login(client, make_user):
    user = make_user(email="grace@example.com", password="cobol-rules")

    ok = login(client, "grace@example.com", "cobol-rules")
    wrong = login(client, "grace@example.com", "fortran")
    unknown = login(client, "nobody@example.com", "cobol-rules")

    assert ok.status_code == 200
    assert ok.json()["user"]["id"] == user.id
    assert wrong.status_code == 401
    assert unknown.status_code == 401


def test_current_user_includes_profile_and_cvs(client, candidate):
    client.post("/profile", json={"phone_number": "+33 6 00 00 00 00"}, headers=auth_headers(candidate))

    response = client.get("/auth/user", headers=auth_headers(candidate))

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == candidate.id
    assert body["profile"]["phone_number"] == "+33 6 00 00 00 00"
    assert body["cvs"] == []
    assert body["skills"] == []


def test_requests_without_valid_token_are_rejected(client):
    assert client.get("/job-offers").status_code == 401
    response = client.get("/job-offers", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_logout_revokes_access_token(client, candidate):
    headers = auth_headers(candidate)

    assert client.post("/auth/logout", headers=headers).status_code == 200
    assert client.get("/auth/user", headers=headers).status_code == 401


def test_logout_ends_the_refresh_token_of_the_same_pair(client):
    tokens = register(client).json()
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    assert client.post("/auth/logout", headers=headers).status_code == 200

    response = client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 401


def test_refresh_rotates_tokens(client):
    tokens = register(client).json()

    refreshed = client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200
    new_tokens = refreshed.json()
    assert new_tokens["refresh_token"] != tokens["refresh_token"]
    me = client.get("/auth/user", headers={"Authorization": f"Bearer {new_tokens['access_token']}"})
    assert me.status_code == 200

    replayed = client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert replayed.status_code == 401


def test_access_token_cannot_be_used_to_refresh(client):
    tokens = register(client).json()

    response = client.post("/auth/refresh", json={"refresh_token": tokens["access_token"]})

    assert response.status_code == 401


def test_inactive_user_is_rejected(client, db, candidate):
    headers = auth_headers(candidate)
    candidate.is_active = False
    db.commit()

    assert client.get("/auth/user", headers=headers).status_code == 401
