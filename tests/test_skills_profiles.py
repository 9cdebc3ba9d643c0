from conftest import auth_headers


def test_skill_catalog_crud(client, candidate):
    headers = auth_headers(candidate)

    created = client.post("/skills", json={"name": "Django", "description": "Web framework"}, headers=headers)
    assert created.status_code == 201
    skill_id = created.json()["id"]

    assert client.get(f"/skills/{skill_id}", headers=headers).json()["name"] == "Django"

    renamed = client.patch(f"/skills/{skill_id}", json={"name": "FastAPI"}, headers=headers)
    assert renamed.status_code == 200
    assert renamed.json() == {"id": skill_id, "name": "FastAPI", "description": "Web framework"}

    assert [s["name"] for s in client.get("/skills", headers=headers).json()] == ["FastAPI"]

    assert client.delete(f"/skills/{skill_id}", headers=headers).status_code == 200
    assert client.get(f"/skills/{skill_id}", headers=headers).status_code == 404


def test_skill_names_are_unique(client, candidate):
    headers = auth_headers(candidate)
    client.post("/skills", json={"name": "SQL"}, headers=headers)
    other = client.post("/skills", json={"name": "NoSQL"}, headers=headers).json()

    duplicate = client.post("/skills", json={"name": "SQL"}, headers=headers)
    renamed_onto = client.patch(f"/skills/{other['id']}", json={"name": "SQL"}, headers=headers)
    keep_own_name = client.patch(f"/skills/{other['id']}", json={"name": "NoSQL"}, headers=headers)

    assert duplicate.status_code == 422
    assert duplicate.json()["detail"] == {"name": ["The name has already been taken."]}
    assert renamed_onto.status_code == 422
    assert keep_own_name.status_code == 200


def test_profile_is_created_then_updated(client, candidate):
    headers = auth_headers(candidate)

    assert client.get("/profile", headers=headers).json() == {"profile": None}

    created = client.post("/profile", json={"phone_number": "0102030405"}, headers=headers)
    assert created.status_code == 200
    profile_id = created.json()["id"]

    updated = client.post("/profile", json={"image": "https://cdn.example.com/me.png"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["id"] == profile_id
    assert updated.json()["phone_number"] == "0102030405"
    assert updated.json()["image"] == "https://cdn.example.com/me.png"

    shown = client.get("/profile", headers=headers).json()["profile"]
    assert shown["user_id"] == candidate.id


def test_profile_phone_number_is_bounded(client, candidate):
    response = client.post("/profile", json={"phone_number": "1" * 21}, headers=auth_headers(candidate))

    assert response.status_code == 422


def test_profiles_are_per_user(client, candidate, recruiter):
    client.post("/profile", json={"phone_number": "111"}, headers=auth_headers(candidate))

    assert client.get("/profile", headers=auth_headers(recruiter)).json() == {"profile": None}
