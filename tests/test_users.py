from conftest import auth_headers

from jobboard import models


def test_only_admins_list_users(client, candidate, recruiter, admin):
    assert client.get("/users", headers=auth_headers(candidate)).status_code == 403
    assert client.get("/users", headers=auth_headers(recruiter)).status_code == 403

    response = client.get("/users", headers=auth_headers(admin))
    assert response.status_code == 200
    assert {u["id"] for u in response.json()} == {candidate.id, recruiter.id, admin.id}


def test_view_user_rules(client, make_user, candidate, recruiter, admin):
    other_candidate = make_user(models.UserRole.CANDIDATE)
    other_recruiter = make_user(models.UserRole.RECRUITER)

    def status(viewer, target):
        return client.get(f"/users/{target.id}", headers=auth_headers(viewer)).status_code

    assert status(candidate, candidate) == 200
    assert status(candidate, other_candidate) == 403
    assert status(recruiter, candidate) == 200
    assert status(recruiter, other_recruiter) == 403
    assert status(admin, other_recruiter) == 200
    assert client.get("/users/9999", headers=auth_headers(admin)).status_code == 404


def test_update_self_or_admin(client, db, make_user, candidate, admin):
    python = models.Skill(name="Python")
    db.add(python)
    db.commit()

    own = client.patch(
        f"/users/{candidate.id}",
        json={"name": "Renamed", "skills": [python.id]},
        headers=auth_headers(candidate),
    )
    assert own.status_code == 200
    assert own.json()["name"] == "Renamed"
    assert [s["name"] for s in own.json()["skills"]] == ["Python"]

    stranger = make_user(models.UserRole.RECRUITER)
    assert client.patch(
        f"/users/{candidate.id}", json={"name": "Nope"}, headers=auth_headers(stranger)
    ).status_code == 403

    by_admin = client.patch(f"/users/{candidate.id}", json={"name": "Fixed"}, headers=auth_headers(admin))
    assert by_admin.status_code == 200


def test_email_must_stay_unique(client, make_user, candidate):
    other = make_user(email="other@example.com")

    response = client.patch(
        f"/users/{candidate.id}", json={"email": other.email}, headers=auth_headers(candidate)
    )

    assert response.status_code == 422


def test_deleting_user_releases_their_files(
    client, db, storage, candidate, recruiter, admin, make_job_offer, make_application
):
    candidate_id = candidate.id
    application_file = storage.put(b"%PDF a", "cvs", "pdf")
    cv_file = storage.put(b"%PDF b", f"cvs/{candidate.id}", "pdf")
    make_application(candidate, make_job_offer(recruiter), cv_path=application_file)
    db.add(models.CV(user_id=candidate.id, title="CV", file_path=cv_file, file_type="pdf"))
    db.commit()

    assert client.delete(f"/users/{candidate.id}", headers=auth_headers(recruiter)).status_code == 403

    response = client.delete(f"/users/{candidate_id}", headers=auth_headers(admin))

    assert response.status_code == 200
    db.expire_all()
    assert db.get(models.User, candidate_id) is None
    assert db.query(models.Application).count() == 0
    assert db.query(models.CV).count() == 0
    assert not storage.path_for(application_file).exists()
    assert not storage.path_for(cv_file).exists()


def test_deleting_recruiter_removes_offers_and_applicant_files(
    client, db, storage, candidate, recruiter, make_job_offer, make_application
):
    path = storage.put(b"%PDF", "cvs", "pdf")
    make_application(candidate, make_job_offer(recruiter), cv_path=path)

    response = client.delete(f"/users/{recruiter.id}", headers=auth_headers(recruiter))

    assert response.status_code == 200
    db.expire_all()
    assert db.query(models.JobOffer).count() == 0
    assert db.query(models.Application).count() == 0
    assert db.get(models.User, candidate.id) is not None
    assert not storage.path_for(path).exists()
