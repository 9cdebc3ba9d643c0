import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from jobboard import models
from jobboard.auth import create_access_token, hash_password
from jobboard.database import Base, get_db, make_engine
from jobboard.errors import StorageError
from jobboard.main import app
from jobboard.storage import AssetStorage, get_storage

PDF_BYTES = b"%PDF-1.4 fake cv"


class FailingStorage(AssetStorage):
    """Storage whose put and/or delete always fail."""

    def __init__(self, root, fail_on=("delete",)):
        super().__init__(root, signing_key="test-signing-key")
        self.fail_on = set(fail_on)

    def put(self, data, directory, extension):
        if "put" in self.fail_on:
            raise StorageError()
        return super().put(data, directory, extension)

    def delete(self, reference):
        if "delete" in self.fail_on:
            raise StorageError()
        return super().delete(reference)


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def storage(tmp_path):
    return AssetStorage(tmp_path / "files", signing_key="test-signing-key")


@pytest.fixture
def client(session_factory, storage):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def use_storage():
    """Swap the storage the API uses, e.g. for a FailingStorage."""

    def _use(replacement):
        app.dependency_overrides[get_storage] = lambda: replacement
        return replacement

    return _use


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role=models.UserRole.CANDIDATE, name=None, email=None, password="password123"):
        counter["n"] += 1
        n = counter["n"]
        user = models.User(
            name=name or f"{role.value.title()} {n}",
            email=email or f"{role.value}{n}@example.com",
            hashed_password=hash_password(password),
            role=role,
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def candidate(make_user):
    return make_user(models.UserRole.CANDIDATE)


@pytest.fixture
def recruiter(make_user):
    return make_user(models.UserRole.RECRUITER)


@pytest.fixture
def admin(make_user):
    return make_user(models.UserRole.ADMIN)


@pytest.fixture
def make_job_offer(db):
    def _make(recruiter, status=models.JobOfferStatus.PUBLISHED, title="Backend Engineer"):
        job_offer = models.JobOffer(
            title=title,
            description="Build and run our APIs",
            location="Remote",
            contract_type=models.ContractType.FULL_TIME,
            salary=55000,
            recruiter_id=recruiter.id,
            status=status,
        )
        db.add(job_offer)
        db.commit()
        db.refresh(job_offer)
        return job_offer

    return _make


@pytest.fixture
def make_application(db):
    def _make(candidate, job_offer, status=models.ApplicationStatus.PENDING, cv_path=None):
        application = models.Application(
            user_id=candidate.id,
            job_offer_id=job_offer.id,
            cover_letter="I would love to join.",
            status=status,
            cv_path=cv_path,
        )
        db.add(application)
        db.commit()
        db.refresh(application)
        return application

    return _make


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user, uuid.uuid4().hex)}"}


def pdf_upload(name="cv.pdf", content=PDF_BYTES):
    return {"cv": (name, content, "application/pdf")}
