import pytest

from config import Config
from corpsite import create_app
from corpsite.extensions import db
from corpsite.models import User
from corpsite.services.auth import AuthService


@pytest.fixture
def app(tmp_path):
    class TestConfig(Config):
        TESTING = True
        APP_ENV = "test"
        DEBUG = False
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'test.db'}"
        JWT_SECRET_KEY = "test-secret-key-that-is-long-enough-for-hs256"
        UPLOAD_FOLDER = str(tmp_path / "uploads")
        DASHBOARD_WORKERS = 4
        AUTO_CREATE_TABLES = True

    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _headers(app, email, role):
    with app.app_context():
        service = AuthService(db.session)
        if role == "admin":
            user = service.set_admin_password(email, "secret123", name="Admin")
        else:
            user = User(name="Reader", email=email, password=service.hash_password("secret123"), role="user")
            db.session.add(user)
            db.session.commit()
        token = AuthService.create_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(app):
    return _headers(app, "admin@example.com", "admin")


@pytest.fixture
def user_headers(app):
    return _headers(app, "reader@example.com", "user")


def job_payload(**overrides):
    payload = {
        "title": "Site Engineer",
        "department": "Engineering",
        "type": "Full-time",
        "location": "Pune",
        "experience": "3-5 years",
        "salary": "8 LPA",
        "description": "Supervise structural works.",
        "requirements": ["B.E. Civil", "Site experience"],
        "status": "active",
    }
    payload.update(overrides)
    return payload


def blog_payload(**overrides):
    payload = {
        "title": "Steel Erection Basics",
        "excerpt": "What to check before lifting.",
        "content": "Long form content about steel erection.",
        "author": {"name": "Engineering Desk"},
        "category": "Structural Engineering",
        "tags": ["steel", "safety"],
        "readingTime": 5,
    }
    payload.update(overrides)
    return payload


def application_payload(job_id, **overrides):
    payload = {
        "name": "Asha Rao",
        "email": "asha@example.com",
        "phone": "9876543210",
        "jobId": job_id,
        "experience": "4 years",
        "expectedSalary": "9 LPA",
        "noticePeriod": "30 days",
        "skills": "AutoCAD, STAAD Pro",
    }
    payload.update(overrides)
    return payload


def contact_payload(**overrides):
    payload = {
        "name": "Ravi Kumar",
        "email": "ravi@example.com",
        "phone": "+919876543210",
        "company": "Acme Infra",
        "subject": "Project enquiry",
        "message": "We need a quote for a piping package.",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def create_job(client, admin_headers):
    def _create(**overrides):
        response = client.post("/api/jobs", json=job_payload(**overrides), headers=admin_headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["data"]
    return _create


@pytest.fixture
def create_blog(client, admin_headers):
    def _create(**overrides):
        response = client.post("/api/blogs", json=blog_payload(**overrides), headers=admin_headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["data"]
    return _create


@pytest.fixture
def submit_application(client):
    def _submit(job_id, **overrides):
        return client.post("/api/applications", json=application_payload(job_id, **overrides))
    return _submit
