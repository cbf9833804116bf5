import io
import os

from corpsite.extensions import db
from corpsite.models import Application, Job
from tests.conftest import application_payload


def _job_counter(app, job_id):
    with app.app_context():
        return db.session.get(Job, job_id).applications


def _application_count(app, job_id):
    with app.app_context():
        return db.session.query(Application).filter_by(job_id=job_id).count()


def test_submit_application(app, create_job, submit_application):
    job = create_job(title="Piping Engineer")

    response = submit_application(job["id"], email="Asha@Example.com")
    body = response.get_json()

    assert response.status_code == 201
    assert body["message"] == "Application submitted successfully"
    assert body["data"]["position"] == "Piping Engineer"
    assert body["data"]["email"] == "asha@example.com"
    assert body["data"]["status"] == "new"
    assert body["data"]["skills"] == ["AutoCAD", "STAAD Pro"]
    assert body["data"]["job"]["id"] == job["id"]
    assert _job_counter(app, job["id"]) == 1


def test_draft_job_rejects_applications(app, create_job, submit_application):
    job = create_job(status="draft")

    response = submit_application(job["id"])

    assert response.status_code == 400
    assert response.get_json()["message"] == "Job not found or not active"
    assert _job_counter(app, job["id"]) == 0
    assert _application_count(app, job["id"]) == 0


def test_unknown_job_rejects_applications(submit_application):
    response = submit_application("no-such-job")
    assert response.status_code == 400
    assert response.get_json()["message"] == "Job not found or not active"


def test_duplicate_application_conflicts(app, create_job, submit_application):
    job = create_job()
    assert submit_application(job["id"]).status_code == 201

    response = submit_application(job["id"], email="ASHA@example.com")

    assert response.status_code == 409
    assert response.get_json()["message"] == "You have already applied for this position"
    assert _job_counter(app, job["id"]) == 1


def test_same_person_may_apply_to_different_jobs(create_job, submit_application):
    first = create_job(title="First")
    second = create_job(title="Second")
    assert submit_application(first["id"]).status_code == 201
    assert submit_application(second["id"]).status_code == 201


def test_counter_matches_stored_applications(app, create_job, submit_application):
    job = create_job()
    for i in range(3):
        assert submit_application(job["id"], email=f"candidate{i}@example.com").status_code == 201
    submit_application(job["id"], email="candidate0@example.com")

    assert _job_counter(app, job["id"]) == _application_count(app, job["id"]) == 3


def test_missing_fields_are_all_reported(client):
    response = client.post("/api/applications", json={})
    errors = response.get_json()["errors"]

    assert response.status_code == 400
    assert {"jobId", "name", "email", "phone", "experience", "expectedSalary", "noticePeriod"} <= set(errors)


def test_resume_upload_and_download(app, client, admin_headers, create_job):
    job = create_job()
    data = application_payload(job["id"])
    data["resume"] = (io.BytesIO(b"%PDF-1.4 resume"), "asha cv.pdf")

    response = client.post("/api/applications", data=data, content_type="multipart/form-data")
    body = response.get_json()

    assert response.status_code == 201
    resume = body["data"]["resume"]
    assert resume["originalName"] == "asha_cv.pdf"
    assert resume["size"] == len(b"%PDF-1.4 resume")
    assert os.path.exists(resume["path"])

    download = client.get(f"/api/applications/{body['data']['id']}/resume", headers=admin_headers)
    assert download.status_code == 200
    assert download.data == b"%PDF-1.4 resume"
    assert "attachment" in download.headers["Content-Disposition"]


def test_resume_with_wrong_extension_is_rejected(app, client, create_job):
    job = create_job()
    data = application_payload(job["id"])
    data["resume"] = (io.BytesIO(b"plain text"), "cv.txt")

    response = client.post("/api/applications", data=data, content_type="multipart/form-data")

    assert response.status_code == 400
    assert "resume" in response.get_json()["errors"]
    assert _application_count(app, job["id"]) == 0


def test_rejected_submission_leaves_no_resume_behind(app, client, create_job):
    job = create_job(status="closed")
    data = application_payload(job["id"])
    data["resume"] = (io.BytesIO(b"%PDF-1.4"), "cv.pdf")

    response = client.post("/api/applications", data=data, content_type="multipart/form-data")

    assert response.status_code == 400
    folder = os.path.join(app.config["UPLOAD_FOLDER"], "resumes")
    assert not os.path.isdir(folder) or os.listdir(folder) == []


def test_delete_removes_resume_file(client, admin_headers, create_job):
    job = create_job()
    data = application_payload(job["id"])
    data["resume"] = (io.BytesIO(b"%PDF-1.4"), "cv.pdf")
    created = client.post("/api/applications", data=data, content_type="multipart/form-data").get_json()["data"]

    response = client.delete(f"/api/applications/{created['id']}", headers=admin_headers)

    assert response.status_code == 200
    assert not os.path.exists(created["resume"]["path"])


def test_missing_resume_is_404(client, admin_headers, create_job, submit_application):
    job = create_job()
    application = submit_application(job["id"]).get_json()["data"]

    response = client.get(f"/api/applications/{application['id']}/resume", headers=admin_headers)

    assert response.status_code == 404
    assert response.get_json()["message"] == "Resume not found"


def test_list_filters_and_status_patch(client, admin_headers, create_job, submit_application):
    job = create_job()
    first = submit_application(job["id"], email="one@example.com").get_json()["data"]
    submit_application(job["id"], email="two@example.com")

    response = client.patch(
        f"/api/applications/{first['id']}/status", json={"status": "interview"}, headers=admin_headers
    )
    assert response.status_code == 200

    body = client.get("/api/applications?status=interview", headers=admin_headers).get_json()
    assert [a["id"] for a in body["data"]] == [first["id"]]
    assert body["pagination"]["total"] == 1

    body = client.get("/api/applications?search=two@", headers=admin_headers).get_json()
    assert [a["email"] for a in body["data"]] == ["two@example.com"]

    response = client.patch(
        f"/api/applications/{first['id']}/status", json={"status": "ghosted"}, headers=admin_headers
    )
    assert response.status_code == 400


def test_stats(client, admin_headers, create_job, submit_application):
    job = create_job()
    submit_application(job["id"], email="one@example.com")
    submit_application(job["id"], email="two@example.com")

    data = client.get("/api/applications/stats", headers=admin_headers).get_json()["data"]

    assert data["total"] == 2
    assert data["new"] == 2


def test_overlong_fields_are_reported(app, create_job, submit_application):
    job = create_job()

    response = submit_application(job["id"], phone="9" * 51, expectedSalary="x" * 256, noticePeriod="n" * 256)

    assert response.status_code == 400
    assert set(response.get_json()["errors"]) == {"phone", "expectedSalary", "noticePeriod"}
    assert _application_count(app, job["id"]) == 0
