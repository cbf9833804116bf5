from corpsite.extensions import db
from corpsite.models import Job
from corpsite.models.job import DEFAULT_COLOR
from tests.conftest import job_payload


def test_active_jobs_are_public(client, create_job):
    create_job(title="Open Role")
    create_job(title="Hidden Role", status="draft")

    response = client.get("/api/jobs/active")
    body = response.get_json()

    assert response.status_code == 200
    assert body["count"] == 1
    assert [job["title"] for job in body["data"]] == ["Open Role"]


def test_listing_requires_admin(client, user_headers):
    response = client.get("/api/jobs", headers=user_headers)
    assert response.status_code == 403
    assert response.get_json()["message"] == "Access denied. Admin role required."


def test_status_filter_with_second_page(client, admin_headers, create_job):
    for i in range(12):
        create_job(title=f"Active {i}")
    for i in range(3):
        create_job(title=f"Draft {i}", status="draft")

    response = client.get("/api/jobs?status=active&page=2&limit=5", headers=admin_headers)
    body = response.get_json()

    assert response.status_code == 200
    assert len(body["data"]) == 5
    assert all(job["status"] == "active" for job in body["data"])
    assert body["pagination"] == {
        "current": 2,
        "limit": 5,
        "total": 12,
        "pages": 3,
        "hasNext": True,
        "hasPrev": True,
    }


def test_pages_cover_every_match_exactly_once(client, admin_headers, create_job):
    for i in range(7):
        create_job(title=f"Job {i}")

    seen = []
    for page in (1, 2, 3):
        body = client.get(f"/api/jobs?page={page}&limit=3&sortBy=title&sortOrder=asc", headers=admin_headers).get_json()
        seen.extend(job["id"] for job in body["data"])

    assert len(seen) == 7
    assert len(set(seen)) == 7


def test_search_and_sort(client, admin_headers, create_job):
    create_job(title="Piping Designer", department="Design")
    create_job(title="Site Engineer")
    create_job(title="Piping Supervisor")

    body = client.get("/api/jobs?search=piping&sortBy=title&sortOrder=asc", headers=admin_headers).get_json()

    assert [job["title"] for job in body["data"]] == ["Piping Designer", "Piping Supervisor"]


def test_search_treats_wildcards_literally(client, admin_headers, create_job):
    create_job(title="Engineer")
    body = client.get("/api/jobs?search=%25", headers=admin_headers).get_json()
    assert body["data"] == []


def test_create_reports_every_missing_field(client, admin_headers):
    response = client.post("/api/jobs", json={}, headers=admin_headers)
    body = response.get_json()

    assert response.status_code == 400
    assert body["success"] is False
    assert set(body["errors"]) == {
        "title", "department", "type", "location", "experience", "salary", "description", "requirements",
    }


def test_single_requirement_string_is_wrapped(create_job):
    job = create_job(requirements="B.E. Civil")
    assert job["requirements"] == ["B.E. Civil"]
    assert job["color"] == DEFAULT_COLOR
    assert job["applications"] == 0


def test_update_revalidates_the_merged_record(client, admin_headers, create_job):
    job = create_job()

    response = client.put(f"/api/jobs/{job['id']}", json={"type": "Gig"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.get_json()["errors"] == {"type": "Invalid job type"}

    response = client.put(f"/api/jobs/{job['id']}", json={"salary": "12 LPA"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()["data"]["salary"] == "12 LPA"


def test_status_patch(client, admin_headers, create_job):
    job = create_job()

    response = client.patch(f"/api/jobs/{job['id']}/status", json={"status": "closed"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()["data"]["status"] == "closed"

    response = client.patch(f"/api/jobs/{job['id']}/status", json={"status": "frozen"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid status value"


def test_unknown_job_is_404(client, admin_headers):
    response = client.get("/api/jobs/does-not-exist", headers=admin_headers)
    assert response.status_code == 404
    assert response.get_json()["message"] == "Job not found"


def test_delete_refused_while_applications_exist(app, client, admin_headers, create_job, submit_application):
    job = create_job()
    assert submit_application(job["id"]).status_code == 201

    response = client.delete(f"/api/jobs/{job['id']}", headers=admin_headers)
    assert response.status_code == 409
    assert response.get_json()["message"] == "Cannot delete job with existing applications"

    with app.app_context():
        assert db.session.get(Job, job["id"]) is not None


def test_delete_job_without_applications(app, client, admin_headers, create_job):
    job = create_job()
    response = client.delete(f"/api/jobs/{job['id']}", headers=admin_headers)
    assert response.status_code == 200
    with app.app_context():
        assert db.session.get(Job, job["id"]) is None


def test_stats(client, admin_headers, create_job, submit_application):
    job = create_job()
    create_job(status="draft")
    submit_application(job["id"])

    data = client.get("/api/jobs/stats", headers=admin_headers).get_json()["data"]

    assert data["total"] == 2
    assert data["active"] == 1
    by_status = {row["_id"]: row for row in data["byStatus"]}
    assert by_status["active"]["totalApplications"] == 1
    assert by_status["draft"]["count"] == 1


def test_unknown_status_filter_matches_nothing(client, admin_headers, create_job):
    create_job()
    response = client.get("/api/jobs?status=bogus", headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()["data"] == []
    assert response.get_json()["pagination"]["total"] == 0


def test_huge_page_is_a_bad_request(client, admin_headers, create_job):
    create_job()

    response = client.get("/api/jobs?page=99999999999999999999", headers=admin_headers)

    assert response.status_code == 400
    assert response.get_json()["errors"] == {"page": "page is too large"}


def test_page_past_the_end_is_empty(client, admin_headers, create_job):
    create_job()
    body = client.get("/api/jobs?page=1000", headers=admin_headers).get_json()
    assert body["data"] == []
    assert body["pagination"]["total"] == 1
    assert body["pagination"]["hasNext"] is False


def test_overlong_fields_are_reported(client, admin_headers):
    response = client.post(
        "/api/jobs",
        json=job_payload(department="d" * 256, location="l" * 256, salary="s" * 256),
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert set(response.get_json()["errors"]) == {"department", "location", "salary"}
