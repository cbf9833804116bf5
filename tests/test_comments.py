from corpsite.extensions import db
from corpsite.models import Blog

COMMENT = {"name": "Meera", "email": "Meera@Example.com", "comment": "Clear and practical."}


def _blog_comments(app, blog_id):
    with app.app_context():
        return db.session.get(Blog, blog_id).comments


def test_post_and_list_comments(app, client, create_blog):
    blog = create_blog()

    response = client.post(f"/api/blogs/{blog['id']}/comments", json={**COMMENT, "status": "rejected"})
    comment = response.get_json()["data"]

    assert response.status_code == 201
    assert comment["rating"] == 5
    assert comment["status"] == "approved"
    assert comment["email"] == "meera@example.com"
    assert comment["blog"] == blog["id"]
    assert _blog_comments(app, blog["id"]) == 1

    listed = client.get(f"/api/blogs/{blog['id']}/comments").get_json()["data"]
    assert [c["id"] for c in listed] == [comment["id"]]

    body = client.get(f"/api/blogs/{blog['slug']}").get_json()
    assert body["data"]["commentsCount"] == 1


def test_comments_disabled(app, client, create_blog):
    blog = create_blog(allowComments=False)

    response = client.post(f"/api/blogs/{blog['id']}/comments", json=COMMENT)

    assert response.status_code == 400
    assert response.get_json()["message"] == "Comments are disabled for this blog post"
    assert _blog_comments(app, blog["id"]) == 0


def test_comment_on_missing_blog(client):
    response = client.post("/api/blogs/missing/comments", json=COMMENT)
    assert response.status_code == 404
    assert response.get_json()["message"] == "Blog post not found"


def test_invalid_comment(client, create_blog):
    blog = create_blog()
    response = client.post(
        f"/api/blogs/{blog['id']}/comments",
        json={"name": "", "email": "nope", "comment": "x", "rating": 9},
    )
    errors = response.get_json()["errors"]

    assert response.status_code == 400
    assert set(errors) == {"name", "email", "rating"}


def test_moderation_hides_comment(client, admin_headers, create_blog):
    blog = create_blog()
    comment = client.post(f"/api/blogs/{blog['id']}/comments", json=COMMENT).get_json()["data"]

    response = client.put(f"/api/blogs/comments/{comment['id']}", json={"status": "rejected"}, headers=admin_headers)

    assert response.status_code == 200
    assert client.get(f"/api/blogs/{blog['id']}/comments").get_json()["data"] == []


def test_reply(client, admin_headers, create_blog):
    blog = create_blog()
    comment = client.post(f"/api/blogs/{blog['id']}/comments", json=COMMENT).get_json()["data"]

    response = client.post(
        f"/api/blogs/comments/{comment['id']}/reply",
        json={"name": "Editor", "email": "editor@example.com", "comment": "Thanks!"},
        headers=admin_headers,
    )
    replies = response.get_json()["data"]["replies"]

    assert response.status_code == 200
    assert len(replies) == 1
    assert replies[0]["name"] == "Editor"
    assert replies[0]["repliedAt"]


def test_delete_decrements_counter(app, client, admin_headers, create_blog):
    blog = create_blog()
    comment = client.post(f"/api/blogs/{blog['id']}/comments", json=COMMENT).get_json()["data"]

    response = client.delete(f"/api/blogs/comments/{comment['id']}", headers=admin_headers)

    assert response.status_code == 200
    assert _blog_comments(app, blog["id"]) == 0
    response = client.delete(f"/api/blogs/comments/{comment['id']}", headers=admin_headers)
    assert response.status_code == 404
