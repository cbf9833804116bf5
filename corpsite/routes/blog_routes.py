from flask import Blueprint, request

from corpsite.errors import ValidationError
from corpsite.extensions import db
from corpsite.guards import admin_required, optional_principal
from corpsite.responses import page_response, success_response
from corpsite.serializers import blog_summary, blog_to_dict, comment_to_dict
from corpsite.services.query import ListParams
from corpsite.stores import BlogStore, CommentStore

blogs_bp = Blueprint("blogs", __name__)


def _store():
    return BlogStore(db.session)


def _comments():
    return CommentStore(db.session)


def _limit(default):
    raw = request.args.get("limit")
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError({"limit": "limit must be a positive integer"}, message="Invalid query parameters")
    if value < 1:
        raise ValidationError({"limit": "limit must be a positive integer"}, message="Invalid query parameters")
    return min(value, 50)


# -- public reads --------------------------------------------------------

@blogs_bp.route("", methods=["GET"])
def list_blogs():
    """Published posts; admins see every status with ``admin=true``."""
    store = _store()
    params = ListParams.from_args(request.args, store.list_spec)
    include_unpublished = False
    if request.args.get("admin") == "true":
        user = optional_principal()
        include_unpublished = user is not None and user.is_admin
    return page_response(store.list(params, include_unpublished=include_unpublished), blog_summary)


@blogs_bp.route("/featured", methods=["GET"])
def featured_blogs():
    return success_response(data=[blog_summary(blog) for blog in _store().featured()])


@blogs_bp.route("/popular", methods=["GET"])
def popular_blogs():
    return success_response(data=[blog_summary(blog) for blog in _store().popular(_limit(5))])


@blogs_bp.route("/search", methods=["GET"])
def search_blogs():
    store = _store()
    params = ListParams.from_args(request.args, store.list_spec, search_param="q", require_search=True)
    return page_response(store.search(params), blog_summary)


@blogs_bp.route("/category/<category>", methods=["GET"])
def blogs_by_category(category):
    store = _store()
    params = ListParams.from_args(request.args, store.list_spec)
    return page_response(store.by_category(category, params), blog_summary)


@blogs_bp.route("/related/<blog_id>", methods=["GET"])
def related_blogs(blog_id):
    return success_response(data=[blog_summary(blog) for blog in _store().related(blog_id, _limit(3))])


@blogs_bp.route("/<slug>", methods=["GET"])
def get_blog(slug):
    blog, comments_count = _store().get_published_by_slug(slug)
    data = blog_to_dict(blog)
    data["commentsCount"] = comments_count
    return success_response(data=data)


# -- interactions --------------------------------------------------------

@blogs_bp.route("/<blog_id>/views", methods=["PATCH"])
def increment_views(blog_id):
    views = _store().increment_views(blog_id)
    return success_response("View count updated", views=views)


@blogs_bp.route("/<blog_id>/like", methods=["PATCH"])
def like_blog(blog_id):
    likes = _store().like(blog_id)
    return success_response("Blog liked successfully", likes=likes)


# -- admin management ----------------------------------------------------

@blogs_bp.route("", methods=["POST"])
@admin_required
def create_blog():
    blog = _store().create(request.get_json(silent=True) or {})
    return success_response("Blog created successfully", blog_to_dict(blog), 201)


@blogs_bp.route("/<blog_id>", methods=["PUT"])
@admin_required
def update_blog(blog_id):
    blog = _store().update(blog_id, request.get_json(silent=True) or {})
    return success_response("Blog updated successfully", blog_to_dict(blog))


@blogs_bp.route("/<blog_id>", methods=["DELETE"])
@admin_required
def delete_blog(blog_id):
    _store().delete(blog_id)
    return success_response("Blog deleted successfully")


# -- comments ------------------------------------------------------------

@blogs_bp.route("/<blog_id>/comments", methods=["GET"])
def list_comments(blog_id):
    return success_response(data=[comment_to_dict(c) for c in _comments().approved_for(blog_id)])


@blogs_bp.route("/<blog_id>/comments", methods=["POST"])
def add_comment(blog_id):
    comment = _comments().create(blog_id, request.get_json(silent=True) or {})
    return success_response("Comment added successfully", comment_to_dict(comment), 201)


@blogs_bp.route("/comments/<comment_id>", methods=["PUT"])
@admin_required
def update_comment(comment_id):
    comment = _comments().update(comment_id, request.get_json(silent=True) or {})
    return success_response("Comment updated successfully", comment_to_dict(comment))


@blogs_bp.route("/comments/<comment_id>", methods=["DELETE"])
@admin_required
def delete_comment(comment_id):
    _comments().delete(comment_id)
    return success_response("Comment deleted successfully")


@blogs_bp.route("/comments/<comment_id>/reply", methods=["POST"])
@admin_required
def reply_to_comment(comment_id):
    comment = _comments().add_reply(comment_id, request.get_json(silent=True) or {})
    return success_response("Reply added successfully", comment_to_dict(comment))
