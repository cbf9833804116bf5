from corpsite.errors import NotFoundError, ValidationError
from corpsite.models import Blog, Comment
from corpsite.models.base import utcnow
from corpsite.models.comment import COMMENT_STATUSES
from corpsite.validation import Validator, clean_str, to_int
from .base import BaseStore

COMMENTS_DISABLED_MESSAGE = "Comments are disabled for this blog post"


class CommentStore(BaseStore):
    model = Comment
    not_found_message = "Comment not found"
    fields = {
        "name": "name",
        "email": "email",
        "comment": "comment",
        "rating": "rating",
        "status": "status",
    }

    def normalize(self, data):
        data = super().normalize(data)
        if isinstance(data.get("email"), str):
            data["email"] = data["email"].lower()
        if "rating" in data:
            data["rating"] = to_int(data["rating"])
        return data

    def validate(self, data, record=None):
        (
            Validator(data)
            .required("name", "Name is required")
            .max_length("name", 100, "Name cannot exceed 100 characters")
            .required("email", "Email is required")
            .email("email")
            .max_length("email", 255, "Email cannot exceed 255 characters")
            .required("comment", "Comment is required")
            .max_length("comment", 1000, "Comment cannot exceed 1000 characters")
            .integer("rating", minimum=1, maximum=5, message="Rating must be between 1 and 5")
            .one_of("status", COMMENT_STATUSES, "Invalid status")
            .check()
        )

    def _blog(self, blog_id):
        blog = self.session.get(Blog, blog_id)
        if blog is None:
            raise NotFoundError("Blog post not found")
        return blog

    def approved_for(self, blog_id):
        self._blog(blog_id)
        return (
            self.query()
            .filter(Comment.blog_id == blog_id, Comment.status == "approved")
            .order_by(Comment.created_at.desc(), Comment.id)
            .all()
        )

    def create(self, blog_id, data):
        """Post a public comment; the blog's ``comments`` counter moves in the same commit."""
        blog = self._blog(blog_id)
        if not blog.allow_comments:
            raise ValidationError({"blog": COMMENTS_DISABLED_MESSAGE}, message=COMMENTS_DISABLED_MESSAGE)

        data = self.normalize(data)
        data.pop("status", None)
        if data.get("rating") in (None, ""):
            data["rating"] = 5
        self.validate(data)

        comment = self.assign(Comment(blog_id=blog.id), data)
        self.session.add(comment)
        self.session.flush()
        self._blog_counter(blog.id, 1)
        self.commit()
        return comment

    def delete(self, comment_id):
        comment = self.get(comment_id)
        blog_id = comment.blog_id
        self.session.delete(comment)
        self._blog_counter(blog_id, -1)
        self.commit()

    def add_reply(self, comment_id, data):
        comment = self.get(comment_id)
        reply = {key: clean_str(data.get(key)) for key in ("name", "email", "comment")}
        if isinstance(reply["email"], str):
            reply["email"] = reply["email"].lower()
        (
            Validator(reply)
            .required("name", "Name is required")
            .email("email")
            .required("comment", "Reply is required")
            .max_length("comment", 1000, "Reply cannot exceed 1000 characters")
            .check()
        )
        reply["repliedAt"] = utcnow().isoformat()
        comment.replies.append(reply)
        self.commit()
        return comment

    def _blog_counter(self, blog_id, delta):
        query = self.session.query(Blog).filter(Blog.id == blog_id)
        if delta < 0:
            query = query.filter(Blog.comments > 0)
        query.update({Blog.comments: Blog.comments + delta}, synchronize_session=False)
