from .user import User
from .job import Job
from .application import Application
from .blog import Blog, BlogTag
from .comment import Comment
from .contact import Contact

__all__ = [
    "User",
    "Job",
    "Application",
    "Blog",
    "BlogTag",
    "Comment",
    "Contact",
]
