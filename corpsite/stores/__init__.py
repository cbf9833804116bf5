from .jobs import JobStore
from .applications import ApplicationStore
from .blogs import BlogStore, slugify
from .comments import CommentStore
from .contacts import ContactStore

__all__ = [
    "JobStore",
    "ApplicationStore",
    "BlogStore",
    "CommentStore",
    "ContactStore",
    "slugify",
]
