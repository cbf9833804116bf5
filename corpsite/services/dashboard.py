"""Aggregation Reporter for the admin dashboard.

Every sub-query is independent, so they all run concurrently on a thread
pool. Each worker pushes its own application context and therefore gets
its own scoped session. ``future.result()`` re-raises the first failure,
which fails the whole report; there is no partial dashboard.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
import logging
import math
import time

from sqlalchemy import func

from corpsite.models import Application, Blog, Contact, Job
from corpsite.models.application import APPLICATION_STATUSES
from corpsite.models.base import utcnow
from corpsite.models.blog import BLOG_STATUSES
from corpsite.models.contact import CONTACT_STATUSES
from corpsite.models.job import JOB_STATUSES
from corpsite.serializers import iso

logger = logging.getLogger(__name__)

GROWTH_WINDOW = timedelta(days=30)
RECENT_PER_SOURCE = 5
RECENT_ACTIVITY_LIMIT = 8
POPULAR_LIMIT = 5
POSITION_LIMIT = 10

# (upper bound in seconds, divisor, suffix); older than the last bound is months
TIME_AGO_STEPS = (
    (3600, 60, "m"),
    (86400, 3600, "h"),
    (2592000, 86400, "d"),
)


def round_half_up(value):
    return math.floor(value + 0.5)


def engagement_rate(total_views, total_comments, total_likes, total_blogs):
    """Heuristic 0-100 score: ``(views + comments*10 + likes*5) / blogs / 10``."""
    if total_blogs == 0:
        return 0
    total_engagement = total_views + total_comments * 10 + total_likes * 5
    return min(round_half_up((total_engagement / total_blogs) / 10), 100)


def time_ago(elapsed_seconds):
    seconds = math.floor(elapsed_seconds)
    if seconds < 60:
        return "Just now"
    for bound, divisor, suffix in TIME_AGO_STEPS:
        if seconds < bound:
            return f"{seconds // divisor}{suffix} ago"
    return f"{seconds // 2592000}mo ago"


def _blog_activity_title(status):
    if status == "published":
        return "New Blog Published"
    if status == "draft":
        return "Blog Draft Saved"
    return "Blog Updated"


def recent_activities(blogs, applications, now):
    """Merge recent blogs and applications into one newest-first feed."""
    activities = []
    for blog in blogs:
        activities.append({
            "id": blog["id"],
            "type": "blog",
            "title": _blog_activity_title(blog["status"]),
            "description": blog["title"],
            "at": blog["updatedAt"] or blog["createdAt"],
            "status": blog["status"],
        })
    for application in applications:
        activities.append({
            "id": application["id"],
            "type": "application",
            "title": "New Job Application",
            "description": f"{application['name']} - {application['position']}",
            "at": application["createdAt"],
            "status": application["status"],
        })

    activities.sort(key=lambda activity: activity["at"], reverse=True)
    feed = []
    for activity in activities[:RECENT_ACTIVITY_LIMIT]:
        at = activity.pop("at")
        activity["time"] = time_ago((now - at).total_seconds())
        activity["timestamp"] = iso(at)
        feed.append(activity)
    return feed


# -- sub-queries: each takes a session and returns plain data ------------

def _status_counts(model, statuses):
    def query(session):
        counts = {status: 0 for status in statuses}
        for status, count in session.query(model.status, func.count(model.id)).group_by(model.status):
            counts[status] = count
        return counts
    return query


def _count(model, *criteria):
    def query(session):
        return session.query(func.count(model.id)).filter(*criteria).scalar() or 0
    return query


def _engagement_totals(session):
    views, comments, likes = session.query(
        func.coalesce(func.sum(Blog.views), 0),
        func.coalesce(func.sum(Blog.comments), 0),
        func.coalesce(func.sum(Blog.likes), 0),
    ).one()
    return {"views": int(views), "comments": int(comments), "likes": int(likes)}


def _grouped(column, model, limit=None):
    def query(session):
        count = func.count(model.id)
        rows = session.query(column, count).group_by(column).order_by(count.desc(), column)
        if limit is not None:
            rows = rows.limit(limit)
        return [{"_id": value, "count": n} for value, n in rows]
    return query


def _recent_blogs(session):
    rows = (
        session.query(Blog.id, Blog.title, Blog.status, Blog.created_at, Blog.updated_at)
        .order_by(Blog.created_at.desc())
        .limit(RECENT_PER_SOURCE)
    )
    return [
        {"id": r.id, "title": r.title, "status": r.status, "createdAt": r.created_at, "updatedAt": r.updated_at}
        for r in rows
    ]


def _recent_applications(session):
    rows = (
        session.query(Application.id, Application.name, Application.position, Application.status, Application.created_at)
        .order_by(Application.created_at.desc())
        .limit(RECENT_PER_SOURCE)
    )
    return [
        {"id": r.id, "name": r.name, "position": r.position, "status": r.status, "createdAt": r.created_at}
        for r in rows
    ]


def _popular_blogs(session):
    rows = (
        session.query(Blog.id, Blog.title, Blog.views, Blog.comments, Blog.likes, Blog.category)
        .filter(Blog.status == "published")
        .order_by(Blog.views.desc(), Blog.id)
        .limit(POPULAR_LIMIT)
    )
    return [
        {"id": r.id, "title": r.title, "views": r.views, "comments": r.comments, "likes": r.likes, "category": r.category}
        for r in rows
    ]


class DashboardReporter:
    """Builds the dashboard snapshot.

    ``app`` and ``db`` are the long-lived handles: each worker opens an app
    context on ``app`` and queries through ``db.session``.
    """

    def __init__(self, app, db, max_workers=8):
        self.app = app
        self.db = db
        self.max_workers = max_workers

    def _run(self, query):
        with self.app.app_context():
            return query(self.db.session)

    def gather(self, queries):
        """Run ``{name: query}`` concurrently; returns ``{name: result}``."""
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(queries))) as pool:
            futures = {name: pool.submit(self._run, query) for name, query in queries.items()}
            return {name: future.result() for name, future in futures.items()}

    def build(self, now=None):
        now = now or utcnow()
        since = now - GROWTH_WINDOW
        started = time.perf_counter()

        results = self.gather({
            "blogStatus": _status_counts(Blog, BLOG_STATUSES),
            "featuredBlogs": _count(Blog, Blog.featured.is_(True)),
            "jobStatus": _status_counts(Job, JOB_STATUSES),
            "applicationStatus": _status_counts(Application, APPLICATION_STATUSES),
            "contactStatus": _status_counts(Contact, CONTACT_STATUSES),
            "engagement": _engagement_totals,
            "recentBlogs": _recent_blogs,
            "recentApplications": _recent_applications,
            "blogsByCategory": _grouped(Blog.category, Blog),
            "applicationsByPosition": _grouped(Application.position, Application, limit=POSITION_LIMIT),
            "newBlogs": _count(Blog, Blog.created_at >= since),
            "newApplications": _count(Application, Application.created_at >= since),
            "newContacts": _count(Contact, Contact.created_at >= since),
            "popularBlogs": _popular_blogs,
        })

        blog_counts = results["blogStatus"]
        total_blogs = sum(blog_counts.values())
        totals = results["engagement"]

        report = {
            "counts": {
                "blogs": {"total": total_blogs, **blog_counts, "featured": results["featuredBlogs"]},
                "jobs": _with_total(results["jobStatus"]),
                "applications": _with_total(results["applicationStatus"]),
                "contacts": _with_total(results["contactStatus"]),
            },
            "engagement": {
                "totalViews": totals["views"],
                "totalComments": totals["comments"],
                "totalLikes": totals["likes"],
                "engagementRate": engagement_rate(totals["views"], totals["comments"], totals["likes"], total_blogs),
                "averageViewsPerPost": round_half_up(totals["views"] / total_blogs) if total_blogs else 0,
                "averageCommentsPerPost": round(totals["comments"] / total_blogs, 1) if total_blogs else 0,
            },
            "distribution": {
                "blogsByCategory": results["blogsByCategory"],
                "applicationsByPosition": results["applicationsByPosition"],
            },
            "growth": {
                "last30Days": {
                    "newBlogs": results["newBlogs"],
                    "newApplications": results["newApplications"],
                    "newContacts": results["newContacts"],
                },
                "popularBlogs": results["popularBlogs"],
            },
            "recentActivities": recent_activities(results["recentBlogs"], results["recentApplications"], now),
            "lastUpdated": iso(now),
        }
        logger.info("Dashboard built in %.1f ms", (time.perf_counter() - started) * 1000)
        return report


def _with_total(counts):
    return {"total": sum(counts.values()), **counts}
