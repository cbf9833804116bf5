"""Model -> JSON dict helpers. Keys follow the public camelCase API."""


def iso(value):
    return value.isoformat() if value else None


def _timestamps(obj):
    return {"createdAt": iso(obj.created_at), "updatedAt": iso(obj.updated_at)}


def user_to_dict(user):
    # password is never serialized
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "isActive": user.is_active,
        "createdAt": iso(user.created_at),
    }


def job_to_dict(job):
    return {
        "id": job.id,
        "title": job.title,
        "department": job.department,
        "type": job.type,
        "location": job.location,
        "experience": job.experience,
        "salary": job.salary,
        "description": job.description,
        "requirements": list(job.requirements or []),
        "status": job.status,
        "color": job.color,
        "applications": job.applications,
        "postedBy": job.posted_by,
        **_timestamps(job),
    }


def application_to_dict(application, include_job=True):
    data = {
        "id": application.id,
        "name": application.name,
        "email": application.email,
        "phone": application.phone,
        "position": application.position,
        "jobId": application.job_id,
        "experience": application.experience,
        "currentCompany": application.current_company,
        "expectedSalary": application.expected_salary,
        "noticePeriod": application.notice_period,
        "resume": application.resume,
        "coverLetter": application.cover_letter,
        "skills": list(application.skills or []),
        "education": application.education,
        "status": application.status,
        "notes": application.notes,
        **_timestamps(application),
    }
    if include_job and application.job is not None:
        data["job"] = {
            "id": application.job.id,
            "title": application.job.title,
            "department": application.job.department,
        }
    return data


def blog_to_dict(blog, include_content=True):
    data = {
        "id": blog.id,
        "title": blog.title,
        "slug": blog.slug,
        "excerpt": blog.excerpt,
        "featuredImage": dict(blog.featured_image or {}),
        "author": dict(blog.author or {}),
        "category": blog.category,
        "tags": list(blog.tags or []),
        "readingTime": blog.reading_time,
        "views": blog.views,
        "likes": blog.likes,
        "shares": blog.shares,
        "comments": blog.comments,
        "featured": blog.featured,
        "allowComments": blog.allow_comments,
        "status": blog.status,
        "publishedAt": iso(blog.published_at),
        "seo": dict(blog.seo or {}),
        **_timestamps(blog),
    }
    if include_content:
        data["content"] = blog.content
    return data


def blog_summary(blog):
    """Listing form: everything but the body."""
    return blog_to_dict(blog, include_content=False)


def comment_to_dict(comment):
    return {
        "id": comment.id,
        "blog": comment.blog_id,
        "name": comment.name,
        "email": comment.email,
        "comment": comment.comment,
        "rating": comment.rating,
        "status": comment.status,
        "replies": list(comment.replies or []),
        **_timestamps(comment),
    }


def contact_to_dict(contact):
    data = {
        "id": contact.id,
        "name": contact.name,
        "email": contact.email,
        "phone": contact.phone,
        "company": contact.company,
        "subject": contact.subject,
        "message": contact.message,
        "status": contact.status,
        "priority": contact.priority,
        "assignedTo": None,
        "isRead": contact.is_read,
        "notes": list(contact.notes or []),
        **_timestamps(contact),
    }
    if contact.assignee is not None:
        data["assignedTo"] = {
            "id": contact.assignee.id,
            "name": contact.assignee.name,
            "email": contact.assignee.email,
        }
    return data
