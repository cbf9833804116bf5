import logging
import os
import secrets
import time

from werkzeug.utils import secure_filename

from corpsite.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_RESUME_EXTENSIONS = (".pdf", ".doc", ".docx")


class ResumeStorage:
    """Stores uploaded resumes on local disk under ``<folder>/resumes``."""

    def __init__(self, folder, max_size):
        self.folder = os.path.join(folder, "resumes")
        self.max_size = max_size

    def save(self, file_storage):
        """Persist a werkzeug ``FileStorage`` and return the resume descriptor."""
        original_name = file_storage.filename or ""
        extension = os.path.splitext(original_name)[1].lower()
        if extension not in ALLOWED_RESUME_EXTENSIONS:
            raise ValidationError({"resume": "Only PDF, DOC, and DOCX files are allowed"})

        stream = file_storage.stream
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(0)
        if size > self.max_size:
            raise ValidationError({"resume": "Resume cannot exceed 5MB"})

        os.makedirs(self.folder, exist_ok=True)
        filename = f"resume-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{extension}"
        path = os.path.join(self.folder, filename)
        file_storage.save(path)
        logger.info("Saved resume %s (%d bytes)", filename, size)

        return {
            "filename": filename,
            "originalName": secure_filename(original_name) or filename,
            "path": path,
            "size": size,
        }

    def remove(self, path):
        """Best-effort delete; failures are logged, never raised."""
        if not path:
            return False
        try:
            os.remove(path)
            return True
        except OSError as e:
            logger.warning("Error deleting resume file %s: %s", path, e)
            return False
