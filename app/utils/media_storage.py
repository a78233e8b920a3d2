"""File-backed storage for uploaded page media (.webp images, .webm videos).

Files live under ``<public>/assets/<media_type>/<category>/`` and are served
from ``/assets/<media_type>/<category>/<filename>``.
"""
import logging
import os
from datetime import datetime, timezone

from flask import current_app
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'.webp', '.webm'}
MEDIA_TYPES = ('main', 'subpages')
CATEGORIES = ('images', 'videos')
MAX_UPLOAD_BYTES = 50 * 1024 * 1024


class MediaError(Exception):
    """Base class for rejected uploads and file operations."""


class MissingFileError(MediaError):
    pass


class InvalidExtensionError(MediaError):
    pass


class FileTooLargeError(MediaError):
    pass


class InvalidDestinationError(MediaError):
    pass


def _extension(filename):
    return os.path.splitext(filename)[1].lower()


def _stream_size(stream):
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


class MediaStorage:
    """Save, list and delete media files in the public assets folder."""

    def __init__(self, public_root, max_bytes=MAX_UPLOAD_BYTES):
        self.public_root = os.path.realpath(public_root)
        self.max_bytes = max_bytes

    @property
    def max_mb(self):
        return self.max_bytes // (1024 * 1024)

    def _directory(self, media_type, category):
        if media_type not in MEDIA_TYPES or category not in CATEGORIES:
            raise InvalidDestinationError('Invalid parameters')
        return os.path.join(self.public_root, 'assets', media_type, category)

    def ensure_directories(self):
        """Create every assets/<media_type>/<category> folder."""
        for media_type in MEDIA_TYPES:
            for category in CATEGORIES:
                os.makedirs(self._directory(media_type, category), exist_ok=True)

    def save(self, file, media_type, category):
        """Store an uploaded ``FileStorage`` and return its public path, name and size."""
        if file is None or not file.filename:
            raise MissingFileError('No file uploaded')

        if _extension(file.filename) not in ALLOWED_EXTENSIONS:
            raise InvalidExtensionError('Only .webp and .webm files are allowed')

        filename = secure_filename(file.filename)
        if not filename or _extension(filename) not in ALLOWED_EXTENSIONS:
            raise InvalidExtensionError('Only .webp and .webm files are allowed')

        size = _stream_size(file.stream)
        if size > self.max_bytes:
            raise FileTooLargeError(f'File too large. Maximum size is {self.max_mb}MB.')

        directory = self._directory(media_type, category)
        os.makedirs(directory, exist_ok=True)
        file.save(os.path.join(directory, filename))
        logger.info(f"Stored upload {media_type}/{category}/{filename} ({size} bytes)")

        return {
            'path': f'/assets/{media_type}/{category}/{filename}',
            'filename': filename,
            'size': size,
        }

    def list_files(self, media_type, category):
        """Media files in one folder, sorted by name."""
        directory = self._directory(media_type, category)
        if not os.path.isdir(directory):
            return []

        files = []
        for name in sorted(os.listdir(directory)):
            if _extension(name) not in ALLOWED_EXTENSIONS:
                continue
            path = os.path.join(directory, name)
            stats = os.stat(path)
            files.append({
                'name': name,
                'path': f'/assets/{media_type}/{category}/{name}',
                'size': stats.st_size,
                'modified': datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc).isoformat(),
            })
        return files

    def resolve_public_path(self, public_path):
        """Absolute filesystem path for a public path, or None if it escapes the public folder."""
        if not public_path or not isinstance(public_path, str):
            return None
        if '..' in public_path or '~' in public_path:
            return None
        full_path = os.path.realpath(os.path.join(self.public_root, public_path.lstrip('/')))
        if not full_path.startswith(self.public_root + os.sep):
            return None
        return full_path

    def delete_file(self, public_path):
        """Delete a file by public path. Returns False if it does not exist."""
        full_path = self.resolve_public_path(public_path)
        if full_path is None:
            raise InvalidDestinationError('Invalid file path')
        if not os.path.isfile(full_path):
            return False
        os.remove(full_path)
        logger.info(f"Deleted media file {public_path}")
        return True


def get_media_storage():
    return current_app.extensions['media_storage']
