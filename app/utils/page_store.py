"""SQLAlchemy-backed storage for landing pages.

The store speaks in rows (dicts keyed by column name) and knows nothing about
caching. Every database failure is rolled back and re-raised as
``StorageError`` so the repository can decide what the caller sees.
"""
import logging
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

# Columns a caller may write; id, is_main and timestamps are managed here
WRITABLE_COLUMNS = (
    'name', 'slug', 'seo_title', 'seo_description',
    'navigation', 'videos', 'welcome_section', 'stats',
    'gallery', 'locations', 'footer',
)


class StorageError(Exception):
    """Raised when the database rejects or fails a page operation."""


class SqlPageStore:
    """Page rows in the ``pages`` table."""

    def __init__(self, db):
        self.db = db

    @property
    def _model(self):
        from app.models.page import Page
        return Page

    def _fail(self, action, error):
        self.db.session.rollback()
        logger.error(f"Page store {action} failed: {str(error)}")
        raise StorageError(f"{action} failed: {str(error)}") from error

    def select_all(self):
        """All rows, main page first, then in creation order."""
        Page = self._model
        try:
            pages = Page.query.order_by(
                Page.is_main.desc(),
                Page.created_at.asc()
            ).all()
            return [page.to_row() for page in pages]
        except SQLAlchemyError as e:
            self._fail('select', e)

    def update(self, page_id, fields):
        """Overwrite the writable columns of one row. Returns the number of rows changed."""
        Page = self._model
        values = {key: fields[key] for key in WRITABLE_COLUMNS if key in fields}
        if 'slug' in values:
            values['is_main'] = values['slug'] == '/'
        try:
            page = self.db.session.get(Page, page_id)
            if page is None:
                return 0
            for key, value in values.items():
                setattr(page, key, value)
            self.db.session.commit()
            return 1
        except SQLAlchemyError as e:
            self._fail('update', e)

    def insert(self, fields):
        """Insert a row and return it as stored."""
        Page = self._model
        values = {key: fields[key] for key in WRITABLE_COLUMNS if key in fields}
        try:
            if fields.get('id'):
                values['id'] = fields['id']
            page = Page(is_main=bool(fields.get('is_main', False)), **values)
            self.db.session.add(page)
            self.db.session.commit()
            return page.to_row()
        except SQLAlchemyError as e:
            self._fail('insert', e)

    def delete(self, page_id):
        """Delete a subpage. The main page never matches, so deleting it affects zero rows."""
        Page = self._model
        try:
            count = Page.query.filter(
                Page.id == page_id,
                Page.is_main == False  # noqa: E712
            ).delete(synchronize_session=False)
            self.db.session.commit()
            return count
        except SQLAlchemyError as e:
            self._fail('delete', e)
