"""Page repository: reads and writes landing pages through a time-boxed cache.

Reads go through an in-process cache of the full page list. Any write
(update, add, remove) clears the whole cache. Storage failures never
propagate: they are logged and turned into an empty, ``None`` or ``False``
result, while ``fetch_all`` keeps the error detail for callers that want it.
"""
import copy
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional

from flask import current_app

from app.models.page import (
    MAIN_PAGE_SLUG,
    STRUCTURAL_FIELDS,
    db_row_to_page_data,
    new_page_id,
    page_data_to_db_row,
    page_shape_problem,
)
from app.utils.page_store import StorageError
from app.utils.slugs import normalize_slug, validate_slug

logger = logging.getLogger(__name__)

CACHE_DURATION = 5 * 60  # seconds


@dataclass
class FetchResult:
    """Outcome of reading the page list from storage or cache."""
    pages: List[dict] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self):
        return self.error is None


class PageRepository:
    """Sole reader and writer of landing pages.

    Args:
        store: storage collaborator (``select_all``, ``update``, ``insert``, ``delete``)
        clock: callable returning seconds, used for cache age
        ttl: staleness window in seconds
    """

    def __init__(self, store, clock=time.monotonic, ttl=CACHE_DURATION):
        self.store = store
        self.clock = clock
        self.ttl = ttl
        self._lock = threading.RLock()
        self._pages = []
        self._fetched_at = None

    # ---- cache ----

    def _cache_is_fresh(self, now):
        return bool(self._pages) and self._fetched_at is not None and now - self._fetched_at < self.ttl

    def clear_cache(self):
        """Drop cached pages so the next read hits storage."""
        with self._lock:
            self._pages = []
            self._fetched_at = None

    # ---- reads ----

    def fetch_all(self):
        """Return all pages as a ``FetchResult``, refreshing the cache when stale."""
        with self._lock:
            now = self.clock()
            if self._cache_is_fresh(now):
                return FetchResult(pages=copy.deepcopy(self._pages))

            try:
                rows = self.store.select_all()
            except StorageError as e:
                logger.error(f"Error loading pages: {str(e)}")
                return FetchResult(error=str(e))
            except Exception as e:
                logger.exception("Unexpected error loading pages")
                return FetchResult(error=str(e))

            pages = [db_row_to_page_data(row) for row in rows]
            self._pages = pages
            self._fetched_at = now
            return FetchResult(pages=copy.deepcopy(pages))

    def load_all(self):
        """All pages, main page first. Empty when nothing exists or storage failed."""
        return self.fetch_all().pages

    def get_all_pages(self):
        return self.load_all()

    def get_by_slug(self, slug):
        """Exact slug lookup over the cached page list."""
        for page in self.load_all():
            if page['slug'] == slug:
                return page
        return None

    def get_by_id(self, page_id):
        for page in self.load_all():
            if page['id'] == page_id:
                return page
        return None

    def get_main_page(self):
        return self.get_by_slug(MAIN_PAGE_SLUG)

    # ---- writes ----

    def _validate_update(self, page_id, data):
        """Return an error message if ``data`` cannot replace page ``page_id``."""
        if not page_id:
            return 'missing page id'
        problem = page_shape_problem(data)
        if problem:
            return problem
        if data.get('id') not in (None, page_id):
            return 'page id cannot change'
        name = data.get('name')
        if not isinstance(name, str) or not name.strip():
            return 'page name is required'
        slug = data.get('slug')
        if not validate_slug(slug):
            return f'invalid slug {slug!r}'

        main = self.get_main_page()
        if main is not None:
            if main['id'] == page_id and slug != MAIN_PAGE_SLUG:
                return 'the main page must keep slug "/"'
            if main['id'] != page_id and slug == MAIN_PAGE_SLUG:
                return 'only the main page can use slug "/"'
        return None

    def update(self, page_id, data):
        """Replace the stored page ``page_id`` with ``data``. Returns True on success."""
        problem = self._validate_update(page_id, data)
        if problem:
            logger.warning(f"Rejected update of page {page_id}: {problem}")
            return False

        row = page_data_to_db_row(data)
        try:
            changed = self.store.update(page_id, row)
        except StorageError as e:
            logger.error(f"Error updating page {page_id}: {str(e)}")
            return False
        except Exception:
            logger.exception(f"Unexpected error updating page {page_id}")
            return False

        if not changed:
            logger.warning(f"Update of page {page_id} matched no rows")
            return False

        self.clear_cache()
        return True

    def add_subpage(self, name, slug):
        """Create a subpage cloned from the main page. Returns the new page or None."""
        if not isinstance(name, str) or not isinstance(slug, str):
            logger.warning(f"Rejected new subpage name={name!r} slug={slug!r}")
            return None
        name = name.strip()
        slug = normalize_slug(slug)
        if not name or not validate_slug(slug) or slug == MAIN_PAGE_SLUG:
            logger.warning(f"Rejected new subpage name={name!r} slug={slug!r}")
            return None

        main_page = self.get_main_page()
        if main_page is None:
            logger.error("Error adding new page: main page not found")
            return None
        if self.get_by_slug(slug) is not None:
            logger.warning(f"Rejected new subpage: slug {slug} already exists")
            return None

        data = {
            'id': new_page_id(),
            'name': name,
            'slug': slug,
            'seo': {'title': '', 'description': ''},
        }
        for key in STRUCTURAL_FIELDS:
            data[key] = copy.deepcopy(main_page[key])

        try:
            row = self.store.insert(page_data_to_db_row(data))
        except StorageError as e:
            logger.error(f"Error adding new page: {str(e)}")
            return None
        except Exception:
            logger.exception("Unexpected error adding new page")
            return None

        self.clear_cache()
        return db_row_to_page_data(row)

    def remove_subpage(self, page_id):
        """Delete a subpage. The main page is never removed. Returns True if a page was deleted."""
        try:
            deleted = self.store.delete(page_id)
        except StorageError as e:
            logger.error(f"Error removing page {page_id}: {str(e)}")
            return False
        except Exception:
            logger.exception(f"Unexpected error removing page {page_id}")
            return False

        if not deleted:
            logger.warning(f"Page {page_id} was not removed (main page or unknown id)")
            return False

        self.clear_cache()
        return True


def get_page_repository():
    """The repository bound to the current application."""
    return current_app.extensions['page_repository']
