"""Landing page model and the row <-> page data mapping.

Page data is handled as a plain JSON-compatible dict with camelCase keys,
the same shape the admin panel sends and receives. Rows use the snake_case
column names of the ``pages`` table.
"""
import copy
import uuid
from datetime import datetime
from app import db


MAIN_PAGE_SLUG = '/'

# Structural fields copied from the main page when a subpage is created
STRUCTURAL_FIELDS = (
    'navigation', 'videos', 'welcomeSection', 'stats',
    'gallery', 'locations', 'footer',
)

# page data key -> column name
FIELD_COLUMNS = {
    'navigation': 'navigation',
    'videos': 'videos',
    'welcomeSection': 'welcome_section',
    'stats': 'stats',
    'gallery': 'gallery',
    'locations': 'locations',
    'footer': 'footer',
}


def empty_navigation():
    return {'facebookUrl': '', 'instagramUrl': ''}


def empty_welcome_section():
    return {'welcomeText': '', 'subtitle': ''}


def empty_stats():
    return {'clientsCount': '0', 'yearsOnMarket': '0', 'smilesCount': '0'}


def empty_footer():
    return {
        'facebookUrl': '',
        'facebookText': '',
        'instagramUrl': '',
        'instagramText': '',
        'phoneNumber': '',
    }


FIELD_DEFAULTS = {
    'navigation': empty_navigation,
    'videos': list,
    'welcomeSection': empty_welcome_section,
    'stats': empty_stats,
    'gallery': lambda: {'images': []},
    'locations': lambda: {'cities': []},
    'footer': empty_footer,
}


def new_page_id():
    """Generate an opaque page identifier."""
    return str(uuid.uuid4())


class Page(db.Model):
    """One landing page: the main page (slug '/') or a city subpage."""
    __tablename__ = 'pages'

    id = db.Column(db.String(36), primary_key=True, default=new_page_id)
    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), unique=True, nullable=False, index=True)
    is_main = db.Column(db.Boolean, default=False, nullable=False)

    # SEO
    seo_title = db.Column(db.String(255), nullable=True)
    seo_description = db.Column(db.Text, nullable=True)

    # Nested content, stored as JSON documents
    navigation = db.Column(db.JSON, nullable=True)
    videos = db.Column(db.JSON, nullable=True)
    welcome_section = db.Column(db.JSON, nullable=True)
    stats = db.Column(db.JSON, nullable=True)
    gallery = db.Column(db.JSON, nullable=True)
    locations = db.Column(db.JSON, nullable=True)
    footer = db.Column(db.JSON, nullable=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<Page {self.slug}>'

    def to_row(self):
        """Return the column values as a plain dict."""
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'is_main': self.is_main,
            'seo_title': self.seo_title,
            'seo_description': self.seo_description,
            'navigation': self.navigation,
            'videos': self.videos,
            'welcome_section': self.welcome_section,
            'stats': self.stats,
            'gallery': self.gallery,
            'locations': self.locations,
            'footer': self.footer,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }


def db_row_to_page_data(row):
    """Convert a ``pages`` row (dict) into page data.

    Missing nested objects are replaced by empty defaults. SEO fields stay
    empty strings here; the site-wide default title is applied when a page
    is resolved for rendering.
    """
    data = {
        'id': row.get('id'),
        'name': row.get('name') or '',
        'slug': row.get('slug') or '',
        'seo': {
            'title': row.get('seo_title') or '',
            'description': row.get('seo_description') or '',
        },
    }
    for field, column in FIELD_COLUMNS.items():
        value = row.get(column)
        data[field] = copy.deepcopy(value) if value is not None else FIELD_DEFAULTS[field]()
    return data


def page_data_to_db_row(data):
    """Convert page data into ``pages`` column values."""
    seo = data.get('seo') or {}
    row = {
        'id': data.get('id'),
        'name': data.get('name'),
        'slug': data.get('slug'),
        'is_main': data.get('slug') == MAIN_PAGE_SLUG,
        'seo_title': seo.get('title'),
        'seo_description': seo.get('description'),
    }
    for field, column in FIELD_COLUMNS.items():
        row[column] = copy.deepcopy(data.get(field))
    return row


def default_page_data(name, slug):
    """Build empty page data, used when seeding a fresh site."""
    data = {
        'id': None,
        'name': name,
        'slug': slug,
        'seo': {'title': '', 'description': ''},
    }
    for field in FIELD_COLUMNS:
        data[field] = FIELD_DEFAULTS[field]()
    return data


# Object fields and the array each array-holding field wraps
OBJECT_FIELDS = ('seo', 'navigation', 'welcomeSection', 'stats', 'footer')
WRAPPED_ARRAYS = {'gallery': 'images', 'locations': 'cities'}


def _is_seconds(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0


def page_shape_problem(data):
    """Describe the first way ``data`` departs from the page layout, or return None.

    Nested fields may be absent (they read back as empty defaults) but when
    present they must have the documented shape.
    """
    if not isinstance(data, dict):
        return 'page must be an object'

    for field in OBJECT_FIELDS:
        value = data.get(field)
        if value is not None and not isinstance(value, dict):
            return f'{field} must be an object'

    seo = data.get('seo') or {}
    for key in ('title', 'description'):
        if seo.get(key) is not None and not isinstance(seo[key], str):
            return f'seo.{key} must be text'

    videos = data.get('videos')
    if videos is not None:
        if not isinstance(videos, list):
            return 'videos must be a list'
        for video in videos:
            if not isinstance(video, dict):
                return 'each video must be an object'
            if video.get('startTime') is not None and not _is_seconds(video['startTime']):
                return 'video startTime must be a non-negative number of seconds'

    for field, key in WRAPPED_ARRAYS.items():
        value = data.get(field)
        if value is None:
            continue
        if not isinstance(value, dict) or not isinstance(value.get(key), list):
            return f'{field}.{key} must be a list'

    if not all(isinstance(image, dict) for image in (data.get('gallery') or {}).get('images') or []):
        return 'each gallery image must be an object'
    if not all(isinstance(city, str) for city in (data.get('locations') or {}).get('cities') or []):
        return 'each city must be text'
    return None
