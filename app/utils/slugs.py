"""Slug helpers for landing page URLs."""
import re
import unicodedata

_SLUG_RE = re.compile(r'^/[a-z0-9]+(?:-[a-z0-9]+)*(?:/[a-z0-9]+(?:-[a-z0-9]+)*)*$')


def generate_slug_from_name(name):
    """Turn a page name into a URL segment ('Gdańsk Wrzeszcz' -> 'gdansk-wrzeszcz')."""
    text = unicodedata.normalize('NFD', name or '')
    text = ''.join(ch for ch in text if not unicodedata.combining(ch))
    text = text.lower()
    text = re.sub(r'[^a-z0-9\s-]', '', text)
    text = text.strip()
    text = re.sub(r'\s+', '-', text)
    return re.sub(r'-+', '-', text)


def normalize_slug(slug):
    """Strip whitespace and make sure the slug starts with '/'."""
    slug = (slug or '').strip()
    if not slug:
        return ''
    return slug if slug.startswith('/') else f'/{slug}'


def validate_slug(slug):
    """Check slug format: '/' for the main page, otherwise '/lowercase-words'."""
    if not isinstance(slug, str):
        return False
    if slug == '/':
        return True
    if not slug or len(slug) > 200:
        return False
    return bool(_SLUG_RE.match(slug))
