"""Resolve request paths to landing pages ready for rendering."""
from flask import current_app


def path_to_slug(path):
    """Map a request path ('gdansk/', '/gdansk', '') to a page slug ('/gdansk', '/')."""
    path = (path or '').strip().strip('/')
    return f'/{path}' if path else '/'


class PageResolver:
    """Look up pages by slug and fill SEO defaults for rendering."""

    def __init__(self, repository, default_title, default_description=''):
        self.repository = repository
        self.default_title = default_title
        self.default_description = default_description

    def apply_seo_defaults(self, page):
        seo = page.get('seo') or {}
        page['seo'] = {
            'title': seo.get('title') or self.default_title,
            'description': seo.get('description') or self.default_description,
        }
        return page

    def resolve(self, slug):
        """Return the page for ``slug`` with SEO defaults applied, or None if there is none."""
        page = self.repository.get_by_slug(slug)
        if page is None:
            return None
        return self.apply_seo_defaults(page)

    def resolve_path(self, path):
        return self.resolve(path_to_slug(path))


def get_page_resolver():
    """The resolver bound to the current application."""
    return current_app.extensions['page_resolver']
