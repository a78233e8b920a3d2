"""sitemap.xml generation from the landing pages."""
import logging
import os
from datetime import date
from xml.sax.saxutils import escape

logger = logging.getLogger(__name__)


def _priority(index):
    """Priority of the n-th subpage in display order."""
    if index < 4:
        return '0.8'
    if index < 10:
        return '0.7'
    return '0.6'


def _url_entry(loc, lastmod, changefreq, priority):
    return (
        '  <url>\n'
        f'    <loc>{escape(loc)}</loc>\n'
        f'    <lastmod>{lastmod}</lastmod>\n'
        f'    <changefreq>{changefreq}</changefreq>\n'
        f'    <priority>{priority}</priority>\n'
        '  </url>\n'
    )


def build_sitemap(pages, site_url, today=None):
    """Render sitemap XML for ``pages`` (main page first, then subpages in order).

    Returns:
        tuple: (xml string, number of URLs)
    """
    lastmod = (today or date.today()).isoformat()
    site_url = site_url.rstrip('/')

    entries = [_url_entry(f'{site_url}/', lastmod, 'weekly', '1.0')]
    subpages = [page for page in pages if page.get('slug') and page['slug'] != '/']
    for index, page in enumerate(subpages):
        entries.append(_url_entry(f"{site_url}{page['slug']}", lastmod, 'monthly', _priority(index)))

    xml = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        + ''.join(entries)
        + '</urlset>\n'
    )
    return xml, len(entries)


def write_sitemap(path, pages, site_url, today=None):
    """Write sitemap.xml and return the number of URLs it lists."""
    xml, count = build_sitemap(pages, site_url, today)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(xml)
    logger.info(f"Sitemap written to {path} ({count} URLs)")
    return count
