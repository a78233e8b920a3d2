"""
Public site routes - landing pages, uploaded assets and SEO files
"""
from datetime import datetime, timezone
import os
from flask import Blueprint, render_template, abort, current_app, jsonify, send_from_directory
from app.utils.page_resolver import get_page_resolver, path_to_slug

site_bp = Blueprint('site', __name__)


def _send_public_file(filename, mimetype):
    public_folder = current_app.config['PUBLIC_FOLDER']
    if not os.path.isfile(os.path.join(public_folder, filename)):
        abort(404)
    return send_from_directory(public_folder, filename, mimetype=mimetype)


@site_bp.route('/robots.txt')
def robots():
    return _send_public_file('robots.txt', 'text/plain')


@site_bp.route('/sitemap.xml')
def sitemap():
    return _send_public_file('sitemap.xml', 'application/xml')


@site_bp.route('/assets/<path:filename>')
def assets(filename):
    """Serve uploaded media from the public assets folder."""
    assets_folder = os.path.join(current_app.config['PUBLIC_FOLDER'], 'assets')
    return send_from_directory(assets_folder, filename, max_age=86400)


@site_bp.route('/api/health')
def health():
    return jsonify({
        'status': 'OK',
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })


@site_bp.route('/', defaults={'path': ''})
@site_bp.route('/<path:path>')
def page(path):
    """Render a landing page by slug; unknown slugs get the not-found page."""
    slug = path_to_slug(path)
    page_data = get_page_resolver().resolve(slug)
    if page_data is None:
        current_app.logger.info(f"No page for slug {slug}")
        return render_template('site/not_found.html', slug=slug), 404
    return render_template('site/page.html', page=page_data)
