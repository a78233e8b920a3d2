import os
from flask import Blueprint, render_template, request, jsonify, current_app
from flask_babel import gettext as _
from app.utils.media_storage import MediaError, get_media_storage
from app.utils.page_editor import EditError, apply_edits
from app.utils.page_repository import get_page_repository
from app.utils.session_guard import admin_required
from app.utils.sitemap import write_sitemap
from app.utils.slugs import generate_slug_from_name

admin_bp = Blueprint('admin', __name__)

# Defaults for new list items, per editable list
NEW_ITEM_DEFAULTS = {
    'videos': {'src': '', 'alt': '', 'startTime': 0},
    'gallery.images': {'src': '', 'alt': ''},
    'locations.cities': '',
}


def json_error(message, status=400):
    return jsonify({'success': False, 'error': message}), status


def json_payload():
    """Request JSON body as a dict; anything else reads as empty."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@admin_bp.errorhandler(413)
def too_large(e):
    max_mb = current_app.config.get('MAX_UPLOAD_MB', 50)
    return json_error(f'File too large. Maximum size is {max_mb}MB.')


# ==================== Panel ====================

@admin_bp.route('/')
@admin_required
def panel():
    """Admin panel: page list and the editor for the selected page."""
    result = get_page_repository().fetch_all()
    if not result.ok:
        current_app.logger.error(f"Admin panel could not load pages: {result.error}")

    selected_id = request.args.get('page')
    selected = None
    for page in result.pages:
        if page['id'] == selected_id:
            selected = page
            break
    if selected is None and result.pages:
        selected = result.pages[0]

    return render_template(
        'admin/panel.html',
        pages=result.pages,
        selected=selected,
        load_failed=not result.ok,
        new_item_defaults=NEW_ITEM_DEFAULTS,
    )


# ==================== Pages API ====================

@admin_bp.route('/api/pages', methods=['GET'])
@admin_required
def list_pages():
    result = get_page_repository().fetch_all()
    if not result.ok:
        return json_error(_('Nie udało się wczytać stron.'), 503)
    return jsonify({'pages': result.pages})


@admin_bp.route('/api/pages', methods=['POST'])
@admin_required
def add_page():
    """Create a subpage cloned from the main page."""
    payload = json_payload()
    name = payload.get('name') or ''
    slug = payload.get('slug') or ''
    if not isinstance(name, str) or not isinstance(slug, str):
        return json_error(_('Podaj nazwę i adres strony.'))
    name = name.strip()
    slug = slug.strip() or generate_slug_from_name(name)
    if not name or not slug:
        return json_error(_('Podaj nazwę i adres strony.'))

    page = get_page_repository().add_subpage(name, slug)
    if page is None:
        return json_error(_('Błąd podczas dodawania strony.'))

    current_app.logger.info(f"Subpage {page['slug']} created")
    return jsonify({'success': True, 'page': page}), 201


@admin_bp.route('/api/pages/<page_id>', methods=['GET'])
@admin_required
def get_page(page_id):
    page = get_page_repository().get_by_id(page_id)
    if page is None:
        return json_error(_('Nie znaleziono strony.'), 404)
    return jsonify({'page': page})


@admin_bp.route('/api/pages/<page_id>', methods=['PUT'])
@admin_required
def save_page(page_id):
    """Replace a page with the submitted working copy."""
    payload = json_payload()
    page = payload.get('page')
    if not isinstance(page, dict):
        return json_error(_('Nieprawidłowe dane strony.'))

    repository = get_page_repository()
    if not repository.update(page_id, page):
        return json_error(_('Błąd podczas zapisywania zmian.'))

    current_app.logger.info(f"Page {page_id} saved")
    return jsonify({
        'success': True,
        'message': _('Zmiany zostały zapisane pomyślnie!'),
        'page': repository.get_by_id(page_id),
    })


@admin_bp.route('/api/pages/<page_id>', methods=['DELETE'])
@admin_required
def delete_page(page_id):
    repository = get_page_repository()
    if not repository.remove_subpage(page_id):
        return json_error(_('Błąd podczas usuwania strony.'))

    main_page = repository.get_main_page()
    return jsonify({'success': True, 'main_page_id': main_page['id'] if main_page else None})


@admin_bp.route('/api/pages/<page_id>/edits', methods=['POST'])
@admin_required
def edit_page(page_id):
    """Apply edit operations to a working copy and return the new copy.

    Nothing is stored; the panel saves with PUT when the admin is done.
    """
    payload = json_payload()
    working_copy = payload.get('page')
    if working_copy is None:
        working_copy = get_page_repository().get_by_id(page_id)
        if working_copy is None:
            return json_error(_('Nie znaleziono strony.'), 404)
    if not isinstance(working_copy, dict) or working_copy.get('id') not in (None, page_id):
        return json_error(_('Nieprawidłowe dane strony.'))

    try:
        updated = apply_edits(working_copy, payload.get('edits', []))
    except EditError as e:
        current_app.logger.warning(f"Rejected edit for page {page_id}: {str(e)}")
        return json_error(str(e))

    return jsonify({'page': updated})


@admin_bp.route('/api/cache/clear', methods=['POST'])
@admin_required
def clear_cache():
    get_page_repository().clear_cache()
    return jsonify({'success': True})


# ==================== Media ====================

@admin_bp.route('/api/upload', methods=['POST'])
@admin_required
def upload_file():
    """Upload a .webp/.webm file into the public assets folder."""
    media_type = request.form.get('mediaType', 'main')
    category = request.form.get('category', 'images')

    try:
        stored = get_media_storage().save(request.files.get('file'), media_type, category)
    except MediaError as e:
        current_app.logger.warning(f"Upload rejected: {str(e)}")
        return json_error(str(e))
    except OSError as e:
        current_app.logger.error(f"Upload error: {str(e)}")
        return json_error(_('Nie udało się zapisać pliku.'), 500)

    return jsonify({
        'success': True,
        'message': 'File uploaded successfully',
        **stored,
    })


@admin_bp.route('/api/files/<media_type>/<category>', methods=['GET'])
@admin_required
def list_files(media_type, category):
    try:
        files = get_media_storage().list_files(media_type, category)
    except MediaError as e:
        return json_error(str(e))
    return jsonify({'files': files})


@admin_bp.route('/api/files', methods=['DELETE'])
@admin_required
def delete_file():
    payload = json_payload()
    try:
        deleted = get_media_storage().delete_file(payload.get('filePath'))
    except MediaError as e:
        return json_error(str(e))
    except OSError as e:
        current_app.logger.error(f"Delete file error: {str(e)}")
        return json_error(_('Nie udało się usunąć pliku.'), 500)

    if not deleted:
        return json_error('File not found', 404)
    return jsonify({'success': True, 'message': 'File deleted successfully'})


# ==================== SEO ====================

@admin_bp.route('/api/sitemap', methods=['POST'])
@admin_required
def regenerate_sitemap():
    """Rewrite sitemap.xml from the current pages."""
    result = get_page_repository().fetch_all()
    if not result.ok:
        return json_error(_('Nie udało się wczytać stron.'), 503)

    path = os.path.join(current_app.config['PUBLIC_FOLDER'], 'sitemap.xml')
    try:
        count = write_sitemap(path, result.pages, current_app.config['SITE_URL'])
    except OSError as e:
        current_app.logger.error(f"Sitemap regeneration error: {str(e)}")
        return json_error(_('Nie udało się wygenerować mapy strony.'), 500)

    return jsonify({'success': True, 'message': 'Sitemap regenerated successfully', 'urls': count})
