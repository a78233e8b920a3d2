from flask import Blueprint, render_template, redirect, url_for, flash, request, current_app
from flask_babel import lazy_gettext as _l
from flask_login import current_user
from urllib.parse import urlparse
from app import limiter
from app.utils.identity import get_identity

auth_bp = Blueprint('auth', __name__)


# Rate limit error handler
@auth_bp.errorhandler(429)
def ratelimit_handler(e):
    flash(_l('Zbyt wiele prób logowania. Spróbuj ponownie za kilka minut.'), 'error')
    return redirect(request.url)


def is_safe_url(target):
    """Check if the URL is safe for redirect (prevents open redirect attacks)."""
    if not target:
        return False
    ref_url = urlparse(request.host_url)
    test_url = urlparse(target)
    # Allow relative URLs (no scheme or netloc) or same host
    return test_url.scheme in ('', 'http', 'https') and ref_url.netloc == test_url.netloc or \
           (not test_url.scheme and not test_url.netloc)


@auth_bp.route('/login', methods=['GET', 'POST'])
@limiter.limit("10 per minute", methods=["POST"])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('admin.panel'))

    if request.method == 'POST':
        username = request.form.get('username', '').strip()
        password = request.form.get('password', '')

        user = get_identity().sign_in_with_credentials(username, password)
        if user:
            current_app.logger.info(f"Admin {user.username} logged in")
            next_page = request.args.get('next')
            # Validate redirect URL to prevent open redirect attacks
            if not next_page or not is_safe_url(next_page):
                next_page = url_for('admin.panel')
            return redirect(next_page)

        flash(_l('Nieprawidłowy login lub hasło'), 'error')

    return render_template('auth/login.html')


@auth_bp.route('/logout')
def logout():
    if current_user.is_authenticated:
        get_identity().sign_out()
        flash(_l('Wylogowano.'), 'info')
    return redirect(url_for('auth.login'))
