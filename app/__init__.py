from flask import Flask, request, abort, session, current_app
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_babel import Babel
from config import Config

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://"
)
babel = Babel()


def get_locale():
    """Select the best language for the visitor."""
    # 1. Check session
    if 'language' in session:
        return session['language']

    # 2. Check Accept-Language header
    return request.accept_languages.best_match(
        current_app.config.get('LANGUAGES', ['pl', 'en'])
    ) or current_app.config.get('BABEL_DEFAULT_LOCALE', 'pl')


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)

    # Import all models before initializing migrate (for Alembic discovery)
    from app import models  # noqa: F401

    migrate.init_app(app, db)
    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'
    csrf.init_app(app)
    limiter.init_app(app)
    babel.init_app(app, locale_selector=get_locale)

    from app.models.user import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    # Page content services, one set per application
    from app.utils.identity import FlaskLoginIdentity
    from app.utils.media_storage import MediaStorage
    from app.utils.page_repository import PageRepository
    from app.utils.page_resolver import PageResolver
    from app.utils.page_store import SqlPageStore

    repository = PageRepository(SqlPageStore(db), ttl=app.config['PAGES_CACHE_TTL'])
    app.extensions['page_repository'] = repository
    app.extensions['page_resolver'] = PageResolver(
        repository,
        default_title=app.config['DEFAULT_SEO_TITLE'],
        default_description=app.config.get('DEFAULT_SEO_DESCRIPTION', ''),
    )
    app.extensions['identity'] = FlaskLoginIdentity()

    media_storage = MediaStorage(
        app.config['PUBLIC_FOLDER'],
        max_bytes=app.config['MAX_UPLOAD_MB'] * 1024 * 1024,
    )
    app.extensions['media_storage'] = media_storage
    try:
        media_storage.ensure_directories()
    except OSError as e:
        app.logger.warning(f"Failed to create asset directories: {str(e)}")

    # Security: Check allowed hosts
    @app.before_request
    def check_host():
        allowed_hosts = app.config.get('ALLOWED_HOSTS', [])
        if allowed_hosts:
            host = request.host.split(':')[0]  # Remove port
            if host not in allowed_hosts:
                abort(403)

    # Security: Add security headers
    @app.after_request
    def add_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'

        # HSTS - Only enable when HTTPS is configured (SESSION_COOKIE_SECURE=true)
        if app.config.get('SESSION_COOKIE_SECURE'):
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        # Content Security Policy - Restrict resource loading
        csp_directives = [
            "default-src 'self'",
            "script-src 'self' 'unsafe-inline'",
            "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com",
            "font-src 'self' https://fonts.gstatic.com",
            "img-src 'self' data: blob:",
            "media-src 'self' blob:",
            "frame-ancestors 'self'",
            "form-action 'self'",
            "base-uri 'self'"
        ]
        response.headers['Content-Security-Policy'] = '; '.join(csp_directives)

        return response

    # Register blueprints
    from app.routes.auth import auth_bp
    from app.routes.admin import admin_bp
    from app.routes.site import site_bp

    app.register_blueprint(auth_bp, url_prefix='/admin')
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(site_bp)

    @app.context_processor
    def inject_site_settings():
        return {
            'site_url': app.config.get('SITE_URL', ''),
            'default_seo_title': app.config.get('DEFAULT_SEO_TITLE', ''),
        }

    return app
