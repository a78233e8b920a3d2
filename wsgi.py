import os
from app import create_app
from werkzeug.middleware.proxy_fix import ProxyFix

app = create_app()

# Trust reverse proxy headers (X-Forwarded-Proto, X-Forwarded-Host, etc.)
# This is required when running behind Nginx
app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

if __name__ == "__main__":
    debug_mode = os.environ.get('FLASK_DEBUG', 'false').lower() == 'true'
    app.run(port=int(os.environ.get('PORT', 3001)), debug=debug_mode)
