"""Gate for the admin panel, driven by the identity provider's session state."""
import logging
from functools import wraps

from flask import redirect, request, url_for

from app.utils.identity import get_identity

logger = logging.getLogger(__name__)

LOADING = 'loading'
ALLOWED = 'allowed'
REDIRECT = 'redirect'


class SessionGuard:
    """Tracks whether there is a session while the guard is mounted.

    ``is_authenticated`` is None until the first session check completes,
    so callers can tell "still checking" apart from "not logged in".
    Session changes reported by the identity provider update it until
    ``unmount`` detaches the subscription.
    """

    def __init__(self, identity):
        self.identity = identity
        self.is_authenticated = None
        self._unsubscribe = None

    @property
    def state(self):
        if self.is_authenticated is None:
            return LOADING
        return ALLOWED if self.is_authenticated else REDIRECT

    @property
    def mounted(self):
        return self._unsubscribe is not None

    def _on_session_change(self, session):
        self.is_authenticated = session is not None

    def mount(self):
        if self.mounted:
            return self
        self.is_authenticated = self.identity.get_current_session() is not None
        self._unsubscribe = self.identity.on_session_change(self._on_session_change)
        return self

    def unmount(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __enter__(self):
        return self.mount()

    def __exit__(self, exc_type, exc, tb):
        self.unmount()
        return False


def admin_required(f):
    """Require a logged-in admin; anonymous visitors are sent to the login page."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        with SessionGuard(get_identity()) as guard:
            if guard.state != ALLOWED:
                logger.info(f"Redirecting anonymous request for {request.path} to login")
                return redirect(url_for('auth.login', next=request.path))
            return f(*args, **kwargs)
    return decorated_function
