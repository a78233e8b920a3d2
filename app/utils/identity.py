"""Identity provider for the admin panel, backed by Flask-Login."""
from flask import current_app, has_request_context, request
from flask_login import current_user, login_user, logout_user, user_logged_in, user_logged_out
from app import db


class FlaskLoginIdentity:
    """Session lookup, sign in/out and session-change notifications.

    Notifications come from Flask-Login's ``user_logged_in`` and
    ``user_logged_out`` signals; callbacks receive the user, or None after
    a logout.
    """

    def get_current_session(self):
        """The logged-in user, or None."""
        if current_user and current_user.is_authenticated:
            return current_user._get_current_object()
        return None

    def on_session_change(self, callback):
        """Call ``callback(session)`` on every login/logout. Returns an unsubscribe function.

        When subscribed during a request, only logins/logouts made in that
        same request are reported; other requests belong to other sessions.
        """
        owner = request._get_current_object() if has_request_context() else None

        def same_session():
            if owner is None:
                return True
            return has_request_context() and request._get_current_object() is owner

        def on_login(sender, user=None, **extra):
            if same_session():
                callback(user)

        def on_logout(sender, user=None, **extra):
            if same_session():
                callback(None)

        # Receivers are local functions, so keep strong references
        user_logged_in.connect(on_login, weak=False)
        user_logged_out.connect(on_logout, weak=False)

        def unsubscribe():
            user_logged_in.disconnect(on_login)
            user_logged_out.disconnect(on_logout)

        return unsubscribe

    def sign_in_with_credentials(self, username, password):
        """Log in with username/password. Returns the user or None."""
        from app.models.user import User

        if not username or not password:
            return None
        user = User.query.filter_by(username=username).first()
        if not user or not user.is_active or not user.check_password(password):
            current_app.logger.info(f"Failed admin login for {username!r}")
            return None

        user.record_login(request.remote_addr)
        db.session.commit()
        login_user(user)
        return user

    def sign_out(self):
        logout_user()


def get_identity():
    return current_app.extensions['identity']
