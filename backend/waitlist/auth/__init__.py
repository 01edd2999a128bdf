# waitlist/auth/__init__.py
"""
Authentication modules for the Waitlist API.

This package contains:
- context.py: Explicit authenticated context carrying the organizer id
- errors.py: Error kinds raised by the identity core
- providers.py: Google/GitHub token verification
- oauth.py: Redirect-based OAuth flow (authorize URL, signed state, code exchange)
"""
from waitlist.auth.context import AuthContext

__all__ = ["AuthContext"]
