"""Session and authentication settings."""

from server.settings.components import config

# Name of the cookie carrying the session key
ACCOUNTS_SESSION_COOKIE_NAME = config(
    'ACCOUNTS_SESSION_COOKIE_NAME',
    default='fm_session',
)

# Session lifetime in seconds (fixed, not sliding)
ACCOUNTS_SESSION_TIMEOUT = config(
    'ACCOUNTS_SESSION_TIMEOUT',
    cast=int,
    default=60 * 60,
)

ACCOUNTS_SESSION_COOKIE_PATH = '/'
ACCOUNTS_SESSION_COOKIE_HTTPONLY = True
ACCOUNTS_SESSION_COOKIE_SECURE = config(
    'ACCOUNTS_SESSION_COOKIE_SECURE',
    cast=bool,
    default=False,
)
ACCOUNTS_SESSION_COOKIE_SAMESITE = 'Lax'
