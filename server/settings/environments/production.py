"""Settings for production, everything sensitive comes from the environment."""

from server.settings.components import config

DEBUG = False

SECRET_KEY = config('DJANGO_SECRET_KEY')

ALLOWED_HOSTS = [
    config('DOMAIN_NAME'),
]

ACCOUNTS_SESSION_COOKIE_SECURE = True

SECURE_CONTENT_TYPE_NOSNIFF = True
