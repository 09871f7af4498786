"""Settings for local development and tests."""

from server.settings.components import config

DEBUG = True

ALLOWED_HOSTS = [
    config('DOMAIN_NAME', default='localhost'),
    'localhost',
    '127.0.0.1',
    '[::1]',
]
