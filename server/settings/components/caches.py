"""Cache configuration.

Posts are cached per id and per listing query; see
``server.apps.posts.infrastructure.cache``.
"""

from server.settings.components import config

CACHES = {
    'default': {
        'BACKEND': config(
            'DJANGO_CACHE_BACKEND',
            default='django.core.cache.backends.locmem.LocMemCache',
        ),
        'LOCATION': config('DJANGO_CACHE_LOCATION', default='microblog'),
    },
}
