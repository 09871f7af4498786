"""Microblog domain settings."""

from server.settings.components import config

# Seconds a cached post or listing page stays valid
POSTS_CACHE_TIMEOUT = config('POSTS_CACHE_TIMEOUT', cast=int, default=300)

# Default number of posts per listing/search page
POSTS_PAGE_SIZE = config('POSTS_PAGE_SIZE', cast=int, default=20)

# Maximum edit distance for fuzzy full-text search
POSTS_SEARCH_FUZZINESS = config('POSTS_SEARCH_FUZZINESS', cast=int, default=2)

# Reject updates whose attachment ordering references unknown ids
# instead of skipping the reordering step
POSTS_STRICT_ATTACHMENT_ORDER = config(
    'POSTS_STRICT_ATTACHMENT_ORDER',
    cast=bool,
    default=False,
)
