"""Infrastructure layer for posts app.

- Namespaced cache over Django's cache framework
- Fuzzy full-text search index over posts
"""
