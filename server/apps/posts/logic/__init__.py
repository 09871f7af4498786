"""Business logic layer for posts app.

Post lifecycle (create, update, delete), listing, full-text
search and the tag registry. Every write runs in one database
transaction and invalidates the post caches synchronously.
"""
