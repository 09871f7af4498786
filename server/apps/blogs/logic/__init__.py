"""Business logic layer for blogs app.

Blog lookup, default blog creation for new users, the user's
active blog and follow relationships between blogs.
"""
