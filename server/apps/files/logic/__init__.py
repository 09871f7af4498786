"""Business logic layer for files app.

Attachment upload, lookup and deletion. Posts decide which
attachments they show and in what order; this package only owns
the bytes and their metadata.
"""
