"""Infrastructure layer for files app.

Integrations with external systems:
- Custom S3-compatible storage backend
- Metadata extraction (MIME type, checksum, storage paths)
"""
