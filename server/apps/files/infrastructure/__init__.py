"""Infrastructure layer for files app.

Integrations with external systems:
- S3-compatible storage backend for file content
- Metadata helpers (MIME type, checksum, filename handling)

Keep infrastructure concerns separate from business logic.
"""
