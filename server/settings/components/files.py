"""Upload validation settings."""

from server.settings.components import config

# Content types accepted by the upload endpoint
FILES_ALLOWED_CONTENT_TYPES = frozenset((
    'image/jpeg',
    'image/png',
    'application/pdf',
))

# Upload size ceiling in bytes (512 KB)
FILES_MAX_UPLOAD_SIZE = config(
    'FILES_MAX_UPLOAD_SIZE',
    cast=int,
    default=512 * 1024,
)

# How many times an upload re-probes for a free name after losing a race
FILES_NAME_RETRY_LIMIT = config(
    'FILES_NAME_RETRY_LIMIT',
    cast=int,
    default=3,
)
