"""Business logic for uploaded files.

- ``file_registry``: upload, listing, rename, delete and download
- ``upload_namer``: collision-free names for uploads
- ``ownership``: each user's ordered ``file_ids`` list
- ``cascade``: deletions that keep files, lists and users consistent
"""
