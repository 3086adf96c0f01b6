"""Celebrity recognition and image indexing service."""
