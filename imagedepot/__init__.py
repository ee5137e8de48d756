"""HTTP service for uploading, listing, downloading and deleting image files."""

__version__ = "0.1.0"
