"""Infrastructure adapters for the FOCCACIA service.

This package contains the football API client and the storage backends.
"""
