"""Object storage adapters."""

from .object_storage import ObjectStorage, build_object_storage

__all__ = ["ObjectStorage", "build_object_storage"]
