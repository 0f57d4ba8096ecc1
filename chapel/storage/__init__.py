"""
Object storage for Chapel.
"""

from chapel.storage.images import ImageStorage, make_object_name, object_path_from_url

__all__ = [
  "ImageStorage",
  "make_object_name",
  "object_path_from_url",
]
