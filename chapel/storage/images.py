"""
Image storage helpers (Supabase Storage + public URLs).

Uploaded images get a random, timestamped object name under a folder in the
image bucket; callers keep only the public URL, and deletion works back from
that URL to the object path.
"""

import logging
import time
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse
from uuid import uuid4

from chapel.db.client import SupabaseClient, get_client, get_config
from chapel.errors import InvalidImageURLError
from chapel.models.records import ImageFile

logger = logging.getLogger(__name__)

DEFAULT_FOLDER = "general"
CACHE_CONTROL_SECONDS = "3600"


def make_object_name(original_name: str) -> str:
  """Random token plus epoch millis, keeping the original extension."""
  token = uuid4().hex[:13]
  millis = int(time.time() * 1000)
  return f"{token}_{millis}{Path(original_name).suffix}"


def object_path_from_url(url: str, bucket: str) -> str:
  """
  Extract the object path that follows the bucket segment of a URL.

  Public URLs look like .../storage/v1/object/public/<bucket>/<path>, so the
  segment right after "object/public" is preferred; this keeps buckets named
  like a route segment ("public", "object") from matching too early.

  Raises:
    InvalidImageURLError: if no path segment equals the bucket name.
  """
  parts = urlparse(url).path.split("/")
  candidates = [i for i, part in enumerate(parts) if part == bucket]
  if not candidates:
    raise InvalidImageURLError(url, bucket)
  bucket_index = next(
    (i for i in candidates if i >= 2 and parts[i - 2:i] == ["object", "public"]),
    candidates[0],
  )
  object_path = "/".join(unquote(part) for part in parts[bucket_index + 1:])
  if not object_path:
    raise InvalidImageURLError(url, bucket)
  return object_path


def _extract_public_url(result: object) -> Optional[str]:
  # storage3 has returned both a bare string and a dict across releases.
  if isinstance(result, dict):
    url = result.get("publicUrl") or result.get("publicURL") or result.get("public_url")
    if isinstance(url, str) and url.strip():
      return url.strip()
  if isinstance(result, str) and result.strip():
    return result.strip()
  return None


class ImageStorage:
  """Upload and delete images in the configured bucket."""

  def __init__(self, client: Optional[SupabaseClient] = None, bucket: Optional[str] = None):
    self._client = client or get_client()
    self.bucket = bucket or get_config().image_bucket

  @property
  def _bucket(self):
    return self._client.storage.from_(self.bucket)

  def upload_image(self, file: ImageFile | str | Path, folder: str = DEFAULT_FOLDER) -> str:
    """Upload an image and return its public URL."""
    if not isinstance(file, ImageFile):
      file = ImageFile.from_path(file)

    object_path = f"{folder}/{make_object_name(file.name)}"
    self._bucket.upload(
      object_path,
      file.content,
      {
        "content-type": file.mime_type,
        "cache-control": CACHE_CONTROL_SECONDS,
        "upsert": "false",
      },
    )
    logger.debug("Uploaded %s (%d bytes) to %s/%s", file.name, len(file.content), self.bucket, object_path)

    url = _extract_public_url(self._bucket.get_public_url(object_path))
    if not url:
      raise RuntimeError(f"Storage returned no public URL for {object_path}")
    return url

  def delete_image(self, url: str) -> bool:
    """Delete the object behind a URL returned by upload_image."""
    object_path = object_path_from_url(url, self.bucket)
    self._bucket.remove([object_path])
    logger.debug("Removed %s/%s", self.bucket, object_path)
    return True
