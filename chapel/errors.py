"""
Application errors for Chapel.

Backend failures (postgrest APIError, storage and network errors) are not
wrapped; they reach the caller exactly as the Supabase client raised them.
"""


class ChapelError(Exception):
  """Base class for errors raised by this package."""


class ConfigurationError(ChapelError, ValueError):
  """Supabase connection settings are missing."""


class LastAdminError(ChapelError):
  """Raised when a demotion would leave no admin profile."""

  def __init__(self, message: str = "Cannot demote the last admin user"):
    super().__init__(message)


class InvalidImageURLError(ChapelError, ValueError):
  """The URL does not point into the image bucket."""

  def __init__(self, url: str, bucket: str):
    self.url = url
    self.bucket = bucket
    super().__init__(f"Invalid image URL (expected bucket '{bucket}'): {url}")


class RecordNotFoundError(ChapelError, LookupError):
  """An update matched no row."""

  def __init__(self, table: str, record_id: str):
    self.table = table
    self.record_id = record_id
    super().__init__(f"No row in '{table}' with id {record_id}")


class EmptyWriteResponseError(ChapelError):
  """An insert succeeded but the backend returned no row."""

  def __init__(self, table: str):
    self.table = table
    super().__init__(f"Insert into '{table}' returned no row")
