"""
Supabase client wrapper for Chapel.

Provides singleton access to the Supabase client, one using the anon key
(subject to Row Level Security) and one using the service role key.
"""

import logging
import os
from typing import Optional

from supabase import create_client, Client

from chapel.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_BUCKET = "images"


class SupabaseConfig:
  """Configuration for Supabase connection."""

  def __init__(self):
    self.url = os.environ.get("SUPABASE_URL")
    self.anon_key = os.environ.get("SUPABASE_ANON_KEY")
    self.service_key = os.environ.get("SUPABASE_SERVICE_KEY")
    self.image_bucket = os.environ.get("SUPABASE_IMAGE_BUCKET") or DEFAULT_IMAGE_BUCKET

  @property
  def is_configured(self) -> bool:
    """Check if Supabase is properly configured."""
    return bool(self.url and self.anon_key)

  def validate(self) -> None:
    """Raise error if not properly configured."""
    if not self.url:
      raise ConfigurationError("SUPABASE_URL environment variable not set")
    if not self.anon_key:
      raise ConfigurationError("SUPABASE_ANON_KEY environment variable not set")


class SupabaseClient:
  """
  Wrapper around Supabase client with convenience methods.

  Repositories only talk to `table()` and `storage`, which keeps them
  independent of how the underlying client was built.
  """

  def __init__(self, client: Client):
    self._client = client

  @property
  def client(self) -> Client:
    """Get the underlying Supabase client."""
    return self._client

  @property
  def storage(self):
    """Get the storage module."""
    return self._client.storage

  def table(self, name: str):
    """Get a table reference for queries."""
    return self._client.table(name)


# -----------------------------------------------------------------------------
# Singleton instances
# -----------------------------------------------------------------------------

_client: Optional[SupabaseClient] = None
_admin_client: Optional[SupabaseClient] = None
_config: Optional[SupabaseConfig] = None


def get_config() -> SupabaseConfig:
  """Get the Supabase configuration (singleton)."""
  global _config
  if _config is None:
    _config = SupabaseConfig()
  return _config


def get_client() -> SupabaseClient:
  """
  Get the Supabase client (singleton).

  Uses the anon key, which respects Row Level Security.
  """
  global _client
  if _client is None:
    config = get_config()
    config.validate()
    raw_client = create_client(config.url, config.anon_key)
    _client = SupabaseClient(raw_client)
    logger.debug("Created anon Supabase client for %s", config.url)
  return _client


def get_admin_client() -> SupabaseClient:
  """
  Get the admin Supabase client (singleton).

  Uses the service_role key, which bypasses Row Level Security.
  """
  global _admin_client
  if _admin_client is None:
    config = get_config()
    config.validate()
    if not config.service_key:
      raise ConfigurationError("SUPABASE_SERVICE_KEY environment variable not set")
    raw_client = create_client(config.url, config.service_key)
    _admin_client = SupabaseClient(raw_client)
    logger.debug("Created service-role Supabase client for %s", config.url)
  return _admin_client


def reset_clients() -> None:
  """Reset client singletons (useful for testing)."""
  global _client, _admin_client, _config
  _client = None
  _admin_client = None
  _config = None
