"""
Single-row settings tables.

Each table holds at most one row, with id 1. Reads tolerate an empty table;
writes upsert that row.
"""

import logging
from typing import Any, Optional

from postgrest.exceptions import APIError

from chapel.db.repositories import BaseRepository
from chapel.models.records import Record, utc_now

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1
# PostgREST code for ".single()" matching zero rows.
NO_ROWS_CODE = "PGRST116"


class SettingsRepository(BaseRepository):
  """Base class for a table holding one settings row."""

  def get(self) -> Optional[Record]:
    """Get the settings row, or None if it was never saved."""
    try:
      response = self.table.select("*").limit(1).single().execute()
    except APIError as e:
      if e.code == NO_ROWS_CODE:
        return None
      raise
    return response.data

  def update(self, settings: Any) -> Record:
    """Create or replace the settings row."""
    data = {
      **self._to_dict(settings),
      "id": SETTINGS_ROW_ID,
      "updated_at": utc_now(),
    }
    response = self.table.upsert(data, on_conflict="id").execute()
    logger.info("Saved %s", self.table_name)
    return response.data[0] if response.data else data


class StripeSettingsRepository(SettingsRepository):
  """Stripe keys and donation options."""

  table_name = "stripe_settings"


class EmailSettingsRepository(SettingsRepository):
  """Outgoing email provider settings."""

  table_name = "email_settings"
