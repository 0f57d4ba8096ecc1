"""
Repositories for the email newsletter tables.
"""

import logging

from chapel.db.repositories import CrudRepository
from chapel.models.records import Record, SubscriberStatus, utc_now

logger = logging.getLogger(__name__)


class EmailSubscriberRepository(CrudRepository):
  """Repository for newsletter subscribers."""

  table_name = "email_subscribers"
  stamp_updated_at = True

  def unsubscribe(self, email: str) -> Record:
    """Mark a subscriber as unsubscribed by email address."""
    now = utc_now()
    response = (
      self.table.update({
        "status": SubscriberStatus.UNSUBSCRIBED.value,
        "unsubscribed_at": now,
        "updated_at": now,
      })
      .eq("email", email)
      .execute()
    )
    record = self._require_row(response, email)
    logger.info("Unsubscribed %s", email)
    return record


class EmailTemplateRepository(CrudRepository):
  """Repository for reusable email templates."""

  table_name = "email_templates"
  stamp_updated_at = True


class EmailCampaignRepository(CrudRepository):
  """Repository for email campaigns."""

  table_name = "email_campaigns"
  stamp_updated_at = True
