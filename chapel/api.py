"""
Single entry point grouping every repository by namespace.

  api = get_api()
  api.sermons.featured()
  api.users.demote_from_admin(user_id)
  api.storage.upload_image("photo.jpg", folder="gallery")
"""

from typing import Optional

from chapel.db.client import SupabaseClient, get_admin_client, get_client
from chapel.db.email import (
  EmailCampaignRepository,
  EmailSubscriberRepository,
  EmailTemplateRepository,
)
from chapel.db.profiles import ProfileRepository
from chapel.db.repositories import (
  AppointmentRepository,
  DonationRepository,
  EventRepository,
  GalleryRepository,
  MemberRepository,
  PrayerRequestRepository,
  SermonRepository,
  TestimonialRepository,
)
from chapel.db.settings import EmailSettingsRepository, StripeSettingsRepository
from chapel.storage.images import ImageStorage
from chapel.sync.bus import EventPublisher, get_event_bus


class ChurchAPI:
  """All data access for the church site, sharing one client and one bus."""

  def __init__(
    self,
    client: Optional[SupabaseClient] = None,
    bus: Optional[EventPublisher] = None,
    image_bucket: Optional[str] = None,
  ):
    self.client = client or get_client()
    self.bus = bus if bus is not None else get_event_bus()

    repo_args = {"client": self.client, "bus": self.bus}
    self.sermons = SermonRepository(**repo_args)
    self.events = EventRepository(**repo_args)
    self.members = MemberRepository(**repo_args)
    self.gallery = GalleryRepository(**repo_args)
    self.testimonials = TestimonialRepository(**repo_args)
    self.prayer_requests = PrayerRequestRepository(**repo_args)
    self.donations = DonationRepository(**repo_args)
    self.users = ProfileRepository(**repo_args)
    self.appointments = AppointmentRepository(**repo_args)
    self.stripe_settings = StripeSettingsRepository(**repo_args)
    self.email_settings = EmailSettingsRepository(**repo_args)
    self.email_subscribers = EmailSubscriberRepository(**repo_args)
    self.email_templates = EmailTemplateRepository(**repo_args)
    self.email_campaigns = EmailCampaignRepository(**repo_args)
    self.storage = ImageStorage(client=self.client, bucket=image_bucket)


_api: Optional[ChurchAPI] = None
_admin_api: Optional[ChurchAPI] = None


def get_api(admin: bool = False) -> ChurchAPI:
  """
  Get the shared API (singleton).

  With admin=True the service-role client is used, bypassing Row Level
  Security.
  """
  global _api, _admin_api
  if admin:
    if _admin_api is None:
      _admin_api = ChurchAPI(client=get_admin_client())
    return _admin_api
  if _api is None:
    _api = ChurchAPI()
  return _api


def reset_api() -> None:
  """Reset API singletons (useful for testing)."""
  global _api, _admin_api
  _api = None
  _admin_api = None
