"""
Database module for Chapel.

Provides Supabase client and repository classes for data access.
"""

from chapel.db.client import get_client, get_admin_client, reset_clients, SupabaseClient
from chapel.db.repositories import (
  BaseRepository,
  RecordRepository,
  CrudRepository,
  SermonRepository,
  EventRepository,
  MemberRepository,
  GalleryRepository,
  TestimonialRepository,
  PrayerRequestRepository,
  DonationRepository,
  AppointmentRepository,
)
from chapel.db.profiles import ProfileRepository
from chapel.db.email import (
  EmailSubscriberRepository,
  EmailTemplateRepository,
  EmailCampaignRepository,
)
from chapel.db.settings import StripeSettingsRepository, EmailSettingsRepository

__all__ = [
  "get_client",
  "get_admin_client",
  "reset_clients",
  "SupabaseClient",
  "BaseRepository",
  "RecordRepository",
  "CrudRepository",
  "SermonRepository",
  "EventRepository",
  "MemberRepository",
  "GalleryRepository",
  "TestimonialRepository",
  "PrayerRequestRepository",
  "DonationRepository",
  "AppointmentRepository",
  "ProfileRepository",
  "EmailSubscriberRepository",
  "EmailTemplateRepository",
  "EmailCampaignRepository",
  "StripeSettingsRepository",
  "EmailSettingsRepository",
]
