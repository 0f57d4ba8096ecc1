"""
Data models for Chapel.
"""

from chapel.models.records import (
  Record,
  UserRole,
  SubscriberStatus,
  AppointmentStatus,
  QueryOptions,
  AppointmentResponse,
  ProfileInvite,
  ImageFile,
  utc_now,
)

__all__ = [
  "Record",
  "UserRole",
  "SubscriberStatus",
  "AppointmentStatus",
  "QueryOptions",
  "AppointmentResponse",
  "ProfileInvite",
  "ImageFile",
  "utc_now",
]
