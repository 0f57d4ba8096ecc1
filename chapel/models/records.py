"""
Request shapes for Chapel.

Rows themselves stay plain dicts: the backend owns the schema. These models
cover the few inputs whose shape this package depends on.
"""

import mimetypes
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, EmailStr

Record = dict[str, Any]


class UserRole(str, Enum):
  """Profile roles for access control."""

  ADMIN = "admin"
  USER = "user"


class SubscriberStatus(str, Enum):
  """Email subscriber states."""

  ACTIVE = "active"
  UNSUBSCRIBED = "unsubscribed"


class AppointmentStatus(str, Enum):
  """Appointment states set by an admin response."""

  PENDING = "pending"
  CONFIRMED = "confirmed"
  DECLINED = "declined"
  RESCHEDULED = "rescheduled"
  COMPLETED = "completed"
  CANCELLED = "cancelled"


class QueryOptions(BaseModel):
  """
  Ordering, predicates and limit applied to a list query.

  Every field is optional; unset fields fall back to the repository's
  default ordering and no filtering.
  """

  order_by: Optional[str] = None
  ascending: Optional[bool] = None
  eq: dict[str, Any] = Field(default_factory=dict)
  gte: dict[str, Any] = Field(default_factory=dict)
  lte: dict[str, Any] = Field(default_factory=dict)
  limit: Optional[int] = Field(default=None, gt=0)


class AppointmentResponse(BaseModel):
  """An admin's answer to an appointment request."""

  status: AppointmentStatus
  admin_response: str
  responded_by: str
  admin_notes: Optional[str] = None
  confirmed_date: Optional[date] = None
  confirmed_time: Optional[str] = None


class ProfileInvite(BaseModel):
  """A profile row created directly by an admin."""

  email: EmailStr
  role: UserRole = UserRole.ADMIN


class ImageFile(BaseModel):
  """Image bytes plus the name they were uploaded under."""

  name: str
  content: bytes
  content_type: Optional[str] = None

  @property
  def extension(self) -> str:
    """File extension including the dot, or "" if the name has none."""
    return Path(self.name).suffix

  @property
  def mime_type(self) -> str:
    """Declared content type, else one guessed from the name."""
    if self.content_type:
      return self.content_type
    guessed, _ = mimetypes.guess_type(self.name)
    return guessed or "application/octet-stream"

  @classmethod
  def from_path(cls, path: str | Path) -> "ImageFile":
    """Read an image from disk."""
    path = Path(path)
    return cls(name=path.name, content=path.read_bytes())


def utc_now() -> str:
  """Current UTC time as an ISO 8601 string for timestamp columns."""
  return datetime.utcnow().isoformat()
