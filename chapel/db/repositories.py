"""
Repository classes for database operations.

Each repository handles CRUD operations for a specific table, providing a
clean interface for the rest of the application. Backend errors are never
caught here; they propagate to the caller as the Supabase client raised them.
"""

import logging
from datetime import datetime
from typing import Optional, Any
from uuid import UUID

from chapel.db.client import get_client, get_admin_client, SupabaseClient
from chapel.errors import EmptyWriteResponseError, RecordNotFoundError
from chapel.models.records import (
  AppointmentResponse,
  QueryOptions,
  Record,
  utc_now,
)
from chapel.sync.bus import EventPublisher, get_event_bus

logger = logging.getLogger(__name__)


class BaseRepository:
  """Base class for all repositories."""

  table_name: str = ""
  # Event published after every confirmed write, or None for silent tables.
  change_event: Optional[str] = None

  def __init__(
    self,
    client: Optional[SupabaseClient] = None,
    use_admin: bool = False,
    bus: Optional[EventPublisher] = None,
  ):
    """
    Initialize repository with optional client.

    Args:
      client: Supabase client to use. If None, gets default client.
      use_admin: If True and no client provided, use admin client.
      bus: Where change events go. Defaults to the process-wide bus.
    """
    if client:
      self._client = client
    elif use_admin:
      self._client = get_admin_client()
    else:
      self._client = get_client()
    self._bus = bus if bus is not None else get_event_bus()

  @property
  def table(self):
    """Get the table reference."""
    return self._client.table(self.table_name)

  def _to_dict(self, obj: Any) -> dict:
    """Convert object to dict for storage."""
    if hasattr(obj, "model_dump"):
      return obj.model_dump(mode="json", exclude_none=True)
    elif isinstance(obj, dict):
      return dict(obj)
    else:
      raise ValueError(f"Cannot convert {type(obj)} to dict")

  def _notify(self, action: str, payload: Any) -> None:
    """Publish the table's change event, if it has one."""
    if self.change_event:
      self._bus.emit(self.change_event, payload, action=action)

  def _require_row(self, response, record_id: str) -> Record:
    """First returned row, or RecordNotFoundError when nothing matched."""
    if not response.data:
      raise RecordNotFoundError(self.table_name, record_id)
    return response.data[0]


class RecordRepository(BaseRepository):
  """Read and update access with a default list ordering."""

  default_order: str = "created_at"
  default_ascending: bool = False
  select_columns: str = "*"
  # Tables with an updated_at column the database does not maintain itself.
  stamp_updated_at: bool = False

  def _query(self, options: Optional[QueryOptions] = None, **eq):
    """
    Build a select with the given predicates, ordering and limit.

    Keyword predicates are defaults; an equality predicate the caller set on
    the same column in options takes precedence.
    """
    options = options or QueryOptions()
    query = self.table.select(self.select_columns)
    for column, value in {**eq, **options.eq}.items():
      query = query.eq(column, value)
    for column, value in options.gte.items():
      query = query.gte(column, value)
    for column, value in options.lte.items():
      query = query.lte(column, value)

    ascending = self.default_ascending if options.ascending is None else options.ascending
    query = query.order(options.order_by or self.default_order, desc=not ascending)
    if options.limit:
      query = query.limit(options.limit)
    return query

  def list(self, options: Optional[QueryOptions] = None) -> list[Record]:
    """List rows in the default order unless options say otherwise."""
    response = self._query(options).execute()
    return response.data or []

  def get_by_id(self, record_id: str | UUID) -> Record:
    """Get one row by ID. A missing row raises the backend's APIError."""
    response = (
      self.table.select(self.select_columns)
      .eq("id", str(record_id))
      .single()
      .execute()
    )
    return response.data

  def update(self, record_id: str | UUID, changes: Any) -> Record:
    """Apply a partial update and return the updated row."""
    data = self._to_dict(changes)
    if self.stamp_updated_at:
      data["updated_at"] = utc_now()
    response = self.table.update(data).eq("id", str(record_id)).execute()
    record = self._require_row(response, str(record_id))
    logger.debug("Updated %s %s", self.table_name, record_id)
    self._notify("update", record)
    return record


class CrudRepository(RecordRepository):
  """Full create/read/update/delete access."""

  def create(self, record: Any) -> Record:
    """Insert one row and return it as stored."""
    response = self.table.insert(self._to_dict(record)).execute()
    if not response.data:
      # RLS can allow the insert but hide the row from the returning select.
      raise EmptyWriteResponseError(self.table_name)
    created = response.data[0]
    logger.debug("Created %s %s", self.table_name, created.get("id"))
    self._notify("create", created)
    return created

  def delete(self, record_id: str | UUID) -> bool:
    """Delete a row by ID."""
    self.table.delete().eq("id", str(record_id)).execute()
    logger.debug("Deleted %s %s", self.table_name, record_id)
    self._notify("delete", {"id": str(record_id)})
    return True


class SermonRepository(CrudRepository):
  """Repository for sermons, newest first."""

  table_name = "sermons"
  change_event = "sermonsChanged"
  default_order = "sermon_date"

  def featured(self, limit: int = 3) -> list[Record]:
    """Get the most recent featured sermons."""
    return self.list(QueryOptions(eq={"is_featured": True}, limit=limit))


class EventRepository(CrudRepository):
  """Repository for church events, soonest first."""

  table_name = "events"
  change_event = "eventsChanged"
  default_order = "event_date"
  default_ascending = True

  def upcoming(self, limit: int = 3) -> list[Record]:
    """Get events from today onward."""
    today = datetime.utcnow().date().isoformat()
    return self.list(QueryOptions(gte={"event_date": today}, limit=limit))


class MemberRepository(CrudRepository):
  """Repository for church members."""

  table_name = "members"


class GalleryRepository(CrudRepository):
  """Repository for gallery image rows (the files live in storage)."""

  table_name = "gallery"
  change_event = "galleryChanged"


class TestimonialRepository(CrudRepository):
  """Repository for testimonials."""

  table_name = "testimonials"

  def list(self, options: Optional[QueryOptions] = None, approved_only: bool = True) -> list[Record]:
    """
    List testimonials, only approved ones unless told otherwise.

    An explicit is_approved predicate in options overrides approved_only.
    """
    filters = {"is_approved": True} if approved_only else {}
    response = self._query(options, **filters).execute()
    return response.data or []


class PrayerRequestRepository(CrudRepository):
  """Repository for prayer requests."""

  table_name = "prayer_requests"

  def list(self, options: Optional[QueryOptions] = None, public_only: bool = True) -> list[Record]:
    """List prayer requests, only public ones unless options filter is_public."""
    filters = {"is_public": True} if public_only else {}
    response = self._query(options, **filters).execute()
    return response.data or []


class DonationRepository(RecordRepository):
  """
  Repository for donations.

  Donation rows are written by the payment flow; here they can only be
  read and annotated.
  """

  table_name = "donations"


class AppointmentRepository(CrudRepository):
  """Repository for pastoral appointment requests."""

  table_name = "appointments"
  change_event = "appointmentsChanged"
  select_columns = "*, responded_by_profile:profiles!appointments_responded_by_fkey(email)"

  def by_status(self, status: str) -> list[Record]:
    """Get appointments in one status, newest first."""
    return self.list(QueryOptions(eq={"status": status}))

  def respond(self, appointment_id: str | UUID, response: AppointmentResponse | dict) -> Record:
    """Record an admin's response and stamp responded_at."""
    if isinstance(response, dict):
      response = AppointmentResponse(**response)
    data = self._to_dict(response)
    data["responded_at"] = utc_now()
    result = self.table.update(data).eq("id", str(appointment_id)).execute()
    record = self._require_row(result, str(appointment_id))
    logger.debug("Appointment %s answered with status %s", appointment_id, data["status"])
    self._notify("respond", record)
    return record
