"""
Profile repository with role management.

Demotion is guarded so the site can never be left without an admin. The
guard counts admins and then writes; the two requests are not atomic, so two
concurrent demotions can still race past it. That risk is accepted for this
admin-only tooling.
"""

import logging
from typing import Optional
from uuid import UUID

from chapel.db.repositories import RecordRepository
from chapel.errors import LastAdminError
from chapel.models.records import ProfileInvite, Record, UserRole

logger = logging.getLogger(__name__)


class ProfileRepository(RecordRepository):
  """Repository for user profiles."""

  table_name = "profiles"

  def delete(self, user_id: str | UUID) -> bool:
    """Delete a profile."""
    self.table.delete().eq("id", str(user_id)).execute()
    logger.debug("Deleted profile %s", user_id)
    return True

  def add_user(self, email: str, role: UserRole | str = UserRole.USER) -> Optional[Record]:
    """Create a profile directly, without a registration flow."""
    invite = ProfileInvite(email=email, role=role)
    response = self.table.insert(self._to_dict(invite)).execute()
    logger.info("Added %s profile for %s", invite.role.value, invite.email)
    return response.data[0] if response.data else None

  def invite_admin(self, email: str, role: UserRole | str = UserRole.ADMIN) -> dict:
    """Create a profile with an admin role and report the outcome."""
    data = self.add_user(email, role)
    return {"success": True, "message": "User added successfully", "data": data}

  def admin_count(self) -> int:
    """Count profiles with the admin role."""
    response = (
      self.table.select("id", count="exact", head=True)
      .eq("role", UserRole.ADMIN.value)
      .execute()
    )
    return response.count or 0

  def list_admins(self) -> list[Record]:
    """Get all admin profiles."""
    response = self._query(role=UserRole.ADMIN.value).execute()
    return response.data or []

  def update_role(self, user_id: str | UUID, role: UserRole | str) -> Record:
    """Set a profile's role."""
    return self.update(user_id, {"role": UserRole(role).value})

  def promote_to_admin(self, user_id: str | UUID) -> Record:
    """Give a profile the admin role."""
    record = self.update_role(user_id, UserRole.ADMIN)
    logger.info("Promoted %s to admin", user_id)
    return record

  def demote_from_admin(self, user_id: str | UUID) -> Record:
    """
    Return an admin to the plain user role.

    Raises:
      LastAdminError: if at most one admin exists. Nothing is written.
    """
    admins = self.admin_count()
    if admins <= 1:
      logger.warning("Refusing to demote %s: %d admin(s) left", user_id, admins)
      raise LastAdminError()

    record = self.update_role(user_id, UserRole.USER)
    logger.info("Demoted %s to user", user_id)
    return record
