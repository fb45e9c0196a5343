"""Activity (audit trail) domain service."""

import logging
from typing import Optional

from bussnote.database.base import Database
from bussnote.domain.entities import Activity as ActivityEntity, ActivityType

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 5


class ActivityService:
    """Service for the append-only activity log."""

    def __init__(self, db: Database):
        """Initialize activity service.

        Args:
            db: Database instance
        """
        self.db = db

    def log(
        self,
        type: ActivityType,
        title: str,
        description: str,
        party_id: Optional[int] = None,
        invoice_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> int:
        """Append an activity entry.

        Args:
            type: Activity type
            title: Short title
            description: Human readable description
            party_id: Optional related party
            invoice_id: Optional related note
            user_id: Optional acting user

        Returns:
            Activity ID
        """
        activity_type = ActivityType(type)
        activity_id = self.db.create_activity(
            type=activity_type.value,
            title=title,
            description=description,
            party_id=party_id,
            invoice_id=invoice_id,
            user_id=user_id,
        )
        logger.debug("Logged %s activity %s", activity_type.value, activity_id)
        return activity_id

    def recent_activities(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[ActivityEntity]:
        """Return the newest activities first.

        Raises:
            ValueError: If limit is not positive
        """
        if limit <= 0:
            raise ValueError("Limit must be greater than 0")
        return self.db.list_activities(limit=limit)

    def invoice_activities(self, invoice_id: int) -> list[ActivityEntity]:
        """Return activities attached to a note, newest first."""
        return self.db.list_activities(invoice_id=invoice_id)
