"""
Registration Model
One row per (user, event) registration; registration_code is the check-in credential.
"""

import uuid
from datetime import datetime, timezone

from campus_events.extensions import db


class Registration(db.Model):
    __tablename__ = 'registrations'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'event_id', name='uq_registration_user_event'),
    )

    registration_id = db.Column(db.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = db.Column(
        db.UUID(as_uuid=True),
        db.ForeignKey('users.user_id', ondelete='CASCADE'),
        nullable=False
    )
    # Not a foreign key: deleting an event leaves its registrations orphaned.
    # Nullable only so rows written by older clients can still be loaded.
    event_id = db.Column(db.UUID(as_uuid=True), nullable=True, index=True)
    registration_code = db.Column(db.String(64), unique=True, nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )

    user = db.relationship('User', back_populates='registrations')

    @property
    def is_well_formed(self):
        return self.event_id is not None and bool(self.registration_code)
