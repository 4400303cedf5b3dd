import uuid
from datetime import datetime, timezone

from campus_events.extensions import db

DEFAULT_EVENT_IMAGE = 'https://via.placeholder.com/400x200?text=Event+Image'


class Event(db.Model):
    __tablename__ = 'events'

    event_id = db.Column(db.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    date = db.Column(db.Date, nullable=False)
    start_time = db.Column(db.String(20), nullable=False)
    end_time = db.Column(db.String(20), nullable=False)
    location = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(255), nullable=False)
    is_approved = db.Column(db.Boolean, nullable=False, default=False)
    # Nulled when the organizer account is deleted
    organizer_id = db.Column(db.UUID(as_uuid=True), db.ForeignKey('users.user_id'), nullable=True)
    event_image = db.Column(db.Text, nullable=False, default=DEFAULT_EVENT_IMAGE)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    organizer = db.relationship('User', back_populates='events')

    def is_owned_by(self, user):
        return self.organizer_id is not None and self.organizer_id == user.user_id

    def to_summary(self):
        return {
            'id': str(self.event_id),
            'title': self.title,
            'location': self.location,
        }

    def to_dict(self):
        return {
            'id': str(self.event_id),
            'title': self.title,
            'description': self.description,
            'date': self.date.isoformat() if self.date else None,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'location': self.location,
            'category': self.category,
            'isApproved': self.is_approved,
            'organizer': {
                'id': str(self.organizer.user_id),
                'name': self.organizer.name,
                'email': self.organizer.email,
            } if self.organizer else None,
            'eventImage': self.event_image,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
