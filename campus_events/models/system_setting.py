import uuid
from datetime import datetime, timezone

from campus_events.extensions import db


class SystemSetting(db.Model):
    __tablename__ = 'system_settings'

    setting_id = db.Column(db.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    setting_name = db.Column(db.String(255), unique=True, nullable=False)
    setting_value = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    def to_dict(self):
        return {
            'id': str(self.setting_id),
            'settingName': self.setting_name,
            'settingValue': self.setting_value,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
