import uuid
from datetime import datetime, timezone

import bcrypt
from flask import current_app

from campus_events.extensions import db

ROLES = ('admin', 'organizer', 'student')
GENDERS = ('Male', 'Female', 'Other', 'Prefer not to say')
DEFAULT_AVATAR = 'https://i.pravatar.cc/150?img=68'

# Profile fields each role may carry, keyed by model attribute
ROLE_PROFILE_FIELDS = {
    'student': ('gender', 'roll_no', 'department'),
    'organizer': ('gender', 'roll_no', 'department', 'society_name'),
    'admin': (),
}


class User(db.Model):
    __tablename__ = 'users'

    user_id = db.Column(db.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.Text, nullable=False)
    role = db.Column(
        db.Enum(*ROLES, name='user_role'),
        nullable=False,
        default='student'
    )
    profile_picture = db.Column(db.Text, nullable=False, default=DEFAULT_AVATAR)
    gender = db.Column(db.Enum(*GENDERS, name='user_gender'), nullable=True)
    roll_no = db.Column(db.String(64), unique=True, nullable=True)
    department = db.Column(db.String(255))
    society_name = db.Column(db.String(255))
    reset_password_token = db.Column(db.String(64), nullable=True)
    reset_password_expire = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    registrations = db.relationship(
        'Registration',
        back_populates='user',
        cascade='all, delete-orphan',
        order_by='Registration.created_at'
    )
    events = db.relationship('Event', back_populates='organizer', lazy=True)

    def set_password(self, password):
        rounds = current_app.config.get('BCRYPT_ROUNDS', 12)
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds)).decode('utf-8')

    def check_password(self, password):
        return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))

    def clear_reset_token(self):
        self.reset_password_token = None
        self.reset_password_expire = None

    def to_summary(self):
        return {
            'id': str(self.user_id),
            'name': self.name,
            'email': self.email,
            'role': self.role,
        }

    def to_dict(self):
        return {
            'id': str(self.user_id),
            'name': self.name,
            'email': self.email,
            'role': self.role,
            'profilePicture': self.profile_picture,
            'gender': self.gender,
            'rollNo': self.roll_no,
            'department': self.department,
            'societyName': self.society_name,
        }
