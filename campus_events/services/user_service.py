"""
User Service
Account creation, profile updates, admin user management and password reset.
"""

import hashlib
import logging
import re
import secrets
from datetime import datetime, timedelta, timezone

from flask import current_app
from sqlalchemy.exc import IntegrityError

from campus_events.errors import BadRequest, EmailDeliveryError, NotFound, Unauthorized
from campus_events.extensions import db, commit_session
from campus_events.models import User
from campus_events.models.user import DEFAULT_AVATAR, GENDERS, ROLES, ROLE_PROFILE_FIELDS
from campus_events.services.email_service import send_email
from campus_events.services.image_service import PROFILE_PICTURE_FOLDER, upload_image

logger = logging.getLogger(__name__)

EMAIL_REGEX = r'^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$'
MIN_PASSWORD_LENGTH = 8

# Request body key -> model attribute
PROFILE_FIELD_KEYS = {
    'gender': 'gender',
    'rollNo': 'roll_no',
    'department': 'department',
    'societyName': 'society_name',
}


def _validate_email(email):
    if not re.match(EMAIL_REGEX, email):
        raise BadRequest('Invalid email format')


def _validate_password(password):
    if len(password) < MIN_PASSWORD_LENGTH:
        raise BadRequest(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')


def _validate_gender(gender):
    if gender and gender not in GENDERS:
        raise BadRequest(f"Gender must be one of: {', '.join(GENDERS)}")


def _hash_reset_token(token):
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def _apply_profile_fields(user, data):
    """Copy the profile fields the user's role carries; the rest are ignored."""
    for key, attr in PROFILE_FIELD_KEYS.items():
        if attr in ROLE_PROFILE_FIELDS[user.role]:
            setattr(user, attr, data.get(key) or getattr(user, attr))


def _commit_user():
    try:
        commit_session()
    except IntegrityError as e:
        message = str(e.orig).lower()
        if 'roll_no' in message:
            raise BadRequest('Roll number already in use') from e
        raise BadRequest('User already exists') from e


def get_user(user_id):
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound('User not found')
    return user


def list_users():
    return User.query.order_by(User.created_at).all()


def authenticate(email, password):
    if not email or not password:
        raise BadRequest('Missing email or password')

    user = User.query.filter_by(email=email).first()
    if user and user.check_password(password):
        return user

    logger.info("Failed login for %s", email)
    raise Unauthorized('Invalid email or password')


def register_user(data):
    """Self-service signup. Role defaults to student; admin accounts cannot be created here."""
    name = data.get('name')
    email = data.get('email')
    password = data.get('password')
    if not name or not email or not password:
        raise BadRequest('Missing name, email or password')

    _validate_email(email)
    _validate_password(password)

    if User.query.filter_by(email=email).first():
        raise BadRequest('User already exists')

    role = data.get('role') or 'student'
    if role == 'admin':
        raise BadRequest('Direct admin registration is not allowed')
    if role not in ROLES:
        raise BadRequest(f'Invalid role: {role}')

    _validate_gender(data.get('gender'))

    user = User(
        name=name,
        email=email,
        role=role,
        profile_picture=upload_image(data.get('profilePicture'), PROFILE_PICTURE_FOLDER) or DEFAULT_AVATAR,
    )
    user.set_password(password)

    _apply_profile_fields(user, data)

    db.session.add(user)
    _commit_user()
    logger.info("Registered %s %s", role, user.user_id)
    return user


def create_admin(name, email, password):
    _validate_email(email)
    _validate_password(password)
    if User.query.filter_by(email=email).first():
        raise BadRequest('User already exists')

    user = User(name=name, email=email, role='admin')
    user.set_password(password)
    db.session.add(user)
    _commit_user()
    return user


def update_profile(user_id, data):
    """Update the caller's own profile. Role is not changeable here."""
    user = get_user(user_id)

    if data.get('email') and data['email'] != user.email:
        _validate_email(data['email'])
        if User.query.filter_by(email=data['email']).first():
            raise BadRequest('User already exists')

    user.name = data.get('name') or user.name
    user.email = data.get('email') or user.email

    picture = data.get('profilePicture')
    if picture == '':
        user.profile_picture = DEFAULT_AVATAR
    elif picture:
        user.profile_picture = upload_image(picture, PROFILE_PICTURE_FOLDER)

    _validate_gender(data.get('gender'))
    _apply_profile_fields(user, data)

    if data.get('password'):
        _validate_password(data['password'])
        user.set_password(data['password'])

    _commit_user()
    return user


def admin_update_user(user_id, data):
    user = get_user(user_id)

    role = data.get('role')
    if role and role not in ROLES:
        raise BadRequest(f'Invalid role: {role}')
    _validate_gender(data.get('gender'))
    if data.get('email') and data['email'] != user.email:
        _validate_email(data['email'])

    user.name = data.get('name') or user.name
    user.email = data.get('email') or user.email
    user.role = role or user.role
    user.profile_picture = data.get('profilePicture') or user.profile_picture
    _apply_profile_fields(user, data)

    _commit_user()
    logger.info("Admin updated user %s", user.user_id)
    return user


def delete_user(user_id):
    user = get_user(user_id)
    if user.role == 'admin':
        raise BadRequest('Cannot delete admin user')

    db.session.delete(user)
    commit_session()
    logger.info("Deleted user %s", user_id)


def request_password_reset(email):
    """
    Store a hashed, short-lived reset token and email the raw token as a link.

    The token and expiry are cleared again if the email cannot be sent.
    """
    user = User.query.filter_by(email=email).first() if email else None
    if not user:
        raise NotFound('User with that email does not exist')

    reset_token = secrets.token_hex(32)
    ttl = current_app.config.get('RESET_TOKEN_TTL_MINUTES', 10)
    user.reset_password_token = _hash_reset_token(reset_token)
    user.reset_password_expire = datetime.now(timezone.utc) + timedelta(minutes=ttl)
    commit_session()

    reset_url = f"{current_app.config.get('FRONTEND_URL')}/resetpassword/{reset_token}"
    message = f"""
    <h1>You have requested a password reset</h1>
    <p>Please go to this link to reset your password:</p>
    <a href={reset_url} clicktracking=off>{reset_url}</a>
    <p>This link is valid for {ttl} minutes only.</p>
    """

    try:
        send_email(user.email, 'Password Reset Request', message)
    except EmailDeliveryError:
        user.clear_reset_token()
        commit_session()
        raise


def reset_password(token, password, confirm_password):
    user = User.query.filter(
        User.reset_password_token == _hash_reset_token(token),
        User.reset_password_expire > datetime.now(timezone.utc),
    ).first()
    if not user:
        raise BadRequest('Invalid or expired reset token')

    if not password or password != confirm_password:
        raise BadRequest('Passwords do not match')
    _validate_password(password)

    user.set_password(password)
    user.clear_reset_token()
    commit_session()
    logger.info("Password reset for user %s", user.user_id)
