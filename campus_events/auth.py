import uuid
from functools import wraps

from flask import jsonify
from flask_jwt_extended import create_access_token, current_user, jwt_required

from campus_events.errors import Unauthorized
from campus_events.extensions import BLOCKLIST, db, jwt
from campus_events.models import User

ROLE_DENIED_MESSAGES = {
    'admin': 'Not authorized as an admin',
    'organizer': 'Not authorized as an organizer',
}


def issue_token(user):
    return create_access_token(identity=str(user.user_id), additional_claims={'role': user.role})


def role_required(role):
    """Require a valid access token belonging to a user with `role`."""
    def wrapper(fn):
        @wraps(fn)
        @jwt_required()
        def decorator(*args, **kwargs):
            if current_user.role != role:
                raise Unauthorized(ROLE_DENIED_MESSAGES.get(role, 'Not authorized'))
            return fn(*args, **kwargs)
        return decorator
    return wrapper


admin_required = role_required('admin')
organizer_required = role_required('organizer')


@jwt.user_lookup_loader
def load_user(jwt_header, jwt_payload):
    return db.session.get(User, uuid.UUID(jwt_payload['sub']))


@jwt.token_in_blocklist_loader
def check_if_token_in_blocklist(jwt_header, jwt_payload):
    return jwt_payload['jti'] in BLOCKLIST


@jwt.user_lookup_error_loader
def user_lookup_error(jwt_header, jwt_payload):
    return jsonify({'message': 'Not authorized, user not found'}), 401


@jwt.unauthorized_loader
def missing_token(reason):
    return jsonify({'message': 'Not authorized, no token'}), 401


@jwt.invalid_token_loader
def invalid_token(reason):
    return jsonify({'message': 'Not authorized, token failed'}), 401


@jwt.expired_token_loader
def expired_token(jwt_header, jwt_payload):
    return jsonify({'message': 'Not authorized, token expired'}), 401


@jwt.revoked_token_loader
def revoked_token(jwt_header, jwt_payload):
    return jsonify({'message': 'Not authorized, token revoked'}), 401
