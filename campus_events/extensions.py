from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_mail import Mail
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from campus_events.errors import StorageError

db = SQLAlchemy()
jwt = JWTManager()
mail = Mail()

# Revoked token ids (jti). Process-local; use Redis with TTL across workers.
BLOCKLIST = set()


def commit_session():
    """
    Commit the current session, rolling back on failure.

    IntegrityError is re-raised untouched so callers can translate
    constraint violations; any other database error becomes StorageError.
    """
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StorageError('Database error') from e
