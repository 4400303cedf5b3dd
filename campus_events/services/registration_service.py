"""
Registration Service
Registers users for events and resolves registration codes at check-in.

A registration code is a bearer credential: whoever presents it can have it
resolved to its (user, event) pair, regardless of which organizer scans it.
"""

import logging
import uuid

from sqlalchemy.exc import IntegrityError

from campus_events.errors import (
    BadRequest,
    DuplicateRegistration,
    EventNotFound,
    InvalidCredential,
    NotFound,
)
from campus_events.extensions import db, commit_session
from campus_events.models import Event, Registration, User

logger = logging.getLogger(__name__)


def well_formed_registrations(user):
    """Registrations of `user` that carry both an event id and a code, in order."""
    return [entry for entry in user.registrations if entry.is_well_formed]


def _find_for_event(registrations, event_id):
    return next((entry for entry in registrations if entry.event_id == event_id), None)


def register_for_event(user_id, event_id):
    """
    Register a user for an event and return the new registration code.

    Approval state is not checked: pending events accept registrations.
    Corrupt registrations on the user are dropped in the same write.
    """
    event = db.session.get(Event, event_id)
    if not event:
        raise NotFound('Event not found')

    user = db.session.get(User, user_id)
    if not user:
        raise NotFound('User not found')

    corrupt = [entry for entry in user.registrations if not entry.is_well_formed]
    for entry in corrupt:
        user.registrations.remove(entry)
    if corrupt:
        logger.warning("Dropping %d corrupt registration(s) for user %s", len(corrupt), user.user_id)
        # Flush deletes now: the unit of work would otherwise insert first
        db.session.flush()

    if _find_for_event(user.registrations, event.event_id):
        db.session.rollback()
        raise DuplicateRegistration()

    registration_code = str(uuid.uuid4())
    user.registrations.append(Registration(event_id=event.event_id, registration_code=registration_code))

    try:
        commit_session()
    except IntegrityError as e:
        # A concurrent request registered the same pair first
        logger.info("Duplicate registration rejected by constraint for user %s event %s", user_id, event_id)
        raise DuplicateRegistration() from e

    logger.info("User %s registered for event %s", user.user_id, event.event_id)
    return registration_code


def get_registration_code(user_id, event_id):
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound('User not found')

    entry = _find_for_event(well_formed_registrations(user), event_id)
    if not entry:
        raise NotFound('User is not registered for this event')
    return entry.registration_code


def verify_registration_code(code):
    """
    Resolve a registration code to minimal event and user summaries.

    Raises InvalidCredential when no registration carries the code and
    EventNotFound when the registration outlived its event.
    """
    if not code or not isinstance(code, str):
        raise BadRequest('QR code is required')

    registration = Registration.query.filter(
        Registration.registration_code == code,
        Registration.event_id.isnot(None),
    ).first()
    if not registration:
        raise InvalidCredential()

    user = registration.user
    entry = next(
        (r for r in well_formed_registrations(user) if r.registration_code == code),
        None
    )
    if not entry:
        raise InvalidCredential()

    event = db.session.get(Event, entry.event_id)
    if not event:
        logger.info("Registration code for deleted event %s presented", entry.event_id)
        raise EventNotFound()

    return {
        'event': event.to_summary(),
        'user': user.to_summary(),
    }


def get_registered_events(user_id):
    """The user's registrations, each with its event populated (None when orphaned)."""
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound('User not found')

    entries = well_formed_registrations(user)
    event_ids = {entry.event_id for entry in entries}
    events = {}
    if event_ids:
        events = {
            event.event_id: event
            for event in Event.query.filter(Event.event_id.in_(list(event_ids))).all()
        }

    result = []
    for entry in entries:
        event = events.get(entry.event_id)
        result.append({
            'eventId': event.to_dict() if event else None,
            'registrationCode': entry.registration_code,
        })
    return result
