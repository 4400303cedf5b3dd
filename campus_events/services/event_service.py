"""
Event Service
Event CRUD, public listing and the admin approval state machine.

Approval: pending (is_approved=False) <-> approved (is_approved=True).
Both transitions are admin-only and idempotent; there is no terminal state.
"""

import logging
from datetime import date

from sqlalchemy import or_

from campus_events.errors import BadRequest, NotFound, Unauthorized
from campus_events.extensions import db, commit_session
from campus_events.models import Event
from campus_events.models.event import DEFAULT_EVENT_IMAGE
from campus_events.services.image_service import EVENT_IMAGE_FOLDER, upload_image

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ['title', 'description', 'date', 'startTime', 'endTime', 'location', 'category']

SORT_COLUMNS = {
    'date': Event.date,
    'title': Event.title,
    'category': Event.category,
    'location': Event.location,
    'createdAt': Event.created_at,
}


def _parse_date(value):
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise BadRequest(f'Invalid date: {value}') from None


def get_event(event_id):
    event = db.session.get(Event, event_id)
    if not event:
        raise NotFound('Event not found')
    return event


def list_public_events(keyword=None, category=None, date_range=None, sort_by=None, order=None):
    """Approved events only, filtered and sorted (date ascending by default)."""
    query = Event.query.filter(Event.is_approved.is_(True))

    if keyword:
        pattern = f'%{keyword}%'
        query = query.filter(or_(Event.title.ilike(pattern), Event.description.ilike(pattern)))
    if category:
        query = query.filter(Event.category == category)

    today = date.today()
    if date_range == 'upcoming':
        query = query.filter(Event.date >= today)
    elif date_range == 'past':
        query = query.filter(Event.date < today)

    column = SORT_COLUMNS.get(sort_by, Event.date)
    query = query.order_by(column.desc() if order == 'desc' else column.asc())
    return query.all()


def list_organizer_events(organizer_id):
    return Event.query.filter_by(organizer_id=organizer_id).order_by(Event.date.asc()).all()


def list_pending_events():
    return Event.query.filter(Event.is_approved.is_(False)).order_by(Event.created_at.asc()).all()


def create_event(organizer, data):
    missing = [f for f in REQUIRED_FIELDS if not data.get(f)]
    if missing:
        raise BadRequest(f"Missing fields: {', '.join(missing)}")

    event = Event(
        title=data['title'],
        description=data['description'],
        date=_parse_date(data['date']),
        start_time=data['startTime'],
        end_time=data['endTime'],
        location=data['location'],
        category=data['category'],
        organizer_id=organizer.user_id,
        is_approved=False,
        event_image=upload_image(data.get('eventImage'), EVENT_IMAGE_FOLDER) or DEFAULT_EVENT_IMAGE,
    )
    db.session.add(event)
    commit_session()
    logger.info("Organizer %s created event %s", organizer.user_id, event.event_id)
    return event


def update_event(user, event_id, data):
    """Only the owning organizer may edit an event; approval state is untouched."""
    event = get_event(event_id)
    if not event.is_owned_by(user):
        raise Unauthorized('Not authorized to update this event')

    event.title = data.get('title') or event.title
    event.description = data.get('description') or event.description
    if data.get('date'):
        event.date = _parse_date(data['date'])
    event.start_time = data.get('startTime') or event.start_time
    event.end_time = data.get('endTime') or event.end_time
    event.location = data.get('location') or event.location
    event.category = data.get('category') or event.category

    image = data.get('eventImage')
    if image == '':
        event.event_image = DEFAULT_EVENT_IMAGE
    elif image:
        event.event_image = upload_image(image, EVENT_IMAGE_FOLDER)

    commit_session()
    return event


def delete_event(user, event_id):
    """Owner or admin. Registrations pointing at the event are left in place."""
    event = get_event(event_id)
    if not event.is_owned_by(user) and user.role != 'admin':
        raise Unauthorized('Not authorized to delete this event')

    db.session.delete(event)
    commit_session()
    logger.info("User %s deleted event %s", user.user_id, event_id)


def set_approval(event_id, approved):
    event = get_event(event_id)
    event.is_approved = approved
    commit_session()
    logger.info("Event %s %s", event_id, 'approved' if approved else 'set to pending')
    return event


def approve_event(event_id):
    return set_approval(event_id, True)


def reject_event(event_id):
    return set_approval(event_id, False)
