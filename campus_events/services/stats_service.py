"""
Stats Service
Aggregate counts for the admin dashboard, computed in the database.
"""

from sqlalchemy import extract, func

from campus_events.extensions import db
from campus_events.models import Category, Event, User


def get_dashboard_stats():
    return {
        'totalUsers': db.session.query(func.count(User.user_id)).scalar(),
        'totalEvents': db.session.query(func.count(Event.event_id)).scalar(),
        'totalCategories': db.session.query(func.count(Category.category_id)).scalar(),
        'pendingEvents': db.session.query(func.count(Event.event_id)).filter(Event.is_approved.is_(False)).scalar(),
        'approvedEvents': db.session.query(func.count(Event.event_id)).filter(Event.is_approved.is_(True)).scalar(),
    }


def get_event_category_counts():
    rows = (
        db.session.query(Event.category, func.count(Event.event_id))
        .group_by(Event.category)
        .order_by(Event.category)
        .all()
    )
    return [{'name': category, 'value': count} for category, count in rows]


def get_event_month_counts():
    year = extract('year', Event.date)
    month = extract('month', Event.date)
    rows = (
        db.session.query(year, month, func.count(Event.event_id))
        .group_by(year, month)
        .order_by(year, month)
        .all()
    )
    return [
        {'month': f"{int(y):04d}-{int(m):02d}", 'events': count}
        for y, m, count in rows
    ]
