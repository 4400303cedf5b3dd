from sqlalchemy.exc import IntegrityError

from campus_events.errors import BadRequest, NotFound
from campus_events.extensions import db, commit_session
from campus_events.models import Category

DEFAULT_CATEGORIES = ['Technology', 'Cultural', 'Sports', 'Academic', 'Workshop', 'Seminar']


def list_categories():
    return Category.query.order_by(Category.name).all()


def get_category(category_id):
    category = db.session.get(Category, category_id)
    if not category:
        raise NotFound('Category not found')
    return category


def _commit_category():
    try:
        commit_session()
    except IntegrityError as e:
        raise BadRequest('Category already exists') from e


def create_category(name):
    if not name:
        raise BadRequest('Category name is required')
    if Category.query.filter_by(name=name).first():
        raise BadRequest('Category already exists')

    category = Category(name=name)
    db.session.add(category)
    _commit_category()
    return category


def update_category(category_id, name):
    category = get_category(category_id)
    category.name = name or category.name
    _commit_category()
    return category


def delete_category(category_id):
    category = get_category(category_id)
    db.session.delete(category)
    commit_session()


def seed_categories(destroy_only=False):
    """Replace all categories with the defaults. Returns the number inserted."""
    Category.query.delete()
    if not destroy_only:
        db.session.add_all(Category(name=name) for name in DEFAULT_CATEGORIES)
    commit_session()
    return 0 if destroy_only else len(DEFAULT_CATEGORIES)
