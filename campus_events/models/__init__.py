from campus_events.models.user import User
from campus_events.models.event import Event
from campus_events.models.registration import Registration
from campus_events.models.category import Category
from campus_events.models.system_setting import SystemSetting

__all__ = ['User', 'Event', 'Registration', 'Category', 'SystemSetting']
