from campus_events.errors import NotFound
from campus_events.extensions import db, commit_session
from campus_events.models import SystemSetting


def list_settings():
    return SystemSetting.query.order_by(SystemSetting.setting_name).all()


def update_setting(setting_id, value):
    setting = db.session.get(SystemSetting, setting_id)
    if not setting:
        raise NotFound('Setting not found')

    setting.setting_value = value or setting.setting_value
    commit_session()
    return setting
