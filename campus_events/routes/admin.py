from flask import Blueprint, jsonify

from campus_events.auth import admin_required
from campus_events.routes import json_body
from campus_events.services import setting_service, stats_service

admin_bp = Blueprint('admin', __name__)
settings_bp = Blueprint('settings', __name__)


@admin_bp.route('/stats', methods=['GET'])
@admin_required
def dashboard_stats():
    """
    Dashboard totals
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    responses:
      200:
        description: User, event and category counts
    """
    return jsonify(stats_service.get_dashboard_stats()), 200


@admin_bp.route('/event-category-counts', methods=['GET'])
@admin_required
def event_category_counts():
    """
    Event count per category
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    responses:
      200:
        description: List of {name, value}
    """
    return jsonify(stats_service.get_event_category_counts()), 200


@admin_bp.route('/event-month-counts', methods=['GET'])
@admin_required
def event_month_counts():
    """
    Event count per month (YYYY-MM), ascending
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    responses:
      200:
        description: List of {month, events}
    """
    return jsonify(stats_service.get_event_month_counts()), 200


@settings_bp.route('', methods=['GET'])
@admin_required
def list_settings():
    return jsonify([s.to_dict() for s in setting_service.list_settings()]), 200


@settings_bp.route('/<uuid:setting_id>', methods=['PUT'])
@admin_required
def update_setting(setting_id):
    """
    Update a system setting value
    ---
    tags:
      - Settings
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            settingValue:
              type: string
    responses:
      200:
        description: Updated setting
      404:
        description: Setting not found
    """
    data = json_body()
    return jsonify(setting_service.update_setting(setting_id, data.get('settingValue')).to_dict()), 200
