from flask import Blueprint, jsonify, request
from flask_jwt_extended import current_user, jwt_required

from campus_events.auth import admin_required, organizer_required
from campus_events.routes import json_body
from campus_events.services import event_service, registration_service

events_bp = Blueprint('events', __name__)


@events_bp.route('', methods=['GET'])
def list_events():
    """
    List approved events
    ---
    tags:
      - Events
    parameters:
      - name: keyword
        in: query
        type: string
        description: Case-insensitive match on title or description
      - name: category
        in: query
        type: string
      - name: dateRange
        in: query
        type: string
        enum: [upcoming, past]
      - name: sortBy
        in: query
        type: string
        enum: [date, title, category, location, createdAt]
        default: date
      - name: order
        in: query
        type: string
        enum: [asc, desc]
        default: asc
    responses:
      200:
        description: List of approved events
    """
    events = event_service.list_public_events(
        keyword=request.args.get('keyword'),
        category=request.args.get('category'),
        date_range=request.args.get('dateRange'),
        sort_by=request.args.get('sortBy'),
        order=request.args.get('order'),
    )
    return jsonify([e.to_dict() for e in events]), 200


@events_bp.route('', methods=['POST'])
@organizer_required
def create_event():
    """
    Create an event (pending approval)
    ---
    tags:
      - Events
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - title
            - description
            - date
            - startTime
            - endTime
            - location
            - category
          properties:
            title:
              type: string
            description:
              type: string
            date:
              type: string
              format: date
            startTime:
              type: string
            endTime:
              type: string
            location:
              type: string
            category:
              type: string
            eventImage:
              type: string
              description: URL or base64 data URI
    responses:
      201:
        description: Event created
      400:
        description: Missing fields
      401:
        description: Not an organizer
    """
    data = json_body()
    event = event_service.create_event(current_user, data)
    return jsonify(event.to_dict()), 201


@events_bp.route('/myevents', methods=['GET'])
@organizer_required
def my_events():
    """
    Events created by the calling organizer, any approval state
    ---
    tags:
      - Events
    security:
      - Bearer: []
    responses:
      200:
        description: Organizer's events
    """
    events = event_service.list_organizer_events(current_user.user_id)
    return jsonify([e.to_dict() for e in events]), 200


@events_bp.route('/pending', methods=['GET'])
@admin_required
def pending_events():
    """
    Events awaiting approval
    ---
    tags:
      - Events
    security:
      - Bearer: []
    responses:
      200:
        description: Unapproved events
    """
    return jsonify([e.to_dict() for e in event_service.list_pending_events()]), 200


@events_bp.route('/verifyqr', methods=['POST'])
@organizer_required
def verify_qr_code():
    """
    Verify a registration code at check-in
    ---
    tags:
      - Registration
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - qrCode
          properties:
            qrCode:
              type: string
    responses:
      200:
        description: Code resolved to an event and user
      400:
        description: qrCode missing
      401:
        description: Invalid QR code
      404:
        description: Event for this registration no longer exists
    """
    data = json_body()
    result = registration_service.verify_registration_code(data.get('qrCode'))
    return jsonify({'message': 'QR code verified successfully', **result}), 200


@events_bp.route('/<uuid:event_id>', methods=['GET'])
def get_event(event_id):
    """
    Get a single event
    ---
    tags:
      - Events
    parameters:
      - name: event_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Event details
      404:
        description: Event not found
    """
    return jsonify(event_service.get_event(event_id).to_dict()), 200


@events_bp.route('/<uuid:event_id>', methods=['PUT'])
@organizer_required
def update_event(event_id):
    """
    Update an event (owning organizer only)
    ---
    tags:
      - Events
    security:
      - Bearer: []
    parameters:
      - name: event_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Updated event
      401:
        description: Not the owner
      404:
        description: Event not found
    """
    data = json_body()
    return jsonify(event_service.update_event(current_user, event_id, data).to_dict()), 200


@events_bp.route('/<uuid:event_id>', methods=['DELETE'])
@jwt_required()
def delete_event(event_id):
    """
    Delete an event (owner or admin)
    ---
    tags:
      - Events
    security:
      - Bearer: []
    parameters:
      - name: event_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Event removed
      401:
        description: Neither owner nor admin
      404:
        description: Event not found
    """
    event_service.delete_event(current_user, event_id)
    return jsonify({'message': 'Event removed'}), 200


@events_bp.route('/<uuid:event_id>/approve', methods=['PUT'])
@admin_required
def approve_event(event_id):
    """
    Approve an event
    ---
    tags:
      - Events
    security:
      - Bearer: []
    responses:
      200:
        description: Updated event
      404:
        description: Event not found
    """
    return jsonify(event_service.approve_event(event_id).to_dict()), 200


@events_bp.route('/<uuid:event_id>/reject', methods=['PUT'])
@admin_required
def reject_event(event_id):
    """
    Move an event back to pending
    ---
    tags:
      - Events
    security:
      - Bearer: []
    responses:
      200:
        description: Updated event
      404:
        description: Event not found
    """
    return jsonify(event_service.reject_event(event_id).to_dict()), 200


@events_bp.route('/<uuid:event_id>/register', methods=['POST'])
@jwt_required()
def register_for_event(event_id):
    """
    Register the caller for an event
    ---
    tags:
      - Registration
    security:
      - Bearer: []
    parameters:
      - name: event_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Registered; returns the registration code
      400:
        description: Already registered for this event
      404:
        description: Event or user not found
    """
    code = registration_service.register_for_event(current_user.user_id, event_id)
    return jsonify({'message': 'Event registered successfully', 'registrationCode': code}), 200


@events_bp.route('/<uuid:event_id>/qrcode', methods=['GET'])
@jwt_required()
def get_qr_code(event_id):
    """
    Get the caller's registration code for an event
    ---
    tags:
      - Registration
    security:
      - Bearer: []
    responses:
      200:
        description: Registration code
      404:
        description: Not registered for this event
    """
    code = registration_service.get_registration_code(current_user.user_id, event_id)
    return jsonify({'qrCode': code}), 200
