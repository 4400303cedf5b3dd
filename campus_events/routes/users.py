from flask import Blueprint, jsonify
from flask_jwt_extended import (
    create_refresh_token,
    current_user,
    get_jwt,
    jwt_required,
)

from campus_events.auth import admin_required, issue_token
from campus_events.extensions import BLOCKLIST
from campus_events.routes import json_body
from campus_events.services import registration_service, user_service

users_bp = Blueprint('users', __name__)


@users_bp.route('', methods=['POST'])
def register():
    """
    Register a new user
    ---
    tags:
      - Users
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - name
            - email
            - password
          properties:
            name:
              type: string
            email:
              type: string
            password:
              type: string
            role:
              type: string
              enum: [student, organizer]
            profilePicture:
              type: string
              description: URL or base64 data URI
            gender:
              type: string
            rollNo:
              type: string
            department:
              type: string
            societyName:
              type: string
    responses:
      201:
        description: User registered, token issued
      400:
        description: Invalid input, user exists or admin signup attempted
    """
    data = json_body()
    user = user_service.register_user(data)
    return jsonify({**user.to_dict(), 'token': issue_token(user)}), 201


@users_bp.route('/login', methods=['POST'])
def login():
    """
    Authenticate user and return tokens
    ---
    tags:
      - Users
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - email
            - password
          properties:
            email:
              type: string
            password:
              type: string
    responses:
      200:
        description: Login successful
      401:
        description: Invalid credentials
    """
    data = json_body()
    user = user_service.authenticate(data.get('email'), data.get('password'))
    return jsonify({
        **user.to_dict(),
        'token': issue_token(user),
        'refreshToken': create_refresh_token(identity=str(user.user_id)),
    }), 200


@users_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh():
    """
    Refresh access token
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: New access token
      401:
        description: Invalid refresh token
    """
    return jsonify({'token': issue_token(current_user)}), 200


@users_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    """
    Logout user (revoke token)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: Logout successful
    """
    BLOCKLIST.add(get_jwt()['jti'])
    return jsonify({'message': 'Logout successful'}), 200


@users_bp.route('', methods=['GET'])
@admin_required
def list_users():
    """
    List all users
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: All users, without password data
      401:
        description: Not an admin
    """
    return jsonify([u.to_dict() for u in user_service.list_users()]), 200


@users_bp.route('/profile', methods=['GET'])
@jwt_required()
def get_profile():
    """
    Get own profile
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: User profile
    """
    return jsonify(current_user.to_dict()), 200


@users_bp.route('/profile', methods=['PUT'])
@jwt_required()
def update_profile():
    """
    Update own profile
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            name:
              type: string
            email:
              type: string
            password:
              type: string
            profilePicture:
              type: string
              description: URL, base64 data URI, or empty string to reset
    responses:
      200:
        description: Updated profile with a fresh token
    """
    data = json_body()
    user = user_service.update_profile(current_user.user_id, data)
    return jsonify({**user.to_dict(), 'token': issue_token(user)}), 200


@users_bp.route('/registeredevents', methods=['GET'])
@jwt_required()
def registered_events():
    """
    List the caller's event registrations
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: Registrations with populated events (null when the event was deleted)
    """
    return jsonify(registration_service.get_registered_events(current_user.user_id)), 200


@users_bp.route('/<uuid:user_id>', methods=['PUT'])
@admin_required
def update_user(user_id):
    """
    Update any user (admin)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        required: true
        type: string
    responses:
      200:
        description: Updated user
      404:
        description: User not found
    """
    data = json_body()
    return jsonify(user_service.admin_update_user(user_id, data).to_dict()), 200


@users_bp.route('/<uuid:user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id):
    """
    Delete a user (admin)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        required: true
        type: string
    responses:
      200:
        description: User removed
      400:
        description: Target is an admin
      404:
        description: User not found
    """
    user_service.delete_user(user_id)
    return jsonify({'message': 'User removed'}), 200


@users_bp.route('/forgotpassword', methods=['POST'])
def forgot_password():
    """
    Request a password reset email
    ---
    tags:
      - Users
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - email
          properties:
            email:
              type: string
    responses:
      200:
        description: Email sent
      404:
        description: No user with that email
      500:
        description: Email could not be sent
    """
    data = json_body()
    user_service.request_password_reset(data.get('email'))
    return jsonify({'success': True, 'data': 'Email Sent'}), 200


@users_bp.route('/resetpassword/<reset_token>', methods=['PUT'])
def reset_password(reset_token):
    """
    Reset password with an emailed token
    ---
    tags:
      - Users
    parameters:
      - in: path
        name: reset_token
        required: true
        type: string
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - password
            - confirmPassword
          properties:
            password:
              type: string
            confirmPassword:
              type: string
    responses:
      200:
        description: Password reset
      400:
        description: Invalid or expired token, or passwords do not match
    """
    data = json_body()
    user_service.reset_password(reset_token, data.get('password'), data.get('confirmPassword'))
    return jsonify({'success': True, 'data': 'Password reset successful'}), 200
