from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from campus_events.auth import admin_required
from campus_events.routes import json_body
from campus_events.services import category_service

categories_bp = Blueprint('categories', __name__)


@categories_bp.route('', methods=['GET'])
@jwt_required()
def list_categories():
    """
    List event categories
    ---
    tags:
      - Categories
    security:
      - Bearer: []
    responses:
      200:
        description: All categories
    """
    return jsonify([c.to_dict() for c in category_service.list_categories()]), 200


@categories_bp.route('', methods=['POST'])
@admin_required
def create_category():
    """
    Create a category
    ---
    tags:
      - Categories
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - name
          properties:
            name:
              type: string
    responses:
      201:
        description: Category created
      400:
        description: Category already exists
    """
    data = json_body()
    return jsonify(category_service.create_category(data.get('name')).to_dict()), 201


@categories_bp.route('/<uuid:category_id>', methods=['PUT'])
@admin_required
def update_category(category_id):
    data = json_body()
    return jsonify(category_service.update_category(category_id, data.get('name')).to_dict()), 200


@categories_bp.route('/<uuid:category_id>', methods=['DELETE'])
@admin_required
def delete_category(category_id):
    category_service.delete_category(category_id)
    return jsonify({'message': 'Category removed'}), 200
