"""
Campus Events API: Flask application factory.
Users, events with admin approval, registrations with check-in codes, admin stats.
"""

import logging
import os
from datetime import timedelta

from dotenv import load_dotenv
from flasgger import Swagger
from flask import Flask, jsonify, request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from campus_events.errors import ApiError, StorageError
from campus_events.extensions import db, jwt, mail

load_dotenv()

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger(__name__)


def _database_uri():
    if os.getenv('DATABASE_URL'):
        return os.getenv('DATABASE_URL')

    db_user = os.environ.get('DB_USER', 'campus_user')
    db_pass = os.environ.get('DB_PASS', 'password')
    db_host = os.environ.get('DB_HOST', 'campus-db')
    db_name = os.environ.get('DB_NAME', 'campus_db')
    return f"postgresql://{db_user}:{db_pass}@{db_host}/{db_name}"


def _register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            logger.error("%s on %s %s: %s", type(error).__name__, request.method, request.path, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.error("Database error on %s %s: %s", request.method, request.path, error)
        return jsonify(StorageError().to_dict()), StorageError.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if error.code is None or error.code < 400:
            return error
        if error.code == 404:
            return jsonify({'message': f'Not Found - {request.path}'}), 404
        return jsonify({'message': error.description}), error.code


def create_app(test_config=None):
    app = Flask(__name__)

    # Configuration
    app.config['SQLALCHEMY_DATABASE_URI'] = _database_uri()
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['JWT_SECRET_KEY'] = os.environ.get('JWT_SECRET', 'dev-secret-change-me')
    app.config['JWT_ACCESS_TOKEN_EXPIRES'] = timedelta(days=int(os.environ.get('JWT_ACCESS_DAYS', 30)))
    app.config['JWT_REFRESH_TOKEN_EXPIRES'] = timedelta(days=60)
    app.config['BCRYPT_ROUNDS'] = int(os.environ.get('BCRYPT_ROUNDS', 12))
    app.config['FRONTEND_URL'] = os.environ.get('FRONTEND_URL', 'http://localhost:5173')
    app.config['RESET_TOKEN_TTL_MINUTES'] = 10
    app.config['CLOUDINARY_CLOUD_NAME'] = os.environ.get('CLOUDINARY_CLOUD_NAME')
    app.config['CLOUDINARY_API_KEY'] = os.environ.get('CLOUDINARY_API_KEY')
    app.config['CLOUDINARY_API_SECRET'] = os.environ.get('CLOUDINARY_API_SECRET')
    app.config['MAIL_SERVER'] = os.environ.get('SMTP_HOST')
    app.config['MAIL_PORT'] = int(os.environ.get('SMTP_PORT', 587))
    app.config['MAIL_USE_TLS'] = os.environ.get('SMTP_USE_TLS', 'true').lower() == 'true'
    app.config['MAIL_USERNAME'] = os.environ.get('SMTP_USER')
    app.config['MAIL_PASSWORD'] = os.environ.get('SMTP_PASSWORD')
    app.config['MAIL_DEFAULT_SENDER'] = os.environ.get('EMAIL_FROM', 'no-reply@campus-events.local')
    app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', 'INFO')

    if test_config:
        app.config.update(test_config)

    logging.basicConfig(level=app.config['LOG_LEVEL'], format=LOG_FORMAT)

    # Initialize Extensions
    db.init_app(app)
    jwt.init_app(app)
    mail.init_app(app)

    # Registers the JWT loaders
    from campus_events import auth  # noqa: F401
    from campus_events import models  # noqa: F401

    Swagger(app, template={
        "info": {"title": "Campus Events API", "version": "1.0.0"},
        "securityDefinitions": {
            "Bearer": {"type": "apiKey", "name": "Authorization", "in": "header"}
        },
    })

    _register_error_handlers(app)

    # Register Blueprints
    from campus_events.routes.users import users_bp
    app.register_blueprint(users_bp, url_prefix='/api/users')

    from campus_events.routes.events import events_bp
    app.register_blueprint(events_bp, url_prefix='/api/events')

    from campus_events.routes.categories import categories_bp
    app.register_blueprint(categories_bp, url_prefix='/api/categories')

    from campus_events.routes.admin import admin_bp, settings_bp
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    app.register_blueprint(settings_bp, url_prefix='/api/settings')

    from campus_events.cli import register_commands
    register_commands(app)

    @app.route('/health')
    def health():
        try:
            db.session.execute(text('SELECT 1'))
            return jsonify({"service": "campus-events", "status": "healthy"}), 200
        except Exception as e:
            logger.error("Health check failed: %s", e)
            return jsonify({"service": "campus-events", "status": "unhealthy", "error": str(e)}), 503

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 4000)))
