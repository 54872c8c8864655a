# Creates the Flask app (App Factory)
from datetime import timedelta
import os
import logging
from types import SimpleNamespace

import click
from flask import Flask, jsonify, send_from_directory
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_sqlalchemy import SQLAlchemy

from .config import Config

# Extensions, bound to an app inside create_app
db = SQLAlchemy()
jwt = JWTManager()


def _configure_logging(app):
    level = getattr(logging, app.config.get('LOG_LEVEL', 'DEBUG'), logging.DEBUG)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level,
                            format='%(asctime)s %(levelname)s %(name)s - %(message)s')
    logging.getLogger(__name__).setLevel(level)
    app.logger.setLevel(level)


def _register_jwt_handlers():
    # Every credential failure is a 401, whatever the reason.
    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({'message': 'Access token required'}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({'message': 'Invalid or expired token'}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({'message': 'Invalid or expired token'}), 401


def _register_error_handlers(app):
    from .errors import StudyflowError

    @app.errorhandler(StudyflowError)
    def handle_domain_error(error):
        # managers log the failures that need attention
        app.logger.debug(f'{type(error).__name__}: {error.message}')
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'message': 'Not Found'}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return jsonify({'message': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def handle_internal_error(error):
        app.logger.error('Unhandled error while serving request')
        return jsonify({'message': 'Internal server error'}), 500


def _register_commands(app):
    @app.cli.command('init-db')
    def init_db():
        """Create all database tables."""
        db.create_all()
        click.echo('Database tables created.')

    @app.cli.command('sweep-notes')
    def sweep_notes():
        """Delete expired, unpinned notes once."""
        count = app.extensions['studyflow'].notes.sweep_expired()
        click.echo(f'Swept {count} expired note(s).')


# Application Factory Function
def create_app(config_object=None, clock=None):
    # Disable Flask's default static handler so we can serve the client build
    app = Flask(__name__, static_folder=None)
    app.config.from_object(config_object or Config)
    _configure_logging(app)

    # Extensions
    db.init_app(app)
    jwt.init_app(app)
    CORS(app, resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}})
    _register_jwt_handlers()

    from . import models  # noqa: F401  registers the tables on db.metadata
    from .clock import utcnow
    from .credentials import CredentialStore
    from .notes import NoteManager
    from .security import SecretCodec
    from .vault import VaultManager

    clock = clock or utcnow
    credentials = CredentialStore(db.session, bcrypt_rounds=app.config['BCRYPT_ROUNDS'])
    codec = SecretCodec(app.config['VAULT_PASSPHRASE'], app.config['VAULT_KDF_ITERATIONS'])
    app.extensions['studyflow'] = SimpleNamespace(
        credentials=credentials,
        vault=VaultManager(db.session, credentials, codec, clock=clock),
        notes=NoteManager(db.session, clock=clock,
                          ttl=timedelta(days=app.config['NOTE_TTL_DAYS'])),
    )

    if app.config['SECRET_KEY'] == 'dev-secret-change-me':
        app.logger.warning('SECRET_KEY is the development default; set it in the environment')

    # Import and register the blueprint from routes.py
    from .routes import api as api_blueprint
    app.register_blueprint(api_blueprint, url_prefix='/api')

    _register_error_handlers(app)
    _register_commands(app)
    app.logger.debug('Application created and configured')

    # Serve frontend build if available
    build_dir = app.config['FRONTEND_BUILD_DIR']

    @app.route('/')
    @app.route('/<path:path>')
    def serve_frontend(path: str = None):
        # If requesting API, do nothing here (handled by blueprint)
        if path and path.startswith('api/'):
            app.logger.debug('Bypassing frontend route for API path')
            return jsonify({'message': 'Not Found'}), 404

        if os.path.isdir(build_dir):
            # Serve static files if they exist
            if path and os.path.exists(os.path.join(build_dir, path)):
                app.logger.debug(f'Serving static asset: {path}')
                return send_from_directory(build_dir, path)
            index_path = os.path.join(build_dir, 'index.html')
            if os.path.exists(index_path):
                app.logger.debug('Serving frontend index.html')
                return send_from_directory(build_dir, 'index.html')

        app.logger.debug('Frontend build not found; returning backend info JSON')
        return jsonify({
            'message': 'Backend running',
            'api_base': '/api',
            'health': '/api/health',
            'frontend_hint': 'Client build not found. Run npm run build in client.'
        }), 200

    return app
