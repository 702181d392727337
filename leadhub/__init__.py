"""
Flask application factory.

Creates and configures the Flask app, registers all blueprints.
"""
from flask import Flask, jsonify


def create_app():
    """Create and configure the Flask application."""
    from leadhub.logging_config import configure_logging
    from leadhub.config import SECRET_KEY
    from leadhub.database import import_models

    app = Flask(__name__)

    configure_logging(app)

    # Secret key for sessions (cart + login live in the session cookie)
    app.secret_key = SECRET_KEY

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'error': 'Method not allowed'}), 405

    # Register blueprints
    from leadhub.auth import bp as auth_bp
    from leadhub.routes.dashboard import bp as dashboard_bp
    from leadhub.routes.catalog import bp as catalog_bp
    from leadhub.routes.account import bp as account_bp
    from leadhub.routes.admin import bp as admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(account_bp)
    app.register_blueprint(admin_bp)

    # Import models so Base.metadata knows about them (required for SQLAlchemy).
    # Schema is managed by Alembic, never create_all().
    import_models()

    return app
