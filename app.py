import logging
import os

from config import config
from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_login import LoginManager
from flask_migrate import Migrate


def create_app(config_name=None):
    """Application factory pattern"""
    if config_name is None:
        config_name = os.getenv("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize CORS for API clients
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["ALLOWED_ORIGINS"]}},
        supports_credentials=True,
    )

    # Initialize SQLAlchemy
    from models import db

    db.init_app(app)

    # Initialize Flask-Migrate
    Migrate(app, db)

    # Initialize Flask-Login
    login_manager = LoginManager()
    login_manager.init_app(app)

    # Import all models to ensure they are registered with SQLAlchemy
    from models.flashcard import Flashcard
    from models.log import Log
    from models.practice_result import PracticeResult
    from models.statistic import Statistic
    from models.study_session import StudySession
    from models.user import User

    # User loader callback for Flask-Login
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    # API clients send HTTP Basic credentials with every request
    @login_manager.request_loader
    def load_user_from_request(req):
        from auth.utils import verify_credentials

        credentials = req.authorization
        if credentials is None or not credentials.username:
            return None
        return verify_credentials(credentials.username, credentials.password)

    @login_manager.unauthorized_handler
    def unauthorized():
        app.logger.info(f"Unauthenticated request to {request.path}")
        return jsonify({"error": "Authentication required"}), 401

    # Register API blueprints
    from routes.flashcards import bp as flashcards_bp
    from routes.logs import bp as logs_bp
    from routes.statistics import bp as statistics_bp
    from routes.study_sessions import bp as study_sessions_bp

    app.register_blueprint(flashcards_bp)
    app.register_blueprint(study_sessions_bp)
    app.register_blueprint(statistics_bp)
    app.register_blueprint(logs_bp)

    # Register `flask flashcard ...` commands
    from commands.cli import flashcard_cli

    app.cli.add_command(flashcard_cli)

    # Home route
    @app.route("/")
    def home():
        return jsonify({"message": "Welcome to the Flashcard Study App!", "version": "1.0.0"})

    # Health check route
    @app.route("/health")
    def health_check():
        try:
            db.session.execute(db.text("SELECT 1"))
            return jsonify({"status": "healthy", "database": "connected"}), 200
        except Exception as e:
            app.logger.error(f"Health check failed: {e}")
            return jsonify({"status": "unhealthy", "error": str(e)}), 500

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True, port=5001)
