import click
from dotenv import load_dotenv
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from config import Config
from errors import AppError
from models import db
from routes.auth_routes import auth_bp
from routes.interview_routes import interview_bp
from services.ai_client import build_ai_client
from services.question_service import seed_question_bank

load_dotenv()


def register_error_handlers(app: Flask):
    @app.errorhandler(AppError)
    def handle_app_error(exc: AppError):
        if exc.status_code >= 500:
            app.logger.error("%s on %s: %s", type(exc).__name__, request.path, exc)
            return jsonify({"error": "Internal server error"}), exc.status_code
        return jsonify({"error": exc.message}), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        app.logger.exception("Unhandled error on %s: %s", request.path, exc)
        return jsonify({"error": "Internal server error"}), 500


def register_commands(app: Flask):
    @app.cli.command("seed-questions")
    @click.option("--force", is_flag=True, help="Insert the built-in questions even if the bank is not empty.")
    def seed_questions(force: bool):
        """Load the built-in questions into the question bank."""
        added = seed_question_bank(force=force)
        click.echo(f"Added {added} questions to the question bank.")


def create_app(test_config=None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)
    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)
    app.register_blueprint(auth_bp)
    app.register_blueprint(interview_bp)
    register_error_handlers(app)
    register_commands(app)

    app.extensions["ai_client"] = build_ai_client(app.config)
    if app.extensions["ai_client"] is None:
        app.logger.warning("GEMINI_API_KEY is empty. AI question generation and scoring are disabled.")

    with app.app_context():
        db.create_all()
        if app.config["SEED_QUESTION_BANK"]:
            seed_question_bank()

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
