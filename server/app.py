import logging
import click
from flask import Flask, jsonify
from flask_cors import CORS
from marshmallow import ValidationError as SchemaValidationError
from werkzeug.exceptions import HTTPException
from server.config import Config
from server.extension import db, migrate, jwt, ma
from server.exceptions import LedgerError
from server.routes_controller import register_routes
from server.utils.helper import parse_date


def create_app(config_object=None):
    app = Flask(__name__)

    app.config.from_object(config_object or Config)
    # FLASK_* environment variables override the config object
    app.config.from_prefixed_env()

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    CORS(app,
         supports_credentials=True,
         origins=app.config["CORS_ORIGINS"],
         methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
         allow_headers=["Content-Type", "Authorization"],
         expose_headers=["Authorization"],
         max_age=3600
    )

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ma.init_app(app)

    # Register routes
    register_routes(app)
    register_error_handlers(app)
    register_commands(app)

    @app.route('/')
    def home():
        return {"message": "Welcome to the loan ledger API"}

    if app.config.get("ENABLE_SCHEDULER"):
        from server.scheduler import init_scheduler
        app.extensions["reminder_scheduler"] = init_scheduler(app)

    return app


def register_error_handlers(app):

    @app.errorhandler(LedgerError)
    def handle_ledger_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(e):
        return jsonify({
            "success": False,
            "message": "Invalid request data",
            "error_code": "VALIDATION_ERROR",
            "errors": e.messages,
        }), 422

    @app.errorhandler(Exception)
    def handle_error(e):
        if isinstance(e, HTTPException):
            return e
        db.session.rollback()
        app.logger.error(f"Unhandled error: {e}", exc_info=True)
        return jsonify({"success": False, "message": "Internal Server Error", "error_code": "SERVER_ERROR"}), 500

    # Add JWT error handlers
    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return jsonify({
            "message": "Invalid token",
            "error": str(error)
        }), 401

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return jsonify({
            "message": "Missing authorization token",
            "error": str(error)
        }), 401

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"message": "Token has expired"}), 401


def register_commands(app):

    @app.cli.command("send-reminders")
    @click.option("--date", "as_of", default=None, help="Run the sweep as of YYYY-MM-DD (default: today, UTC).")
    def send_reminders_command(as_of):
        """Send due-date reminders to borrowers."""
        from server.tasks.loan_reminders import run_reminder_sweep

        counts = run_reminder_sweep(parse_date(as_of, "date"))
        for bucket, sent in counts.items():
            click.echo(f"Sent {sent} '{bucket}' reminders.")

    @app.cli.command("seed")
    def seed_command():
        """Load demo users and loans."""
        from server.seed import seed

        seed()
