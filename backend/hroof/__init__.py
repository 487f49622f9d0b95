from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from sqlalchemy.exc import SQLAlchemyError
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from hroof.main import main
    flask_app.register_blueprint(main)

    from hroof.api.games import games
    from hroof.api.buzzer import buzzer
    from hroof.api.players import players
    flask_app.register_blueprint(games, url_prefix='/api/games')
    flask_app.register_blueprint(buzzer, url_prefix='/api/buzzer')
    flask_app.register_blueprint(players, url_prefix='/api/players')

    from hroof.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    _register_error_handlers(flask_app)

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database tables."""
        import hroof.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app


def _register_error_handlers(flask_app):
    from hroof.errors import InvalidInput, StaleWrite

    @flask_app.errorhandler(InvalidInput)
    def handle_invalid_input(exc):
        return jsonify({'error': str(exc)}), 400

    @flask_app.errorhandler(StaleWrite)
    def handle_stale_write(exc):
        return jsonify({'error': str(exc), 'version': exc.current_version}), 409

    @flask_app.errorhandler(404)
    def handle_not_found(exc):
        return jsonify({'error': 'Not found'}), 404

    @flask_app.errorhandler(SQLAlchemyError)
    def handle_db_error(exc):
        db.session.rollback()
        flask_app.logger.error(f"[db-error] {exc}")
        return jsonify({'error': 'Storage failure'}), 500
