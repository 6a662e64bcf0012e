from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from app.main import main
    flask_app.register_blueprint(main)

    from app.api.runs import runs
    flask_app.register_blueprint(runs, url_prefix='/api/runs')

    from app.api.settings import settings
    flask_app.register_blueprint(settings, url_prefix='/api')

    # Register Socket.IO event handlers on the initialized socketio instance
    from app.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('scores-reset')
    def scores_reset_command():
        """Clears the best scores of every difficulty."""
        from app.services.smite.preferences import PreferencesStore
        PreferencesStore(flask_app).reset_all_scores()
        print('All best scores have been reset!')

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database."""
        import app.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(scores_reset_command)
    flask_app.cli.add_command(db_reset_command)

    return flask_app
