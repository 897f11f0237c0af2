import logging
import os

import click
from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_mailman import Mail
from flask_migrate import Migrate
from werkzeug.security import generate_password_hash

from config import CONFIGS, Config
from models import db, User, ProjectStatus, Subject, Tag, Board, TimesheetActivity

mail = Mail()
migrate = Migrate()
jwt = JWTManager()

DEFAULT_STATUSES = [
    'Project Execution - yet to start',
    'Project Execution - in progress',
    'Research Paper - in progress',
    'Ready for Publication',
    'Project Execution - completed',
]
DEFAULT_SUBJECTS = [
    ('Computer Science', 'CS'),
    ('Physics', 'PHY'),
    ('Biology', 'BIO'),
    ('Economics', 'ECO'),
]
DEFAULT_TAGS = [('Priority', '#dc3545'), ('Prototype', '#28a745')]
DEFAULT_BOARDS = ['CBSE', 'ICSE', 'IB', 'State Board']
DEFAULT_ACTIVITIES = [
    ('Mentoring Session', '#007bff'),
    ('Paper Review', '#28a745'),
    ('Research Guidance', '#17a2b8'),
    ('Code Review', '#ffc107'),
    ('Administrative', '#6c757d'),
]


def seed_defaults(app):
    """Insert lookup rows and the first admin account if they are missing."""
    for order, name in enumerate(DEFAULT_STATUSES, start=1):
        if not ProjectStatus.query_first(status_name=name):
            db.session.add(ProjectStatus(status_name=name, status_order=order))
    for name, code in DEFAULT_SUBJECTS:
        if not Subject.query_first(subject_name=name):
            db.session.add(Subject(subject_name=name, subject_code=code))
    for name, color in DEFAULT_TAGS:
        if not Tag.query_first(tag_name=name):
            db.session.add(Tag(tag_name=name, tag_color=color))
    for name in DEFAULT_BOARDS:
        if not Board.query_first(name=name):
            db.session.add(Board(name=name))
    for name, color in DEFAULT_ACTIVITIES:
        if not TimesheetActivity.query_first(activity_name=name):
            db.session.add(TimesheetActivity(activity_name=name, color=color))

    username = app.config['ADMIN_USERNAME']
    if not User.query_first(username=username):
        db.session.add(User(
            username=username,
            password_hash=generate_password_hash(app.config['ADMIN_PASSWORD']),
            full_name='Administrator',
            user_type='admin',
            status='active'
        ))
    db.session.commit()


def register_blueprints(app):
    from routes.auth import auth
    from routes.users import users
    from routes.projects import projects
    from routes.students import students
    from routes.publications import publications
    from routes.ready_publication import ready
    from routes.in_publication import in_publication
    from routes.conference import conference
    from routes.journals import journals
    from routes.auditlogs import auditlogs
    from routes.dashboard import dashboard
    from routes.timesheet import timesheet

    app.register_blueprint(auth, url_prefix='/auth')
    app.register_blueprint(users, url_prefix='/users')
    app.register_blueprint(projects, url_prefix='/projects')
    app.register_blueprint(students, url_prefix='/students')
    app.register_blueprint(publications, url_prefix='/publications')
    app.register_blueprint(ready, url_prefix='/ready_publication')
    app.register_blueprint(in_publication, url_prefix='/in_publication')
    app.register_blueprint(conference, url_prefix='/conference')
    app.register_blueprint(journals, url_prefix='/journals')
    app.register_blueprint(auditlogs, url_prefix='/auditlogs')
    app.register_blueprint(dashboard, url_prefix='/dashboard')
    app.register_blueprint(timesheet, url_prefix='/timesheet')


def create_app(config_class=None):
    if config_class is None:
        config_class = CONFIGS.get(os.getenv('FLASK_ENV', 'development'), Config)

    app = Flask(__name__)
    app.config.from_object(config_class)
    app.url_map.strict_slashes = False
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    CORS(app, resources={
        r"/*": {
            "origins": app.config['FRONTEND_ORIGIN'],
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization", "Accept"],
            "supports_credentials": True,
            "expose_headers": ["Content-Type", "Authorization"]
        }
    })

    db.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)
    jwt.init_app(app)

    @app.route('/')
    def index():
        return jsonify({"message": "API is running"})

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({"error": reason}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({"error": reason}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({"error": "Token has expired"}), 401

    @app.cli.command('init-db')
    def init_db():
        """Create tables and seed default lookups and the admin account."""
        db.create_all()
        seed_defaults(app)
        click.echo("Database initialized.")

    register_blueprints(app)
    app.logger.info("Research apps API started with %s", config_class.__name__)
    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", debug=app.config.get('DEBUG', False), port=5000)
