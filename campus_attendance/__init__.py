"""Campus Attendance API - Application Factory."""
import logging
import os
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Initialize extensions
db = SQLAlchemy()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)

def create_app(config_name: str = None) -> Flask:
    """Application factory pattern."""
    app = Flask(__name__)

    # Load configuration
    from config import get_config
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)
    limiter.init_app(app)

    # Configure CORS
    CORS(app, origins=app.config.get('CORS_ORIGINS', ["*"]))

    # Setup logging
    setup_logging(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Setup database
    setup_database(app)

    # Add CLI commands
    register_commands(app)

    # Add health check
    @app.route('/health')
    def health_check():
        return jsonify({
            'status': 'healthy',
            'service': 'Campus Attendance API',
            'version': '1.0.0'
        })

    return app

def register_blueprints(app: Flask) -> None:
    """Register all application blueprints."""
    from campus_attendance.api.auth import auth_bp
    from campus_attendance.api.departments import departments_bp
    from campus_attendance.api.batches import batches_bp
    from campus_attendance.api.sections import sections_bp
    from campus_attendance.api.courses import courses_bp
    from campus_attendance.api.faculty import faculty_bp
    from campus_attendance.api.students import students_bp
    from campus_attendance.api.timetable import timetable_bp
    from campus_attendance.api.attendance import attendance_bp
    from campus_attendance.api.reports import reports_bp

    # Auth
    app.register_blueprint(auth_bp, url_prefix='/api')

    # Admin Management
    app.register_blueprint(departments_bp, url_prefix='/api/admin/depts')
    app.register_blueprint(batches_bp, url_prefix='/api/admin/batches')
    app.register_blueprint(sections_bp, url_prefix='/api/admin/sections')
    app.register_blueprint(courses_bp, url_prefix='/api/admin/courses')
    app.register_blueprint(faculty_bp, url_prefix='/api/admin')
    app.register_blueprint(students_bp, url_prefix='/api/admin')

    # Core Features
    app.register_blueprint(timetable_bp, url_prefix='/api')
    app.register_blueprint(attendance_bp, url_prefix='/api')
    app.register_blueprint(reports_bp, url_prefix='/api')

    # Swagger UI
    from flask_swagger_ui import get_swaggerui_blueprint
    from campus_attendance.utils.swagger import SWAGGER_URL, API_URL, generate_swagger_spec

    @app.route(API_URL)
    def swagger_spec():
        """Serve Swagger/OpenAPI specification."""
        return jsonify(generate_swagger_spec())

    swaggerui_bp = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={'app_name': "Campus Attendance API"}
    )
    app.register_blueprint(swaggerui_bp, url_prefix=SWAGGER_URL)

def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from campus_attendance.utils.helpers import handle_error
    from campus_attendance.utils.exceptions import ServiceError
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        db.session.rollback()
        return handle_error(error.message, error.status_code)

    @app.errorhandler(400)
    def bad_request(error):
        return handle_error(error, 400)

    @app.errorhandler(401)
    def unauthorized(error):
        return handle_error(error, 401)

    @app.errorhandler(403)
    def forbidden(error):
        return handle_error(error, 403)

    @app.errorhandler(404)
    def not_found(error):
        return handle_error(error, 404)

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return handle_error("Internal server error", 500)

    @app.errorhandler(HTTPException)
    def handle_exception(e):
        return handle_error(e.description, e.code)

    # JWT error handlers
    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({
            'error': True,
            'message': 'Token has expired',
            'status_code': 401
        }), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return jsonify({
            'error': True,
            'message': 'Invalid token',
            'status_code': 401
        }), 401

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return jsonify({
            'error': True,
            'message': 'Authorization token required',
            'status_code': 401
        }), 401

def setup_logging(app: Flask) -> None:
    """Setup application logging."""
    level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO'), logging.INFO)
    app.logger.setLevel(level)

    if not app.debug and not app.testing:
        log_file = app.config.get('LOG_FILE', 'logs/app.log')
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(level)
        app.logger.addHandler(file_handler)

        app.logger.info('Campus Attendance API startup')

def setup_database(app: Flask) -> None:
    """Setup database connections."""
    with app.app_context():
        # Import all models so metadata is complete before create_all
        from campus_attendance.models import (  # noqa: F401
            User, UserRole, Department, Batch, Section,
            Course, FacultyProfile, Student, TimetableSlot, WeekDay,
            AttendanceSession, SessionCategory, AttendanceRecord,
            AttendanceStatus, ClassSwap
        )

def register_commands(app: Flask) -> None:
    """Register CLI commands."""
    import click

    @app.cli.command('init-db')
    @click.option('--drop', is_flag=True, help='Drop existing tables')
    def init_db(drop):
        """Initialize the database."""
        if drop:
            db.drop_all()
            click.echo('Dropped all tables.')

        db.create_all()
        click.echo('Created all tables.')

        # Create default admin
        from campus_attendance.models.user import User, UserRole

        admin = User.query.filter_by(email='admin@college.edu').first()
        if not admin:
            admin = User(email='admin@college.edu', role=UserRole.ADMIN)
            admin.set_password('admin123456')
            db.session.add(admin)
            db.session.commit()
            click.echo('Created admin user: admin@college.edu / admin123456')

    @app.cli.command('seed-db')
    def seed_db():
        """Seed database with sample data."""
        from campus_attendance.services.seed_service import SeedService

        try:
            SeedService.seed_all()
            click.echo('Database seeded successfully!')
        except Exception as e:
            db.session.rollback()
            click.echo(f'Error seeding database: {str(e)}')

    @app.cli.command('create-admin')
    def create_admin():
        """Create admin user."""
        email = click.prompt('Admin email')
        password = click.prompt('Password', hide_input=True, confirmation_prompt=True)

        from campus_attendance.models.user import User, UserRole

        admin = User(email=email.lower().strip(), role=UserRole.ADMIN)
        admin.set_password(password)

        try:
            db.session.add(admin)
            db.session.commit()
            click.echo(f'Admin user created: {email}')
        except Exception as e:
            db.session.rollback()
            click.echo(f'Error creating admin: {str(e)}')
