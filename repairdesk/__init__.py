import logging
from flask import Flask, render_template, redirect, url_for
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager, current_user
from flask_wtf import CSRFProtect
from datetime import datetime

# Initialize extensions (but don't bind to app yet)
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
login_manager.login_view = 'auth.login'
login_manager.login_message_category = 'info'


def create_app(config_class=None):
    from config import get_config, ensure_directories

    if config_class is None:
        config_class = get_config()
        ensure_directories()

    # Create the app instance
    app = Flask(__name__, template_folder='../templates')
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    # Init extensions WITH the app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)

    # Live updates: one hub per app, fed by session commit events
    from .sync import SnapshotHub, install_listeners
    from .sync.events import HUB_EXTENSION
    app.extensions[HUB_EXTENSION] = SnapshotHub()
    install_listeners(db)

    # Import models (inside function to avoid circular imports)
    from .models import Admin, Technician, Customer, Repair, Donation
    from .services.auth import load_account

    @login_manager.user_loader
    def load_user(user_id):
        return load_account(user_id)

    # Register blueprints
    from .blueprints.auth import auth_bp, api_bp
    from .blueprints.repair import repair_bp
    from .blueprints.customers import customers_bp
    from .blueprints.staff import staff_bp
    from .blueprints.donations import donations_bp
    from .blueprints.live import live_bp
    from .blueprints.public import public_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(api_bp, url_prefix='/api')
    app.register_blueprint(repair_bp, url_prefix='/dashboard')
    app.register_blueprint(customers_bp, url_prefix='/customers')
    app.register_blueprint(staff_bp, url_prefix='/staff')
    app.register_blueprint(donations_bp, url_prefix='/donations')
    app.register_blueprint(live_bp, url_prefix='/live')
    app.register_blueprint(public_bp)

    # Jinja filters
    from .utils.timezone_helper import format_local_datetime, format_local_date, time_ago
    app.jinja_env.filters['local_datetime'] = format_local_datetime
    app.jinja_env.filters['local_date'] = format_local_date
    app.jinja_env.filters['time_ago'] = time_ago

    @app.context_processor
    def inject_shop():
        return {'now': datetime.utcnow(), 'shop_name': app.config.get('SHOP_NAME', 'RepairDesk')}

    @app.route('/')
    def index():
        if not current_user.is_authenticated:
            return redirect(url_for('auth.login'))
        return redirect(url_for('repair.dashboard'))

    # Error handlers
    @app.errorhandler(404)
    def page_not_found(e):
        return render_template('404.html'), 404

    @app.errorhandler(500)
    def internal_server_error(e):
        db.session.rollback()
        return render_template('500.html'), 500

    # Health check endpoint
    @app.route('/health')
    def health_check():
        return {'status': 'healthy', 'timestamp': datetime.utcnow().isoformat()}

    # Initialize database
    with app.app_context():
        from .services.staff import ensure_default_admin
        try:
            db.create_all()
            app.logger.info('Database tables checked/created')
            if app.config.get('BOOTSTRAP_DEFAULT_ADMIN', True):
                ensure_default_admin(app.config['DEFAULT_ADMIN_EMAIL'], app.config['DEFAULT_ADMIN_PASSWORD'])
        except Exception:
            db.session.rollback()
            app.logger.exception('Error during database initialization')

    return app
