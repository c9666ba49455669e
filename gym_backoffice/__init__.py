from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from gym_backoffice.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
)


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(test_config=None):
    from pathlib import Path

    app = Flask(__name__)

    logger = get_logger("gym_backoffice")
    logger.info("Initializing Flask application")

    # Configuration
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')

    # Prefer an explicit DATABASE_URL; otherwise keep the SQLite file in the
    # project's instance/ directory.
    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        base_dir = Path(__file__).parent.parent
        instance_dir = base_dir / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'gym_backoffice.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.json.sort_keys = False

    # Rate limiting
    app.config['RATELIMIT_ENABLED'] = _env_flag('RATELIMIT_ENABLED', 'True')
    app.config['RATELIMIT_DEFAULT'] = os.environ.get('RATELIMIT_DEFAULT', '100 per 15 minutes')

    # Inventory business rules
    app.config['REORDER_NUMBER_PREFIX'] = os.environ.get('REORDER_NUMBER_PREFIX', 'RO')
    app.config['REORDER_NUMBER_WIDTH'] = int(os.environ.get('REORDER_NUMBER_WIDTH', '4'))
    app.config['SKU_NUMBER_WIDTH'] = int(os.environ.get('SKU_NUMBER_WIDTH', '3'))
    app.config['REORDER_MAX_QUANTITY'] = int(os.environ.get('REORDER_MAX_QUANTITY', '1000'))
    app.config['STOCK_ADJUSTMENT_MAX_QUANTITY'] = int(os.environ.get('STOCK_ADJUSTMENT_MAX_QUANTITY', '10000'))
    app.config['REORDER_PARTIAL_RECEIPT_RATIO'] = float(os.environ.get('REORDER_PARTIAL_RECEIPT_RATIO', '0.5'))
    app.config['NOTES_MAX_LENGTH'] = int(os.environ.get('NOTES_MAX_LENGTH', '500'))

    if test_config is not None:
        app.config.update(test_config)

    # SECURITY: Require SECRET_KEY - no fallback
    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    logger.debug(f"Database configured: {app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0]}")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from gym_backoffice.data.core.location import Location
    from gym_backoffice.data.inventory import (
        InventoryCategory,
        Product,
        StockLevel,
        Vendor,
        ReorderRequest,
    )

    from gym_backoffice.presentation.routes import init_app as init_routes
    init_routes(app)

    @app.errorhandler(429)
    def ratelimit_handler(e):
        logger.warning(f"Rate limit exceeded: {e.description}")
        return jsonify({'error': 'Too many requests', 'code': 'RATE_LIMITED', 'details': str(e.description)}), 429

    @app.get('/')
    def root():
        return jsonify({'service': 'gym_backoffice', 'status': 'ok'})

    logger.info("Flask application initialized")
    return app
