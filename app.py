import os
import logging
import click
from logging.handlers import RotatingFileHandler
from flask import Flask, g, jsonify
from config import config
from extensions import db, migrate
from services.errors import LedgerError


def configure_logging(app):
    """Configure application logging"""
    if not app.debug and not app.testing:
        log_file = app.config['LOG_FILE']
        log_dir = os.path.dirname(log_file)
        # Create logs directory if it doesn't exist
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10240000,  # 10MB
            backupCount=10
        )
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s %(name)s: %(message)s '
            '[in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)
        # Service modules log through their own loggers
        logging.getLogger('services').addHandler(file_handler)
        logging.getLogger('services').setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info('EV Ledger startup')
    else:
        # Development logging to console
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')
        app.logger.setLevel(logging.DEBUG)
        app.logger.info('EV Ledger startup (DEBUG mode)')


def create_app(config_name=None):
    """Application factory pattern"""

    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)
    app.json.sort_keys = app.config.get('JSON_SORT_KEYS', False)

    # Configure logging
    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models to ensure they're registered with SQLAlchemy
    with app.app_context():
        import models

    # Register blueprints
    from blueprints.vehicles import vehicles_bp
    from blueprints.suppliers import suppliers_bp
    from blueprints.charges import charges_bp
    from blueprints.settings import settings_bp
    from blueprints.dashboard import dashboard_bp

    app.register_blueprint(vehicles_bp, url_prefix='/api')
    app.register_blueprint(suppliers_bp, url_prefix='/api')
    app.register_blueprint(charges_bp, url_prefix='/api')
    app.register_blueprint(settings_bp, url_prefix='/api')
    app.register_blueprint(dashboard_bp, url_prefix='/api')

    @app.teardown_request
    def drop_request_state(exc):
        g.pop('ledger_config', None)
        g.pop('gateway', None)

    # Create database tables
    if app.config.get('AUTO_CREATE_TABLES'):
        with app.app_context():
            from services.setup_service import setup_ledger
            setup_ledger()

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_commands(app)

    return app


def register_error_handlers(app):
    """Render every failure as {"error": <kind>, "message": <text>}"""

    @app.errorhandler(LedgerError)
    def ledger_error(error):
        if error.status_code >= 500:
            app.logger.error(f'{error.kind}: {error.message}')
        else:
            app.logger.warning(f'{error.kind}: {error.message}')
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'error': 'not_found', 'message': 'Resource not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return jsonify({'error': 'method_not_allowed', 'message': str(error.description)}), 405

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        app.logger.error(f'Internal Server Error: {error}')
        return jsonify({'error': 'internal_error', 'message': 'Internal server error'}), 500


def register_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('setup-db')
    def setup_db():
        """Create the tables, the home supplier and the default settings."""
        from services.setup_service import setup_ledger
        result = setup_ledger()
        click.echo(f'Tables ready: {", ".join(result["tables"])}')
        click.echo(f'Home supplier: {result["home_supplier"]}')

    @app.cli.command('export-charges')
    @click.option('--vehicle-id', type=int, default=None, help='Only export this vehicle.')
    @click.option('--output', type=click.Path(dir_okay=False, writable=True), default=None,
                  help='Write the CSV to this file instead of stdout.')
    def export_charges(vehicle_id, output):
        """Export charge sessions as CSV."""
        from services.export_service import charges_to_csv
        from services.table_gateway import TableGateway

        gateway = TableGateway()
        filters = {}
        try:
            if vehicle_id is not None:
                gateway.get('vehicles', vehicle_id)
                filters['vehicle_id'] = vehicle_id
            charges = gateway.select_all('charges', newest_first=True, **filters)
        except LedgerError as e:
            raise click.ClickException(e.message)
        text = charges_to_csv(charges)

        if output:
            with open(output, 'w', encoding='utf-8', newline='') as f:
                f.write(text)
            click.echo(f'SUCCESS: {len(charges)} charges written to {output}')
        else:
            click.echo(text, nl=False)


if __name__ == '__main__':
    app = create_app()
    # SECURITY: Only bind to localhost in development
    # Never use 0.0.0.0 with debug mode - it exposes the debugger to the network
    app.run(host='127.0.0.1', port=5000, debug=True)
