"""
WasteChain - Application Factory

Smart-bin waste management service: simulated IoT bins, citizen issue
reports with reward points and contractor pickups with earnings.
"""

import logging
import os

from flask import Flask
from wastechain.extensions import db
from wastechain.config import Config
from wastechain.errors import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    """Build the WasteChain app: database, JSON error handlers, the /api
    blueprints and the IoT simulation scheduler.

    ``config_class`` defaults to ``Config``; tests pass ``TestConfig``.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)
    
    # Initialize extensions
    db.init_app(app)
    register_error_handlers(app)
    
    # Register blueprints
    from wastechain.auth import auth_bp
    from wastechain.admin import admin_bp
    from wastechain.bins import bins_bp
    from wastechain.citizens import citizens_bp
    from wastechain.contractors import contractors_bp
    
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(admin_bp, url_prefix='/api')
    app.register_blueprint(bins_bp, url_prefix='/api')
    app.register_blueprint(citizens_bp, url_prefix='/api')
    app.register_blueprint(contractors_bp, url_prefix='/api')
    
    _init_simulation(app)
    
    # Create database tables
    with app.app_context():
        os.makedirs(app.instance_path, exist_ok=True)
        db.create_all()
        if app.config.get('SEED_DEFAULT_DATA'):
            from wastechain.services.seed import ensure_default_data
            ensure_default_data()
    
    if app.config.get('SIMULATION_AUTOSTART'):
        app.extensions['simulation_scheduler'].start(app.config['SIMULATION_INTERVAL_MS'])
    
    return app


def _init_simulation(app):
    """Attach the IoT engine and its scheduler to the application."""
    from wastechain.services.simulation import IoTSimulationEngine
    from wastechain.services.scheduler import SimulationScheduler
    
    engine = IoTSimulationEngine()
    
    def tick():
        with app.app_context():
            return engine.run_once()
    
    app.extensions['iot_engine'] = engine
    app.extensions['simulation_scheduler'] = SimulationScheduler(tick)
