"""
Configuration settings for the WasteChain smart-bin service
"""
import os


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Flask application configuration"""
    
    # Flask secret key
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production-12345'
    
    # Database configuration
    basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'wastechain.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    
    # IoT simulation
    SIMULATION_AUTOSTART = _env_flag('SIMULATION_AUTOSTART', True)
    SIMULATION_INTERVAL_MS = int(os.environ.get('SIMULATION_INTERVAL_MS') or 30000)
    
    # Demo bins, citizen and contractor on first start
    SEED_DEFAULT_DATA = _env_flag('SEED_DEFAULT_DATA', True)
    
    # Hardcoded admin and contractor accounts
    ADMIN_USERNAME = os.environ.get('ADMIN_USERNAME') or 'sde'
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD') or '123'
    CONTRACTOR_USERNAME = os.environ.get('CONTRACTOR_USERNAME') or 'sde'
    CONTRACTOR_PASSWORD = os.environ.get('CONTRACTOR_PASSWORD') or '123'
    
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SIMULATION_AUTOSTART = False
    SEED_DEFAULT_DATA = False
