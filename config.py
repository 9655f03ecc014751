import os


class Config:
    """Base configuration"""
    
    # Secret key for session management
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    
    # Database configuration
    # Relative SQLite paths live in the app's instance folder
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///ev_ledger.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False  # Set to True for SQL query logging during development
    
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }

    # The JSON API validates bodies with Flask-WTF forms; there is no browser session to protect
    WTF_CSRF_ENABLED = False

    # Create missing tables at startup. Production runs `flask setup-db` instead.
    AUTO_CREATE_TABLES = True

    # Logging
    LOG_FILE = os.environ.get('LOG_FILE') or os.path.join('logs', 'ev_ledger.log')

    JSON_SORT_KEYS = False


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_ECHO = False  # Set to True only when debugging SQL queries


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    
    # MUST set these environment variables in production
    SECRET_KEY = os.environ.get('SECRET_KEY')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or os.environ.get('SQLALCHEMY_DATABASE_URI')

    AUTO_CREATE_TABLES = False
    
    # Validate required settings
    @classmethod
    def init_app(cls, app):
        Config.init_app(app)
        
        if not app.config.get('SQLALCHEMY_DATABASE_URI'):
            raise ValueError("DATABASE_URL environment variable must be set in production!")

        # Warn if using SQLite in production
        if 'sqlite' in app.config.get('SQLALCHEMY_DATABASE_URI', ''):
            import warnings
            warnings.warn("Using SQLite in production is not recommended. Use PostgreSQL or MySQL.")


# Add init_app to base config
Config.init_app = classmethod(lambda cls, app: None)


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    # conftest creates the schema and each test seeds its own rows
    AUTO_CREATE_TABLES = False


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
