import os
import configparser
import urllib.parse
from pathlib import Path

class Config:
    """Configuration manager for the Storefront Operations system."""
    
    _instance = None
    
    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance
    
    def __init__(self):
        """Initialize the configuration if not already initialized."""
        if self._initialized:
            return
            
        self._config_dir = Path(os.environ.get('STOREFRONT_CONFIG_DIR', 'config'))
        self._config_path = self._config_dir / 'settings.ini'
        self._config = configparser.ConfigParser(interpolation=None)
        
        # Create config directory if it doesn't exist
        if not self._config_dir.exists():
            self._config_dir.mkdir(parents=True)
        
        # Load config or create default
        if self._config_path.exists():
            self._config.read(self._config_path)
        else:
            self._create_default_config()
            
        self._initialized = True
    
    def _create_default_config(self):
        """Create default configuration file."""
        self._config['DATABASE'] = {
            'engine': 'postgresql',
            'host': 'localhost',
            'port': '5432',
            'database': 'storefront',
            'username': 'postgres',
            'password': 'postgres',
            'echo': 'False',
            'pool_size': '5',
            'max_overflow': '10',
            'pool_timeout': '30',
            'pool_recycle': '1800'
        }
        
        self._config['LOGGING'] = {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'directory': 'logs',
            'max_size_mb': '10',
            'backup_count': '5',
            'console_output': 'False'
        }
        
        self._config['BUSINESS_RULES'] = {
            'search_radius': '30.0',
            'recent_limit': '5',
            'top_limit': '5',
            'password_min_length': '5',
            'password_max_length': '11'
        }
        
        self._save_config()
    
    def _save_config(self):
        """Save configuration to file."""
        with open(self._config_path, 'w') as configfile:
            self._config.write(configfile)
    
    def get(self, section, key, default=None):
        """Get configuration value."""
        try:
            return self._config.get(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default
    
    def get_int(self, section, key, default=None):
        """Get configuration value as integer."""
        try:
            return self._config.getint(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default
    
    def get_float(self, section, key, default=None):
        """Get configuration value as float."""
        try:
            return self._config.getfloat(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default
    
    def get_boolean(self, section, key, default=None):
        """Get configuration value as boolean."""
        try:
            return self._config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default
    
    def get_db_url(self):
        """Generate SQLAlchemy database URL.

        An explicit ``STOREFRONT_DATABASE_URL`` environment variable or a
        ``url`` entry in the DATABASE section wins over the individual fields.
        """
        url = os.environ.get('STOREFRONT_DATABASE_URL') or self.get('DATABASE', 'url')
        if url:
            return url

        engine = self.get('DATABASE', 'engine', 'postgresql')
        username = self.get('DATABASE', 'username', 'postgres')
        password = urllib.parse.quote_plus(self.get('DATABASE', 'password', 'postgres'))
        host = self.get('DATABASE', 'host', 'localhost')
        port = self.get('DATABASE', 'port', '5432')
        database = self.get('DATABASE', 'database', 'storefront')
        
        return f"{engine}://{username}:{password}@{host}:{port}/{database}"
    
    @property
    def pool_config(self):
        """Get connection pool configuration."""
        return {
            'pool_size': self.get_int('DATABASE', 'pool_size', 5),
            'max_overflow': self.get_int('DATABASE', 'max_overflow', 10),
            'pool_timeout': self.get_int('DATABASE', 'pool_timeout', 30),
            'pool_recycle': self.get_int('DATABASE', 'pool_recycle', 1800)
        }
    
    @property
    def log_config(self):
        """Get logging configuration."""
        return {
            'level': self.get('LOGGING', 'level', 'INFO'),
            'format': self.get('LOGGING', 'format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            'directory': self.get('LOGGING', 'directory', 'logs'),
            'max_size_mb': self.get_int('LOGGING', 'max_size_mb', 10),
            'backup_count': self.get_int('LOGGING', 'backup_count', 5),
            'console_output': self.get_boolean('LOGGING', 'console_output', False)
        }
    
    @property
    def business_rules(self):
        """Get business rules configuration."""
        return {
            'search_radius': self.get_float('BUSINESS_RULES', 'search_radius', 30.0),
            'recent_limit': self.get_int('BUSINESS_RULES', 'recent_limit', 5),
            'top_limit': self.get_int('BUSINESS_RULES', 'top_limit', 5),
            'password_min_length': self.get_int('BUSINESS_RULES', 'password_min_length', 5),
            'password_max_length': self.get_int('BUSINESS_RULES', 'password_max_length', 11)
        }

# Global config instance
config = Config()
