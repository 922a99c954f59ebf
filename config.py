import os
from exceptions import ConfigError

DEFAULT_API_ORIGIN = 'https://api.bigcommerce.com'
DEFAULT_TREE_NAME = 'Catalyst catalog tree'
DEFAULT_SOURCE_TREE_ID = 1


def _env(environ):
    return os.environ if environ is None else environ


def get_api_origin(environ=None):
    """Return the API origin, falling back to the production endpoint"""
    origin = _env(environ).get('BIGCOMMERCE_API_ORIGIN') or DEFAULT_API_ORIGIN
    return origin.rstrip('/')


def get_store_hash(environ=None):
    store_hash = _env(environ).get('BIGCOMMERCE_STORE_HASH')
    if not store_hash:
        raise ConfigError('BIGCOMMERCE_STORE_HASH missing in env')
    return store_hash


def get_access_token(environ=None):
    access_token = _env(environ).get('BIGCOMMERCE_ACCESS_TOKEN')
    if not access_token:
        raise ConfigError('BIGCOMMERCE_ACCESS_TOKEN missing in env')
    return access_token


def _parse_positive_int(value, name):
    # Plain digits only: no sign, whitespace or underscores
    if not isinstance(value, str) or not (value.isascii() and value.isdigit()):
        raise ConfigError(f'{name} must be a number')
    parsed = int(value, 10)
    # 0 was never a valid channel or tree id
    if parsed <= 0:
        raise ConfigError(f'{name} must be a number')
    return parsed


def get_channel_id(environ=None):
    """Return the target channel id

    Rejects unset, empty, non-numeric and non-positive values.
    """
    channel_id = _env(environ).get('BIGCOMMERCE_CHANNEL_ID')
    if not channel_id:
        raise ConfigError('BIGCOMMERCE_CHANNEL_ID missing in env')
    return _parse_positive_int(channel_id, 'BIGCOMMERCE_CHANNEL_ID')


def get_source_channel_id(environ=None):
    """Return the optional channel used to filter product channel assignments"""
    value = _env(environ).get('BIGCOMMERCE_SOURCE_CHANNEL_ID')
    if not value:
        return None
    return _parse_positive_int(value, 'BIGCOMMERCE_SOURCE_CHANNEL_ID')


def get_source_tree_id(environ=None):
    value = _env(environ).get('BIGCOMMERCE_SOURCE_TREE_ID')
    if not value:
        return DEFAULT_SOURCE_TREE_ID
    return _parse_positive_int(value, 'BIGCOMMERCE_SOURCE_TREE_ID')


class Config:
    """Settings resolved once at startup and handed to every stage"""

    def __init__(self, store_hash, access_token, channel_id,
                 api_origin=DEFAULT_API_ORIGIN, source_tree_id=DEFAULT_SOURCE_TREE_ID,
                 source_channel_id=None, tree_name=DEFAULT_TREE_NAME,
                 batch_size=50, page_limit=250, max_retries=3,
                 log_level='INFO', dry_run=False):
        # BigCommerce Configuration
        self.store_hash = store_hash
        self.access_token = access_token
        self.channel_id = channel_id
        self.api_origin = api_origin
        self.source_tree_id = source_tree_id
        self.source_channel_id = source_channel_id
        self.tree_name = tree_name

        # Migration Settings
        self.batch_size = batch_size
        self.page_limit = page_limit
        self.max_retries = max_retries
        self.log_level = log_level
        self.dry_run = dry_run

    @classmethod
    def from_env(cls, environ=None):
        """Build a Config from the process environment (or the given mapping)"""
        env = _env(environ)
        config = cls(
            store_hash=get_store_hash(env),
            access_token=get_access_token(env),
            channel_id=get_channel_id(env),
            api_origin=get_api_origin(env),
            source_tree_id=get_source_tree_id(env),
            source_channel_id=get_source_channel_id(env),
            tree_name=env.get('BIGCOMMERCE_TREE_NAME') or DEFAULT_TREE_NAME,
            batch_size=_parse_positive_int(env.get('BATCH_SIZE', '50'), 'BATCH_SIZE'),
            page_limit=_parse_positive_int(env.get('PAGE_LIMIT', '250'), 'PAGE_LIMIT'),
            max_retries=_parse_positive_int(env.get('MAX_RETRIES', '3'), 'MAX_RETRIES'),
            log_level=env.get('LOG_LEVEL', 'INFO'),
            dry_run=env.get('DRY_RUN', 'false').lower() == 'true',
        )
        config.validate()
        return config

    def validate(self):
        """Validate that all required configuration is present"""
        required_fields = {
            'store_hash': 'BIGCOMMERCE_STORE_HASH',
            'access_token': 'BIGCOMMERCE_ACCESS_TOKEN',
            'channel_id': 'BIGCOMMERCE_CHANNEL_ID',
        }

        missing_fields = []
        for attr, env_name in required_fields.items():
            if not getattr(self, attr):
                missing_fields.append(env_name)

        if missing_fields:
            raise ConfigError(f"Missing required configuration: {', '.join(missing_fields)}")

        return True

    def __repr__(self):
        return (f"Config(store_hash={self.store_hash!r}, channel_id={self.channel_id}, "
                f"api_origin={self.api_origin!r}, dry_run={self.dry_run})")
