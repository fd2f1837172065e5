from batchshortener.utils.config import app_env, project_root, load_config, ShortenerConfig
from batchshortener.utils.helpers import get_short_url, compute_expiry, utc_now, new_id
from batchshortener.utils.shortener import generate_shortcode, generate_unique_shortcode
from batchshortener.utils.logging import initialize_logging, get_log_sink


__all__ = [
    'generate_shortcode',
    'generate_unique_shortcode',
    'app_env',
    'project_root',
    'load_config',
    'ShortenerConfig',
    'get_short_url',
    'compute_expiry',
    'utc_now',
    'new_id',
    'initialize_logging',
    'get_log_sink',
]
