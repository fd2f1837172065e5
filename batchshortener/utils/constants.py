from enum import StrEnum


class Limits:
    """Batch and field limits."""

    MAX_BATCH_SIZE = 5  # Maximum number of URLs shortened per submission
    DEFAULT_VALIDITY_MINUTES = 30
    MAX_VALIDITY_MINUTES = 10_080  # 60 * 24 * 7 (one week)
    MIN_SHORTCODE_LENGTH = 3
    MAX_SHORTCODE_LENGTH = 20


class Generation:
    """Shortcode generation defaults."""

    SHORTCODE_LENGTH = 6
    MAX_ATTEMPTS = 100  # Retry cap before giving up on a unique shortcode


class Defaults:
    """Defaults used when nothing is configured."""

    BASE_URL = 'http://localhost:3000'
    SHORT_URL_PATH = 's'
    CLICK_LOCATION = 'New York, US'
    USER_AGENT = 'batchshortener/1.0'
    LOG_SINK_MAXLEN = 10_000


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        PROJECT_ROOT = 'PROJECT_ROOT'
        LOG_LEVEL = 'LOG_LEVEL'
        CONFIG_FILE = 'BATCHSHORTENER_CONFIG'

    class Shortener(StrEnum):
        BASE_URL = 'SHORTENER_BASE_URL'
        MAX_GENERATION_ATTEMPTS = 'SHORTENER_MAX_GENERATION_ATTEMPTS'
