"""Utility functions for application configuration management.

Configuration is a small YAML document with the shortener settings. It is
looked up, in order, at:

    1. The path passed to `load_config()`.
    2. The path in the `BATCHSHORTENER_CONFIG` environment variable.
    3. `<project root>/config/<APP_ENV>.yml`, if such a file exists.

Missing files fall back to built-in defaults. The YAML document follows this
structure (every key optional):

    base_url: http://localhost:3000
    default_validity_minutes: 30
    max_generation_attempts: 100
    shortcode_length: 6

Environment variables `SHORTENER_BASE_URL` and
`SHORTENER_MAX_GENERATION_ATTEMPTS` override values read from the file.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    project_root() -> Path
        Return the absolute path to the project root directory, using
        `PROJECT_ROOT` when available.

    load_config(path: str | Path | None = None) -> ShortenerConfig
        Load and validate the shortener configuration.

Example:
    >>> from batchshortener.utils.config import load_config
    >>> config = load_config()
    >>> config.base_url
    'http://localhost:3000'
"""

import os
import logging
import urllib.parse
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from batchshortener.exceptions import BadConfigurationError
from batchshortener.utils.constants import ENV, Defaults, Generation, Limits


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShortenerConfig:
    """Validated shortener settings.

    Attributes:
        base_url (str):
            Public origin used to build short URL strings.
        default_validity_minutes (int):
            Validity period applied to entries that don't specify one.
        max_generation_attempts (int):
            Retry cap for generating a unique shortcode.
        shortcode_length (int):
            Length of generated shortcodes.
    """

    base_url: str = Defaults.BASE_URL
    default_validity_minutes: int = Limits.DEFAULT_VALIDITY_MINUTES
    max_generation_attempts: int = Generation.MAX_ATTEMPTS
    shortcode_length: int = Generation.SHORTCODE_LENGTH

    def __post_init__(self):
        for name in ('default_validity_minutes', 'max_generation_attempts', 'shortcode_length'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise BadConfigurationError(f'{name} must be an integer (given value: {value!r}).')
        if not isinstance(self.base_url, str):
            raise BadConfigurationError(f'base_url must be a string (given value: {self.base_url!r}).')

        components = urllib.parse.urlsplit(self.base_url)
        if components.scheme not in {'http', 'https'} or not components.netloc:
            raise BadConfigurationError(f'Bad base URL {self.base_url!r}')
        if not 0 < self.default_validity_minutes <= Limits.MAX_VALIDITY_MINUTES:
            raise BadConfigurationError(f'Bad default validity period {self.default_validity_minutes}')
        if self.max_generation_attempts <= 0:
            raise BadConfigurationError(f'Bad generation attempts cap {self.max_generation_attempts}')
        if not Limits.MIN_SHORTCODE_LENGTH <= self.shortcode_length <= Limits.MAX_SHORTCODE_LENGTH:
            raise BadConfigurationError(f'Bad shortcode length {self.shortcode_length}')


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def project_root() -> Path:
    """Return the absolute path to the project root directory

    Uses PROJECT_ROOT when set, otherwise the current working directory.
    """
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.getcwd()))


def _config_path(path: str | Path | None) -> Path | None:
    if path is not None:
        return Path(path)
    if env_path := os.environ.get(ENV.App.CONFIG_FILE):
        return Path(env_path)
    default = project_root() / 'config' / f'{app_env()}.yml'
    return default if default.is_file() else None


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open(encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise BadConfigurationError(f'Configuration file {path} must contain a mapping.')
    return data


def _env_overrides() -> dict[str, Any]:
    overrides = {}
    if base_url := os.environ.get(ENV.Shortener.BASE_URL):
        overrides['base_url'] = base_url
    if attempts := os.environ.get(ENV.Shortener.MAX_GENERATION_ATTEMPTS):
        try:
            overrides['max_generation_attempts'] = int(attempts)
        except ValueError as e:
            raise BadConfigurationError(f'{ENV.Shortener.MAX_GENERATION_ATTEMPTS} must be an integer (given value: {attempts!r}).') from e
    return overrides


def load_config(path: str | Path | None = None) -> ShortenerConfig:
    """Load the shortener configuration.

    Args:
        path (str | Path | None):
            Explicit YAML file to read. See module docstring for lookup order.

    Returns:
        ShortenerConfig: validated configuration.

    Raises:
        FileNotFoundError:
            If an explicitly requested configuration file doesn't exist.
        BadConfigurationError:
            If the document has unknown keys or invalid values.
    """
    config_path = _config_path(path)
    data = {}
    if config_path is not None:
        data = _read_yaml(config_path)
        logger.debug('Loaded configuration file.', extra={'configPath': str(config_path)})

    data.update(_env_overrides())

    known = {f.name for f in fields(ShortenerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise BadConfigurationError(f'Unknown configuration keys: {", ".join(unknown)}')

    return ShortenerConfig(**data)
