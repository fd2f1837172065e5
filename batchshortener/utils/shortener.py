"""Shortcode generation utilities

This module provides helpers for generating random, base62-safe shortcodes
and for retrying generation until a candidate is unused.

Functions:
    generate_shortcode(length=6):
        Generate a random shortcode suitable for use as a URL slug.

    generate_unique_shortcode(is_unique, generate=generate_shortcode, max_attempts=100):
        Draw shortcodes until one passes the uniqueness check.

Example:
    >>> from batchshortener.utils import generate_shortcode
    >>> generate_shortcode()
    'aZ3kq9'
"""

import string
import secrets
import logging
from collections.abc import Callable

from batchshortener.exceptions import GenerationExhaustedError
from batchshortener.utils.constants import Generation


logger = logging.getLogger(__name__)

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits


def generate_shortcode(length: int = Generation.SHORTCODE_LENGTH) -> str:
    """Generate a random Base62 shortcode.

    Every character is an independent uniform draw from the 62-character
    alphabet, so the result is NOT guaranteed to be unique. Callers that need
    uniqueness should use generate_unique_shortcode().

    Args:
        length (int, optional):
            Number of characters in the shortcode. Defaults to 6.

    Returns:
        str: A random alphanumeric shortcode.

    Raises:
        TypeError: If length is not an integer.
        ValueError: If length is not positive.

    Example:
        >>> code = generate_shortcode(8)
        >>> len(code)
        8
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    shortcode = ''.join(secrets.choice(ALPHABET) for _ in range(length))
    logger.debug('Generated shortcode.', extra={'shortcode': shortcode})
    return shortcode


def generate_unique_shortcode(
    is_unique: Callable[[str], bool],
    generate: Callable[[], str] = generate_shortcode,
    max_attempts: int = Generation.MAX_ATTEMPTS,
) -> str:
    """Generate shortcodes until one is accepted by `is_unique`.

    Args:
        is_unique (Callable[[str], bool]):
            Uniqueness oracle, usually backed by the short URL registry.
        generate (Callable[[], str], optional):
            Candidate generator. Defaults to generate_shortcode().
        max_attempts (int, optional):
            Number of candidates tried before giving up. Defaults to 100.

    Returns:
        str: The first generated shortcode accepted by `is_unique`.

    Raises:
        GenerationExhaustedError: If every attempt produced a taken shortcode.

    Example:
        >>> taken = {'abc123'}
        >>> generate_unique_shortcode(lambda code: code not in taken)
        'Qm81xz'
    """
    if max_attempts <= 0:
        raise ValueError(f'max_attempts must be a positive integer (given value: {max_attempts}).')

    for attempt in range(1, max_attempts + 1):
        candidate = generate()
        if is_unique(candidate):
            return candidate
        logger.debug(
            'Generated shortcode is already taken. Retrying.',
            extra={'shortcode': candidate, 'attempt': attempt},
        )

    logger.error('Failed to generate a unique shortcode.', extra={'max_attempts': max_attempts})
    raise GenerationExhaustedError(f'No unique shortcode found after {max_attempts} attempts.')
