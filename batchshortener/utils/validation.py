"""Validation rules for URLs waiting to be shortened.

Every validator is a pure function returning either None (valid) or a
FieldError describing the problem. Errors are data: nothing here raises for
bad user input.

Functions:
    validate_url(candidate) -> FieldError | None
    validate_validity_minutes(minutes) -> FieldError | None
    validate_shortcode_format(shortcode) -> FieldError | None
    validate_entry(entry, is_unique) -> EntryErrors

Example:
    >>> validate_url('https://example.com')
    >>> validate_url('example.com')
    FieldError(kind=<FieldErrorKind.INVALID_URL: 'invalid_url'>, message='Please enter a valid URL (including http:// or https://)')
    >>> validate_shortcode_format('ab').kind
    <FieldErrorKind.INVALID_SHORTCODE: 'invalid_shortcode'>
"""

import re
import logging
import ipaddress
import urllib.parse
from dataclasses import dataclass
from enum import StrEnum
from collections.abc import Callable

from batchshortener.models import PendingURLModel
from batchshortener.utils.constants import Limits


logger = logging.getLogger(__name__)

SHORTCODE_PATTERN = re.compile(r'[a-zA-Z0-9_-]+')

# Code points that may never appear in a URL host
HOST_FORBIDDEN_CHARS = frozenset('\x00#%/:<>?@[\\]^|"`{}')


class FieldErrorKind(StrEnum):
    INVALID_URL = 'invalid_url'
    INVALID_DURATION = 'invalid_duration'
    INVALID_SHORTCODE = 'invalid_shortcode'
    SHORTCODE_TAKEN = 'shortcode_taken'


@dataclass(frozen=True)
class FieldError:
    kind: FieldErrorKind
    message: str


@dataclass(frozen=True)
class EntryErrors:
    """Validation outcome of one batch entry, one slot per field (None means Ok)."""

    target: FieldError | None = None
    validity_minutes: FieldError | None = None
    custom_shortcode: FieldError | None = None

    @property
    def ok(self) -> bool:
        return self.target is None and self.validity_minutes is None and self.custom_shortcode is None

    def as_dict(self) -> dict[str, str]:
        """Field name to error message, for failing fields only."""
        slots = {
            'target': self.target,
            'validity_minutes': self.validity_minutes,
            'custom_shortcode': self.custom_shortcode,
        }
        return {name: error.message for name, error in slots.items() if error is not None}


def valid_host(components: urllib.parse.SplitResult) -> bool:
    """True if the URL has a host made only of characters allowed in a host."""
    hostname = components.hostname
    if not hostname:
        return False
    if '[' in components.netloc:
        try:
            ipaddress.IPv6Address(hostname)
        except ValueError:
            return False
        return True
    return not any(char.isspace() or char in HOST_FORBIDDEN_CHARS for char in hostname)


def validate_url(candidate: str) -> FieldError | None:
    if not isinstance(candidate, str) or not candidate.strip():
        return FieldError(FieldErrorKind.INVALID_URL, 'URL is required')

    try:
        components = urllib.parse.urlsplit(candidate.strip())
        # Accessing .port validates it
        components.port
    except ValueError:
        components = None

    if components is None or not components.scheme or not valid_host(components):
        logger.warning('Invalid URL format provided.', extra={'url': candidate})
        return FieldError(FieldErrorKind.INVALID_URL, 'Please enter a valid URL (including http:// or https://)')
    return None


def validate_validity_minutes(minutes: int) -> FieldError | None:
    if not isinstance(minutes, int) or isinstance(minutes, bool) or minutes <= 0:
        logger.warning('Invalid validity period provided.', extra={'minutes': minutes})
        return FieldError(FieldErrorKind.INVALID_DURATION, 'Validity period must be a positive integer')
    if minutes > Limits.MAX_VALIDITY_MINUTES:
        logger.warning('Invalid validity period provided.', extra={'minutes': minutes})
        return FieldError(
            FieldErrorKind.INVALID_DURATION,
            f'Validity period cannot exceed 1 week ({Limits.MAX_VALIDITY_MINUTES} minutes)',
        )
    return None


def validate_shortcode_format(shortcode: str | None) -> FieldError | None:
    """Validate the format of a custom shortcode.

    A missing or blank shortcode is valid: it asks for an auto-generated one.
    """
    if shortcode is None or not shortcode.strip():
        return None

    code = shortcode.strip()
    if len(code) < Limits.MIN_SHORTCODE_LENGTH:
        return FieldError(
            FieldErrorKind.INVALID_SHORTCODE,
            f'Shortcode must be at least {Limits.MIN_SHORTCODE_LENGTH} characters long',
        )
    if len(code) > Limits.MAX_SHORTCODE_LENGTH:
        return FieldError(
            FieldErrorKind.INVALID_SHORTCODE,
            f'Shortcode cannot exceed {Limits.MAX_SHORTCODE_LENGTH} characters',
        )
    if not SHORTCODE_PATTERN.fullmatch(code):
        logger.warning('Invalid shortcode format provided.', extra={'shortcode': code})
        return FieldError(
            FieldErrorKind.INVALID_SHORTCODE,
            'Shortcode can only contain letters, numbers, underscores, and hyphens',
        )
    return None


def validate_entry(entry: PendingURLModel, is_unique: Callable[[str], bool]) -> EntryErrors:
    """Run every validator against a batch entry.

    Uniqueness of a custom shortcode is only checked once its format passes.
    An unspecified validity period stands for the default one and is valid.

    Args:
        entry (PendingURLModel):
            The entry to validate.
        is_unique (Callable[[str], bool]):
            Uniqueness oracle for custom shortcodes.

    Returns:
        EntryErrors: per-field outcome.
    """
    shortcode_error = validate_shortcode_format(entry.custom_shortcode)
    if shortcode_error is None and entry.wants_custom_shortcode and not is_unique(entry.custom_shortcode.strip()):
        shortcode_error = FieldError(FieldErrorKind.SHORTCODE_TAKEN, 'This shortcode is already in use')

    validity_minutes = entry.validity_minutes
    if validity_minutes is None:
        validity_minutes = Limits.DEFAULT_VALIDITY_MINUTES

    return EntryErrors(
        target=validate_url(entry.target),
        validity_minutes=validate_validity_minutes(validity_minutes),
        custom_shortcode=shortcode_error,
    )
