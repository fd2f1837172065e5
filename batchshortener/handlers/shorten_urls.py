import logging
import functools
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import StrEnum
from collections.abc import Callable, Sequence

from batchshortener.models import PendingURLModel, ShortURLModel
from batchshortener.dao.base import ShortURLBaseDAO
from batchshortener.dao.exceptions import ShortURLAlreadyExistsError
from batchshortener.exceptions import (
    BatchShortenerError,
    EmptyBatchError,
    TooManyEntriesError,
    ValidationFailedError,
    InsertConflictError,
    GenerationExhaustedError,
)
from batchshortener.utils import ShortenerConfig, generate_shortcode, generate_unique_shortcode
from batchshortener.utils.helpers import get_short_url, compute_expiry, utc_now, new_id
from batchshortener.utils.validation import EntryErrors, validate_entry
from batchshortener.utils.constants import Limits


logger = logging.getLogger(__name__)


class BatchStatus(StrEnum):
    OK = 'ok'
    EMPTY_BATCH = 'empty_batch'
    TOO_MANY_ENTRIES = 'too_many_entries'
    VALIDATION_FAILED = 'validation_failed'
    INSERT_CONFLICT = 'insert_conflict'
    GENERATION_EXHAUSTED = 'generation_exhausted'


STATUS_BY_ERROR = {
    EmptyBatchError: BatchStatus.EMPTY_BATCH,
    TooManyEntriesError: BatchStatus.TOO_MANY_ENTRIES,
    ValidationFailedError: BatchStatus.VALIDATION_FAILED,
    InsertConflictError: BatchStatus.INSERT_CONFLICT,
    GenerationExhaustedError: BatchStatus.GENERATION_EXHAUSTED,
}


@dataclass(frozen=True)
class BatchResult:
    """Outcome of a batch submission.

    Attributes:
        status (BatchStatus):
            'ok' when every entry was shortened, otherwise the failure kind.
        created (tuple[ShortURLModel, ...]):
            Newly created short URLs in input order (empty on failure).
        entry_errors (dict[int, EntryErrors]):
            Field errors keyed by zero-based entry index (validation failures only).
        message (str):
            Human-readable summary.
        error_code (str | None):
            Error code of the failure, None on success.
    """

    status: BatchStatus
    created: tuple[ShortURLModel, ...] = ()
    entry_errors: dict[int, EntryErrors] = field(default_factory=dict)
    message: str = ''
    error_code: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is BatchStatus.OK


def with_default_validity(entry: PendingURLModel, config: ShortenerConfig) -> PendingURLModel:
    if entry.validity_minutes is None:
        return replace(entry, validity_minutes=config.default_validity_minutes)
    return entry


def check_batch_size(entries: Sequence[PendingURLModel]) -> None:
    if not entries:
        raise EmptyBatchError('Please add at least one URL to shorten.')
    if len(entries) > Limits.MAX_BATCH_SIZE:
        raise TooManyEntriesError(f'You can only shorten up to {Limits.MAX_BATCH_SIZE} URLs at once.')


def validate_batch(entries: Sequence[PendingURLModel], dao: ShortURLBaseDAO) -> None:
    """Validate every entry of the batch and raise if any of them failed.

    Custom shortcodes must be free in the registry and must not repeat a
    custom shortcode requested by an earlier entry of the same batch.

    Raises:
        ValidationFailedError: carrying the errors of every failing entry.
    """
    requested = set()

    def is_unique(shortcode: str) -> bool:
        return shortcode not in requested and dao.is_unique(shortcode)

    entry_errors = {}
    for index, entry in enumerate(entries):
        errors = validate_entry(entry, is_unique)
        if not errors.ok:
            entry_errors[index] = errors
        if entry.wants_custom_shortcode:
            requested.add(entry.custom_shortcode.strip())

    if entry_errors:
        raise ValidationFailedError(f'{len(entry_errors)} of {len(entries)} URLs failed validation.', entry_errors)


def build_short_urls(
    entries: Sequence[PendingURLModel],
    dao: ShortURLBaseDAO,
    config: ShortenerConfig,
    generate: Callable[[], str],
    now: datetime,
) -> list[ShortURLModel]:
    """Resolve a shortcode for every entry and build its ShortURLModel.

    Generated shortcodes avoid both stored shortcodes and shortcodes already
    reserved by earlier entries of the batch.
    """
    reserved = {entry.custom_shortcode.strip() for entry in entries if entry.wants_custom_shortcode}

    def is_unique(shortcode: str) -> bool:
        return shortcode not in reserved and dao.is_unique(shortcode)

    short_urls = []
    for entry in entries:
        if entry.wants_custom_shortcode:
            shortcode = entry.custom_shortcode.strip()
        else:
            shortcode = generate_unique_shortcode(is_unique, generate=generate, max_attempts=config.max_generation_attempts)
            reserved.add(shortcode)

        short_urls.append(
            ShortURLModel(
                id=new_id(),
                target=entry.target.strip(),
                shortcode=shortcode,
                short_url=get_short_url(shortcode, config.base_url),
                validity_minutes=entry.validity_minutes,
                created_at=now,
                expires_at=compute_expiry(now, entry.validity_minutes),
            )
        )
    return short_urls


def shorten_urls(
    entries: Sequence[PendingURLModel],
    dao: ShortURLBaseDAO,
    *,
    config: ShortenerConfig | None = None,
    generate: Callable[[], str] | None = None,
    now: datetime | None = None,
) -> BatchResult:
    """Shorten a batch of 1-5 URLs

    This handler follows this procedure to shorten URLs:
    - Step 1: Reject empty batches and batches larger than 5 entries
    - Step 2: Validate every entry (URL, validity period, custom shortcode)
    - Step 3: Resolve shortcodes (custom or generated) and build records
    - Step 4: Commit every record to the registry in one atomic insert
    - Step 5: Return the newly created short URLs

    Nothing is stored unless every entry of the batch is shortened.

    Args:
        entries (Sequence[PendingURLModel]):
            URLs to shorten, in display order.
        dao (ShortURLBaseDAO):
            Short URL registry owned by the caller.
        config (ShortenerConfig | None):
            Shortener settings. Defaults to ShortenerConfig().
        generate (Callable[[], str] | None):
            Shortcode candidate generator. Defaults to generate_shortcode()
            with the configured shortcode length.
        now (datetime | None):
            Creation time of the batch. Defaults to the current UTC time.

    Returns:
        BatchResult:
            status 'ok' with the created records, or the failure kind with
            per-entry errors and a message. Never raises for bad input.

    Example:
        >>> dao = ShortURLMemoryDAO()
        >>> result = shorten_urls([PendingURLModel(target='https://example.com')], dao)
        >>> result.status
        <BatchStatus.OK: 'ok'>
        >>> result.created[0].short_url
        'http://localhost:3000/s/Xb31Kq'
    """
    config = config or ShortenerConfig()
    generate = generate or functools.partial(generate_shortcode, config.shortcode_length)

    entries = [with_default_validity(entry, config) for entry in entries]

    try:
        # 1- Reject empty or oversized batches
        check_batch_size(entries)

        # 2- Validate every entry, reporting all problems at once
        validate_batch(entries, dao)

        # 3- Resolve shortcodes and build records
        short_urls = build_short_urls(entries, dao, config, generate, now or utc_now())

        # 4- Commit the whole batch
        try:
            dao.insert_many(short_urls)
        except ShortURLAlreadyExistsError as e:
            raise InsertConflictError(str(e)) from e
    except ValidationFailedError as e:
        logger.warning(
            'Form validation failed.',
            extra={
                'entry_errors': {index: errors.as_dict() for index, errors in sorted(e.entry_errors.items())},
                'batch_size': len(entries),
            },
        )
        return failure(e)
    except (EmptyBatchError, TooManyEntriesError) as e:
        logger.warning('Rejected batch.', extra={'reason': e.error_code, 'batch_size': len(entries)})
        return failure(e)
    except (InsertConflictError, GenerationExhaustedError) as e:
        logger.error('Error shortening URLs.', extra={'reason': e.error_code, 'batch_size': len(entries)})
        return failure(e)

    # 5- Return newly created short URLs
    logger.info('Successfully shortened URLs.', extra={'count': len(short_urls)})
    return BatchResult(
        status=BatchStatus.OK,
        created=tuple(short_urls),
        message=f'Successfully shortened {len(short_urls)} URLs.',
    )


def failure(error: BatchShortenerError) -> BatchResult:
    return BatchResult(
        status=STATUS_BY_ERROR[type(error)],
        entry_errors=getattr(error, 'entry_errors', {}),
        message=str(error),
        error_code=error.error_code,
    )
