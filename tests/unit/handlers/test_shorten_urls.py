"""Unit tests for the shorten_urls batch handler.

Test coverage includes:

1. Successful shortening
   - Ensures every entry of a valid batch is shortened, in input order.
   - Ensures custom shortcodes are trimmed and used as-is.
   - Ensures expiry is computed from the creation time and validity period.

2. Batch size boundaries
   - Empty batches and batches above 5 entries are rejected before any
     validation or insertion happens.

3. Validation failures
   - Ensures every failing entry is reported and nothing is inserted.
   - Ensures taken shortcodes (stored or requested earlier in the batch)
     are reported.
   - Ensures the failing fields are logged per entry.

4. Shortcode generation
   - Ensures taken generated shortcodes are retried.
   - Ensures generation exhaustion aborts the batch.

5. Commit conflicts
   - Ensures conflicts on commit surface as 'insert_conflict' and store nothing.
"""

from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from batchshortener.dao.base import ShortURLBaseDAO
from batchshortener.dao.exceptions import ShortURLAlreadyExistsError
from batchshortener.handlers import BatchStatus, shorten_urls
from batchshortener.models import PendingURLModel
from batchshortener.utils import ShortenerConfig
from batchshortener.utils.validation import FieldErrorKind


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def entries():
    return [PendingURLModel(target=f'https://example.com/article/{i}') for i in range(5)]


@pytest.fixture
def generator():
    """Mock shortcode generator producing predictable shortcodes."""
    return MagicMock(side_effect=[f'gen{i:03d}' for i in range(100)])


@pytest.fixture
def mock_dao():
    """Mock DAO implementing ShortURLBaseDAO with every shortcode free."""
    dao = MagicMock(spec=ShortURLBaseDAO)
    dao.is_unique.return_value = True
    return dao


# -------------------------------
# 1. Successful shortening
# -------------------------------


def test_shorten_five_urls(dao, entries, generator):
    """A batch of exactly 5 valid entries inserts 5 records."""
    result = shorten_urls(entries, dao, generate=generator)

    assert result.ok is True
    assert result.status is BatchStatus.OK
    assert result.error_code is None
    assert result.entry_errors == {}
    assert len(result.created) == 5
    assert dao.count() == 5
    assert [short_url.target for short_url in result.created] == [entry.target for entry in entries]
    assert [short_url.shortcode for short_url in result.created] == ['gen000', 'gen001', 'gen002', 'gen003', 'gen004']
    assert dao.all() == list(result.created)


def test_shorten_single_url_with_defaults(dao):
    result = shorten_urls([PendingURLModel(target='https://example.com')], dao)

    short_url = result.created[0]
    assert result.ok is True
    assert len(short_url.shortcode) == 6
    assert short_url.shortcode.isalnum()
    assert short_url.short_url == f'http://localhost:3000/s/{short_url.shortcode}'
    assert short_url.validity_minutes == 30
    assert short_url.click_count == 0


def test_shorten_url_with_custom_shortcode(dao, generator):
    entry = PendingURLModel(target='https://example.com', validity_minutes=120, custom_shortcode='  my-link  ')

    result = shorten_urls([entry], dao, generate=generator)

    assert result.created[0].shortcode == 'my-link'
    assert dao.get('my-link') is not None
    generator.assert_not_called()


def test_shorten_urls_uses_configured_base_url(dao, generator):
    config = ShortenerConfig(base_url='https://sho.rt/')

    result = shorten_urls([PendingURLModel(target='https://example.com')], dao, config=config, generate=generator)

    assert result.created[0].short_url == 'https://sho.rt/s/gen000'


def test_shorten_urls_uses_configured_shortcode_length(dao):
    config = ShortenerConfig(shortcode_length=10)

    result = shorten_urls([PendingURLModel(target='https://example.com')], dao, config=config)

    assert len(result.created[0].shortcode) == 10


@freeze_time('2026-03-01 08:00:00')
def test_expiry_computation(dao, generator):
    """expires_at is exactly created_at + validity period."""
    result = shorten_urls([PendingURLModel(target='https://example.com', validity_minutes=30)], dao, generate=generator)

    short_url = result.created[0]
    created_at = datetime(2026, 3, 1, 8, 0, 0, tzinfo=UTC)
    assert short_url.created_at == created_at
    assert short_url.expires_at == created_at + timedelta(minutes=30)
    assert short_url.is_expired(created_at + timedelta(minutes=29)) is False
    assert short_url.is_expired(created_at + timedelta(minutes=31)) is True


def test_shorten_urls_with_explicit_now(dao, generator):
    now = datetime(2026, 5, 5, 5, 5, 5, tzinfo=UTC)

    result = shorten_urls([PendingURLModel(target='https://example.com', validity_minutes=10080)], dao, generate=generator, now=now)

    assert result.created[0].created_at == now
    assert result.created[0].expires_at == now + timedelta(weeks=1)


def test_configured_default_validity(dao, generator):
    config = ShortenerConfig(default_validity_minutes=90)
    entries = [PendingURLModel(target='https://example.com/a'), PendingURLModel(target='https://example.com/b', validity_minutes=15)]

    result = shorten_urls(entries, dao, config=config, generate=generator)

    assert [short_url.validity_minutes for short_url in result.created] == [90, 15]


def test_record_ids_are_unique(dao, entries, generator):
    result = shorten_urls(entries, dao, generate=generator)
    assert len({short_url.id for short_url in result.created}) == 5


# -------------------------------
# 2. Batch size boundaries
# -------------------------------


def test_empty_batch(mock_dao):
    result = shorten_urls([], mock_dao)

    assert result.status is BatchStatus.EMPTY_BATCH
    assert result.error_code == 'batch:empty_batch'
    assert result.created == ()
    mock_dao.is_unique.assert_not_called()
    mock_dao.insert_many.assert_not_called()


def test_too_many_entries(mock_dao, generator):
    """A batch of 6 is rejected before any validation or insertion occurs."""
    entries = [PendingURLModel(target='not a url', custom_shortcode=f'code{i}') for i in range(6)]

    result = shorten_urls(entries, mock_dao, generate=generator)

    assert result.status is BatchStatus.TOO_MANY_ENTRIES
    assert result.error_code == 'batch:too_many_entries'
    assert result.message == 'You can only shorten up to 5 URLs at once.'
    assert result.entry_errors == {}
    mock_dao.is_unique.assert_not_called()
    mock_dao.insert.assert_not_called()
    mock_dao.insert_many.assert_not_called()
    generator.assert_not_called()


# -------------------------------
# 3. Validation failures
# -------------------------------


def test_validation_reports_every_failing_entry(dao, entries, generator):
    """Entries 2 and 4 are invalid: both are reported, nothing is inserted."""
    entries[1] = PendingURLModel(target='not a url')
    entries[3] = PendingURLModel(target='https://example.com', validity_minutes=0)

    result = shorten_urls(entries, dao, generate=generator)

    assert result.status is BatchStatus.VALIDATION_FAILED
    assert result.error_code == 'batch:validation_failed'
    assert set(result.entry_errors) == {1, 3}
    assert result.entry_errors[1].target.kind is FieldErrorKind.INVALID_URL
    assert result.entry_errors[3].validity_minutes.kind is FieldErrorKind.INVALID_DURATION
    assert result.created == ()
    assert dao.count() == 0
    generator.assert_not_called()


def test_validation_fails_for_taken_shortcode(dao, make_short_url, generator):
    dao.insert(make_short_url('taken'))
    entries = [PendingURLModel(target='https://example.com', custom_shortcode='taken')]

    result = shorten_urls(entries, dao, generate=generator)

    assert result.status is BatchStatus.VALIDATION_FAILED
    assert result.entry_errors[0].custom_shortcode.kind is FieldErrorKind.SHORTCODE_TAKEN
    assert dao.count() == 1


def test_validation_fails_for_shortcode_repeated_within_batch(dao, generator):
    """The second request for the same custom shortcode is reported as taken."""
    entries = [
        PendingURLModel(target='https://example.com/a', custom_shortcode='same'),
        PendingURLModel(target='https://example.com/b', custom_shortcode=' same '),
    ]

    result = shorten_urls(entries, dao, generate=generator)

    assert result.status is BatchStatus.VALIDATION_FAILED
    assert set(result.entry_errors) == {1}
    assert result.entry_errors[1].custom_shortcode.kind is FieldErrorKind.SHORTCODE_TAKEN
    assert dao.count() == 0


def test_format_error_reported_before_uniqueness(dao, make_short_url):
    dao.insert(make_short_url('ab'))

    result = shorten_urls([PendingURLModel(target='https://example.com', custom_shortcode='ab')], dao)

    assert result.entry_errors[0].custom_shortcode.kind is FieldErrorKind.INVALID_SHORTCODE


def test_validation_failure_logs_failing_fields(dao, caplog):
    entries = [
        PendingURLModel(target='https://example.com'),
        PendingURLModel(target='not a url', validity_minutes=0),
    ]

    with caplog.at_level('WARNING'):
        shorten_urls(entries, dao)

    record = next(r for r in caplog.records if r.getMessage() == 'Form validation failed.')
    assert record.batch_size == 2
    assert record.entry_errors == {
        1: {
            'target': 'Please enter a valid URL (including http:// or https://)',
            'validity_minutes': 'Validity period must be a positive integer',
        },
    }


# -------------------------------
# 4. Shortcode generation
# -------------------------------


def test_generator_retries_taken_shortcode(dao, make_short_url):
    """'abc123' is taken, so the handler retries and inserts 'xyz789'."""
    dao.insert(make_short_url('abc123'))
    generator = MagicMock(side_effect=['abc123', 'xyz789'])

    result = shorten_urls([PendingURLModel(target='https://example.com')], dao, generate=generator)

    assert result.ok is True
    assert result.created[0].shortcode == 'xyz789'
    assert generator.call_count == 2
    assert dao.get('xyz789') is not None


def test_generator_avoids_custom_shortcodes_of_the_batch(dao):
    """A generated shortcode never collides with a custom shortcode of a later entry."""
    generator = MagicMock(side_effect=['mine', 'other'])
    entries = [
        PendingURLModel(target='https://example.com/a'),
        PendingURLModel(target='https://example.com/b', custom_shortcode='mine'),
    ]

    result = shorten_urls(entries, dao, generate=generator)

    assert result.ok is True
    assert [short_url.shortcode for short_url in result.created] == ['other', 'mine']


def test_generator_avoids_shortcodes_generated_earlier_in_the_batch(dao):
    generator = MagicMock(side_effect=['dup', 'dup', 'fresh'])
    entries = [PendingURLModel(target='https://example.com/a'), PendingURLModel(target='https://example.com/b')]

    result = shorten_urls(entries, dao, generate=generator)

    assert [short_url.shortcode for short_url in result.created] == ['dup', 'fresh']


def test_generation_exhausted(dao, make_short_url):
    dao.insert(make_short_url('abc123'))
    generator = MagicMock(return_value='abc123')
    config = ShortenerConfig(max_generation_attempts=3)

    result = shorten_urls([PendingURLModel(target='https://example.com')], dao, config=config, generate=generator)

    assert result.status is BatchStatus.GENERATION_EXHAUSTED
    assert result.error_code == 'batch:generation_exhausted'
    assert generator.call_count == 3
    assert dao.count() == 1


# -------------------------------
# 5. Commit conflicts
# -------------------------------


def test_insert_conflict(mock_dao, entries, generator):
    mock_dao.insert_many.side_effect = ShortURLAlreadyExistsError("Short URL with code 'gen000' already exists.")

    result = shorten_urls(entries, mock_dao, generate=generator)

    assert result.status is BatchStatus.INSERT_CONFLICT
    assert result.error_code == 'batch:insert_conflict'
    assert result.created == ()
    assert "'gen000'" in result.message
    mock_dao.insert_many.assert_called_once()


def test_batch_is_committed_in_one_call(mock_dao, entries, generator):
    result = shorten_urls(entries, mock_dao, generate=generator)

    assert result.ok is True
    mock_dao.insert.assert_not_called()
    mock_dao.insert_many.assert_called_once_with(list(result.created))
