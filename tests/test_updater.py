from __future__ import annotations

from datetime import UTC, datetime

import pytest

from models import FetchResult, MonitoringRecord
from services.updater import apply_result

NOW = datetime(2024, 6, 1, 10, 0, tzinfo=UTC)


@pytest.fixture
def record() -> MonitoringRecord:
    return MonitoringRecord(
        key="k1",
        url="https://example.com",
        added_at=datetime(2024, 1, 1, tzinfo=UTC),
        success_count=4,
        fail_count=2,
    )


def test_success_increments_success_count(record):
    updated = apply_result(record, FetchResult.success(200, "ok"), NOW)

    assert updated.success_count == 5
    assert updated.fail_count == 2
    assert updated.last_status == 200
    assert updated.last_visited == NOW


def test_failure_increments_fail_count(record):
    updated = apply_result(record, FetchResult.failure("timeout after 10 ms (request cancelled)"), NOW)

    assert updated.success_count == 4
    assert updated.fail_count == 3
    assert updated.last_status == "timeout after 10 ms (request cancelled)"


def test_http_error_records_descriptor_not_status(record):
    updated = apply_result(record, FetchResult.failure("HTTP 500 Internal Server Error", status=500), NOW)

    assert updated.last_status == "HTTP 500 Internal Server Error"


@pytest.mark.parametrize(
    "result",
    [FetchResult.success(200), FetchResult.failure("boom"), FetchResult.failure("HTTP 404", status=404)],
)
def test_exactly_one_counter_moves(record, result):
    updated = apply_result(record, result, NOW)

    assert updated.success_count + updated.fail_count == record.success_count + record.fail_count + 1


def test_identity_fields_pass_through_and_input_untouched(record):
    updated = apply_result(record, FetchResult.success(200), NOW)

    assert (updated.key, updated.url, updated.added_at) == (record.key, record.url, record.added_at)
    assert record.last_visited is None
    assert record.success_count == 4
