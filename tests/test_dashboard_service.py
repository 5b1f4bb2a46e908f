import pytest

from copilot_metrics.exceptions import EmptyInputError, FormatError, MetricsApiError
from copilot_metrics.services.dashboard import DashboardService, build_dashboard


class UnavailableSource:
    """Remote backend that is down."""

    def fetch_latest_metrics_text(self):
        raise MetricsApiError("Failed to fetch metrics")

    def upload_metrics_text(self, text):
        raise MetricsApiError("Upload failed: 503 Service Unavailable", 503)

    def clear_metrics(self):
        raise MetricsApiError("Failed to clear metrics")


def test_build_dashboard_payload(sample_records):
    dashboard = build_dashboard(sample_records)

    assert dashboard["record_count"] == 3
    assert dashboard["summary"]["total_users"] == 2
    assert dashboard["summary"]["acceptance_rate"] == 45.0
    assert dashboard["summary"]["ide_breakdown"]["vscode"]["users"] == 2
    assert dashboard["daily_active_users"] == [
        {"date": "2024-01-07", "users": 1},
        {"date": "2024-01-08", "users": 2},
    ]
    assert dashboard["weekly_active_users"][0] == {"week": "2024-01-01", "users": 1}
    assert [row["user_login"] for row in dashboard["users"]] == ["octocat", "hubot"]
    assert [item["model"] for item in dashboard["model_acceptance_rates"]] == ["gpt-4o"]


def test_ingest_stores_text_and_caches_records(file_store, cache, sample_ndjson):
    service = DashboardService(file_store, cache)

    dashboard = service.ingest(sample_ndjson)

    assert dashboard["record_count"] == 3
    assert file_store.fetch_latest_metrics_text() == sample_ndjson
    assert len(cache.load()) == 3


def test_ingest_rejects_malformed_input_without_storing(file_store, cache, sample_ndjson):
    service = DashboardService(file_store, cache)
    service.ingest(sample_ndjson)

    with pytest.raises(FormatError):
        service.ingest('{"user_id": 9}\nnot json\n')

    assert file_store.fetch_latest_metrics_text() == sample_ndjson
    assert len(cache.load()) == 3


def test_ingest_keeps_previous_snapshot_when_aggregation_fails(file_store, cache, sample_ndjson):
    service = DashboardService(file_store, cache)
    service.ingest(sample_ndjson)

    with pytest.raises(FormatError):
        service.ingest('{"user_id": 9, "day": "2024-13-45"}\n')

    assert file_store.fetch_latest_metrics_text() == sample_ndjson
    assert len(cache.load()) == 3
    assert service.load()["record_count"] == 3


def test_ingest_rejects_empty_input(file_store, cache):
    service = DashboardService(file_store, cache)

    with pytest.raises(EmptyInputError):
        service.ingest("\n\n")

    assert file_store.fetch_latest_metrics_text() is None


def test_load_returns_none_without_data(file_store, cache):
    assert DashboardService(file_store, cache).load() is None


def test_load_prefers_source(file_store, cache, sample_ndjson, sample_records):
    cache.save(sample_records[:1])
    file_store.upload_metrics_text(sample_ndjson)

    dashboard = DashboardService(file_store, cache).load()

    assert dashboard["record_count"] == 3
    assert dashboard["cached_at"] is not None


def test_load_falls_back_to_cache_when_source_unavailable(cache, sample_records):
    cache.save(sample_records)

    dashboard = DashboardService(UnavailableSource(), cache).load()

    assert dashboard["record_count"] == 3


def test_ingest_keeps_working_offline_with_cache(cache, sample_ndjson):
    service = DashboardService(UnavailableSource(), cache)

    dashboard = service.ingest(sample_ndjson)

    assert dashboard["record_count"] == 3
    assert len(cache.load()) == 3


def test_ingest_without_cache_propagates_source_error(sample_ndjson):
    service = DashboardService(UnavailableSource())

    with pytest.raises(MetricsApiError):
        service.ingest(sample_ndjson)


def test_clear_removes_source_and_cache(file_store, cache, sample_ndjson):
    service = DashboardService(file_store, cache)
    service.ingest(sample_ndjson)

    service.clear()

    assert file_store.fetch_latest_metrics_text() is None
    assert cache.load() is None
    assert service.load() is None
