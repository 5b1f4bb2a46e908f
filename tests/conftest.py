from __future__ import annotations

from typing import List

import pytest

from copilot_metrics.app import create_app
from copilot_metrics.models import UsageRecord
from copilot_metrics.storage import MetricsCache, MetricsFileStore
from tests.helpers import make_record, to_ndjson, to_records


@pytest.fixture()
def sample_raw_records() -> List[dict]:
    return [
        make_record(
            user_id=1,
            user_login="octocat",
            day="2024-01-07",
            user_initiated_interaction_count=4,
            code_generation_activity_count=10,
            code_acceptance_activity_count=5,
            loc_suggested_to_add_sum=40,
            loc_added_sum=20,
            loc_deleted_sum=3,
            used_chat=True,
            totals_by_ide=[
                {
                    "ide": "vscode",
                    "ide_version": "1.85.0",
                    "last_known_plugin_version": {"plugin": "copilot-chat", "plugin_version": "0.11.0"},
                    "user_initiated_interaction_count": 4,
                    "code_generation_activity_count": 10,
                    "code_acceptance_activity_count": 5,
                }
            ],
            totals_by_feature=[
                {
                    "feature": "chat_panel_ask_mode",
                    "user_initiated_interaction_count": 3,
                    "code_generation_activity_count": 2,
                    "code_acceptance_activity_count": 1,
                },
                {
                    "feature": "code_completion",
                    "user_initiated_interaction_count": 1,
                    "code_generation_activity_count": 8,
                    "code_acceptance_activity_count": 4,
                },
            ],
            totals_by_model_feature=[
                {
                    "model": "gpt-4o",
                    "feature": "chat_panel_ask_mode",
                    "user_initiated_interaction_count": 3,
                    "code_generation_activity_count": 2,
                    "code_acceptance_activity_count": 1,
                },
                {
                    "model": "unknown",
                    "feature": "code_completion",
                    "user_initiated_interaction_count": 1,
                    "code_generation_activity_count": 8,
                    "code_acceptance_activity_count": 4,
                },
            ],
            totals_by_language_feature=[
                {
                    "language": "python",
                    "feature": "code_completion",
                    "code_generation_activity_count": 6,
                    "code_acceptance_activity_count": 3,
                },
                {
                    "language": "unknown",
                    "feature": "code_completion",
                    "code_generation_activity_count": 2,
                    "code_acceptance_activity_count": 1,
                },
            ],
        ),
        make_record(
            user_id=1,
            user_login="octocat",
            day="2024-01-08",
            user_initiated_interaction_count=2,
            code_generation_activity_count=6,
            code_acceptance_activity_count=3,
            loc_suggested_to_add_sum=12,
            loc_added_sum=9,
            loc_deleted_sum=1,
            used_agent=True,
            totals_by_ide=[
                {
                    "ide": "intellij",
                    "ide_version": "2023.3",
                    "last_known_plugin_version": {"plugin_version": "1.5.0"},
                    "user_initiated_interaction_count": 2,
                    "code_generation_activity_count": 6,
                    "code_acceptance_activity_count": 3,
                }
            ],
            totals_by_feature=[
                {
                    "feature": "agent_edit",
                    "user_initiated_interaction_count": 2,
                    "code_generation_activity_count": 6,
                    "code_acceptance_activity_count": 3,
                }
            ],
            totals_by_model_feature=[
                {
                    "model": "gpt-4o",
                    "feature": "chat_panel_ask_mode",
                    "user_initiated_interaction_count": 2,
                    "code_generation_activity_count": 6,
                    "code_acceptance_activity_count": 3,
                }
            ],
            totals_by_language_feature=[
                {
                    "language": "typescript",
                    "feature": "agent_edit",
                    "code_generation_activity_count": 6,
                    "code_acceptance_activity_count": 3,
                }
            ],
        ),
        make_record(
            user_id=2,
            user_login="hubot",
            day="2024-01-08",
            user_initiated_interaction_count=5,
            code_generation_activity_count=4,
            code_acceptance_activity_count=1,
            loc_suggested_to_add_sum=8,
            loc_added_sum=2,
            used_chat=True,
            totals_by_ide=[
                {
                    "ide": "vscode",
                    "ide_version": "1.86.0",
                    "user_initiated_interaction_count": 5,
                    "code_generation_activity_count": 4,
                    "code_acceptance_activity_count": 1,
                }
            ],
            totals_by_feature=[
                {
                    "feature": "chat_inline",
                    "user_initiated_interaction_count": 5,
                    "code_generation_activity_count": 4,
                    "code_acceptance_activity_count": 1,
                }
            ],
            totals_by_language_feature=[
                {
                    "language": "python",
                    "feature": "chat_inline",
                    "code_generation_activity_count": 4,
                    "code_acceptance_activity_count": 1,
                }
            ],
        ),
    ]


@pytest.fixture()
def sample_records(sample_raw_records) -> List[UsageRecord]:
    return to_records(sample_raw_records)


@pytest.fixture()
def sample_ndjson(sample_raw_records) -> str:
    return to_ndjson(sample_raw_records)


@pytest.fixture()
def file_store(tmp_path) -> MetricsFileStore:
    return MetricsFileStore(str(tmp_path / "storage"))


@pytest.fixture()
def cache(tmp_path):
    cache = MetricsCache(f"sqlite:///{tmp_path / 'cache.db'}")
    try:
        yield cache
    finally:
        cache.close()


@pytest.fixture()
def app(tmp_path):
    app = create_app(
        "testing",
        overrides={
            "STORAGE_PATH": str(tmp_path / "data"),
            "CACHE_DATABASE_URL": f"sqlite:///{tmp_path / 'app_cache.db'}",
        },
    )
    yield app
    app.extensions["dashboard_service"].cache.close()


@pytest.fixture()
def client(app):
    return app.test_client()
