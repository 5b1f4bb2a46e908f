from __future__ import annotations

import json
from typing import List

from copilot_metrics.models import UsageRecord


def make_record(**overrides) -> dict:
    record = {
        "user_id": 1,
        "user_login": "octocat",
        "day": "2024-01-08",
        "user_initiated_interaction_count": 0,
        "code_generation_activity_count": 0,
        "code_acceptance_activity_count": 0,
        "loc_suggested_to_add_sum": 0,
        "loc_added_sum": 0,
        "loc_deleted_sum": 0,
        "used_agent": False,
        "used_chat": False,
    }
    record.update(overrides)
    return record


def to_ndjson(records: List[dict]) -> str:
    return "\n".join(json.dumps(record) for record in records) + "\n"


def to_records(raw_records: List[dict]) -> List[UsageRecord]:
    return [UsageRecord.from_dict(data) for data in raw_records]
