import random

import pytest

from copilot_metrics.exceptions import EmptyInputError
from copilot_metrics.services.aggregator import (
    BreakdownAccumulator,
    accumulate,
    acceptance_rate,
    calculate_summary,
)
from tests.helpers import make_record, to_records


def test_single_record_example():
    records = to_records([
        {
            "user_id": "u1",
            "user_login": "a",
            "day": "2024-01-01",
            "code_generation_activity_count": 10,
            "code_acceptance_activity_count": 5,
        }
    ])

    summary = calculate_summary(records)

    assert summary.acceptance_rate == 50.00
    assert summary.total_users == 1


def test_global_totals(sample_records):
    summary = calculate_summary(sample_records)

    assert summary.total_users == 2
    assert summary.total_interactions == 11
    assert summary.total_code_generation == 20
    assert summary.total_code_acceptance == 9
    assert summary.total_loc_suggested == 60
    assert summary.total_loc_added == 31
    assert summary.total_loc_deleted == 4
    assert summary.acceptance_rate == 45.0


def test_agent_and_chat_users_are_deduplicated(sample_records):
    summary = calculate_summary(sample_records + sample_records)

    assert summary.users_with_agent == 1
    assert summary.users_with_chat == 2


def test_ide_breakdown_counts_unique_users(sample_records):
    summary = calculate_summary(sample_records)

    vscode = summary.ide_breakdown["vscode"]
    assert vscode.users == 2
    assert (vscode.interactions, vscode.code_generation, vscode.code_acceptance) == (9, 14, 6)
    assert summary.ide_breakdown["intellij"].users == 1


def test_model_breakdown_accumulates_on_composite_key(sample_records):
    summary = calculate_summary(sample_records)

    gpt = summary.model_breakdown["gpt-4o|chat_panel_ask_mode"]
    assert gpt.model == "gpt-4o"
    assert gpt.feature == "chat_panel_ask_mode"
    assert (gpt.interactions, gpt.code_generation, gpt.code_acceptance) == (5, 8, 4)
    assert gpt.users == 1
    # unknown model is kept at ingestion time
    assert "unknown|code_completion" in summary.model_breakdown


def test_language_breakdown_skips_unknown(sample_records):
    summary = calculate_summary(sample_records)

    assert "unknown" not in summary.language_breakdown
    python = summary.language_breakdown["python"]
    assert python.users == 2
    assert python.code_generation == 10
    assert python.code_acceptance == 4
    assert summary.language_breakdown["typescript"].code_generation == 6


def test_unknown_language_counters_do_not_leak():
    records = to_records([
        make_record(totals_by_language_feature=[
            {"language": "unknown", "code_generation_activity_count": 100, "code_acceptance_activity_count": 50},
            {"language": "go", "code_generation_activity_count": 1, "code_acceptance_activity_count": 1},
        ])
    ])

    summary = calculate_summary(records)

    assert list(summary.language_breakdown) == ["go"]
    assert summary.language_breakdown["go"].code_generation == 1


def test_date_range_uses_string_comparison(sample_records):
    summary = calculate_summary(sample_records)

    assert summary.date_range.start == "2024-01-07"
    assert summary.date_range.end == "2024-01-08"


def test_date_range_ignores_records_without_day():
    records = to_records([make_record(day=None), make_record(day="2024-03-01")])

    summary = calculate_summary(records)

    assert summary.date_range.start == "2024-03-01"
    assert summary.date_range.end == "2024-03-01"


def test_acceptance_rate_is_zero_without_generation():
    records = to_records([make_record(code_acceptance_activity_count=3)])

    assert calculate_summary(records).acceptance_rate == 0


def test_acceptance_rate_rounding():
    assert acceptance_rate(1, 3, 2) == 33.33
    assert acceptance_rate(2, 3, 1) == 66.7
    assert acceptance_rate(5, 0, 2) == 0


def test_acceptance_rate_rounds_half_up():
    assert acceptance_rate(1, 800, 2) == 0.13
    assert acceptance_rate(1, 16, 1) == 6.3
    assert acceptance_rate(5, 16, 1) == 31.3


def test_acceptance_rate_unrounded_without_ndigits():
    assert acceptance_rate(1, 3) == pytest.approx(100 / 3)
    assert acceptance_rate(1, 0) == 0


def test_empty_input_raises():
    with pytest.raises(EmptyInputError):
        calculate_summary([])


def test_breakdown_accumulator_keeps_contributors_until_finalize(sample_records):
    accumulator = accumulate(sample_records)

    vscode = accumulator.ide_breakdown["vscode"]
    assert isinstance(vscode, BreakdownAccumulator)
    assert vscode.contributors == {1, 2}
    assert vscode.finalize().users == 2


def _complete_records(count, seed):
    """Records whose nested breakdowns add up to the record-level counters."""
    rng = random.Random(seed)
    raw = []
    for _ in range(count):
        interactions = rng.randint(0, 20)
        generation = rng.randint(0, 30)
        acceptance = rng.randint(0, generation)
        counters = {
            "user_initiated_interaction_count": interactions,
            "code_generation_activity_count": generation,
            "code_acceptance_activity_count": acceptance,
        }
        raw.append(make_record(
            user_id=rng.randint(1, 5),
            day=f"2024-02-{rng.randint(1, 28):02d}",
            totals_by_ide=[dict(ide=rng.choice(["vscode", "intellij"]), **counters)],
            totals_by_feature=[dict(feature=rng.choice(["chat_panel", "code_completion"]), **counters)],
            totals_by_model_feature=[dict(model="gpt-4o", feature="code_completion", **counters)],
            **counters,
        ))
    return to_records(raw)


@pytest.mark.parametrize("seed", [1, 7, 42])
def test_breakdown_counters_sum_to_global_totals(seed):
    summary = calculate_summary(_complete_records(40, seed))

    for breakdown in (summary.ide_breakdown, summary.feature_breakdown, summary.model_breakdown):
        stats = breakdown.values()
        assert sum(s.interactions for s in stats) == summary.total_interactions
        assert sum(s.code_generation for s in stats) == summary.total_code_generation
        assert sum(s.code_acceptance for s in stats) == summary.total_code_acceptance


@pytest.mark.parametrize("seed", [3, 11])
def test_total_users_is_order_independent(seed):
    records = _complete_records(30, seed)
    shuffled = list(records)
    random.Random(seed).shuffle(shuffled)

    expected = len({record.user_id for record in records})

    assert calculate_summary(records).total_users == expected
    assert calculate_summary(shuffled).total_users == expected


def test_reaggregation_is_identical(sample_records):
    assert calculate_summary(sample_records).to_dict() == calculate_summary(sample_records).to_dict()
