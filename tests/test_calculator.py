from collections import namedtuple

import pytest

from evaluations.calculator import (
    DEFAULT_EVALUATION_ITEMS,
    ItemSpec,
    calculate_annual_reward,
    calculate_average_score,
    calculate_reward,
    calculate_scores,
    determine_rank,
    get_rank_info,
    get_reward_display,
    rank_table,
    validate_evaluation_form,
)
from .helpers import MAX_SCORES, make_scores

Rank = namedtuple("Rank", ["rank_name", "min_score", "amount"])


def test_default_items_add_up_to_100():
    assert len(DEFAULT_EVALUATION_ITEMS) == 11
    assert sum(item.max_score for item in DEFAULT_EVALUATION_ITEMS) == 100


def test_calculate_scores_sums_per_category():
    result = calculate_scores(MAX_SCORES)
    assert result.performance_score == 48
    assert result.behavior_score == 30
    assert result.growth_score == 22
    assert result.total_score == 100


def test_calculate_scores_ignores_unknown_items_and_counts_negatives():
    result = calculate_scores(make_scores(attendance=-5, compliance=-10, bogus=50))
    assert result.performance_score == 25 + 15 - 15
    assert result.total_score == 100 - 10 - 13


def test_items_outside_standard_categories_count_towards_total():
    items = [
        ItemSpec("sales", "performance", "Sales", 0, 10, ""),
        ItemSpec("language", "skills", "Language", 0, 5, ""),
    ]
    result = calculate_scores({"sales": 8, "language": 4}, items)
    assert result.performance_score == 8
    assert result.total_score == 12


@pytest.mark.parametrize(
    "scores, expected",
    [([], 0), ([80], 80), ([80, 85], 82.5), ([70, 75, 81], 75.33)],
)
def test_calculate_average_score(scores, expected):
    assert calculate_average_score(scores) == expected


@pytest.mark.parametrize(
    "score, rank",
    [(100, "SS"), (95, "SS"), (94.99, "S"), (90, "S"), (85, "A+"), (80, "A"), (75, "A-"),
     (74, "B"), (60, "B"), (59.5, "C"), (55, "C"), (54.9, "D"), (-3, "D")],
)
def test_determine_rank_default_thresholds(score, rank):
    assert determine_rank(score) == rank


def test_determine_rank_with_company_settings_is_order_independent():
    settings = [Rank("Bronze", 0, 0), Rank("Gold", 80, 5000), Rank("Silver", 50, 1000)]
    assert determine_rank(92, settings) == "Gold"
    assert determine_rank(80, settings) == "Gold"
    assert determine_rank(65, settings) == "Silver"
    assert determine_rank(10, settings) == "Bronze"


def test_determine_rank_below_every_custom_threshold_gets_lowest_rank():
    settings = [Rank("Gold", 80, 5000), Rank("Silver", 50, 1000)]
    assert determine_rank(20, settings) == "Silver"


def test_rewards_and_display():
    assert calculate_reward("SS") == 15000
    assert calculate_reward("D") == -10000
    assert calculate_reward("Gold", [Rank("Gold", 80, 5000)]) == 5000
    assert calculate_reward("Unknown", [Rank("Gold", 80, 5000)]) == 0
    assert calculate_annual_reward("S") == 100000
    assert get_reward_display(15000) == "+¥15,000"
    assert get_reward_display(-5000) == "-¥5,000"
    assert get_reward_display(0) == "±¥0"


def test_rank_info_and_table():
    info = get_rank_info("A")
    assert info.reward == 3000
    assert info.description == "Good"

    table = rank_table()
    assert [row["rank"] for row in table] == ["SS", "S", "A+", "A", "A-", "B", "C", "D"]
    assert table[-1]["min_score"] == 0

    custom = rank_table([Rank("Silver", 50, 1000), Rank("Gold", 80, 5000)])
    assert [row["rank"] for row in custom] == ["Gold", "Silver"]
    assert custom[0]["reward_display"] == "+¥5,000"


def test_validate_evaluation_form_accepts_complete_scores():
    assert validate_evaluation_form(MAX_SCORES) == (True, {})


def test_validate_evaluation_form_reports_every_problem():
    scores = make_scores(achievement=30, attendance="5", initiative=True, bogus=1)
    del scores["client"]

    is_valid, errors = validate_evaluation_form(scores)

    assert not is_valid
    assert set(errors) == {"achievement", "attendance", "initiative", "client", "bogus"}
    assert "between 0 and 25" in errors["achievement"]


def test_validate_evaluation_form_rejects_non_dict():
    is_valid, errors = validate_evaluation_form(["achievement"])
    assert not is_valid
    assert "scores" in errors
