from evaluations.calculator import DEFAULT_EVALUATION_ITEMS

PASSWORD = "secret123"

# Every item at its maximum: 100 points.
MAX_SCORES = {item.item_key: item.max_score for item in DEFAULT_EVALUATION_ITEMS}


def make_scores(**overrides):
    scores = dict(MAX_SCORES)
    scores.update(overrides)
    return scores


def scores_totalling(total):
    """Maximum scores with achievement lowered so the total equals `total` (75..100)."""
    return make_scores(achievement=25 - (100 - total))
