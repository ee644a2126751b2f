# ===========================================================
# evaluations/calculator.py
# ===========================================================
# Scoring rules: category sums, averages across evaluators,
# rank thresholds and the reward attached to each rank.
# No database access; company specific item masters and rank
# settings are passed in by the caller.
# ===========================================================

from collections import namedtuple
from dataclasses import dataclass, asdict
from numbers import Real


ItemSpec = namedtuple("ItemSpec", ["item_key", "category", "item_name", "min_score", "max_score", "description"])

PERFORMANCE = "performance"
BEHAVIOR = "behavior"
GROWTH = "growth"
CATEGORY_KEYS = (PERFORMANCE, BEHAVIOR, GROWTH)

DEFAULT_CATEGORIES = [
    {"category_key": PERFORMANCE, "category_label": "Performance", "display_order": 1,
     "description": "Achievement, attendance, compliance and client evaluation"},
    {"category_key": BEHAVIOR, "category_label": "Behavior", "display_order": 2,
     "description": "Initiative, responsibility, cooperation and appearance"},
    {"category_key": GROWTH, "category_label": "Growth", "display_order": 3,
     "description": "Self improvement, responsiveness and goal achievement"},
]

DEFAULT_EVALUATION_ITEMS = [
    ItemSpec("achievement", PERFORMANCE, "Achievement", 0, 25, "Results against monthly targets"),
    ItemSpec("attendance", PERFORMANCE, "Attendance", -5, 5, "Punctuality and absences"),
    ItemSpec("compliance", PERFORMANCE, "Compliance", -10, 3, "Rules and reporting obligations"),
    ItemSpec("client", PERFORMANCE, "Client evaluation", 0, 15, "Feedback received from clients"),
    ItemSpec("initiative", BEHAVIOR, "Initiative", 0, 10, "Acts without being asked"),
    ItemSpec("responsibility", BEHAVIOR, "Responsibility", 0, 7, "Owns tasks through to the end"),
    ItemSpec("cooperation", BEHAVIOR, "Cooperation", 0, 10, "Works well with the team"),
    ItemSpec("appearance", BEHAVIOR, "Appearance", 0, 3, "Professional presentation"),
    ItemSpec("selfImprovement", GROWTH, "Self improvement", 0, 7, "Study and skill building"),
    ItemSpec("response", GROWTH, "Responsiveness", 0, 5, "Speed and quality of replies"),
    ItemSpec("goalAchievement", GROWTH, "Goal achievement", 0, 10, "Progress on personal goals"),
]

CATEGORY_MAX_SCORES = {PERFORMANCE: 100, BEHAVIOR: 30, GROWTH: 30}
TOTAL_MAX_SCORE = sum(CATEGORY_MAX_SCORES.values())

# Ordered highest first; a score takes the first rank whose threshold it reaches.
RANK_THRESHOLDS = [
    ("SS", 95),
    ("S", 90),
    ("A+", 85),
    ("A", 80),
    ("A-", 75),
    ("B", 60),
    ("C", 55),
    ("D", None),
]
RANKS = [rank for rank, _ in RANK_THRESHOLDS]

RANK_REWARDS = {
    "SS": 15000,
    "S": 10000,
    "A+": 4000,
    "A": 3000,
    "A-": 2000,
    "B": 0,
    "C": -5000,
    "D": -10000,
}

ANNUAL_RANK_REWARDS = {
    "SS": 150000,
    "S": 100000,
    "A+": 75000,
    "A": 50000,
    "A-": 30000,
    "B": 0,
    "C": -30000,
    "D": -50000,
}

RANK_DESCRIPTIONS = {
    "SS": "Outstanding",
    "S": "Excellent",
    "A+": "Very good",
    "A": "Good",
    "A-": "Good",
    "B": "Standard",
    "C": "Needs improvement",
    "D": "Significant improvement needed",
}

RANK_REWARD_TYPES = {rank: ("fixed" if rank in ("B", "C", "D") else "addition") for rank in RANKS}


@dataclass
class EvaluationScores:
    performance_score: float = 0
    behavior_score: float = 0
    growth_score: float = 0
    total_score: float = 0

    def as_dict(self):
        return asdict(self)


@dataclass
class RankInfo:
    rank: str
    reward: int
    description: str


# -----------------------------------------------------------
# Scores
# -----------------------------------------------------------
def calculate_scores(scores, items=DEFAULT_EVALUATION_ITEMS):
    """
    Sum submitted item scores per category.

    `scores` maps item_key -> number. Items whose category is not one
    of the three standard categories still count towards the total.
    """
    category_of = {item.item_key: item.category for item in items}
    sums = {key: 0 for key in CATEGORY_KEYS}
    total = 0

    for item_key, value in scores.items():
        if item_key not in category_of:
            continue
        value = value or 0
        total += value
        category = category_of[item_key]
        if category in sums:
            sums[category] += value

    return EvaluationScores(
        performance_score=sums[PERFORMANCE],
        behavior_score=sums[BEHAVIOR],
        growth_score=sums[GROWTH],
        total_score=total,
    )


def calculate_average_score(scores):
    """Mean of `scores` rounded to 2 decimals; 0 for an empty list."""
    scores = list(scores)
    if not scores:
        return 0
    return round(sum(scores) / len(scores), 2)


# -----------------------------------------------------------
# Ranks & rewards
# -----------------------------------------------------------
def _sorted_settings(rank_settings):
    return sorted(rank_settings, key=lambda setting: setting.min_score, reverse=True)


def determine_rank(score, rank_settings=None):
    """
    Rank for `score`. With company `rank_settings` (objects exposing
    rank_name / min_score) the highest threshold reached wins and a
    score below every threshold gets the lowest configured rank.
    """
    if rank_settings:
        ordered = _sorted_settings(rank_settings)
        for setting in ordered:
            if score >= setting.min_score:
                return setting.rank_name
        return ordered[-1].rank_name

    for rank, threshold in RANK_THRESHOLDS:
        if threshold is None or score >= threshold:
            return rank
    return "D"


def calculate_reward(rank, rank_settings=None):
    if rank_settings:
        for setting in rank_settings:
            if setting.rank_name == rank:
                return setting.amount
        return 0
    return RANK_REWARDS.get(rank, 0)


def calculate_annual_reward(rank):
    return ANNUAL_RANK_REWARDS.get(rank, 0)


def get_rank_info(rank, rank_settings=None):
    return RankInfo(
        rank=rank,
        reward=calculate_reward(rank, rank_settings),
        description=RANK_DESCRIPTIONS.get(rank, ""),
    )


def get_reward_display(reward):
    if reward > 0:
        return f"+¥{reward:,}"
    if reward < 0:
        return f"-¥{abs(reward):,}"
    return "±¥0"


def rank_table(rank_settings=None):
    """Rows for the rank/reward reference table shown to staff."""
    if rank_settings:
        return [
            {
                "rank": setting.rank_name,
                "min_score": setting.min_score,
                "monthly_reward": setting.amount,
                "reward_display": get_reward_display(setting.amount),
                "description": RANK_DESCRIPTIONS.get(setting.rank_name, ""),
            }
            for setting in _sorted_settings(rank_settings)
        ]

    return [
        {
            "rank": rank,
            "min_score": threshold or 0,
            "monthly_reward": RANK_REWARDS[rank],
            "annual_reward": ANNUAL_RANK_REWARDS[rank],
            "reward_display": get_reward_display(RANK_REWARDS[rank]),
            "reward_type": RANK_REWARD_TYPES[rank],
            "description": RANK_DESCRIPTIONS[rank],
        }
        for rank, threshold in RANK_THRESHOLDS
    ]


# -----------------------------------------------------------
# Validation
# -----------------------------------------------------------
def validate_score(score, min_score, max_score):
    return min_score <= score <= max_score


def validate_evaluation_form(scores, items=DEFAULT_EVALUATION_ITEMS):
    """
    Check a submitted score map against the item definitions.

    Returns (is_valid, errors) where errors maps item_key -> message.
    """
    errors = {}
    known = {item.item_key: item for item in items}

    if not isinstance(scores, dict):
        return False, {"scores": "Scores must be an object of item_key: score."}

    for key in scores:
        if key not in known:
            errors[key] = "Unknown evaluation item."

    for item in items:
        value = scores.get(item.item_key)
        if value is None:
            errors[item.item_key] = f"{item.item_name} is required."
        elif isinstance(value, bool) or not isinstance(value, Real):
            errors[item.item_key] = f"{item.item_name} must be a number."
        elif not validate_score(value, item.min_score, item.max_score):
            errors[item.item_key] = (
                f"{item.item_name} must be between {item.min_score} and {item.max_score}."
            )

    return not errors, errors
