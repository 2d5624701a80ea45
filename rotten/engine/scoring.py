"""Score deriver - maps a 0-100 rotten score to badges, tiers, flavor text and colors."""

import math
from dataclasses import dataclass

NO_FLAVOR_TEXT = "No flavor text available."
NO_CATEGORY_FLAVOR = "No flavor assigned"

# Descending thresholds; first match wins.
MACRO_TIERS: list[tuple[float, str]] = [
    (90, "Working for Satan"),
    (75, "Working for the Empire from Star Wars"),
    (60, "Rotten but Redeemable"),
    (45, "Suspicious but Salvageable"),
    (30, "Needs Watching"),
    (15, "Mildly Sketchy"),
]
BOTTOM_TIER = "Mostly Clean"

FLAVOR_TEXT_BY_SCORE: dict[int, str] = {
    0: "Dream job. Suspiciously so.",
    5: "Halo slightly askew, still shining.",
    10: "A few red flags, mostly paperwork.",
    15: "Mild whiff of spin from the comms team.",
    20: "Nothing burning, but someone left the stove on.",
    25: "Good intentions, uneven follow-through.",
    30: "The mission statement and the break room disagree.",
    35: "HR is busy. Very busy.",
    40: "Glossy PR on the outside, questionable behavior on the inside.",
    45: "The moral compass is spinning like a broken fidget spinner.",
    50: "Half the reviews mention 'family'. Not in a good way.",
    55: "Lawyers on speed dial, apologies on autopilot.",
    60: "Toxic mess with a smile.",
    65: "The ethics committee meets quarterly, in theory.",
    70: "Profit first, people eventually, planet never.",
    75: "You're not a cog, you're crewing the Death Star.",
    80: "Endless bureaucracy, fear-based management, superweapon on the roadmap.",
    85: "The break room is a pit of despair.",
    90: "Clocking in for Satan himself.",
    95: "If hell had a careers page, this company would be featured.",
    100: "Abandon all hope, ye who apply here.",
}

CATEGORY_FLAVORS: dict[int, str] = {
    1: "Rotten to the core",
    2: "Smells like spin",
    3: "Boardroom smoke and mirrors",
    4: "Toxic workplace vibes",
    5: "Ethics on life support",
    6: "Greenwashing deluxe",
    13: "Customer trust? Never heard of it",
}

# (min score, hex color), green (clean) to dark red (rotten)
SCORE_COLORS: list[tuple[float, str]] = [
    (90, "#8B0000"),
    (75, "#B22222"),
    (60, "#D2691E"),
    (45, "#DAA520"),
    (30, "#CD853F"),
    (15, "#A9A9A9"),
]
CLEAN_COLOR = "#2E8B57"


@dataclass(frozen=True)
class Flavor:
    """Display flavor for a score."""

    score: float
    macro_tier: str
    micro_flavor: str


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round half up (2.5 -> 3). Python's round() would give 2."""
    return math.floor(value + 0.5)


def score_to_badge(score: float) -> str:
    """Rotten at 80+, Spoiled at 50+, Fresh below. Boundaries belong to the higher tier."""
    if score >= 80:
        return "Rotten"
    if score >= 50:
        return "Spoiled"
    return "Fresh"


def macro_tier(score: float) -> str:
    for threshold, label in MACRO_TIERS:
        if score >= threshold:
            return label
    return BOTTOM_TIER


def micro_flavor(score: float) -> str:
    return FLAVOR_TEXT_BY_SCORE.get(round_half_up(score), NO_FLAVOR_TEXT)


def score_to_flavor(score: float) -> Flavor:
    """Macro tier from the threshold ladder, micro flavor keyed by the rounded score."""
    return Flavor(score=score, macro_tier=macro_tier(score), micro_flavor=micro_flavor(score))


def category_flavor(category_id: int) -> str:
    return CATEGORY_FLAVORS.get(category_id, NO_CATEGORY_FLAVOR)


def score_color(score: float) -> str:
    """Hex color for the score meter."""
    clamped = _clamp(score)
    for threshold, color in SCORE_COLORS:
        if clamped >= threshold:
            return color
    return CLEAN_COLOR
