"""
Master Ball finish eligibility.

A handful of groups have a Master Ball reverse finish that the catalog does
not report. Which printings qualify is listed in data/master_ball_rules.json:

- "range" rules: every collector number from min to max, optionally
  skipping Pokemon ex
- "list" rules: only the listed collector numbers

Group ids are matched case-sensitively (the catalog uses "sv03.5" for the
English group and "SV2a" for the Japanese one).
"""

import json
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from binderdex.models.slot import CardVariant

DATA_DIR = Path(__file__).parent.parent / "data"

_LEADING_NUMBER = re.compile(r"\d+")
_EX_SUFFIX = re.compile(r"\s+ex$", re.IGNORECASE)


@dataclass(frozen=True)
class MasterBallRule:
    group_ids: frozenset[str]
    numbers: frozenset[int] | None = None
    min: int = 0
    max: int = 0
    exclude_ex: bool = False

    def matches(self, number: int, name: str | None) -> bool | None:
        """
        True/False if the rule decides, None if it does not apply.

        A range rule that covers the number but excludes ex cards decides
        False for an ex card, ending the search.
        """
        if self.numbers is not None:
            return True if number in self.numbers else None
        if not self.min <= number <= self.max:
            return None
        return not (self.exclude_ex and is_ex_card(name))


def load_master_ball_rules(path: Path | None = None) -> list[MasterBallRule]:
    """
    Load Master Ball rules from file.

    Args:
        path: Path to JSON file. Defaults to data/master_ball_rules.json

    Returns:
        Rules in file order.
    """
    if path is None:
        path = DATA_DIR / "master_ball_rules.json"

    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    rules: list[MasterBallRule] = []
    for item in raw:
        group_ids = frozenset(item["groupIds"])
        if item["type"] == "list":
            rules.append(MasterBallRule(group_ids=group_ids, numbers=frozenset(item["numbers"])))
        else:
            rules.append(
                MasterBallRule(
                    group_ids=group_ids,
                    min=item["min"],
                    max=item["max"],
                    exclude_ex=item.get("excludeEx", False),
                )
            )
    return rules


@lru_cache(maxsize=1)
def get_master_ball_rules() -> tuple[MasterBallRule, ...]:
    """Cached rules from the packaged data file."""
    return tuple(load_master_ball_rules())


def parse_local_id(local_id: str | None) -> int | None:
    """Leading collector number of a local id ("012" -> 12, "TG01" -> None)."""
    if not local_id:
        return None
    match = _LEADING_NUMBER.match(local_id)
    return int(match.group()) if match else None


def is_ex_card(name: str | None) -> bool:
    if not name:
        return False
    return _EX_SUFFIX.search(name.strip()) is not None


def has_master_ball(group_id: str | None, local_id: str | None, name: str | None = None) -> bool:
    """Check whether a printing has a Master Ball finish."""
    number = parse_local_id(local_id)
    if group_id is None or number is None:
        return False
    for rule in get_master_ball_rules():
        if group_id not in rule.group_ids:
            continue
        decided = rule.matches(number, name)
        if decided is not None:
            return decided
    return False


def add_master_ball_if_eligible(
    variants: list[CardVariant],
    group_id: str | None,
    local_id: str | None,
    name: str | None = None,
) -> list[CardVariant]:
    """Append masterBall for eligible printings. Never removes anything."""
    if CardVariant.MASTER_BALL in variants or not has_master_ball(group_id, local_id, name):
        return list(variants)
    return [*variants, CardVariant.MASTER_BALL]
