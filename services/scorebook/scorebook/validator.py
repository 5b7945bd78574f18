"""Cross-field consistency checks over the extracted roster and team totals.

Checks never correct a value. A failed check adds a review reason and the
record goes to a human.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .models import PlayerRecord, TeamTotals, ValidationCheck, ValidationResult, player_sum

# High-school rule ceiling; a sixth foul is an OCR or scorer error.
MAX_PERSONAL_FOULS = 5


def _player_label(player: PlayerRecord) -> str:
    return f"Player #{player.player_number or player.row_index}"


def check_points_equation(players: Sequence[PlayerRecord]) -> Tuple[List[ValidationCheck], List[str]]:
    checks: List[ValidationCheck] = []
    reasons: List[str] = []
    for player in players:
        s = player.shooting
        if player.total_points is None or s.fg2_made is None or s.fg3_made is None or s.ft_made is None:
            continue
        expected = 2 * s.fg2_made + 3 * s.fg3_made + s.ft_made
        passed = expected == player.total_points
        if passed:
            details = (
                f"{_player_label(player)}: {player.total_points} = "
                f"2*{s.fg2_made} + 3*{s.fg3_made} + {s.ft_made}"
            )
        else:
            details = f"{_player_label(player)}: expected {expected} but got {player.total_points}"
            reasons.append(f"Points mismatch for player row {player.row_index}")
        checks.append(
            ValidationCheck(name=f"points_equation_player_{player.row_index}", passed=passed, details=details)
        )
    return checks, reasons


def check_foul_ceiling(players: Sequence[PlayerRecord]) -> Tuple[List[ValidationCheck], List[str]]:
    checks: List[ValidationCheck] = []
    reasons: List[str] = []
    for player in players:
        fouls = player.personal_fouls_total
        if fouls is None or fouls <= MAX_PERSONAL_FOULS:
            continue
        checks.append(
            ValidationCheck(
                name=f"fouls_high_player_{player.row_index}",
                passed=False,
                details=f"{_player_label(player)} has {fouls} fouls (>{MAX_PERSONAL_FOULS} is unusual for HS).",
            )
        )
        reasons.append(f"High foul count for player row {player.row_index}")
    return checks, reasons


def check_team_sum(players: Sequence[PlayerRecord], totals: TeamTotals) -> Tuple[List[ValidationCheck], List[str]]:
    total = player_sum(players)
    if totals.total_points is None or total <= 0:
        return [], []
    passed = total == totals.total_points
    if passed:
        details = f"Team total {totals.total_points} matches player sum."
        reasons: List[str] = []
    else:
        details = f"Team total {totals.total_points} != player sum {total}."
        reasons = ["Team total does not match sum of player points."]
    return [ValidationCheck(name="team_total_vs_player_sum", passed=passed, details=details)], reasons


def null_points_reasons(players: Sequence[PlayerRecord]) -> List[str]:
    if not players:
        return []
    missing = sum(1 for player in players if player.total_points is None)
    rate = missing / len(players)
    if rate <= 0.5:
        return []
    return [f">{int(rate * 100 + 0.5)}% of player rows have null total_points."]


def validate(players: Sequence[PlayerRecord], totals: TeamTotals) -> ValidationResult:
    checks: List[ValidationCheck] = []
    reasons: List[str] = []
    for new_checks, new_reasons in (
        check_points_equation(players),
        check_foul_ceiling(players),
        check_team_sum(players, totals),
    ):
        checks.extend(new_checks)
        reasons.extend(new_reasons)
    reasons.extend(null_points_reasons(players))
    return ValidationResult(checks=tuple(checks), review_reasons=tuple(reasons))
