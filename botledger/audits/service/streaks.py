"""
Winning/losing streak detection over trade audits.

The input must already be in chronological order; it is never re-sorted.
A single forward pass keeps one in-progress run at a time: a WIN ends any
losing run and a LOSS ends any winning run, while a PENDING trade ends
both without starting a new one. The longest run of each type is replaced
only by a strictly longer one, so ties keep the earliest streak.
"""

from typing import Dict, Optional, Sequence, Tuple

from ..dto import TradeOutcome
from ..responses import StreakReportResponse, TradeAuditResponse, TradeStreakResponse

STREAK_OUTCOMES = (TradeOutcome.WIN.value, TradeOutcome.LOSS.value)


def _outcome_of(audit: TradeAuditResponse) -> str:
    outcome = audit.outcome
    return outcome.value if isinstance(outcome, TradeOutcome) else outcome


def _build_streak(
    audits: Sequence[TradeAuditResponse], outcome: str, span: Optional[Tuple[int, int]]
) -> Optional[TradeStreakResponse]:
    if span is None:
        return None
    start, length = span
    trades = list(audits[start:start + length])
    return TradeStreakResponse(
        type=outcome,
        length=length,
        start_timestamp=trades[0].timestamp,
        end_timestamp=trades[-1].timestamp,
        trades=trades,
    )


def analyze_streaks(audits: Sequence[TradeAuditResponse]) -> StreakReportResponse:
    # (start index, length) of the longest run seen so far, per outcome
    longest: Dict[str, Optional[Tuple[int, int]]] = {outcome: None for outcome in STREAK_OUTCOMES}
    run_outcome: Optional[str] = None
    run_start = 0

    for index, audit in enumerate(audits):
        outcome = _outcome_of(audit)
        if outcome not in STREAK_OUTCOMES:
            run_outcome = None
            continue

        if outcome != run_outcome:
            run_outcome = outcome
            run_start = index

        length = index - run_start + 1
        best = longest[outcome]
        if best is None or length > best[1]:
            longest[outcome] = (run_start, length)

    return StreakReportResponse(
        longest_win=_build_streak(audits, TradeOutcome.WIN.value, longest[TradeOutcome.WIN.value]),
        longest_loss=_build_streak(audits, TradeOutcome.LOSS.value, longest[TradeOutcome.LOSS.value]),
        trades_analyzed=len(audits),
    )
