"""
Trigger evaluation contracts (context, decisions, and the rule protocol).

This module defines the contract between:

- Trigger rules, each producing a :class:`TriggerDecision` per evaluator tick
- The report evaluator, which combines decisions into at most one report

Notes
-----
Trigger rules may keep private bookkeeping
(last value sent, last send time). That state belongs to the rule instance
and is only touched from the evaluator thread.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from vehicle_telemetry.domain.models import TriggerKind, VehicleState


@dataclass(frozen=True)
class TriggerContext:
    """
    Context passed into trigger evaluation.

    Parameters
    ----------
    now_ms
        Monotonic clock reading (milliseconds) for the current tick. Every
        rule in a tick sees the same value.
    """

    now_ms: int


@dataclass(frozen=True)
class TriggerDecision:
    """
    Result of evaluating one trigger rule.

    Parameters
    ----------
    kind
        Which rule produced the decision.
    fired
        Whether the rule asks for a report on this tick.
    message
        Human-readable description, used for logging.
    """

    kind: TriggerKind
    fired: bool
    message: str = ""


class TriggerRule(Protocol):
    """
    Protocol interface for report trigger rules.

    Methods
    -------
    evaluate(state, ctx)
        Inspect one vehicle state snapshot and decide whether to report.
        A rule that fires updates its own bookkeeping before returning.
    """

    kind: TriggerKind

    def evaluate(self, state: VehicleState, ctx: TriggerContext) -> TriggerDecision:
        ...
