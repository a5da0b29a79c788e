# =============================================================================
# Evaluation Module
# =============================================================================
"""
Diagnostics for trained Q-tables.

Key Metrics:
------------
1. STATUS
   Max Q-value, count of non-zero and positive entries, and a verdict:
   READY (goal reward has propagated), PARTIAL or UNTRAINED.

2. SUCCESS RATE
   % of greedy rollouts that reach the goal within the step limit.
"""

from smartroom_rl.evaluation.metrics import (
    compute_success_rate,
    summarize_q_table,
    format_status,
    format_q_table,
    QTableSummary,
    EvaluationSuite,
    READY,
    PARTIAL,
    UNTRAINED,
)

__all__ = [
    "compute_success_rate",
    "summarize_q_table",
    "format_status",
    "format_q_table",
    "QTableSummary",
    "EvaluationSuite",
    "READY",
    "PARTIAL",
    "UNTRAINED",
]
