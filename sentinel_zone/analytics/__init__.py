"""
Analytics Layer
===============

Bounded Context: Evaluation results and alert state.

Responsibilities:
- Immutable per-frame evaluation snapshots
- Observable frame-level intrusion flag (mutable, lock-protected)
- Statistics snapshots

Design Philosophy:
- Mutable accumulators (IntrusionState)
- Immutable outputs (FrameEvaluation, IntrusionStats)
"""

from sentinel_zone.analytics.evaluation import FrameEvaluation, ObjectClassification
from sentinel_zone.analytics.state import IntrusionState, IntrusionStats

__all__ = [
    "FrameEvaluation",
    "ObjectClassification",
    "IntrusionState",
    "IntrusionStats",
]
