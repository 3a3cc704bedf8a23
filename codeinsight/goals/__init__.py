"""Goal extraction and alignment scoring."""

from .aligner import GoalAligner
from .extractor import GOAL_PRIORITIES, GoalExtractor

__all__ = ["GOAL_PRIORITIES", "GoalAligner", "GoalExtractor"]
