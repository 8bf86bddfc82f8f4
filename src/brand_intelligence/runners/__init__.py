"""Feature runners and the orchestrator that dispatches them."""

from .base import FeatureRunner
from .brand_health import BrandHealthRunner
from .competitive_position import CompetitivePositionRunner
from .mention_analysis import MentionAnalysisRunner
from .orchestrator import FeatureRunnerOrchestrator

__all__ = [
    "BrandHealthRunner",
    "CompetitivePositionRunner",
    "FeatureRunner",
    "FeatureRunnerOrchestrator",
    "MentionAnalysisRunner",
]
