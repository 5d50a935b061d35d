"""Estimator Module - Historical price suggestions for used machinery."""

from .aggregator import WeightedAggregator
from .blender import SourceBlender
from .estimator import PriceEstimator
from .fetchers import RecordFetcher, SQLiteRecordFetcher
from .matcher import family_token, is_prefix_match, is_related_model, model_relevance
from .models import HistoricalRecord, LiveRecord
from .recency import recency_weight, years_ago

__all__ = [
    "PriceEstimator",
    "WeightedAggregator",
    "SourceBlender",
    "RecordFetcher",
    "SQLiteRecordFetcher",
    "HistoricalRecord",
    "LiveRecord",
    "family_token",
    "model_relevance",
    "is_related_model",
    "is_prefix_match",
    "years_ago",
    "recency_weight",
]
