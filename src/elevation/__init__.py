"""Elevation module - region aggregation, lookup façade and batch enrichment."""

from .batch import BatchReport, Outcome, enrich_coordinates, enrich_coordinates_async, enrich_one
from .query import ElevationQuery
from .region import RegionAggregator, RegionPlan, plan_region, summarize

__all__ = [
    'BatchReport',
    'ElevationQuery',
    'Outcome',
    'RegionAggregator',
    'RegionPlan',
    'enrich_coordinates',
    'enrich_coordinates_async',
    'enrich_one',
    'plan_region',
    'summarize',
]
