"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

This module defines typed event names for structured logging.

Design:
- Enum-based (prevents typos, enables autocomplete)
- Hierarchical naming (namespace.category.action)
- Searchable in log aggregators

Event Naming Convention:
    <component>.<category>.<action>

    component: fit, config, error
    category: zone, generation
    action: started, completed, loaded

Example Log Query (CloudWatch Insights):
    fields @timestamp, event, message, metadata.zone
    | filter event = "fit.zone.completed"
    | stats avg(metadata.fitness) by metadata.zone
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - fit.*: Zone fitting lifecycle
    - config.*: Job configuration
    - error.*: Error conditions
    """

    # ========== Fit Events ==========
    FIT_STARTED = "fit.started"
    """Fit job started (all zones)."""

    FIT_COMPLETED = "fit.completed"
    """Fit job finished, result message built."""

    ZONE_FIT_STARTED = "fit.zone.started"
    """Genetic search for one zone started."""

    ZONE_FIT_COMPLETED = "fit.zone.completed"
    """Genetic search for one zone finished."""

    GENERATION_COMPLETED = "fit.generation.completed"
    """One generation scored and bred (debug level)."""

    # ========== Config Events ==========
    CONFIG_LOADED = "config.loaded"
    """Job configuration loaded and validated."""

    # ========== Error Events ==========
    EMPTY_DATASET_ERROR = "error.empty_dataset"
    """Fit requested without data points."""

    DOMAIN_ERROR = "error.domain"
    """Degenerate characteristic angle (0 or 90 degrees)."""

    CONFIG_ERROR = "error.config"
    """Job configuration failed validation."""


# Event categories for filtering
FIT_EVENTS = {
    LogEvent.FIT_STARTED,
    LogEvent.FIT_COMPLETED,
    LogEvent.ZONE_FIT_STARTED,
    LogEvent.ZONE_FIT_COMPLETED,
    LogEvent.GENERATION_COMPLETED,
}

ERROR_EVENTS = {
    LogEvent.EMPTY_DATASET_ERROR,
    LogEvent.DOMAIN_ERROR,
    LogEvent.CONFIG_ERROR,
}
