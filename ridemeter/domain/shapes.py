"""
Ride Shape Classifier
=====================

Inspects a record and selects one of six cost / progress branches.
First match wins:

1. round trip + recurring  -> ``recurring_round_trip``
2. round trip              -> ``round_trip``
3. errand + recurring      -> ``recurring_errand``
4. errand                  -> ``errand``
5. recurring               -> ``recurring``
6. otherwise               -> ``simple``

Round-trip dominates errand-ness: a round-trip errand is classified as a
round trip.  Recurrence means ``number_of_trips > 1`` or a ``series_id``.
Feature flags in ``Settings`` can switch either dimension off.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ridemeter.config import Settings, settings

from .adapters import ride_from_row
from .entities import RideRecord
from .enums import RideShape
from .service_types import get_behavior

logger = logging.getLogger(__name__)


def is_recurring(ride: RideRecord, config: Optional[Settings] = None) -> bool:
    config = config or settings
    return config.recurring_enabled and ride.has_series


def is_round_trip(ride: RideRecord, config: Optional[Settings] = None) -> bool:
    config = config or settings
    return config.round_trips_enabled and ride.is_round_trip


def is_errand(ride: RideRecord) -> bool:
    return get_behavior(ride.service_type).errand_semantics


def classify(ride: Any, config: Optional[Settings] = None) -> RideShape:
    """Return the ``RideShape`` for *ride* (a ``RideRecord``, row mapping or ``None``)."""
    record = ride_from_row(ride)
    recurring = is_recurring(record, config)
    round_trip = is_round_trip(record, config)
    errand = is_errand(record)

    if round_trip and recurring:
        shape = RideShape.RECURRING_ROUND_TRIP
    elif round_trip:
        shape = RideShape.ROUND_TRIP
    elif errand and recurring:
        shape = RideShape.RECURRING_ERRAND
    elif errand:
        shape = RideShape.ERRAND
    elif recurring:
        shape = RideShape.RECURRING
    else:
        shape = RideShape.SIMPLE

    logger.debug("Classified ride %s as %s", record.id, shape.value)
    return shape
