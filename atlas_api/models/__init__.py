"""Pydantic payload models for the API categories.

The request engine treats these as opaque: it only needs to validate JSON
into them and render them back for display.
"""

from __future__ import annotations

from atlas_api.models.anchors import Anchor, AnchorMeasurement
from atlas_api.models.base import Payload
from atlas_api.models.credits import (
    Credits,
    ExpenseItem,
    IncomeItem,
    Member,
    Transaction,
    Transfer,
)
from atlas_api.models.keys import Grant, Key, Permission, Target
from atlas_api.models.measurements import Measurement, ParticipationRequest
from atlas_api.models.probes import Geometry, Probe, Status, Tag

__all__ = [
    "Anchor",
    "AnchorMeasurement",
    "Credits",
    "ExpenseItem",
    "Geometry",
    "Grant",
    "IncomeItem",
    "Key",
    "Measurement",
    "Member",
    "ParticipationRequest",
    "Payload",
    "Permission",
    "Probe",
    "Status",
    "Tag",
    "Target",
    "Transaction",
    "Transfer",
]
