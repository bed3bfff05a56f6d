from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for the minimal access gating."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class StopReason(str, Enum):
    """Why a running session was stopped."""

    MANUAL = "manual"
    AUTOMATIC_CUTOFF = "automatic_cutoff"


class CutoffPolicy(str, Enum):
    """Which end time an automatic cutoff writes into the record."""

    CUTOFF_TIME = "cutoff"
    ACTUAL_TIME = "actual"


class RequestStatus(str, Enum):
    """Review state of a vacation request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
