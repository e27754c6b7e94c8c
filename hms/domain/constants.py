from __future__ import annotations

from enum import StrEnum


class DurationUnit(StrEnum):
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]


# Drug supply counts a month as 30 days; equipment servicing uses calendar months.
DURATION_DAY_MULTIPLIERS: dict[str, int] = {
    DurationUnit.DAYS: 1,
    DurationUnit.WEEKS: 7,
    DurationUnit.MONTHS: 30,
}


class ServiceFrequency(StrEnum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]


SERVICE_FREQUENCY_MONTHS: dict[str, int] = {
    ServiceFrequency.MONTHLY: 1,
    ServiceFrequency.QUARTERLY: 3,
    ServiceFrequency.YEARLY: 12,
}


class EquipmentStatus(StrEnum):
    UP_TO_DATE = "up-to-date"
    DUE_SOON = "due-soon"
    OVERDUE = "overdue"

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]


DUE_SOON_WINDOW_DAYS = 30


class SwabResultStatus(StrEnum):
    PASS = "PASS"
    ACCEPTABLE = "ACCEPTABLE"
    FAIL = "FAIL"

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]


class SwabCollectionStatus(StrEnum):
    PENDING = "pending"
    IN_LAB = "in_lab"
    COMPLETED = "completed"

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]


class AreaType(StrEnum):
    OT = "OT"
    ICU = "ICU"

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]


class GrowthLevel(StrEnum):
    NONE = "None"
    LOW = "Low"
    MODERATE = "Moderate"
    HEAVY = "Heavy"

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]


GROWTH_RESULT_STATUS: dict[str, SwabResultStatus] = {
    GrowthLevel.NONE: SwabResultStatus.PASS,
    GrowthLevel.LOW: SwabResultStatus.ACCEPTABLE,
    GrowthLevel.MODERATE: SwabResultStatus.FAIL,
    GrowthLevel.HEAVY: SwabResultStatus.FAIL,
}


class CapaStatus(StrEnum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]


CAPA_TARGET_CLOSURE_DAYS = 7


class PrescriptionStatus(StrEnum):
    DRAFT = "draft"
    FINALIZED = "finalized"

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]
