from enum import Enum


class Dimension(str, Enum):
    ECONOMY = "economy"
    LIVABILITY = "livability"
    SUSTAINABILITY = "sustainability"
    GROWTH = "growth"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ScoreTier(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    BELOW_AVERAGE = "below-average"
    POOR = "poor"
    UNKNOWN = "unknown"


class SizeCategory(str, Enum):
    MAJOR = "major"
    MID_SIZED = "mid-sized"
    SMALL = "small"


class ConfidenceLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class RuleCategory(str, Enum):
    PERSONALITY = "PERSONALITY"
    STRENGTH = "STRENGTH"
    WEAKNESS = "WEAKNESS"
    AUDIENCE = "AUDIENCE"


class FallbackTier(int, Enum):
    PARTIAL_DATA = 1
    METADATA_ONLY = 2
    SAFE_DEFAULT = 3

    @property
    def severity(self) -> int:
        """1 = minor degradation, 3 = major."""
        return int(self.value)


class FallbackReason(str, Enum):
    INCOMPLETE_DATA = "incomplete_data"
    LOW_CONFIDENCE = "low_confidence"
    API_UNAVAILABLE = "api_unavailable"
    INFERENCE_ERROR = "inference_error"
    QUALITY_GUARD_BLOCKED = "quality_guard_blocked"

    @property
    def user_message(self) -> str:
        return _REASON_MESSAGES[self]


_REASON_MESSAGES: dict[FallbackReason, str] = {
    FallbackReason.INCOMPLETE_DATA: "Data is incomplete for reliable analysis",
    FallbackReason.LOW_CONFIDENCE: "Confidence too low for reliable predictions",
    FallbackReason.API_UNAVAILABLE: "External data sources temporarily unavailable",
    FallbackReason.INFERENCE_ERROR: "Error during insight processing",
    FallbackReason.QUALITY_GUARD_BLOCKED: "Data quality below minimum threshold",
}
