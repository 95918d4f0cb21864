from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
from enum import Enum

from .scores import UnknownVitalSignError


class ConsciousnessLevel(Enum):
    ALERT = "A"
    CONFUSION = "C"
    VOICE = "V"
    PAIN = "P"
    UNRESPONSIVE = "U"

    @classmethod
    def from_code(cls, code: str) -> 'ConsciousnessLevel':
        """Look up a level by its ACVPU letter, ignoring case."""
        if not isinstance(code, str):
            raise ValueError(f"Consciousness code must be a string, got {type(code).__name__}")
        try:
            return cls(code.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown consciousness code: {code!r}") from None


RESPIRATORY_RATE = "respiratory_rate"
OXYGEN_SATURATION = "oxygen_saturation"
SUPPLEMENTAL_OXYGEN = "supplemental_oxygen"
TEMPERATURE = "temperature"
SYSTOLIC_BP = "systolic_bp"
HEART_RATE = "heart_rate"
CONSCIOUSNESS_LEVEL = "consciousness_level"

FIELD_NAMES = (
    RESPIRATORY_RATE,
    OXYGEN_SATURATION,
    SUPPLEMENTAL_OXYGEN,
    TEMPERATURE,
    SYSTOLIC_BP,
    HEART_RATE,
    CONSCIOUSNESS_LEVEL,
)

# Names used by the presentation layer
FIELD_ALIASES = {
    "respiratoryRate": RESPIRATORY_RATE,
    "oxygenSaturation": OXYGEN_SATURATION,
    "supplementalOxygen": SUPPLEMENTAL_OXYGEN,
    "systolicBP": SYSTOLIC_BP,
    "heartRate": HEART_RATE,
    "consciousnessLevel": CONSCIOUSNESS_LEVEL,
}

Number = Union[int, float]


def resolve_field_name(name: str) -> str:
    """Map a snake_case or camelCase field name onto its canonical name."""
    if name in FIELD_NAMES:
        return name
    if name in FIELD_ALIASES:
        return FIELD_ALIASES[name]
    raise UnknownVitalSignError(f"Unknown vital sign field: {name}")


def coerce_consciousness(value: Any) -> Any:
    """
    Turn an ACVPU letter into a ConsciousnessLevel.

    Values that are not a recognised code are returned unchanged so that
    the snapshot keeps exactly what the caller entered.
    """
    if value is None or isinstance(value, ConsciousnessLevel):
        return value
    if isinstance(value, str):
        try:
            return ConsciousnessLevel.from_code(value)
        except ValueError:
            return value
    return value


@dataclass
class VitalSigns:
    """
    Snapshot of the seven bedside observations shared by NEWS2 and q-SOFA.

    None means "not yet observed" and is never the same thing as zero.
    Values are stored as given; range checking is the validator's job.
    """
    respiratory_rate: Optional[Number] = None
    oxygen_saturation: Optional[Number] = None
    supplemental_oxygen: bool = False
    temperature: Optional[Number] = None
    systolic_bp: Optional[Number] = None
    heart_rate: Optional[Number] = None
    consciousness_level: Optional[ConsciousnessLevel] = None

    def __post_init__(self):
        if self.supplemental_oxygen is None:
            self.supplemental_oxygen = False
        self.consciousness_level = coerce_consciousness(self.consciousness_level)

    def is_present(self, field_name: str) -> bool:
        return getattr(self, resolve_field_name(field_name)) is not None

    def get_missing_parameters(self, required: Iterable[str] = FIELD_NAMES) -> List[str]:
        """Get list of required parameter names that have not been observed."""
        return [name for name in required if not self.is_present(name)]

    def get_completeness_score(self, required: Iterable[str] = FIELD_NAMES) -> float:
        """Fraction of the required parameters that are present."""
        required = list(required)
        if not required:
            return 1.0
        missing = self.get_missing_parameters(required)
        return (len(required) - len(missing)) / len(required)

    def copy(self) -> 'VitalSigns':
        return replace(self)

    def with_updates(self, updates: Mapping[str, Any]) -> 'VitalSigns':
        """
        Return a new snapshot with the given fields overwritten.

        Keys that appear in ``updates`` replace the current value, including
        an explicit None which clears the observation. Keys that do not
        appear are left untouched.

        Raises:
            UnknownVitalSignError: If a key is not a vital sign field
        """
        changes = {resolve_field_name(name): value for name, value in updates.items()}
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, ConsciousnessLevel):
                value = value.value
            result[f.name] = value
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'VitalSigns':
        return cls().with_updates(data)
