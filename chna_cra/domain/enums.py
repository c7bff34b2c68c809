from enum import Enum


class Disparity(str, Enum):
    transport = "transport"
    access = "access"
    food = "food"
    housing = "housing"
    financial = "financial"


class SourceKind(str, Enum):
    pdf = "pdf"
    txt = "txt"


class RunStatus(str, Enum):
    empty = "empty"
    succeeded = "succeeded"
    partial = "partial"
    no_signals = "no_signals"
    failed = "failed"


class OpportunityKind(str, Enum):
    nmt = "nmt"
    food = "food"
    care = "care"


class Strength(str, Enum):
    strong = "Strong"
    moderate = "Moderate"
    weak = "Weak"


class Recommendation(str, Enum):
    advance_high = "Advance (high)"
    advance_moderate = "Advance (moderate)"
    defer = "Defer/monitor"


class ChecklistKind(str, Enum):
    assessment = "assessment"
    implementation_plan = "implementation_plan"
    public_comment = "public_comment"


class WeightMode(str, Enum):
    weighted = "weighted"
    flat = "flat"


class CodingBase(str, Enum):
    prevented = "prevented"
    all = "all"


class ValueBasedModel(str, Enum):
    earnback = "earnback"
    cliff = "cliff"


SEGMENT_OVERALL = "Overall"
SEGMENT_AGE_65_74 = "Age 65–74"
