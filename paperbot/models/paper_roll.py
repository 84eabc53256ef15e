import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class PaperRoll:
    id: str
    weight: float

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> Optional["PaperRoll"]:
        """Return the roll, or None when it has no usable remaining weight."""
        try:
            weight = float(doc.get("paperRemaining") or 0)
        except (TypeError, ValueError):
            return None
        # "NaN" and "inf" parse as floats
        if not math.isfinite(weight) or weight <= 0:
            return None
        return cls(id=str(doc.get("id", "")), weight=weight)
