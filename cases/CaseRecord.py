# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: CaseRecord
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

# Accepted spellings, first match wins. The data file uses the ticket_* names.
ID_KEYS = ("ticket_id", "caseNumber", "case_number")
SHORT_KEYS = ("short_desc", "shortDescription", "short_description")
LONG_KEYS = ("long_desc", "longDescription", "long_description")


def _first(data: Mapping[str, Any], keys) -> Optional[Any]:
    for k in keys:
        v = data.get(k)
        if v is not None:
            return v
    return None


def _text(v: Any) -> str:
    return "" if v is None else str(v)


@dataclass(frozen=True)
class CaseRecord:
    """One HR case as supplied by the record store. Identity is the case number, case-insensitive."""
    case_number: str
    short_description: str = ""
    long_description: str = ""
    fields: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def key(self) -> str:
        return self.case_number.strip().casefold()

    @property
    def embedding_text(self) -> str:
        return f"{self.short_description} {self.long_description}"

    def matches(self, case_number: str) -> bool:
        return self.key == case_number.strip().casefold()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CaseRecord":
        if not isinstance(data, Mapping):
            raise ValueError(f"case record must be a mapping, got {type(data).__name__}")
        case_number = _first(data, ID_KEYS)
        if case_number is None or not str(case_number).strip():
            raise ValueError(f"case record has no identifier (expected one of {ID_KEYS})")
        return cls(
            case_number=str(case_number).strip(),
            short_description=_text(_first(data, SHORT_KEYS)),
            long_description=_text(_first(data, LONG_KEYS)),
            fields=dict(data),
        )

    @classmethod
    def coerce(cls, obj: Any) -> "CaseRecord":
        return obj if isinstance(obj, CaseRecord) else cls.from_dict(obj)

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.fields)
        out.setdefault("ticket_id", self.case_number)
        out.setdefault("short_desc", self.short_description)
        out.setdefault("long_desc", self.long_description)
        return out
