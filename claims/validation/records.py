"""
Record Types and Typed Record Views

A record is the mapping parsed from one claim file. Its type is not stored
in the record; it is derived from where the file lives in the corpus:

    <collection>/claims/<type>/<file>.yml
    <collection>/meta.yml

The pydantic models below are read-only views used to access record fields
by name. They are built with ``model_construct`` so that malformed content
never raises here; the JSON schema check is the authority on structure.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ConfigDict


RECORD_EXTENSIONS = (".yml", ".yaml")


class RecordType(str, Enum):
    """Categories of claim records."""
    EFFECTS = "effects"
    BIOMARKERS = "biomarkers"
    CYCLES = "cycles"
    INTERACTIONS = "interactions"
    FORMULATIONS = "formulations"
    TOXICITY = "toxicity"
    SYNERGIES = "synergies"
    ADDICTION_WITHDRAWAL = "addiction-withdrawal"
    META = "meta"

    @classmethod
    def claim_types(cls):
        """Types stored under ``<collection>/claims/<type>/``."""
        return [t for t in cls if t is not cls.META]


class ClaimRecord(BaseModel):
    """Fields shared by every claim record."""
    model_config = ConfigDict(extra="allow", frozen=True)

    paper: Optional[Any] = None
    paper_quotes: Optional[Any] = None
    notes: Optional[Any] = None


class EffectRecord(ClaimRecord):
    effect: Optional[Any] = None
    kind: Optional[Any] = None
    direction: Optional[Any] = None
    strength: Optional[Any] = None
    dosage: Optional[Any] = None


class BiomarkerRecord(ClaimRecord):
    biomarker: Optional[Any] = None
    direction: Optional[Any] = None
    strength: Optional[Any] = None
    dosage: Optional[Any] = None


class CycleRecord(ClaimRecord):
    protocol: Optional[Any] = None
    duration_weeks: Optional[Any] = None


class InteractionRecord(ClaimRecord):
    substance: Optional[Any] = None
    severity: Optional[Any] = None


class FormulationRecord(ClaimRecord):
    form: Optional[Any] = None
    route: Optional[Any] = None


class ToxicityRecord(ClaimRecord):
    symptom: Optional[Any] = None
    severity: Optional[Any] = None


class SynergyRecord(ClaimRecord):
    partner: Optional[Any] = None
    effect: Optional[Any] = None


class WithdrawalRecord(ClaimRecord):
    symptom: Optional[Any] = None
    severity: Optional[Any] = None


class MetaRecord(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    name: Optional[Any] = None
    dosage_unit: Optional[Any] = None


RECORD_MODELS: Dict[RecordType, Type[BaseModel]] = {
    RecordType.EFFECTS: EffectRecord,
    RecordType.BIOMARKERS: BiomarkerRecord,
    RecordType.CYCLES: CycleRecord,
    RecordType.INTERACTIONS: InteractionRecord,
    RecordType.FORMULATIONS: FormulationRecord,
    RecordType.TOXICITY: ToxicityRecord,
    RecordType.SYNERGIES: SynergyRecord,
    RecordType.ADDICTION_WITHDRAWAL: WithdrawalRecord,
    RecordType.META: MetaRecord,
}


def as_typed(record_type: RecordType, data: Dict[Any, Any]) -> BaseModel:
    """Wrap raw record content in the view for its type.

    Keys that cannot be field names (non-strings, leading underscores)
    are left out of the view.
    """
    model = RECORD_MODELS[record_type]
    fields = {
        key: value for key, value in data.items()
        if isinstance(key, str) and not key.startswith("_")
    }
    return model.model_construct(**fields)


def record_type_from_path(file_path: str) -> Optional[RecordType]:
    """Derive the record type from a file's location.

    Returns:
        The RecordType, or None if the path does not follow the corpus layout.
    """
    path = Path(file_path)
    if path.suffix not in RECORD_EXTENSIONS:
        return None
    parts = path.parts
    if len(parts) >= 3 and parts[-3] == "claims":
        try:
            record_type = RecordType(parts[-2])
        except ValueError:
            return None
        return None if record_type is RecordType.META else record_type
    if path.stem == RecordType.META.value:
        return RecordType.META
    return None


def extract_identifier(data: Dict[str, Any]) -> Optional[str]:
    """Return the record's cited DOI, if it declares one."""
    paper = data.get("paper")
    if paper is None:
        return None
    text = str(paper).strip()
    return text or None
