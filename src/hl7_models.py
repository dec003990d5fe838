from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Literal, Optional

# Data model for parsed HL7 v2.x messages and the structural diff between two of them.
# Parse results are frozen: a ParsedMessage is built once by a parse call and never mutated.

Severity = Literal["critical", "error", "warning"]
DiffType = Literal["added", "removed", "modified", "common"]

class EncodingCharacters(BaseModel):
    """The five delimiter characters declared by the MSH segment."""
    model_config = ConfigDict(frozen=True)

    field_separator: str = "|"
    component_separator: str = "^"
    repetition_separator: str = "~"
    escape_character: str = "\\"
    sub_component_separator: str = "&"

class Hl7Field(BaseModel):
    """A single field, kept raw and decomposed into repetitions/components/sub-components."""
    model_config = ConfigDict(frozen=True)

    value: str
    repetitions: List[str]
    components: List[str]
    sub_components: List[List[str]]

class Hl7Segment(BaseModel):
    """Represents a single HL7 segment (one line of the message)."""
    model_config = ConfigDict(frozen=True)

    name: str
    fields: List[Hl7Field]
    raw: str # Store the original segment line for reference
    line_number: int = 0

    def get_field(self, index: int) -> Optional[Hl7Field]:
        """Retrieves a field by its definition index (0 is the segment name)."""
        if 0 <= index < len(self.fields):
            return self.fields[index]
        return None

    def get_value(self, index: int) -> Optional[str]:
        field = self.get_field(index)
        return field.value if field is not None else None

class ParsedMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str
    message_type: str
    control_id: str
    encoding_characters: EncodingCharacters
    segments: List[Hl7Segment]

    def get_segment(self, name: str) -> Optional[Hl7Segment]:
        return next((segment for segment in self.segments if segment.name == name), None)

    def get_segments(self, name: str) -> List[Hl7Segment]:
        return [segment for segment in self.segments if segment.name == name]

class Diagnostic(BaseModel):
    """Represents a problem found while parsing or validating a message."""
    model_config = ConfigDict(frozen=True)

    severity: Severity
    message: str
    line: int = 0
    segment_name: Optional[str] = None
    field_name: Optional[str] = None
    field_index: Optional[int] = None

    @property
    def type(self) -> Severity:
        return self.severity

class ParseResult(BaseModel):
    message: Optional[ParsedMessage] = None
    errors: List[Diagnostic] = Field(default_factory=list)

    @property
    def has_critical(self) -> bool:
        return any(e.severity == "critical" for e in self.errors)

    def errors_of(self, severity: Severity) -> List[Diagnostic]:
        return [e for e in self.errors if e.severity == severity]

class FieldDiff(BaseModel):
    model_config = ConfigDict(frozen=True)

    field_index: int
    diff_type: DiffType
    value_a: Optional[str] = None
    value_b: Optional[str] = None

class SegmentDiff(BaseModel):
    """
    The comparison outcome for one segment. Matched pairs ('modified' or 'common')
    carry field diffs and both original indices; unmatched segments carry one side only.
    """
    model_config = ConfigDict(frozen=True)

    segment_name: str
    type: DiffType
    fields_a: Optional[List[Hl7Field]] = None
    fields_b: Optional[List[Hl7Field]] = None
    field_diffs: Optional[List[FieldDiff]] = None
    original_index_a: Optional[int] = None
    original_index_b: Optional[int] = None

class DiffResult(BaseModel):
    segments: List[SegmentDiff] = Field(default_factory=list)

    def summary(self) -> Dict[str, int]:
        counts = {"added": 0, "removed": 0, "modified": 0, "common": 0}
        for segment_diff in self.segments:
            counts[segment_diff.type] += 1
        return counts

    @property
    def has_differences(self) -> bool:
        return any(s.type != "common" for s in self.segments)
