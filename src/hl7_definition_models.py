from pydantic import BaseModel, Field, AliasChoices
from typing import Dict, Optional

# --- Models for Field and Segment Definitions ---
class FieldDefinition(BaseModel):
    name: str
    description: str = ""
    data_type: str = Field(validation_alias=AliasChoices("data_type", "dataType"), default="ST")
    max_length: Optional[int] = Field(validation_alias=AliasChoices("max_length", "maxLength", "length"), default=None)
    required: bool = False
    repeatable: bool = False
    table: Optional[str] = None
    usage: Optional[str] = None
    example: Optional[str] = None

class SegmentDefinition(BaseModel):
    name: str
    description: str = ""
    purpose: Optional[str] = None
    fields: Dict[int, FieldDefinition] = Field(default_factory=dict)

    def get_field(self, field_index: int) -> Optional[FieldDefinition]:
        return self.fields.get(field_index)

# --- Versioned container, one per definitions file ---
class DefinitionSet(BaseModel):
    version: str
    description: Optional[str] = None
    segments: Dict[str, SegmentDefinition] = Field(default_factory=dict)
