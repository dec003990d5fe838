import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from hl7_definition_models import DefinitionSet, FieldDefinition, SegmentDefinition
from hl7_definitions import BASELINE_VERSION, load_baseline_definitions

logger = logging.getLogger(__name__)

DefinitionKey = Tuple[str, str]


def resolve_segment_definition(
    definitions: Dict[DefinitionKey, SegmentDefinition],
    segment_name: str,
    version: str,
    baseline_version: str = BASELINE_VERSION,
) -> Optional[SegmentDefinition]:
    """
    Resolve a segment definition by (segment name, version).

    Tries the exact version first, then the baseline version. Returns None
    when the segment is known under neither.
    """
    exact = definitions.get((segment_name, version))
    if exact is not None:
        return exact
    return definitions.get((segment_name, baseline_version))


class DefinitionRegistry:
    """
    Version-keyed registry of HL7 segment and field definitions.
    Holds the built-in baseline definitions and, optionally, extra per-version
    definition files loaded from a directory.
    """

    def __init__(self, definitions_path: Optional[str] = None, baseline_version: str = BASELINE_VERSION):
        self.definitions_path = Path(definitions_path) if definitions_path else None
        self.baseline_version = baseline_version
        self._definitions: Dict[DefinitionKey, SegmentDefinition] = {}
        self._load_definitions()

    def _load_definitions(self):
        """Register the built-in definitions, then any definition files on disk."""
        self.register(load_baseline_definitions())

        if self.definitions_path is None:
            return
        if not self.definitions_path.exists():
            logger.warning(f"Definitions path does not exist: {self.definitions_path}")
            return

        logger.info(f"Loading HL7 definitions from: {self.definitions_path}")

        for definitions_file in sorted(self.definitions_path.glob("*.json")):
            try:
                with open(definitions_file, 'r') as f:
                    definition_data = json.load(f)
                    definition_set = DefinitionSet.model_validate(definition_data)
                    self.register(definition_set)
                    logger.info(f"Loaded definitions for HL7 {definition_set.version}: {definitions_file.name}")
            except Exception as e:
                logger.error(f"Failed to load definitions {definitions_file.name}: {e}")

    def register(self, definition_set: DefinitionSet):
        """Register every segment of a definition set under its version."""
        for segment_name, segment_def in definition_set.segments.items():
            self._definitions[(segment_name, definition_set.version)] = segment_def
        logger.debug(f"Registered {len(definition_set.segments)} segment definitions for version {definition_set.version}")

    def get_segment_definition(self, segment_name: str, version: str) -> Optional[SegmentDefinition]:
        return resolve_segment_definition(self._definitions, segment_name, version, self.baseline_version)

    def get_field_definition(self, segment_name: str, field_index: int, version: str) -> Optional[FieldDefinition]:
        segment_def = self.get_segment_definition(segment_name, version)
        if segment_def is None:
            return None
        return segment_def.get_field(field_index)

    def list_versions(self) -> List[str]:
        """List the versions that have at least one registered segment."""
        return sorted({version for _, version in self._definitions})

    def list_segments(self, version: str) -> List[str]:
        """
        List segment names resolvable for a version, including those
        inherited from the baseline.
        """
        return sorted({
            name for name, def_version in self._definitions
            if def_version in (version, self.baseline_version)
        })

    def reload_definitions(self):
        """Reload all definitions from the built-ins and the filesystem."""
        self._definitions.clear()
        self._load_definitions()


_default_registry: Optional[DefinitionRegistry] = None


def get_default_registry() -> DefinitionRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = DefinitionRegistry()
    return _default_registry


def get_segment_definition(segment_name: str, version: str) -> Optional[SegmentDefinition]:
    return get_default_registry().get_segment_definition(segment_name, version)


def get_field_definition(segment_name: str, field_index: int, version: str) -> Optional[FieldDefinition]:
    return get_default_registry().get_field_definition(segment_name, field_index, version)
