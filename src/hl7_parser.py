import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from definition_registry import DefinitionRegistry, get_default_registry
from hl7_definitions import BASELINE_VERSION
from hl7_models import Diagnostic, EncodingCharacters, Hl7Field, Hl7Segment, ParsedMessage, ParseResult

logger = logging.getLogger(__name__)

HEADER_SEGMENT = "MSH"
MIN_HEADER_LENGTH = 8  # "MSH" + field separator + 4 encoding characters
VERSION_FIELD = 12
MESSAGE_TYPE_FIELD = 9
CONTROL_ID_FIELD = 10
UNKNOWN = "Unknown"

class Hl7Error(Exception):
    """Base class for errors raised while tokenizing an HL7 message."""

class Hl7ParseError(Hl7Error):
    """The message as a whole cannot be parsed (empty input or unusable header)."""

class ParseContext(BaseModel):
    """Per-call parsing state, fixed once the header has been read."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    encoding_characters: EncodingCharacters
    version: str
    registry: DefinitionRegistry

# --- Tokenizing Helpers ---
def split_lines(raw_text: str) -> List[Tuple[int, str]]:
    """Split raw text into (1-based line number, stripped line) pairs, skipping blank lines."""
    normalized = raw_text.replace('\r\n', '\n').replace('\r', '\n')
    lines = []
    for i, line in enumerate(normalized.split('\n')):
        clean_line = line.strip()
        if not clean_line: continue
        lines.append((i + 1, clean_line))
    return lines

def parse_encoding_characters(header_line: str) -> EncodingCharacters:
    if len(header_line) < MIN_HEADER_LENGTH:
        raise Hl7ParseError("Invalid MSH segment - too short for encoding characters")
    defaults = EncodingCharacters()
    return EncodingCharacters(
        field_separator=header_line[3] or defaults.field_separator,
        component_separator=header_line[4] or defaults.component_separator,
        repetition_separator=header_line[5] or defaults.repetition_separator,
        escape_character=header_line[6] or defaults.escape_character,
        sub_component_separator=header_line[7] or defaults.sub_component_separator,
    )

def parse_field(token: str, encoding: EncodingCharacters) -> Hl7Field:
    """Decompose a raw field token. Values are kept as delimited; escapes are not decoded."""
    repetitions = token.split(encoding.repetition_separator)
    components = repetitions[0].split(encoding.component_separator)
    sub_components = [component.split(encoding.sub_component_separator) for component in components]
    return Hl7Field(value=token, repetitions=repetitions, components=components, sub_components=sub_components)

def _literal_field(token: str) -> Hl7Field:
    return Hl7Field(value=token, repetitions=[token], components=[token], sub_components=[[token]])

def parse_header_segment(line: str, line_number: int, encoding: EncodingCharacters) -> Hl7Segment:
    """
    Parse the MSH segment. MSH-1 is the field separator itself and MSH-2 the
    encoding characters, so both are taken positionally and kept undecomposed;
    the remaining fields start after the separator that follows MSH-2.
    """
    fields = [
        _literal_field(HEADER_SEGMENT),
        _literal_field(encoding.field_separator),
        _literal_field(line[4:8]),
    ]
    fields.extend(parse_field(token, encoding) for token in line[9:].split(encoding.field_separator))
    return Hl7Segment(name=HEADER_SEGMENT, fields=fields, raw=line, line_number=line_number)

def parse_segment(line: str, line_number: int, encoding: EncodingCharacters) -> Hl7Segment:
    """Parse one segment line. Every MSH line keeps the header field numbering."""
    if line.startswith(HEADER_SEGMENT):
        return parse_header_segment(line, line_number, encoding)
    tokens = line.split(encoding.field_separator)
    fields = [parse_field(token, encoding) for token in tokens]
    return Hl7Segment(name=line[:3], fields=fields, raw=line, line_number=line_number)

class SegmentValidator:
    def __init__(self, context: ParseContext):
        self.context = context

    def validate(self, segment: Hl7Segment) -> List[Diagnostic]:
        logger.debug(f"      --- Validating Segment: '{segment.raw}' (HL7 {self.context.version}) ---")

        diagnostics: List[Diagnostic] = []
        registry = self.context.registry
        version = self.context.version

        segment_def = registry.get_segment_definition(segment.name, version)
        if not segment_def and segment.name != HEADER_SEGMENT:
            logger.debug(f"[WARN] Definition for '{segment.name}' not found for version {version}. (Line: {segment.line_number})")
            diagnostics.append(Diagnostic(
                severity="warning",
                message=f"Segment type '{segment.name}' is not defined for HL7 version {version}.",
                line=segment.line_number,
                segment_name=segment.name,
            ))

        for index, field in enumerate(segment.fields):
            field_def = registry.get_field_definition(segment.name, index, version)
            if not field_def: continue

            log_line_intro = f"        Validating {segment.name}-{index} ({field_def.name}): Data='{field.value}'"

            if field_def.required and not field.value.strip():
                logger.debug(f"{log_line_intro} -> [FAIL] Required field is empty.")
                diagnostics.append(self._field_error("Field is required.", segment, index, field_def.name))

            if field_def.max_length is not None and len(field.value) > field_def.max_length:
                logger.debug(f"{log_line_intro} -> [FAIL] Longer than {field_def.max_length}.")
                diagnostics.append(self._field_error(
                    f"Field value exceeds maximum length of {field_def.max_length}.", segment, index, field_def.name
                ))

        return diagnostics

    def _field_error(self, message: str, segment: Hl7Segment, index: int, field_name: str) -> Diagnostic:
        return Diagnostic(
            severity="error",
            message=message,
            line=segment.line_number,
            segment_name=segment.name,
            field_name=field_name,
            field_index=index,
        )

class Hl7Parser:
    """
    Parses raw HL7 v2.x text into a ParsedMessage plus diagnostics.

    The parser keeps no per-call state, so one instance can be reused for any
    number of sequential or concurrent parse calls.
    """

    def __init__(self, registry: Optional[DefinitionRegistry] = None):
        self.registry = registry or get_default_registry()

    def parse(self, raw_text: str) -> ParseResult:
        diagnostics: List[Diagnostic] = []
        try:
            message = self._parse_message(raw_text, diagnostics)
        except Hl7ParseError as e:
            logger.warning(f"Critical parsing error: {e}")
            diagnostics.append(Diagnostic(severity="critical", message=str(e), line=0))
            return ParseResult(message=None, errors=diagnostics)
        except Exception as e:
            logger.error(f"Critical parsing error: {str(e)}", exc_info=True)
            diagnostics.append(Diagnostic(severity="critical", message=str(e) or "Critical parsing error", line=0))
            return ParseResult(message=None, errors=diagnostics)

        self._log_summary(diagnostics)
        return ParseResult(message=message, errors=diagnostics)

    def _parse_message(self, raw_text: str, diagnostics: List[Diagnostic]) -> ParsedMessage:
        lines = split_lines(raw_text)
        if not lines:
            raise Hl7ParseError("Empty message")

        header_line_number, header_line = lines[0]
        if not header_line.startswith(HEADER_SEGMENT):
            raise Hl7ParseError("Message must start with MSH segment")

        encoding = parse_encoding_characters(header_line)
        logger.debug(
            f"Encoding characters detected: Field='{encoding.field_separator}', Component='{encoding.component_separator}', "
            f"Repetition='{encoding.repetition_separator}', Escape='{encoding.escape_character}', "
            f"Sub-component='{encoding.sub_component_separator}'"
        )

        header = parse_header_segment(header_line, header_line_number, encoding)
        context = ParseContext(
            encoding_characters=encoding,
            version=header.get_value(VERSION_FIELD) or BASELINE_VERSION,
            registry=self.registry,
        )
        validator = SegmentValidator(context)
        logger.info(f"=== PARSING HL7 MESSAGE (version {context.version}, {len(lines)} segments) ===")

        diagnostics.extend(validator.validate(header))
        segments = [header]

        for line_number, line in lines[1:]:
            try:
                segment = parse_segment(line, line_number, context.encoding_characters)
                diagnostics.extend(validator.validate(segment))
                segments.append(segment)
            except Exception as e:
                logger.error(f"Unexpected error parsing line {line_number}: {str(e)}", exc_info=True)
                diagnostics.append(self._line_error(str(e) or "Unknown error", line, line_number))

        return ParsedMessage(
            version=context.version,
            message_type=header.get_value(MESSAGE_TYPE_FIELD) or UNKNOWN,
            control_id=header.get_value(CONTROL_ID_FIELD) or UNKNOWN,
            encoding_characters=encoding,
            segments=segments,
        )

    def _line_error(self, message: str, line: str, line_number: int) -> Diagnostic:
        return Diagnostic(severity="error", message=message, line=line_number, segment_name=line[:3])

    def _log_summary(self, diagnostics: List[Diagnostic]):
        if diagnostics:
            logger.warning("--- HL7 PARSE & VALIDATION SUMMARY: ISSUES FOUND ---")
            logger.warning(f"Total Issues: {len(diagnostics)}")
            for d in diagnostics:
                location = f"{d.segment_name}-{d.field_index}" if d.field_index is not None else (d.segment_name or "MESSAGE")
                logger.warning(f"  - [{d.severity}] Line {d.line}, {location}: {d.message}")
            logger.warning("--- END OF SUMMARY ---")
        else:
            logger.info("--- HL7 PARSE & VALIDATION SUMMARY: SUCCESS ---")
            logger.info("No issues found in the message.")
            logger.info("--- END OF SUMMARY ---")

def parse(raw_text: str, registry: Optional[DefinitionRegistry] = None) -> ParseResult:
    return Hl7Parser(registry).parse(raw_text)
