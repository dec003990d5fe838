import csv
import io
import json
import logging
from datetime import datetime, timezone
from typing import Optional

from hl7_models import ParsedMessage

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("json", "csv", "txt")

def export_json(message: ParsedMessage, raw_message: Optional[str] = None, include_raw: bool = True) -> str:
    document = {}
    if include_raw and raw_message is not None:
        document["rawMessage"] = raw_message
    document["parsedMessage"] = message.model_dump(mode="json")
    document["exportedAt"] = datetime.now(timezone.utc).isoformat()
    return json.dumps(document, indent=2)

def export_csv(message: ParsedMessage) -> str:
    """One row per field, labelled NAME.index; the segment-name pseudo-field is not a row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(["Segment", "Field", "Value"])
    for segment in message.segments:
        for index, field in enumerate(segment.fields):
            if index == 0: continue
            writer.writerow([segment.name, f"{segment.name}.{index}", field.value])
    return buffer.getvalue()

def export_text(message: ParsedMessage, raw_message: Optional[str] = None, include_raw: bool = True) -> str:
    if include_raw and raw_message is not None:
        return raw_message
    return "\n".join(segment.raw for segment in message.segments)

def export_message(fmt: str, message: ParsedMessage, raw_message: Optional[str] = None, include_raw: bool = True) -> str:
    logger.debug(f"Exporting message {message.control_id} as {fmt}")
    if fmt == "json":
        return export_json(message, raw_message, include_raw)
    if fmt == "csv":
        return export_csv(message)
    if fmt == "txt":
        return export_text(message, raw_message, include_raw)
    raise ValueError(f"Unsupported export format: {fmt}. Expected one of: {', '.join(EXPORT_FORMATS)}")
