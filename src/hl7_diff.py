import logging
import math
from typing import List, Optional

from hl7_models import DiffResult, FieldDiff, Hl7Segment, ParsedMessage, SegmentDiff

logger = logging.getLogger(__name__)

def compare_fields(segment_a: Hl7Segment, segment_b: Hl7Segment) -> List[FieldDiff]:
    """Compare two matched segments position by position, including trailing extra fields."""
    field_diffs: List[FieldDiff] = []
    for i in range(max(len(segment_a.fields), len(segment_b.fields))):
        field_a = segment_a.get_field(i)
        field_b = segment_b.get_field(i)

        if field_a is not None and field_b is not None:
            diff_type = "common" if field_a.value == field_b.value else "modified"
            field_diffs.append(FieldDiff(field_index=i, diff_type=diff_type, value_a=field_a.value, value_b=field_b.value))
        elif field_a is not None:
            field_diffs.append(FieldDiff(field_index=i, diff_type="removed", value_a=field_a.value))
        else:
            field_diffs.append(FieldDiff(field_index=i, diff_type="added", value_b=field_b.value))
    return field_diffs

def _sort_key(segment_diff: SegmentDiff):
    if segment_diff.original_index_a is not None:
        position = segment_diff.original_index_a
    elif segment_diff.original_index_b is not None:
        position = segment_diff.original_index_b
    else:
        position = math.inf
    # At the same position a removal is listed before an addition.
    return position, 1 if segment_diff.type == "added" else 0

def _removed(segment: Hl7Segment, index: int) -> SegmentDiff:
    return SegmentDiff(segment_name=segment.name, type="removed", fields_a=segment.fields, original_index_a=index)

def _added(segment: Hl7Segment, index: int) -> SegmentDiff:
    return SegmentDiff(segment_name=segment.name, type="added", fields_b=segment.fields, original_index_b=index)

def compare_hl7_messages(msg_a: Optional[ParsedMessage], msg_b: Optional[ParsedMessage]) -> DiffResult:
    """
    Compare two parsed HL7 messages segment by segment.

    Each segment of A is paired with the first not-yet-matched segment of B
    with the same name; no identifier fields are consulted. Repeated segments
    are therefore paired strictly in the order each message presents them.
    A missing message (None) makes every segment of the other side added or
    removed.
    """
    if msg_a is None or msg_b is None:
        segments: List[SegmentDiff] = []
        if msg_a is not None:
            segments.extend(_removed(seg, i) for i, seg in enumerate(msg_a.segments))
        if msg_b is not None:
            segments.extend(_added(seg, i) for i, seg in enumerate(msg_b.segments))
        logger.debug(f"Comparing against a missing message: {len(segments)} one-sided segment diffs.")
        return DiffResult(segments=segments)

    logger.debug(f"Comparing messages {msg_a.control_id} ({len(msg_a.segments)} segments) and {msg_b.control_id} ({len(msg_b.segments)} segments)")

    matched_b = [False] * len(msg_b.segments)
    segment_diffs: List[SegmentDiff] = []

    for index_a, seg_a in enumerate(msg_a.segments):
        index_b = next(
            (j for j, seg_b in enumerate(msg_b.segments) if not matched_b[j] and seg_b.name == seg_a.name),
            None,
        )
        if index_b is None:
            logger.debug(f"  - {seg_a.name}[A{index_a}] has no counterpart -> removed")
            segment_diffs.append(_removed(seg_a, index_a))
            continue

        matched_b[index_b] = True
        seg_b = msg_b.segments[index_b]
        field_diffs = compare_fields(seg_a, seg_b)
        segment_type = "modified" if any(fd.diff_type != "common" for fd in field_diffs) else "common"
        logger.debug(f"  - {seg_a.name}[A{index_a}] matched {seg_b.name}[B{index_b}] -> {segment_type}")

        segment_diffs.append(SegmentDiff(
            segment_name=seg_a.name,
            type=segment_type,
            fields_a=seg_a.fields,
            fields_b=seg_b.fields,
            field_diffs=field_diffs,
            original_index_a=index_a,
            original_index_b=index_b,
        ))

    for index_b, seg_b in enumerate(msg_b.segments):
        if not matched_b[index_b]:
            logger.debug(f"  - {seg_b.name}[B{index_b}] has no counterpart -> added")
            segment_diffs.append(_added(seg_b, index_b))

    segment_diffs.sort(key=_sort_key)
    result = DiffResult(segments=segment_diffs)
    logger.info(f"Diff complete: {result.summary()}")
    return result
