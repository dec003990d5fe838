import pytest
from typing import Optional

from hl7_diff import compare_fields, compare_hl7_messages
from hl7_models import ParsedMessage
from hl7_parser import Hl7Parser

pytestmark = pytest.mark.unit

MSH_A = "MSH|^~\\&|APP_A|FAC_A|||202301011200||ADT^A01|MSG001|P|2.3"
PID_A = "PID|1||PATID123^^^MRN|DOE^JOHN^A|19900101|M"
PV1_A = "PV1|1|I|WARD1^ROOM1^BED1"
DG1_A = "DG1|1||D123^Primary Diagnosis"
NK1_A = "NK1|1|DOE^JANE^SPOUSE"

PID_B_MODIFIED = "PID|1||PATID123^^^MRN|DOE^JANE^X|19900101|F"
PV1_B_EXTRA_FIELD = "PV1|1|I|WARD1^ROOM1^BED1||||||ADM002"
NK1_B = "NK1|1|SMITH^PETER^SPOUSE"

def parse_message(*lines: str) -> Optional[ParsedMessage]:
    return Hl7Parser().parse("\n".join(lines)).message

def test_identical_messages_are_all_common():
    result = compare_hl7_messages(parse_message(MSH_A, PID_A, PV1_A), parse_message(MSH_A, PID_A, PV1_A))

    assert len(result.segments) == 3
    assert all(s.type == "common" for s in result.segments)
    for segment_diff in result.segments:
        assert all(f.diff_type == "common" for f in segment_diff.field_diffs)
    assert not result.has_differences

def test_same_message_on_both_sides_is_all_common():
    message = parse_message(MSH_A, PID_A, PV1_A, NK1_A, NK1_B)
    result = compare_hl7_messages(message, message)

    assert [s.type for s in result.segments] == ["common"] * 5
    assert all(f.diff_type == "common" for s in result.segments for f in s.field_diffs)
    assert [s.original_index_a for s in result.segments] == [0, 1, 2, 3, 4]
    assert [s.original_index_b for s in result.segments] == [0, 1, 2, 3, 4]

def test_both_missing_gives_empty_result():
    assert compare_hl7_messages(None, None).segments == []

def test_right_missing_reports_all_removed():
    message = parse_message(MSH_A, PID_A, PV1_A)
    result = compare_hl7_messages(message, None)

    assert [s.type for s in result.segments] == ["removed"] * 3
    assert [s.segment_name for s in result.segments] == ["MSH", "PID", "PV1"]
    assert [s.original_index_a for s in result.segments] == [0, 1, 2]
    assert all(s.original_index_b is None and s.field_diffs is None for s in result.segments)
    assert result.segments[1].fields_a == message.segments[1].fields

def test_left_missing_reports_all_added():
    message = parse_message(MSH_A, NK1_B)
    result = compare_hl7_messages(None, message)

    assert [s.type for s in result.segments] == ["added", "added"]
    assert [s.original_index_b for s in result.segments] == [0, 1]
    assert all(s.original_index_a is None and s.field_diffs is None for s in result.segments)
    assert result.segments[1].fields_b == message.segments[1].fields

def test_messages_sharing_only_header():
    result = compare_hl7_messages(parse_message(MSH_A, PID_A, PV1_A), parse_message(MSH_A, NK1_B))

    msh = next(s for s in result.segments if s.segment_name == "MSH")
    assert msh.type == "common"

    pid = next(s for s in result.segments if s.segment_name == "PID")
    assert pid.type == "removed"
    assert pid.original_index_a == 1

    pv1 = next(s for s in result.segments if s.segment_name == "PV1")
    assert pv1.type == "removed"
    assert pv1.original_index_a == 2

    nk1 = next(s for s in result.segments if s.segment_name == "NK1")
    assert nk1.type == "added"
    assert nk1.original_index_b == 1

    # Removal before addition at the same position
    assert [(s.segment_name, s.type) for s in result.segments] == [
        ("MSH", "common"), ("PID", "removed"), ("NK1", "added"), ("PV1", "removed"),
    ]
    assert result.summary() == {"added": 1, "removed": 2, "modified": 0, "common": 1}

def test_single_modified_field():
    result = compare_hl7_messages(
        parse_message(MSH_A, "PID|1||PATID123^^^MRN|DOE^JOHN|19900101"),
        parse_message(MSH_A, "PID|1||PATID999^^^MRN|DOE^JOHN|19900101"),
    )

    pid = result.segments[1]
    assert pid.type == "modified"
    modified = [f for f in pid.field_diffs if f.diff_type != "common"]
    assert len(modified) == 1
    assert modified[0].diff_type == "modified"
    assert modified[0].field_index == 3
    assert modified[0].value_a == "PATID123^^^MRN"
    assert modified[0].value_b == "PATID999^^^MRN"
    assert len(pid.field_diffs) == 6

def test_multiple_modified_fields():
    result = compare_hl7_messages(parse_message(MSH_A, PID_A), parse_message(MSH_A, PID_B_MODIFIED))

    pid = result.segments[1]
    assert pid.type == "modified"
    changed = {f.field_index: f for f in pid.field_diffs if f.diff_type == "modified"}
    assert set(changed) == {4, 6}
    assert changed[4].value_a == "DOE^JOHN^A"
    assert changed[4].value_b == "DOE^JANE^X"
    assert changed[6].value_a == "M"
    assert changed[6].value_b == "F"

def test_extra_trailing_fields_are_added():
    result = compare_hl7_messages(parse_message(MSH_A, PV1_A), parse_message(MSH_A, PV1_B_EXTRA_FIELD))

    pv1 = result.segments[1]
    assert pv1.type == "modified"
    added = [f for f in pv1.field_diffs if f.diff_type == "added"]
    # PV1-4 through PV1-9 exist only on the right, empty ones included
    assert [f.field_index for f in added] == [4, 5, 6, 7, 8, 9]
    assert [f.value_b for f in added] == ["", "", "", "", "", "ADM002"]
    assert all(f.value_a is None for f in added)

def test_missing_trailing_fields_are_removed():
    result = compare_hl7_messages(parse_message(MSH_A, PV1_B_EXTRA_FIELD), parse_message(MSH_A, PV1_A))

    removed = [f for f in result.segments[1].field_diffs if f.diff_type == "removed"]
    assert [f.field_index for f in removed] == [4, 5, 6, 7, 8, 9]
    assert removed[-1].value_a == "ADM002"
    assert all(f.value_b is None for f in removed)

def test_trailing_empty_field_alone_marks_segment_modified():
    result = compare_hl7_messages(parse_message(MSH_A, "PV1|1|I"), parse_message(MSH_A, "PV1|1|I|"))
    pv1 = result.segments[1]
    assert pv1.type == "modified"
    assert pv1.field_diffs[-1].diff_type == "added"
    assert pv1.field_diffs[-1].value_b == ""

def test_repeated_segments_pair_in_order():
    # Swapped NK1 segments are paired by position, not content
    result = compare_hl7_messages(parse_message(MSH_A, NK1_A, NK1_B), parse_message(MSH_A, NK1_B, NK1_A))

    nk1_diffs = [s for s in result.segments if s.segment_name == "NK1"]
    assert [s.type for s in nk1_diffs] == ["modified", "modified"]
    assert [(s.original_index_a, s.original_index_b) for s in nk1_diffs] == [(1, 1), (2, 2)]

def test_first_available_match_is_used():
    result = compare_hl7_messages(parse_message(MSH_A, NK1_A), parse_message(MSH_A, NK1_B, NK1_A))

    nk1_diffs = [s for s in result.segments if s.segment_name == "NK1"]
    assert nk1_diffs[0].type == "modified"
    assert (nk1_diffs[0].original_index_a, nk1_diffs[0].original_index_b) == (1, 1)
    assert nk1_diffs[1].type == "added"
    assert nk1_diffs[1].original_index_b == 2

def test_sort_places_additions_by_right_index():
    result = compare_hl7_messages(
        parse_message(MSH_A, PID_A, DG1_A),
        parse_message(MSH_A, NK1_B, PV1_A, PID_A),
    )

    assert [(s.segment_name, s.type) for s in result.segments] == [
        ("MSH", "common"),
        ("PID", "common"),   # matched, sorted by its A index 1
        ("NK1", "added"),    # B index 1
        ("DG1", "removed"),  # A index 2
        ("PV1", "added"),    # B index 2
    ]

def test_diff_does_not_mutate_inputs():
    msg_a = parse_message(MSH_A, PID_A, PV1_A)
    msg_b = parse_message(MSH_A, PID_B_MODIFIED)
    snapshot_a = msg_a.model_dump()
    snapshot_b = msg_b.model_dump()

    compare_hl7_messages(msg_a, msg_b)

    assert msg_a.model_dump() == snapshot_a
    assert msg_b.model_dump() == snapshot_b

def test_compare_fields_marks_both_values_for_common():
    msg = parse_message(MSH_A, PID_A)
    diffs = compare_fields(msg.segments[1], msg.segments[1])
    assert diffs[0].diff_type == "common"
    assert diffs[0].value_a == diffs[0].value_b == "PID"
