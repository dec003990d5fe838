"""
Built-in HL7 v2.5 segment definitions.

This is the registry's baseline definition set. Field numbering follows the
parser's field indexing: index 0 is the segment ID pseudo-field and, for MSH,
index 1 is the field separator and index 2 the encoding characters.
"""
from hl7_definition_models import DefinitionSet

BASELINE_VERSION = "2.5"


def _segment_id(name: str) -> dict:
    return {
        "name": "Segment ID",
        "description": "Segment identifier",
        "data_type": "ST",
        "max_length": 3,
        "required": True,
        "example": name,
    }


def _set_id(description: str, required: bool = False) -> dict:
    return {
        "name": "Set ID",
        "description": description,
        "data_type": "SI",
        "max_length": 4,
        "required": required,
    }


BASELINE_DEFINITIONS = {
    "version": BASELINE_VERSION,
    "description": "Core HL7 v2.5 segments (MSH, PID, PV1, OBX, NK1)",
    "segments": {
        "MSH": {
            "name": "Message Header",
            "description": "The MSH segment defines the intent, source, destination, and some specifics of the syntax of a message.",
            "purpose": "Contains message control information",
            "fields": {
                0: _segment_id("MSH"),
                1: {"name": "Field Separator", "description": "Field separator character", "data_type": "ST", "max_length": 1, "required": True, "example": "|"},
                2: {"name": "Encoding Characters", "description": "Component separator, repetition separator, escape character, subcomponent separator", "data_type": "ST", "max_length": 4, "required": True, "example": "^~\\&"},
                3: {"name": "Sending Application", "description": "Identifies the sending application", "data_type": "HD", "max_length": 227, "example": "EPIC"},
                4: {"name": "Sending Facility", "description": "Identifies the sending facility", "data_type": "HD", "max_length": 227, "example": "EPICADT"},
                5: {"name": "Receiving Application", "description": "Identifies the receiving application", "data_type": "HD", "max_length": 227, "example": "SMS"},
                6: {"name": "Receiving Facility", "description": "Identifies the receiving facility", "data_type": "HD", "max_length": 227, "example": "SMSADT"},
                7: {"name": "Date/Time of Message", "description": "Date and time message was created", "data_type": "TS", "max_length": 26, "example": "199912271408"},
                8: {"name": "Security", "description": "Security information", "data_type": "ST", "max_length": 40},
                9: {"name": "Message Type", "description": "Message type and trigger event", "data_type": "MSG", "max_length": 15, "required": True, "example": "ADT^A04"},
                10: {"name": "Message Control ID", "description": "Unique message identifier", "data_type": "ST", "max_length": 20, "required": True, "example": "1817457"},
                11: {"name": "Processing ID", "description": "Processing mode", "data_type": "PT", "max_length": 3, "required": True, "example": "D"},
                12: {"name": "Version ID", "description": "HL7 version", "data_type": "VID", "max_length": 60, "required": True, "example": "2.5"},
            },
        },
        "PID": {
            "name": "Patient Identification",
            "description": "The PID segment is used by all applications as the primary means of communicating patient identification information.",
            "purpose": "Contains patient demographic and identification information",
            "fields": {
                0: _segment_id("PID"),
                1: dict(_set_id("Sequence number for multiple PID segments"), example="0001"),
                2: {"name": "Patient ID (External)", "description": "External patient identifier", "data_type": "CX", "max_length": 250},
                3: {"name": "Patient ID (Internal)", "description": "Internal patient identifier list", "data_type": "CX", "max_length": 250, "required": True, "repeatable": True, "example": "0000112234^^^MR^MRN"},
                4: {"name": "Alternate Patient ID", "description": "Alternate patient identifier", "data_type": "CX", "max_length": 250, "repeatable": True},
                5: {"name": "Patient Name", "description": "Patient legal name", "data_type": "XPN", "max_length": 250, "required": True, "repeatable": True, "example": "EVERYMAN^ADAM^A^III"},
                6: {"name": "Mother's Maiden Name", "description": "Mother's maiden name", "data_type": "XPN", "max_length": 250, "repeatable": True},
                7: {"name": "Date/Time of Birth", "description": "Patient date of birth", "data_type": "TS", "max_length": 26, "example": "19610615"},
                8: {"name": "Administrative Sex", "description": "Patient gender", "data_type": "IS", "max_length": 1, "table": "0001", "example": "M"},
                9: {"name": "Patient Alias", "description": "Patient alias names", "data_type": "XPN", "max_length": 250, "repeatable": True},
                10: {"name": "Race", "description": "Patient race", "data_type": "CE", "max_length": 250, "repeatable": True, "table": "0005", "example": "C"},
                11: {"name": "Patient Address", "description": "Patient address", "data_type": "XAD", "max_length": 250, "repeatable": True, "example": "1200 N ELM STREET^^GREENSBORO^NC^27401-1020"},
                12: {"name": "County Code", "description": "County code", "data_type": "IS", "max_length": 4},
                13: {"name": "Phone Number - Home", "description": "Home phone number", "data_type": "XTN", "max_length": 250, "repeatable": True, "example": "(919)379-1212"},
                14: {"name": "Phone Number - Business", "description": "Business phone number", "data_type": "XTN", "max_length": 250, "repeatable": True},
                15: {"name": "Primary Language", "description": "Patient primary language", "data_type": "CE", "max_length": 250, "example": "E"},
            },
        },
        "PV1": {
            "name": "Patient Visit",
            "description": "The PV1 segment is used by Registration/Patient Administration applications to communicate information on an account or visit-specific basis.",
            "purpose": "Contains visit-specific information",
            "fields": {
                0: _segment_id("PV1"),
                1: dict(_set_id("Sequence number"), example="0001"),
                2: {"name": "Patient Class", "description": "Patient class (I=Inpatient, O=Outpatient, etc.)", "data_type": "IS", "max_length": 1, "required": True, "table": "0004", "example": "I"},
                3: {"name": "Assigned Patient Location", "description": "Patient location", "data_type": "PL", "max_length": 80, "example": "2000^2012^01"},
                4: {"name": "Admission Type", "description": "Type of admission", "data_type": "IS", "max_length": 2, "table": "0007"},
                5: {"name": "Preadmit Number", "description": "Preadmission identifier", "data_type": "CX", "max_length": 250},
                6: {"name": "Prior Patient Location", "description": "Previous patient location", "data_type": "PL", "max_length": 80},
                7: {"name": "Attending Doctor", "description": "Attending physician", "data_type": "XCN", "max_length": 250, "repeatable": True, "example": "004777^ATTEND^AARON^A"},
                8: {"name": "Referring Doctor", "description": "Referring physician", "data_type": "XCN", "max_length": 250, "repeatable": True},
                9: {"name": "Consulting Doctor", "description": "Consulting physician", "data_type": "XCN", "max_length": 250, "repeatable": True},
                10: {"name": "Hospital Service", "description": "Hospital service", "data_type": "IS", "max_length": 3, "table": "0069", "example": "SUR"},
            },
        },
        "OBX": {
            "name": "Observation/Result",
            "description": "The OBX segment is used to transmit a single observation or observation fragment.",
            "purpose": "Contains observation results and values",
            "fields": {
                0: _segment_id("OBX"),
                1: _set_id("Sequence number"),
                2: {"name": "Value Type", "description": "Data type of observation value", "data_type": "ID", "max_length": 2, "table": "0125", "example": "NM"},
                3: {"name": "Observation Identifier", "description": "Observation identifier", "data_type": "CE", "max_length": 250, "required": True},
                4: {"name": "Observation Sub-ID", "description": "Observation sub-identifier", "data_type": "ST", "max_length": 20},
                5: {"name": "Observation Value", "description": "Observation value", "data_type": "Varies", "repeatable": True},
                6: {"name": "Units", "description": "Units of measure", "data_type": "CE", "max_length": 250},
                7: {"name": "References Range", "description": "Reference range for numeric values", "data_type": "ST", "max_length": 60},
                8: {"name": "Abnormal Flags", "description": "Abnormal flags", "data_type": "IS", "max_length": 5, "repeatable": True, "table": "0078"},
                9: {"name": "Probability", "description": "Probability of abnormality", "data_type": "NM", "max_length": 5},
                10: {"name": "Nature of Abnormal Test", "description": "Nature of abnormal test", "data_type": "ID", "max_length": 2, "repeatable": True, "table": "0080"},
            },
        },
        "NK1": {
            "name": "Next of Kin/Associated Parties",
            "description": "The NK1 segment contains information about the patient's other related parties.",
            "purpose": "Contains next of kin and emergency contact information",
            "fields": {
                0: _segment_id("NK1"),
                1: dict(_set_id("Sequence number", required=True), example="0001"),
                2: {"name": "Name", "description": "Next of kin name", "data_type": "XPN", "max_length": 250, "repeatable": True, "example": "JONES^BARBARA^K"},
                3: {"name": "Relationship", "description": "Relationship to patient", "data_type": "CE", "max_length": 250, "table": "0063", "example": "10^MOTHER"},
                4: {"name": "Address", "description": "Next of kin address", "data_type": "XAD", "max_length": 250, "repeatable": True},
                5: {"name": "Phone Number", "description": "Phone number", "data_type": "XTN", "max_length": 250, "repeatable": True},
                6: {"name": "Business Phone Number", "description": "Business phone number", "data_type": "XTN", "max_length": 250, "repeatable": True},
                7: {"name": "Contact Role", "description": "Contact role", "data_type": "CE", "max_length": 250, "table": "0131"},
            },
        },
    },
}


def load_baseline_definitions() -> DefinitionSet:
    """Validate the built-in definitions into a DefinitionSet."""
    return DefinitionSet.model_validate(BASELINE_DEFINITIONS)
