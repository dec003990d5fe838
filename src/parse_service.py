import json
import logging
from typing import Any, Dict, Optional

from hl7_parser import Hl7Parser

logger = logging.getLogger(__name__)

class ParseResponse:
    """Container for a parse endpoint response (status code plus JSON-ready body)."""
    def __init__(self, status_code: int, body: Dict[str, Any]):
        self.status_code = status_code
        self.body = body

class Hl7ParseService:
    """Adapter exposing the HL7 parser through a `{ "message": "<raw HL7>" }` request contract."""

    def __init__(self, parser: Optional[Hl7Parser] = None):
        self.parser = parser or Hl7Parser()

    def handle_parse_request(self, body: Any) -> ParseResponse:
        """
        Parse the HL7 message carried by a request body.

        Args:
            body: The request body, either raw JSON (str/bytes) or an already decoded mapping

        Returns:
            ParseResponse with 200 and `{parsedMessage, errors}`, 400 for a bad request
            or 500 for an unexpected failure
        """
        try:
            if isinstance(body, (str, bytes, bytearray)):
                try:
                    body = json.loads(body)
                except ValueError:
                    return ParseResponse(400, {"error": "Invalid JSON in request body."})

            raw_message = body.get("message") if isinstance(body, dict) else None
            if not raw_message or not isinstance(raw_message, str):
                return ParseResponse(400, {"error": "HL7 message is required and must be a string."})

            logger.info(f"Parsing HL7 message via service ({len(raw_message)} characters)")
            result = self.parser.parse(raw_message)

            return ParseResponse(200, {
                "parsedMessage": result.message.model_dump(mode="json") if result.message else None,
                "errors": [error.model_dump(mode="json") for error in result.errors],
            })

        except Exception as e:
            logger.error(f"Error parsing HL7 message via service: {e}", exc_info=True)
            return ParseResponse(500, {"error": str(e) or "Internal server error"})
