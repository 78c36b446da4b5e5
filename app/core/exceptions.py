from typing import Any, Dict, Optional


class ValidationError(ValueError):
    """Raised when an input record breaks one of its invariants."""

    def __init__(
        self,
        record_type: str,
        field: str,
        message: str,
        record_id: Optional[str] = None,
    ) -> None:
        self.record_type = record_type
        self.field = field
        self.message = message
        self.record_id = record_id
        super().__init__(f"{record_type} {record_id or '<unknown>'}: field '{field}' {message}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "record_type": self.record_type,
            "record_id": self.record_id,
            "field": self.field,
            "message": self.message,
        }
