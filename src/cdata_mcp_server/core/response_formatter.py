"""Response envelopes returned for every tool invocation."""

from typing import Any, Dict, Union
from dataclasses import dataclass
import json

from .errors import ErrorKind


@dataclass(frozen=True)
class Success:
    """Successful invocation carrying the result rows."""
    payload: Any

    @property
    def ok(self) -> bool:
        return True

    def to_text(self) -> str:
        """Serialize the payload as pretty-printed JSON."""
        return json.dumps(self.payload, indent=2, default=str)


@dataclass(frozen=True)
class Failure:
    """Failed invocation with an error code and message."""
    code: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    def to_text(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"code": self.code.value, "message": self.message}


ResponseEnvelope = Union[Success, Failure]
