"""
Base class for structured agent results
"""
from typing import Any, ClassVar, Dict

from pydantic import BaseModel, ConfigDict, model_validator


class AgentResultModel(BaseModel):
    """
    A typed result produced by one of the dispute agents

    Results are immutable and always fully validated. Each subclass names the
    field that defines its presence; a payload where that field is missing or
    blank does not validate.
    """
    model_config = ConfigDict(frozen=True, extra='ignore')

    defining_field: ClassVar[str] = ''

    @model_validator(mode='after')
    def _require_defining_field(self):
        value = getattr(self, self.defining_field, None)
        if isinstance(value, str):
            value = value.strip()
        if not value:
            raise ValueError(f"{type(self).__name__}.{self.defining_field} must be non-empty")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode='json')
