from typing import Any, Dict, List

from pydantic import BaseModel, Field


class StepExecuteRequest(BaseModel):
    method: str
    args: List[Any] = Field(default_factory=list)
    params: Dict[str, Any] = Field(default_factory=dict)
