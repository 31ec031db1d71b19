"""
Models for entries of the ``mounts`` list of a runtime spec.
"""
from typing import Any, Dict, List
from pydantic import BaseModel, Field


class MountDescriptor(BaseModel):
    """
    A single bind mount as it appears in an OCI runtime spec.
    """
    destination: str
    type: str = "bind"
    source: str
    options: List[str] = Field(default_factory=lambda: ["rbind", "rw"])

    def to_spec(self) -> Dict[str, Any]:
        return self.model_dump()
