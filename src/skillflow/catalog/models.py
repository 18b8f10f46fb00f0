"""
Catalog models - skill I/O schemas and display metadata.

These are immutable reference data; workflows only point at them by id.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PortKind(str, Enum):
    """Coarse data-type tag governing connection legality."""
    TEXT = "text"
    CODE = "code"
    DOCUMENT = "document"
    DATA = "data"
    IMAGE = "image"
    PRESENTATION = "presentation"
    ANALYSIS = "analysis"
    ANY = "any"


class SkillPort(BaseModel):
    """
    A named input or output slot of a skill.

    Example: {"id": "findings", "name": "Research Findings", "type": "analysis"}
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Port id, unique per direction within a skill")
    name: str = Field(..., description="Display name")
    kind: PortKind = Field(..., alias="type", description="Port data kind")
    description: str = Field("", description="What the port carries")
    required: bool = Field(False, description="Must be connected or supplied")


class SkillIOSchema(BaseModel):
    """Ordered inputs and outputs of one skill."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    skill_id: str = Field(..., alias="skillId")
    inputs: List[SkillPort] = Field(default_factory=list)
    outputs: List[SkillPort] = Field(default_factory=list)

    def get_input(self, input_id: str) -> Optional[SkillPort]:
        """Get input port by id."""
        for port in self.inputs:
            if port.id == input_id:
                return port
        return None

    def get_output(self, output_id: str) -> Optional[SkillPort]:
        """Get output port by id."""
        for port in self.outputs:
            if port.id == output_id:
                return port
        return None

    @property
    def required_inputs(self) -> List[SkillPort]:
        return [port for port in self.inputs if port.required]


class SkillInfo(BaseModel):
    """Display metadata for a catalog skill."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    description: str = ""
    category: str = "general"
    tags: List[str] = Field(default_factory=list)


__all__ = [
    "PortKind",
    "SkillPort",
    "SkillIOSchema",
    "SkillInfo",
]
