"""
Skill Catalog - composable skills and their typed I/O ports.

This package provides:
- PortKind / SkillPort / SkillIOSchema: typed port definitions
- SkillInfo: display metadata
- SkillCatalog: read-only lookup used by the workflow engine
"""

from .models import PortKind, SkillInfo, SkillIOSchema, SkillPort
from .registry import SkillCatalog

__all__ = [
    "PortKind",
    "SkillInfo",
    "SkillIOSchema",
    "SkillPort",
    "SkillCatalog",
]
