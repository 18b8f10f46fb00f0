"""
Skill Catalog - read-only lookup of skill I/O schemas and metadata.

The workflow engine never mutates the catalog; it only asks for the schema
of the skill a node points at.

Usage:
    catalog = SkillCatalog.default()
    schema = catalog.get_schema("research-assistant")

    # Or load a custom catalog
    catalog = SkillCatalog.from_file("catalog.yaml")
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml
from pydantic import ValidationError

from skillflow.errors import CatalogLoadError, UnknownSkillError

from . import data
from .models import SkillInfo, SkillIOSchema


logger = logging.getLogger(__name__)


class SkillCatalog:
    """
    Registry of skills available to workflows.

    Holds one SkillIOSchema per composable skill and optional display
    metadata. Skills without metadata fall back to their id as name.
    """

    def __init__(
        self,
        schemas: Iterable[SkillIOSchema] = (),
        skills: Iterable[SkillInfo] = (),
    ):
        self._schemas: Dict[str, SkillIOSchema] = {}
        self._skills: Dict[str, SkillInfo] = {}
        for schema in schemas:
            self.register_schema(schema)
        for skill in skills:
            self._skills[skill.id] = skill

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "SkillCatalog":
        """
        Build a catalog from a JSON-shaped dict.

        Expected format: {"skills": [...], "schemas": [...]}
        """
        schemas = [SkillIOSchema.model_validate(s) for s in payload.get("schemas", [])]
        skills = [SkillInfo.model_validate(s) for s in payload.get("skills", [])]
        return cls(schemas=schemas, skills=skills)

    @classmethod
    def from_file(cls, path: str | Path) -> "SkillCatalog":
        """Load a catalog from a YAML or JSON file."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
            if path.suffix.lower() == ".json":
                payload = json.loads(text)
            else:
                payload = yaml.safe_load(text) or {}
            if not isinstance(payload, dict):
                raise CatalogLoadError(f"Catalog {path} must be a mapping")
            catalog = cls.from_dict(payload)
        except (OSError, json.JSONDecodeError, yaml.YAMLError, ValidationError) as e:
            raise CatalogLoadError(f"Cannot load catalog {path}: {e}") from e
        logger.info(f"Loaded catalog from {path} with {len(catalog)} schemas")
        return catalog

    @classmethod
    def default(cls) -> "SkillCatalog":
        """Catalog with the built-in composable skills."""
        return cls.from_dict({"skills": data.SKILLS, "schemas": data.SCHEMAS})

    def register_schema(self, schema: SkillIOSchema) -> None:
        """Add or replace the I/O schema of a skill."""
        self._schemas[schema.skill_id] = schema
        logger.debug(f"Registered schema: {schema.skill_id}")

    def get_schema(self, skill_id: str) -> Optional[SkillIOSchema]:
        """Get I/O schema for a skill, or None when unknown."""
        return self._schemas.get(skill_id)

    def require_schema(self, skill_id: str) -> SkillIOSchema:
        """Get I/O schema for a skill or raise UnknownSkillError."""
        schema = self._schemas.get(skill_id)
        if schema is None:
            raise UnknownSkillError(skill_id)
        return schema

    def get_skill(self, skill_id: str) -> SkillInfo:
        """Get display metadata, synthesizing a minimal record if absent."""
        info = self._skills.get(skill_id)
        if info is None:
            return SkillInfo(id=skill_id, name=skill_id)
        return info

    def list_schemas(self) -> List[SkillIOSchema]:
        return list(self._schemas.values())

    def list_skills(self) -> List[SkillInfo]:
        """List metadata for every skill that has a schema."""
        return [self.get_skill(skill_id) for skill_id in self._schemas]

    def __contains__(self, skill_id: object) -> bool:
        return skill_id in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)


__all__ = ["SkillCatalog"]
