"""Sample workflows shipped with the catalog."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .models import Workflow

_TEMPLATES: List[Dict[str, Any]] = [
    {
        "id": "research-report",
        "name": "Research Report Generator",
        "description": "Research a topic and turn the findings into a report document",
        "nodes": [
            {"id": "node-1", "skillId": "research-assistant", "position": {"x": 100, "y": 200}},
            {"id": "node-2", "skillId": "doc-coauthoring", "position": {"x": 400, "y": 200}},
            {"id": "node-3", "skillId": "docx", "position": {"x": 700, "y": 200}},
        ],
        "connections": [
            {"id": "conn-1", "sourceNodeId": "node-1", "sourceOutputId": "findings",
             "targetNodeId": "node-2", "targetInputId": "draft"},
            {"id": "conn-2", "sourceNodeId": "node-2", "sourceOutputId": "revised-document",
             "targetNodeId": "node-3", "targetInputId": "content"},
        ],
        "createdAt": "2026-01-15",
        "updatedAt": "2026-01-15",
        "author": "skillflow",
        "isPublic": True,
        "tags": ["research", "documents", "automation"],
    },
    {
        "id": "business-presentation",
        "name": "Business Strategy Presentation",
        "description": "Analyze a business question and present the findings as slides",
        "nodes": [
            {"id": "node-1", "skillId": "business-panel", "position": {"x": 100, "y": 200}},
            {"id": "node-2", "skillId": "pptx", "position": {"x": 400, "y": 200}},
        ],
        "connections": [
            {"id": "conn-1", "sourceNodeId": "node-1", "sourceOutputId": "analysis",
             "targetNodeId": "node-2", "targetInputId": "content"},
        ],
        "createdAt": "2026-01-10",
        "updatedAt": "2026-01-10",
        "author": "skillflow",
        "isPublic": True,
        "tags": ["business", "presentations", "strategy"],
    },
    {
        "id": "animated-landing",
        "name": "Animated Landing Page",
        "description": "Design a landing page and animate it with GSAP",
        "nodes": [
            {"id": "node-1", "skillId": "frontend-design", "position": {"x": 100, "y": 200}},
            {"id": "node-2", "skillId": "gsap-animations", "position": {"x": 400, "y": 200}},
        ],
        "connections": [
            {"id": "conn-1", "sourceNodeId": "node-1", "sourceOutputId": "component-code",
             "targetNodeId": "node-2", "targetInputId": "target"},
        ],
        "createdAt": "2026-01-05",
        "updatedAt": "2026-01-05",
        "author": "skillflow",
        "isPublic": True,
        "tags": ["development", "animation", "ui"],
    },
    {
        "id": "generative-art-skill",
        "name": "Custom Art Skill Creator",
        "description": "Create a new skill for generating algorithmic art in a specific style",
        "nodes": [
            {"id": "node-1", "skillId": "algorithmic-art", "position": {"x": 100, "y": 200}},
            {"id": "node-2", "skillId": "skill-creator", "position": {"x": 400, "y": 200}},
        ],
        "connections": [
            {"id": "conn-1", "sourceNodeId": "node-1", "sourceOutputId": "p5-code",
             "targetNodeId": "node-2", "targetInputId": "requirements"},
        ],
        "createdAt": "2026-01-01",
        "updatedAt": "2026-01-01",
        "author": "skillflow",
        "isPublic": True,
        "tags": ["creative", "skills", "art"],
    },
]


def list_templates() -> List[Workflow]:
    """Fresh copies of all workflow templates."""
    return [Workflow.model_validate(t) for t in _TEMPLATES]


def get_template(template_id: str) -> Optional[Workflow]:
    """Fresh copy of one template, or None."""
    for template in _TEMPLATES:
        if template["id"] == template_id:
            return Workflow.model_validate(template)
    return None


__all__ = ["get_template", "list_templates"]
