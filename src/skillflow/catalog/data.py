"""Built-in catalog: skills that can be composed into workflows."""

from __future__ import annotations

from typing import Any, Dict, List

SKILLS: List[Dict[str, Any]] = [
    {
        "id": "gsap-animations",
        "name": "GSAP Animations",
        "description": "Create production-ready GSAP animations with ScrollTrigger, "
        "SplitText, and other plugins.",
        "category": "development",
        "tags": ["animation", "gsap", "scrolltrigger", "motion"],
    },
    {
        "id": "mcp-builder",
        "name": "MCP Builder",
        "description": "Build MCP (Model Context Protocol) servers that let LLMs "
        "interact with external services.",
        "category": "development",
        "tags": ["mcp", "servers", "api", "integration"],
    },
    {
        "id": "skill-creator",
        "name": "Skill Creator",
        "description": "Guide for creating effective assistant skills with specialized "
        "knowledge, workflows, and tool integrations.",
        "category": "development",
        "tags": ["skills", "automation"],
    },
    {
        "id": "algorithmic-art",
        "name": "Algorithmic Art",
        "description": "Create algorithmic art using p5.js with seeded randomness and "
        "interactive parameter exploration.",
        "category": "creative",
        "tags": ["p5js", "generative", "art", "creative-coding"],
    },
    {
        "id": "business-panel",
        "name": "Business Panel",
        "description": "Multi-expert business strategy panel. Supports sequential, "
        "debate, and Socratic modes.",
        "category": "business",
        "tags": ["strategy", "analysis", "experts"],
    },
    {
        "id": "frontend-design",
        "name": "Frontend Design",
        "description": "Create distinctive, production-grade frontend interfaces with "
        "high design quality.",
        "category": "development",
        "tags": ["ui", "react", "design", "components"],
    },
    {
        "id": "pdf",
        "name": "PDF Toolkit",
        "description": "Extract text and tables from PDFs, create documents, merge and "
        "split files, and process forms.",
        "category": "documents",
        "tags": ["pdf", "documents", "extraction"],
    },
    {
        "id": "docx",
        "name": "Word Documents",
        "description": "Create and edit documents with tracked changes, comments, "
        "formatting preservation, and text extraction.",
        "category": "documents",
        "tags": ["word", "documents", "office"],
    },
    {
        "id": "pptx",
        "name": "Presentations",
        "description": "Create, edit, and analyze presentations. Work with layouts, "
        "speaker notes, and slide design.",
        "category": "documents",
        "tags": ["powerpoint", "slides", "presentations"],
    },
    {
        "id": "research-assistant",
        "name": "Research Assistant",
        "description": "Conduct deep research with citations and sources. Summarize "
        "papers, compare sources, and create research reports.",
        "category": "productivity",
        "tags": ["research", "analysis", "citations", "knowledge"],
    },
    {
        "id": "doc-coauthoring",
        "name": "Doc Co-authoring",
        "description": "Structured workflow for co-authoring documentation, proposals, "
        "technical specs, and decision docs.",
        "category": "business",
        "tags": ["documentation", "writing", "collaboration"],
    },
]


def _port(id: str, name: str, kind: str, description: str, required: bool = False) -> Dict[str, Any]:
    return {
        "id": id,
        "name": name,
        "type": kind,
        "description": description,
        "required": required,
    }


SCHEMAS: List[Dict[str, Any]] = [
    {
        "skillId": "gsap-animations",
        "inputs": [
            _port("target", "Target Element", "text", "CSS selector or element description", True),
            _port("animation-type", "Animation Type", "text", "Type of animation (scroll, entrance, hover, etc.)"),
            _port("design-specs", "Design Specs", "document", "Design specifications or mockups"),
        ],
        "outputs": [
            _port("animation-code", "Animation Code", "code", "GSAP animation code"),
            _port("implementation-guide", "Implementation Guide", "text", "Instructions for implementing the animation"),
        ],
    },
    {
        "skillId": "mcp-builder",
        "inputs": [
            _port("api-spec", "API Specification", "document", "API documentation or specification", True),
            _port("use-case", "Use Case", "text", "Description of the intended use case"),
        ],
        "outputs": [
            _port("mcp-server", "MCP Server Code", "code", "Complete MCP server implementation"),
            _port("tool-schemas", "Tool Schemas", "data", "JSON schemas for MCP tools"),
        ],
    },
    {
        "skillId": "skill-creator",
        "inputs": [
            _port("domain", "Domain", "text", "The domain or area of expertise", True),
            _port("requirements", "Requirements", "text", "Specific requirements for the skill"),
        ],
        "outputs": [
            _port("skill-definition", "Skill Definition", "document", "Complete skill definition file"),
            _port("trigger-words", "Trigger Words", "text", "Suggested trigger words for the skill"),
        ],
    },
    {
        "skillId": "algorithmic-art",
        "inputs": [
            _port("concept", "Concept", "text", "Art concept or theme", True),
            _port("parameters", "Parameters", "data", "Generation parameters (colors, seed, etc.)"),
        ],
        "outputs": [
            _port("p5-code", "p5.js Code", "code", "Complete p5.js sketch"),
            _port("preview", "Preview Description", "text", "Description of the generated artwork"),
        ],
    },
    {
        "skillId": "business-panel",
        "inputs": [
            _port("question", "Business Question", "text", "Strategic question to analyze", True),
            _port("context", "Business Context", "document", "Background information about the business"),
            _port("mode", "Analysis Mode", "text", "sequential, debate, or socratic"),
        ],
        "outputs": [
            _port("analysis", "Expert Analysis", "analysis", "Multi-perspective strategic analysis"),
            _port("recommendations", "Recommendations", "text", "Actionable recommendations"),
        ],
    },
    {
        "skillId": "frontend-design",
        "inputs": [
            _port("requirements", "UI Requirements", "text", "Description of the UI to create", True),
            _port("design-system", "Design System", "document", "Existing design system or brand guidelines"),
        ],
        "outputs": [
            _port("component-code", "Component Code", "code", "React component implementation"),
            _port("styles", "Styles", "code", "CSS/Tailwind styles"),
        ],
    },
    {
        "skillId": "pdf",
        "inputs": [
            _port("pdf-file", "PDF File", "document", "PDF document to process", True),
            _port("operation", "Operation", "text", "Extract, merge, split, or create"),
        ],
        "outputs": [
            _port("extracted-data", "Extracted Data", "data", "Extracted text, tables, or form data"),
            _port("processed-pdf", "Processed PDF", "document", "Modified or created PDF"),
        ],
    },
    {
        "skillId": "docx",
        "inputs": [
            _port("document", "Word Document", "document", "Word document to process"),
            _port("content", "Content", "text", "Content to add or modify"),
            _port("template", "Template", "document", "Document template to use"),
        ],
        "outputs": [
            _port("output-document", "Output Document", "document", "Created or modified Word document"),
            _port("extracted-text", "Extracted Text", "text", "Text content from the document"),
        ],
    },
    {
        "skillId": "pptx",
        "inputs": [
            _port("content", "Presentation Content", "text", "Content for the presentation", True),
            _port("template", "Template", "document", "Presentation template"),
        ],
        "outputs": [
            _port("presentation", "Presentation", "presentation", "PowerPoint presentation"),
            _port("speaker-notes", "Speaker Notes", "text", "Generated speaker notes"),
        ],
    },
    {
        "skillId": "research-assistant",
        "inputs": [
            _port("topic", "Research Topic", "text", "Topic to research", True),
            _port("depth", "Research Depth", "text", "Surface, moderate, or deep"),
        ],
        "outputs": [
            _port("findings", "Research Findings", "analysis", "Compiled research findings"),
            _port("sources", "Sources", "data", "List of sources and references"),
        ],
    },
    {
        "skillId": "doc-coauthoring",
        "inputs": [
            _port("draft", "Document Draft", "document", "Initial draft or outline"),
            _port("style", "Writing Style", "text", "Desired writing style"),
            _port("feedback", "Feedback", "text", "Feedback to incorporate"),
        ],
        "outputs": [
            _port("revised-document", "Revised Document", "document", "Improved document"),
            _port("suggestions", "Suggestions", "text", "Writing suggestions and improvements"),
        ],
    },
]
