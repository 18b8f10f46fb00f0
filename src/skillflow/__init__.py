"""
SkillFlow - compose catalog skills into typed workflows and run them.

Subpackages:
- catalog: skill I/O schemas and metadata
- workflow: graph model, editor, validation, layout, serialization
- runtime: execution scheduler and AI backends
- usage: free-run quota gate and its stores
- api / cli: HTTP and command-line surfaces
"""

__version__ = "0.1.0"
