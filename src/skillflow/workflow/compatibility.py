"""
Port compatibility - which output kinds may feed which input kinds.

Compatibility is defined from the producer's kind to the consumer's kind.
The table is asymmetric and is never closed transitively.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Union

from skillflow.catalog.models import PortKind, SkillIOSchema, SkillPort


KindLike = Union[PortKind, str]

# Producer kind -> consumer kinds it may feed besides itself and ``any``.
COMPATIBILITY_TABLE: Dict[PortKind, FrozenSet[PortKind]] = {
    PortKind.TEXT: frozenset({PortKind.DOCUMENT}),
    PortKind.CODE: frozenset({PortKind.TEXT}),
    PortKind.DOCUMENT: frozenset({PortKind.TEXT}),
    PortKind.DATA: frozenset({PortKind.TEXT}),
    PortKind.IMAGE: frozenset(),
    PortKind.PRESENTATION: frozenset({PortKind.DOCUMENT}),
    PortKind.ANALYSIS: frozenset({PortKind.TEXT, PortKind.DOCUMENT}),
}


def is_compatible(output_kind: KindLike, input_kind: KindLike) -> bool:
    """
    Decide whether an output of one kind may be connected to an input.

    Args:
        output_kind: Kind of the producing port
        input_kind: Kind of the consuming port

    Returns:
        True if the connection is legal
    """
    try:
        output_kind = PortKind(output_kind)
        input_kind = PortKind(input_kind)
    except ValueError:
        return False

    if output_kind is PortKind.ANY or input_kind is PortKind.ANY:
        return True
    if output_kind is input_kind:
        return True
    return input_kind in COMPATIBILITY_TABLE.get(output_kind, frozenset())


def compatible_inputs(output_kind: KindLike, schema: SkillIOSchema) -> List[SkillPort]:
    """Inputs of a skill that a pending connection could be dropped on."""
    return [port for port in schema.inputs if is_compatible(output_kind, port.kind)]


__all__ = ["COMPATIBILITY_TABLE", "compatible_inputs", "is_compatible"]
