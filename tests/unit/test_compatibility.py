"""Tests for port kind compatibility."""
import pytest

from skillflow.catalog import PortKind
from skillflow.workflow import compatible_inputs, is_compatible
from skillflow.workflow.compatibility import COMPATIBILITY_TABLE


@pytest.mark.parametrize("kind", list(PortKind))
def test_same_kind_is_always_compatible(kind):
    assert is_compatible(kind, kind)


@pytest.mark.parametrize("kind", list(PortKind))
def test_any_is_compatible_both_ways(kind):
    assert is_compatible(PortKind.ANY, kind)
    assert is_compatible(kind, PortKind.ANY)


@pytest.mark.parametrize(
    "output_kind,input_kind",
    [
        ("text", "document"),
        ("code", "text"),
        ("document", "text"),
        ("data", "text"),
        ("presentation", "document"),
        ("analysis", "text"),
        ("analysis", "document"),
    ],
)
def test_table_entries(output_kind, input_kind):
    assert is_compatible(output_kind, input_kind)


@pytest.mark.parametrize(
    "output_kind,input_kind",
    [
        ("image", "text"),
        ("image", "document"),
        ("text", "code"),
        ("document", "analysis"),
        ("data", "code"),
        ("code", "document"),  # code->text->document is not followed
    ],
)
def test_incompatible_pairs(output_kind, input_kind):
    assert not is_compatible(output_kind, input_kind)


def test_compatibility_is_not_transitive():
    """Every allowed pair comes straight from the table, never via a hop."""
    for output_kind in PortKind:
        for input_kind in PortKind:
            expected = (
                output_kind is input_kind
                or PortKind.ANY in (output_kind, input_kind)
                or input_kind in COMPATIBILITY_TABLE.get(output_kind, frozenset())
            )
            assert is_compatible(output_kind, input_kind) is expected


def test_unknown_kind_is_incompatible():
    assert not is_compatible("video", "text")
    assert not is_compatible("text", "video")


def test_compatible_inputs_filters_schema(catalog):
    schema = catalog.get_schema("doc-coauthoring")

    ports = compatible_inputs(PortKind.ANALYSIS, schema)

    # draft (document), style (text), feedback (text)
    assert [p.id for p in ports] == ["draft", "style", "feedback"]
    assert compatible_inputs(PortKind.IMAGE, schema) == []
