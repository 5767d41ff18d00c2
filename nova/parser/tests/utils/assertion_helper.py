"""
Structural comparison of AST nodes that ignores source positions.
"""

from pydantic import BaseModel


def without_spans(node):
    """Reduces an AST to nested (node type, fields) pairs with every `span` dropped."""
    if isinstance(node, BaseModel):
        fields = {name: without_spans(getattr(node, name)) for name in type(node).model_fields if name != "span"}
        return type(node).__name__, fields
    if isinstance(node, list):
        return [without_spans(item) for item in node]
    return node


def assert_asts_equal(actual, expected):
    actual_shape = without_spans(actual)
    expected_shape = without_spans(expected)
    assert actual_shape == expected_shape, f"ASTs differ.\n  actual:   {actual_shape}\n  expected: {expected_shape}"
