"""Tests for parameter composition."""

from reqkit.core.builder import build_request
from reqkit.core.compose import ParamBuilder, compose, either, flatten, when
from reqkit.ports.http import RequestDefinition
from reqkit.ports.params import Body, Combined, Empty, Header, Timeout

__all__ = []


def headers_of(*nodes) -> dict[str, str]:
    """Build a request from nodes and return its headers."""
    request, _ = build_request(RequestDefinition("GET", "http://test", compose(*nodes)))
    return request.headers


def test_compose_without_nodes_is_empty() -> None:
    """Composing nothing should yield Empty."""
    assert compose() == Empty()


def test_compose_single_node_is_not_wrapped() -> None:
    """A single node should be returned unchanged."""
    header = Header("Accept", "text/plain")

    assert compose(header) is header


def test_compose_many_nodes_preserves_order() -> None:
    """Two or more nodes should become a Combined node in input order."""
    a, b, c = Header("A", "1"), Body(b"x"), Timeout(3)

    assert compose(a, b, c) == Combined(children=(a, b, c))


def test_headers_applied_in_order() -> None:
    """Distinct header keys should all be present, in composition order."""
    nodes = [Header(f"X-{i}", str(i)) for i in range(5)]

    headers = headers_of(*nodes)

    assert list(headers.items()) == [(f"X-{i}", str(i)) for i in range(5)]


def test_duplicate_header_last_write_wins() -> None:
    """The last node with a given key should determine the value."""
    headers = headers_of(
        Header("Accept", "text/html"),
        Header("X-Other", "1"),
        Header("Accept", "application/json"),
    )

    assert headers == {"Accept": "application/json", "X-Other": "1"}


def test_nested_combined_flattens_depth_first() -> None:
    """Nested Combined nodes should apply depth-first, left to right."""
    tree = compose(
        Header("K", "outer-1"),
        compose(Header("K", "inner-1"), compose(Header("K", "inner-2"), Empty())),
        Header("L", "last"),
    )

    leaves = list(flatten(tree))

    assert leaves == [
        Header("K", "outer-1"),
        Header("K", "inner-1"),
        Header("K", "inner-2"),
        Header("L", "last"),
    ]
    assert headers_of(tree) == {"K": "inner-2", "L": "last"}


def test_when_false_contributes_nothing() -> None:
    """A false condition should leave no trace of the guarded node."""
    headers = headers_of(Header("A", "1"), when(False, Header("B", "2")), Header("C", "3"))

    assert headers == {"A": "1", "C": "3"}


def test_when_true_keeps_node() -> None:
    """A true condition should yield the node itself."""
    node = Header("B", "2")

    assert when(True, node) is node


def test_either_keeps_exactly_one_branch() -> None:
    """Either should keep only the chosen branch."""
    first, second = Header("Branch", "first"), Header("Other", "second")

    assert headers_of(either(True, first, second)) == {"Branch": "first"}
    assert headers_of(either(False, first, second)) == {"Other": "second"}


def test_builder_either_omits_unchosen_branch() -> None:
    """The builder should append the chosen branch only, without padding."""
    first, second = Header("A", "1"), Header("B", "2")

    built = ParamBuilder().add(Header("X", "0")).add_either(False, first, second).build()

    assert built == Combined(children=(Header("X", "0"), second))


def test_builder_add_if_false_appends_empty() -> None:
    """A false add_if should keep sibling order with an Empty placeholder."""
    built = ParamBuilder().add(Header("A", "1")).add_if(False, Header("B", "2")).add(Header("C", "3")).build()

    assert built == Combined(children=(Header("A", "1"), Empty(), Header("C", "3")))
    assert headers_of(built) == {"A": "1", "C": "3"}


def test_builder_single_node_not_wrapped() -> None:
    """A builder with one node should return it unchanged."""
    node = Header("A", "1")

    assert ParamBuilder().add(node).build() is node
