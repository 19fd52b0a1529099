"""Composition of parameter nodes into a single tree."""

from __future__ import annotations

from collections.abc import Iterator

from reqkit.ports.params import Combined, Empty, ParamNode

__all__ = ["ParamBuilder", "compose", "either", "flatten", "when"]


def compose(*nodes: ParamNode) -> ParamNode:
    """Combine ordered nodes into one.

    Args:
        *nodes: Nodes in application order.

    Returns:
        ``Empty`` for no nodes, the node itself for one node, otherwise a
        ``Combined`` node preserving the given order.
    """
    if not nodes:
        return Empty()
    if len(nodes) == 1:
        return nodes[0]
    return Combined(children=tuple(nodes))


def when(condition: bool, node: ParamNode) -> ParamNode:
    """Return ``node`` if ``condition`` holds, ``Empty`` otherwise."""
    return node if condition else Empty()


def either(condition: bool, first: ParamNode, second: ParamNode) -> ParamNode:
    """Return ``first`` if ``condition`` holds, ``second`` otherwise."""
    return first if condition else second


def flatten(node: ParamNode) -> Iterator[ParamNode]:
    """Yield the leaves of ``node`` depth-first, left to right.

    ``Empty`` nodes are skipped; application order is exactly this order.
    """
    if isinstance(node, Combined):
        for child in node.children:
            yield from flatten(child)
    elif not isinstance(node, Empty):
        yield node


class ParamBuilder:
    """Expression builder over :func:`compose`.

    Example:
        params = (
            ParamBuilder()
            .add(Header.accept("application/json"))
            .add_if(token is not None, Header.authorization(f"Bearer {token}"))
            .add_either(use_json, Body.json(payload), Body.text(text))
            .build()
        )
    """

    def __init__(self) -> None:
        self._nodes: list[ParamNode] = []

    def add(self, *nodes: ParamNode) -> ParamBuilder:
        self._nodes.extend(nodes)
        return self

    def add_if(self, condition: bool, node: ParamNode) -> ParamBuilder:
        """Append ``node``, or ``Empty`` in its place when ``condition`` is false."""
        self._nodes.append(when(condition, node))
        return self

    def add_either(self, condition: bool, first: ParamNode, second: ParamNode) -> ParamBuilder:
        """Append only the branch selected by ``condition``."""
        self._nodes.append(either(condition, first, second))
        return self

    def build(self) -> ParamNode:
        return compose(*self._nodes)
