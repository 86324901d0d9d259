# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Deterministic execution ordering for hooks with before/after constraints.

Hooks are placed in an arena of integer indices that follows registry order.
Edges ``a -> b`` exist when ``b`` is listed in ``a.before`` or ``a`` is listed
in ``b.after``; references to hooks outside the arena never produce an edge.
Kahn's algorithm always emits the smallest ready index so hooks without a
mutual constraint keep their registry order.
"""

from __future__ import annotations

import heapq
from collections.abc import Sequence
from dataclasses import dataclass

from .errors import CycleError
from .models import HookDefinition


@dataclass(frozen=True, slots=True)
class HookGraph:
    """Index arena describing ordering constraints among a set of hooks."""

    ids: tuple[str, ...]
    successors: tuple[tuple[int, ...], ...]

    @classmethod
    def build(cls, hooks: Sequence[HookDefinition]) -> HookGraph:
        """Return the constraint graph for ``hooks``.

        Raises:
            ValueError: When ``hooks`` contains the same id twice.
        """

        index: dict[str, int] = {}
        for position, hook in enumerate(hooks):
            if hook.id in index:
                raise ValueError(f"hook {hook.id!r} supplied more than once")
            index[hook.id] = position

        edges: list[set[int]] = [set() for _ in hooks]
        for position, hook in enumerate(hooks):
            for target in hook.before:
                if target in index:
                    edges[position].add(index[target])
            for source in hook.after:
                if source in index:
                    edges[index[source]].add(position)
        return cls(
            ids=tuple(hook.id for hook in hooks),
            successors=tuple(tuple(sorted(targets)) for targets in edges),
        )

    def edges(self) -> list[tuple[str, str]]:
        """Return constraint edges as ``(runs_first, runs_later)`` id pairs."""

        return [(self.ids[src], self.ids[dst]) for src, targets in enumerate(self.successors) for dst in targets]

    def order(self) -> tuple[str, ...]:
        """Return ids in a constraint-respecting, registry-stable order.

        Raises:
            CycleError: When the constraints are cyclic; no partial order is returned.
        """

        indegree = [0] * len(self.ids)
        for targets in self.successors:
            for dst in targets:
                indegree[dst] += 1

        ready = [node for node, degree in enumerate(indegree) if degree == 0]
        heapq.heapify(ready)
        emitted: list[int] = []
        while ready:
            node = heapq.heappop(ready)
            emitted.append(node)
            for dst in self.successors[node]:
                indegree[dst] -= 1
                if indegree[dst] == 0:
                    heapq.heappush(ready, dst)

        if len(emitted) != len(self.ids):
            remaining = sorted(set(range(len(self.ids))) - set(emitted))
            raise CycleError(self.ids[node] for node in self._cyclic_nodes(remaining))
        return tuple(self.ids[node] for node in emitted)

    def _cyclic_nodes(self, candidates: Sequence[int]) -> list[int]:
        """Return the nodes of ``candidates`` that lie on a cycle, in index order.

        Uses Tarjan's strongly connected components restricted to ``candidates``;
        a node is cyclic when its component has more than one member or it has
        a self-loop.
        """

        allowed = set(candidates)
        counter = 0
        indices: dict[int, int] = {}
        lowlink: dict[int, int] = {}
        stack: list[int] = []
        on_stack: set[int] = set()
        cyclic: set[int] = set()

        for root in candidates:
            if root in indices:
                continue
            # Iterative DFS: frames hold (node, next successor position).
            work: list[tuple[int, int]] = [(root, 0)]
            indices[root] = lowlink[root] = counter
            counter += 1
            stack.append(root)
            on_stack.add(root)
            while work:
                node, cursor = work[-1]
                targets = [dst for dst in self.successors[node] if dst in allowed]
                if cursor < len(targets):
                    work[-1] = (node, cursor + 1)
                    dst = targets[cursor]
                    if dst not in indices:
                        indices[dst] = lowlink[dst] = counter
                        counter += 1
                        stack.append(dst)
                        on_stack.add(dst)
                        work.append((dst, 0))
                    elif dst in on_stack:
                        lowlink[node] = min(lowlink[node], indices[dst])
                    continue
                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[node])
                if lowlink[node] == indices[node]:
                    component: list[int] = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component.append(member)
                        if member == node:
                            break
                    if len(component) > 1 or node in self.successors[node]:
                        cyclic.update(component)
        return sorted(cyclic)


def build_graph(hooks: Sequence[HookDefinition]) -> HookGraph:
    """Return the constraint graph for ``hooks`` without ordering it."""

    return HookGraph.build(hooks)


def order_hooks(hooks: Sequence[HookDefinition]) -> tuple[str, ...]:
    """Return the execution order for ``hooks``.

    Args:
        hooks: Enabled hooks in registry order.

    Returns:
        tuple[str, ...]: Every hook id exactly once, honouring before/after.

    Raises:
        CycleError: When the constraints are cyclic.
    """

    return build_graph(hooks).order()


def sort_hooks(hooks: Sequence[HookDefinition]) -> tuple[HookDefinition, ...]:
    """Return ``hooks`` reordered according to :func:`order_hooks`."""

    by_id = {hook.id: hook for hook in hooks}
    return tuple(by_id[hook_id] for hook_id in order_hooks(hooks))


__all__ = ["HookGraph", "build_graph", "order_hooks", "sort_hooks"]
