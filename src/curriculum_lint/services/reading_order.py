"""Prerequisite graph and suggested reading order."""

import heapq
from typing import Dict, List, Set, Tuple

from curriculum_lint.markdown import Curriculum
from curriculum_lint.services.exceptions import PrerequisiteCycleError
from curriculum_lint.services.link_resolver import LinkResolver


def prerequisite_graph(curriculum: Curriculum) -> Dict[str, Set[str]]:
    """Map each lesson to the lessons it lists as prerequisites.

    Prerequisites that do not resolve to a lesson are left out.
    """
    resolver = LinkResolver(curriculum)
    graph: Dict[str, Set[str]] = {}
    for path, lesson in curriculum.lessons.items():
        graph[path] = set()
        for link in lesson.prerequisites:
            resolution = resolver.resolve(lesson, link)
            target = resolution.target
            if target and target != path and target in curriculum.lessons:
                graph[path].add(target)
    return graph


def find_cycles(curriculum: Curriculum) -> List[List[str]]:
    """Find prerequisite cycles, each as a path ending where it started."""
    graph = prerequisite_graph(curriculum)
    cycles: List[List[str]] = []
    seen_cycles: Set[frozenset] = set()

    # 0 = unvisited, 1 = on stack, 2 = done
    state: Dict[str, int] = {path: 0 for path in graph}

    def visit(node: str, stack: List[str]) -> None:
        state[node] = 1
        stack.append(node)
        for dep in sorted(graph[node]):
            if state[dep] == 0:
                visit(dep, stack)
            elif state[dep] == 1:
                cycle = stack[stack.index(dep) :] + [dep]
                key = frozenset(cycle)
                if key not in seen_cycles:
                    seen_cycles.add(key)
                    cycles.append(cycle)
        stack.pop()
        state[node] = 2

    for path in sorted(graph):
        if state[path] == 0:
            visit(path, [])
    return cycles


def reading_order(curriculum: Curriculum) -> List[str]:
    """Order lessons so every prerequisite comes before the lessons needing it.

    Ties break by frontmatter order, then by path.

    Raises:
        PrerequisiteCycleError: If prerequisites form a cycle
    """
    graph = prerequisite_graph(curriculum)

    def sort_key(path: str) -> Tuple[int, int, str]:
        order = curriculum.lessons[path].frontmatter.order
        return (0 if order is not None else 1, order or 0, path)

    remaining = {path: len(deps) for path, deps in graph.items()}
    dependents: Dict[str, List[str]] = {path: [] for path in graph}
    for path, deps in graph.items():
        for dep in deps:
            dependents[dep].append(path)

    ready = [(sort_key(path), path) for path, count in remaining.items() if count == 0]
    heapq.heapify(ready)

    ordered: List[str] = []
    while ready:
        _, path = heapq.heappop(ready)
        ordered.append(path)
        for dependent in dependents[path]:
            remaining[dependent] -= 1
            if remaining[dependent] == 0:
                heapq.heappush(ready, (sort_key(dependent), dependent))

    if len(ordered) != len(graph):
        cycles = find_cycles(curriculum)
        raise PrerequisiteCycleError(cycles[0] if cycles else sorted(set(graph) - set(ordered)))
    return ordered
