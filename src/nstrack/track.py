"""Dependency graph kept in the snapshot.

Maps files to the namespaces they declare, records each namespace's
requirements, and queues namespaces for unload/load whenever files are added
or removed. Queues accumulate across scans until the consumer reloads and
calls :func:`clear_queues`.
"""

import logging
from collections import defaultdict
from graphlib import CycleError, TopologicalSorter
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Mapping, Set

from .parse import deps_from_ns_decl, name_from_ns_decl, read_file_ns_decl
from .platforms import DEFAULT_PLATFORM, Platform
from .snapshot import Snapshot

logger = logging.getLogger(__name__)


def dependents(deps: Mapping[str, Iterable[str]], names: Iterable[str]) -> Set[str]:
    """Namespaces that transitively require any of names."""
    required_by: Dict[str, Set[str]] = defaultdict(set)
    for ns, required in deps.items():
        for r in required:
            required_by[r].add(ns)

    result: Set[str] = set()
    stack = list(names)
    while stack:
        for ns in required_by.get(stack.pop(), ()):
            if ns not in result:
                result.add(ns)
                stack.append(ns)
    return result


def topo_order(deps: Mapping[str, Iterable[str]], names: Iterable[str]) -> List[str]:
    """names ordered so every namespace comes after the ones it requires."""
    names = set(names)
    graph = {ns: sorted(d for d in deps.get(ns, ()) if d in names) for ns in sorted(names)}
    try:
        return list(TopologicalSorter(graph).static_order())
    except CycleError as e:
        logger.warning("Circular dependency between namespaces %s", e.args[1])
        return sorted(names)


def _dedupe(names: Iterable[str]) -> List[str]:
    seen: Set[str] = set()
    out = []
    for n in names:
        if n not in seen:
            seen.add(n)
            out.append(n)
    return out


def _requeue(
    snapshot: Snapshot,
    filemap: Dict[Path, str],
    deps: Dict[str, FrozenSet[str]],
    changed: Set[str],
    removed: Set[str],
) -> Snapshot:
    affected = (changed | dependents(deps, changed) | dependents(deps, removed)) - removed
    to_unload = (affected & set(snapshot.deps)) | removed

    new_unload = list(reversed(topo_order(snapshot.deps, to_unload)))
    new_load = topo_order(deps, affected)

    unload = _dedupe(new_unload + list(snapshot.unload))
    load = _dedupe(
        [ns for ns in snapshot.load if ns not in affected and ns not in removed]
        + new_load
    )
    return snapshot.model_copy(update={
        "filemap": filemap,
        "deps": deps,
        "unload": tuple(unload),
        "load": tuple(load),
    })


def add_files(snapshot: Snapshot, files: Iterable[Path],
              platform: Platform = DEFAULT_PLATFORM) -> Snapshot:
    """Read ns declarations from files and add them to the graph.

    Files without a declaration are skipped.
    """
    filemap = dict(snapshot.filemap)
    deps = dict(snapshot.deps)
    changed: Set[str] = set()

    for f in sorted(files):
        decl = read_file_ns_decl(f, platform.features)
        ns = name_from_ns_decl(decl)
        if ns is None:
            logger.debug("Skipping %s: no ns declaration", f)
            continue
        filemap[f] = ns
        deps[ns] = frozenset(deps_from_ns_decl(decl))
        changed.add(ns)

    if not changed:
        return snapshot
    return _requeue(snapshot, filemap, deps, changed, set())


def remove_files(snapshot: Snapshot, files: Iterable[Path]) -> Snapshot:
    """Remove the namespaces declared by files from the graph.

    A namespace still declared by another tracked file (for instance a
    ``.clj``/``.cljs`` pair) stays in the graph.
    """
    filemap = dict(snapshot.filemap)
    deps = dict(snapshot.deps)
    dropped = {filemap.pop(f) for f in files if f in filemap}
    removed = dropped - set(filemap.values())
    for ns in removed:
        deps.pop(ns, None)

    if not dropped:
        return snapshot
    return _requeue(snapshot, filemap, deps, set(), removed)


def clear_queues(snapshot: Snapshot) -> Snapshot:
    """Snapshot with empty unload/load queues, once the consumer has reloaded."""
    if not snapshot.has_pending:
        return snapshot
    return snapshot.model_copy(update={"unload": (), "load": ()})
