"""Dependency ordering of template items.

Items are visited in ``sort_order`` and each item's dependency is resolved
before the item itself. An edge that would close a cycle is dropped so every
item still resolves exactly once.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set, Tuple

from schemas.template import TemplateItem

logger = logging.getLogger(__name__)


@dataclass
class ResolutionOrder:
    items: List[TemplateItem]
    # (dependent item id, dependency item id) edges ignored to break cycles
    broken_edges: List[Tuple[str, str]] = field(default_factory=list)
    # (item id, missing dependency id)
    dangling: List[Tuple[str, str]] = field(default_factory=list)

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def resolution_order(items: Sequence[TemplateItem]) -> ResolutionOrder:
    """Order items so each dependency precedes its dependent.

    Every input item appears exactly once in the result. Visiting is
    iterative: a dependency chain as long as the template cannot exhaust the
    call stack.
    """
    by_id: Dict[str, TemplateItem] = {}
    for item in items:
        by_id.setdefault(item.id, item)

    # sorted() is stable: equal sort_order keeps configured order
    ordered_input = sorted(items, key=lambda i: i.sort_order)

    visited: Set[str] = set()
    emitted: Set[int] = set()
    visiting: Set[str] = set()
    result: List[TemplateItem] = []
    broken: List[Tuple[str, str]] = []
    dangling: List[Tuple[str, str]] = []

    for root in ordered_input:
        if id(root) in emitted:
            continue
        if root.id in visited:
            # Duplicate id: still emitted, but never a dependency target
            emitted.add(id(root))
            result.append(root)
            continue

        # Walk the dependency chain down from root, then emit it bottom-up
        chain: List[TemplateItem] = []
        current = root
        while True:
            chain.append(current)
            visiting.add(current.id)
            dep_id = current.depends_on_item_id
            if not dep_id:
                break
            if dep_id not in by_id:
                dangling.append((current.id, dep_id))
                logger.warning(f"Item {current.id!r} depends on missing item {dep_id!r}; ignoring dependency")
                break
            if dep_id in visited:
                break
            if dep_id in visiting:
                broken.append((current.id, dep_id))
                logger.warning(f"Dependency cycle: ignoring edge {current.id!r} -> {dep_id!r}")
                break
            current = by_id[dep_id]

        for item in reversed(chain):
            visiting.discard(item.id)
            visited.add(item.id)
            emitted.add(id(item))
            result.append(item)

    return ResolutionOrder(result, broken, dangling)
