import logging
from typing import Callable, List

from .adapter import optional_operation, require_operation
from .core import ElementKind
from .errors import CommitError, ReconcilerError
from .fiber import EffectTag, Fiber, FiberTree
from .hook import EffectCell, StateCell

logger = logging.getLogger(__name__)


def props_changed(old_props, new_props) -> bool:
    keys = (set(old_props) | set(new_props)) - {"children"}
    for key in keys:
        if key not in old_props or key not in new_props:
            return True
        old, new = old_props[key], new_props[key]
        if old is not new and old != new:
            return True
    return False


def next_host_sibling(tree: FiberTree, fiber: Fiber):
    """Instance of the first already-attached host fiber after ``fiber`` under
    the same host parent, or ``None`` if the fiber goes last."""
    node = fiber
    while True:
        while node.sibling is None:
            node = tree.get(node.parent)
            if node is None or node.is_host:
                return None
        node = tree[node.sibling]
        while (
            not node.is_host
            and node.effect_tag is not EffectTag.PLACEMENT
            and node.child is not None
        ):
            node = tree[node.child]
        if node.is_host and node.effect_tag is not EffectTag.PLACEMENT:
            return node.instance


class CommitEngine:
    """Applies one cycle's edits to the host adapter.

    Structural edits run in a fixed order: deletions, then placements and
    updates in traversal order, then the optional ``finalize_container``.
    """

    def __init__(self, adapter) -> None:
        self.adapter = adapter

    def commit_mutations(self, cycle) -> List[Callable[[], object]]:
        """Apply structural edits; returns cleanups owed by unmounted fibers."""
        try:
            unmount_cleanups = []
            unmounted_states = []
            for fiber in cycle.deletions:
                cleanups, states = self.commit_deletion(cycle.tree.previous, fiber)
                unmount_cleanups.extend(cleanups)
                unmounted_states.extend(states)

            tree = cycle.tree
            for fiber in tree.walk():
                if fiber.kind is not ElementKind.ROOT:
                    self.commit_work(tree, fiber)

            finalize = optional_operation(self.adapter, "finalize_container")
            if finalize is not None:
                finalize(tree.root.instance)
        except ReconcilerError:
            raise
        except Exception as exc:
            raise CommitError(
                f"{type(self.adapter).__name__} failed during commit: {exc}"
            ) from exc

        for cell in unmounted_states:
            cell.mounted = False
        return unmount_cleanups

    def commit_deletion(self, previous: FiberTree, fiber: Fiber):
        parent_instance = previous.host_parent_instance(fiber)
        remove_child = require_operation(self.adapter, "remove_child", fiber)
        logger.debug("deleting <%s> (fiber %d)", fiber.name, fiber.index)

        # detach only the top-most host instances of the subtree
        stack = [fiber]
        while stack:
            node = stack.pop()
            if node.instance is not None:
                remove_child(parent_instance, node.instance)
                continue
            stack.extend(reversed(list(previous.children_of(node))))

        cleanups, states = [], []
        for node in previous.walk(fiber):
            for cell in node.hooks:
                if isinstance(cell, StateCell):
                    states.append(cell)
                elif isinstance(cell, EffectCell) and callable(cell.cleanup):
                    cleanups.append(cell.cleanup)
                    cell.cleanup = None
        return cleanups, states

    def commit_work(self, tree: FiberTree, fiber: Fiber) -> None:
        if fiber.instance is None:
            return

        if fiber.effect_tag is EffectTag.PLACEMENT:
            parent_instance = tree.host_parent_instance(fiber)
            insert_before = optional_operation(self.adapter, "insert_before")
            before = next_host_sibling(tree, fiber) if insert_before else None
            if before is not None:
                insert_before(parent_instance, fiber.instance, before)
            else:
                append_child = require_operation(self.adapter, "append_child", fiber)
                append_child(parent_instance, fiber.instance)

        elif fiber.effect_tag is EffectTag.UPDATE:
            alternate = tree.alternate_of(fiber)
            if alternate is None:
                return
            if fiber.kind is ElementKind.TEXT:
                old_text = alternate.props.get("value")
                new_text = fiber.props.get("value")
                if old_text != new_text:
                    update = require_operation(self.adapter, "commit_text_update", fiber)
                    update(fiber.instance, old_text, new_text)
            elif props_changed(alternate.props, fiber.props):
                update = require_operation(self.adapter, "commit_update", fiber)
                update(fiber.instance, alternate.props, fiber.props)


def flush_effects(unmount_cleanups, effects: List[EffectCell]) -> None:
    try:
        for cleanup in unmount_cleanups:
            cleanup()
    except BaseException:
        for pending in effects:
            pending.deps = None
        raise

    for position, cell in enumerate(effects):
        try:
            if callable(cell.cleanup):
                cleanup, cell.cleanup = cell.cleanup, None
                cleanup()
            result = cell.callback()
        except BaseException:
            # cells that did not run must be queued again by the next commit
            for pending in effects[position:]:
                pending.deps = None
            raise
        cell.cleanup = result if callable(result) else None
