from typing import List, Optional, Tuple

from .adapter import require_operation
from .core import ElementKind, _current_dispatcher, normalize_children
from .debug import enter_render
from .errors import ConfigurationError
from .fiber import EffectTag, Fiber, FiberTree
from .hook import EffectCell, HookDispatcher, StateCell


class RenderCycle:
    """Work-in-progress state of one render, discarded as a whole on abort."""

    def __init__(self, renderer, tree: FiberTree) -> None:
        self.renderer = renderer
        self.tree = tree
        self.deletions: List[Fiber] = []
        self.pending_effects: List[EffectCell] = []
        self.staged_states: List[Tuple[StateCell, object, int]] = []
        self._replaced_tags: List[Tuple[Fiber, EffectTag]] = []

    def mark_deleted(self, fiber: Fiber) -> None:
        self._replaced_tags.append((fiber, fiber.effect_tag))
        fiber.effect_tag = EffectTag.DELETION
        self.deletions.append(fiber)

    def discard(self) -> None:
        """Undo the marks left on the committed tree by an aborted cycle."""
        for fiber, tag in self._replaced_tags:
            fiber.effect_tag = tag
        self._replaced_tags = []
        self.deletions = []
        self.pending_effects = []
        self.staged_states = []
        self.tree.previous = None

    def stage_state(self, cell: StateCell, value, consumed: int) -> None:
        self.staged_states.append((cell, value, consumed))

    def apply_staged_states(self) -> None:
        for cell, value, consumed in self.staged_states:
            cell.value = value
            for _ in range(consumed):
                cell.pending_actions.popleft()
        self.staged_states = []


class WorkLoop:
    """Builds the work-in-progress tree by an iterative depth-first walk."""

    def __init__(self, cycle: RenderCycle, adapter) -> None:
        self.cycle = cycle
        self.tree = cycle.tree
        self.adapter = adapter

    def run(self) -> None:
        fiber = self.tree.root
        while fiber is not None:
            fiber = self.perform_unit_of_work(fiber)

    def perform_unit_of_work(self, fiber: Fiber) -> Optional[Fiber]:
        if fiber.kind is ElementKind.COMPONENT:
            self.update_component(fiber)
        else:
            self.update_host(fiber)

        # child -> sibling -> parent's sibling
        if fiber.child is not None:
            return self.tree[fiber.child]
        node = fiber
        while node is not None:
            if node.sibling is not None:
                return self.tree[node.sibling]
            node = self.tree.get(node.parent)
        return None

    def update_component(self, fiber: Fiber) -> None:
        alternate = self.tree.alternate_of(fiber)
        dispatcher = HookDispatcher(self.cycle, fiber, alternate)
        enter_render(fiber, self.tree)

        props = dict(fiber.props)
        if not props.get("children"):
            props.pop("children", None)

        token = _current_dispatcher.set(dispatcher)
        try:
            output = fiber.type(**props)
            dispatcher.finish()
        finally:
            _current_dispatcher.reset(token)

        self.reconcile_children(fiber, normalize_children([output]))

    def update_host(self, fiber: Fiber) -> None:
        if fiber.instance is None and fiber.kind is not ElementKind.ROOT:
            fiber.instance = self.create_instance(fiber)
        self.reconcile_children(fiber, fiber.props.get("children", ()))

    def create_instance(self, fiber: Fiber):
        if fiber.kind is ElementKind.TEXT:
            create = require_operation(self.adapter, "create_text_instance", fiber)
            instance = create(fiber.props.get("value", ""))
        else:
            create = require_operation(self.adapter, "create_instance", fiber)
            instance = create(fiber.type, fiber.props)
        if instance is None:
            raise ConfigurationError(
                f"{type(self.adapter).__name__} returned no instance for <{fiber.name}>"
            )
        return instance

    def reconcile_children(self, parent: Fiber, elements) -> None:
        """Positional diff of ``elements`` against the alternate's child chain."""
        alternate = self.tree.alternate_of(parent)
        old = None
        if alternate is not None and self.tree.previous is not None:
            old = self.tree.previous.get(alternate.child)

        previous_sibling: Optional[Fiber] = None
        index = 0
        while index < len(elements) or old is not None:
            element = elements[index] if index < len(elements) else None
            same_type = (
                old is not None and element is not None and element.type == old.type
            )
            new_fiber = None

            if same_type:
                new_fiber = self.tree.add(
                    old.kind,
                    old.type,
                    element.props,
                    instance=old.instance,
                    parent=parent.index,
                    alternate=old.index,
                    hooks=old.hooks,
                    effect_tag=EffectTag.UPDATE,
                )
            elif element is not None:
                new_fiber = self.tree.add(
                    element.kind,
                    element.type,
                    element.props,
                    parent=parent.index,
                    effect_tag=EffectTag.PLACEMENT,
                )

            if old is not None and not same_type:
                self.cycle.mark_deleted(old)

            if old is not None:
                old = self.tree.previous.get(old.sibling)

            if new_fiber is not None:
                if previous_sibling is None:
                    parent.child = new_fiber.index
                else:
                    previous_sibling.sibling = new_fiber.index
                previous_sibling = new_fiber
            index += 1
