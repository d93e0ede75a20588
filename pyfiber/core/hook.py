# hook.py ----------------------------------------------------
import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Optional, Tuple

from .errors import HookOrderViolation

logger = logging.getLogger(__name__)

_SCALARS = (bool, int, float, complex, str, bytes, type(None))


def same_value(a, b) -> bool:
    """Identity for objects, value equality for immutable scalars."""
    if a is b:
        return True
    if type(a) is not type(b) or not isinstance(a, _SCALARS):
        return False
    if isinstance(a, float) and math.isnan(a) and math.isnan(b):
        return True
    return a == b


def deps_changed(old: Optional[Tuple], new: Optional[Tuple]) -> bool:
    if old is None or new is None or len(old) != len(new):
        return True
    return any(not same_value(a, b) for a, b in zip(old, new))


@dataclass(eq=False)
class StateCell:
    value: Any
    pending_actions: Deque[Any] = field(default_factory=deque)
    mounted: bool = True


@dataclass(eq=False)
class EffectCell:
    callback: Callable[[], Any]
    deps: Optional[Tuple]
    cleanup: Optional[Callable[[], Any]] = None


@dataclass(eq=False)
class MemoCell:
    value: Any
    deps: Optional[Tuple]


@dataclass(eq=False)
class RefCell:
    current: Any = None


class HookDispatcher:
    """Hook primitives for the fiber currently being evaluated.

    The cursor advances once per hook call whatever its kind, so callers must
    invoke hooks in the same order and count on every render of a component.
    """

    def __init__(self, cycle, fiber, alternate=None) -> None:
        self.cycle = cycle
        self.fiber = fiber
        self.alternate = alternate
        self.hook_idx: int = 0
        fiber.hooks = []

    def _next_slot(self, kind, name):
        idx = self.hook_idx
        self.hook_idx += 1
        if self.alternate is None:
            return idx, None
        previous = self.alternate.hooks
        if idx >= len(previous):
            raise HookOrderViolation(
                f"{self.fiber.name} called {name}() as hook #{idx} but rendered "
                f"only {len(previous)} hooks last time",
                fiber=self.fiber,
                index=idx,
            )
        prior = previous[idx]
        if not isinstance(prior, kind):
            raise HookOrderViolation(
                f"{self.fiber.name} hook #{idx} was {type(prior).__name__} last "
                f"render but is now {name}()",
                fiber=self.fiber,
                index=idx,
            )
        return idx, prior

    def finish(self) -> None:
        if self.alternate is not None and self.hook_idx != len(self.alternate.hooks):
            raise HookOrderViolation(
                f"{self.fiber.name} rendered {self.hook_idx} hooks, "
                f"expected {len(self.alternate.hooks)}",
                fiber=self.fiber,
                index=self.hook_idx,
            )

    def use_state(self, initial):
        idx, cell = self._next_slot(StateCell, "use_state")
        if cell is None:
            cell = StateCell(initial)

        value = cell.value
        consumed = len(cell.pending_actions)
        for action in list(cell.pending_actions):
            value = action(value) if callable(action) else action
        if consumed:
            self.cycle.stage_state(cell, value, consumed)

        self.fiber.hooks.append(cell)
        renderer = self.cycle.renderer

        def set_state(action):
            if not cell.mounted:
                logger.debug("ignoring update on unmounted state cell #%d", idx)
                return
            renderer.check_can_schedule()
            cell.pending_actions.append(action)
            renderer.schedule_rerender(reason=f"use_state[{idx}] set")

        return value, set_state

    def use_ref(self, initial=None):
        _idx, cell = self._next_slot(RefCell, "use_ref")
        if cell is None:
            cell = RefCell(initial)
        self.fiber.hooks.append(cell)
        return cell

    def use_memo(self, factory, deps=None):
        deps_key = None if deps is None else tuple(deps)
        _idx, prior = self._next_slot(MemoCell, "use_memo")

        if prior is None or deps_changed(prior.deps, deps_key):
            cell = MemoCell(factory(), deps_key)
        else:
            cell = prior
        self.fiber.hooks.append(cell)
        return cell.value

    def use_callback(self, fn, deps=None):
        return self.use_memo(lambda: fn, deps)

    def use_effect(self, effect_fn, deps=None):
        deps_key = None if deps is None else tuple(deps)
        _idx, prior = self._next_slot(EffectCell, "use_effect")

        cell = EffectCell(
            effect_fn, deps_key, cleanup=None if prior is None else prior.cleanup
        )
        if prior is None or deps_changed(prior.deps, deps_key):
            self.cycle.pending_effects.append(cell)
        self.fiber.hooks.append(cell)
