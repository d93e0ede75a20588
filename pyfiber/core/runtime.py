# runtime.py -------------------------------------------------
import logging
from collections import deque
from contextlib import contextmanager
from enum import Enum
from types import MappingProxyType
from typing import Deque, Optional, Tuple

from .. import config
from .adapter import HostAdapter
from .commit import CommitEngine, flush_effects
from .core import ElementKind, VirtualElement
from .debug import enable_tracing, end_trace, record_schedule, start_trace
from .errors import (
    CommitError,
    ConfigurationError,
    ReentrantTraversalError,
    RerenderLimitError,
)
from .fiber import FiberTree
from .reconciler import RenderCycle, WorkLoop

logger = logging.getLogger(__name__)

_RERENDER = "rerender"
_RENDER = "render"


class RenderPhase(Enum):
    IDLE = "idle"
    TRAVERSING = "traversing"
    COMMITTING = "committing"
    FLUSHING_EFFECTS = "flushing_effects"


class Renderer:
    """Reconciler state for one container.

    Holds the current tree, the work-in-progress cycle and the queue of render
    requests. Requests made while effects are flushing (or inside ``batch()``)
    are queued and drained once the running cycle has settled.
    """

    def __init__(
        self, adapter: HostAdapter, *, settings: Optional["config.Settings"] = None
    ) -> None:
        self.adapter = adapter
        self.settings = settings if settings is not None else config.load_settings()
        if self.settings.trace:
            enable_tracing()

        self.root_type = getattr(adapter, "root_type", "ROOT")
        self.container = None
        self.current: Optional[FiberTree] = None
        self.cycle: Optional[RenderCycle] = None
        self.phase = RenderPhase.IDLE
        self.generation = 0

        self._commit = CommitEngine(adapter)
        self._queue: Deque[Tuple[str, Optional[VirtualElement]]] = deque()
        self._draining = False
        self._batch_depth = 0
        self._failed = False

    # -------------------------------
    # Public API
    # -------------------------------
    def render(self, element: VirtualElement, container) -> None:
        if self.container is not None and container is not self.container:
            raise ConfigurationError(
                "renderer is already bound to another container; "
                "create one renderer per container"
            )
        self.check_can_schedule()
        self.container = container
        record_schedule(self, "render()")
        self._enqueue(_RENDER, element)

    def schedule_rerender(self, reason: Optional[str] = None) -> None:
        """Re-render from the last committed tree."""
        self.check_can_schedule()
        record_schedule(self, reason)
        if (_RERENDER, None) in self._queue:
            return
        self._enqueue(_RERENDER, None)

    @contextmanager
    def batch(self):
        """Defer render requests until the outermost ``batch()`` exits."""
        self._batch_depth += 1
        try:
            yield self
        except BaseException:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self._queue.clear()
            raise
        self._batch_depth -= 1
        if self._batch_depth == 0:
            self._drain()

    def check_can_schedule(self) -> None:
        if self._failed:
            raise CommitError("renderer is unusable after a failed commit")
        if self.phase in (RenderPhase.TRAVERSING, RenderPhase.COMMITTING):
            raise ReentrantTraversalError(
                f"render requested while {self.phase.value}; state setters may "
                "only be called from effects or outside rendering"
            )

    # -------------------------------
    # Internal: task queue
    # -------------------------------
    def _enqueue(self, kind: str, element: Optional[VirtualElement]) -> None:
        self._queue.append((kind, element))
        if self.phase is RenderPhase.FLUSHING_EFFECTS or self._batch_depth:
            logger.debug("queued %s request (%d pending)", kind, len(self._queue))
            return
        self._drain()

    def _drain(self) -> None:
        if self._draining:
            return
        self._draining = True
        cycles = 0
        try:
            while self._queue:
                cycles += 1
                if cycles > self.settings.max_nested_renders:
                    raise RerenderLimitError(
                        f"more than {self.settings.max_nested_renders} render cycles "
                        "in one flush; an effect probably sets state unconditionally"
                    )
                kind, element = self._queue.popleft()
                if kind == _RENDER:
                    self._run_cycle(self._root_for_render(element), "render")
                elif self.current is not None:
                    self._run_cycle(self._root_for_rerender(), "rerender")
                else:
                    logger.debug("dropping rerender request: nothing committed yet")
        except BaseException:
            self._queue.clear()
            raise
        finally:
            self._draining = False

    # -------------------------------
    # Internal: render cycle
    # -------------------------------
    def _new_tree(self) -> FiberTree:
        self.generation += 1
        return FiberTree(self.generation, previous=self.current)

    def _root_for_render(self, element: VirtualElement) -> FiberTree:
        tree = self._new_tree()
        tree.add(
            ElementKind.ROOT,
            self.root_type,
            MappingProxyType({"children": (element,)}),
            instance=self.container,
            alternate=None if self.current is None else self.current.root.index,
        )
        return tree

    def _root_for_rerender(self) -> FiberTree:
        current_root = self.current.root
        tree = self._new_tree()
        tree.add(
            ElementKind.ROOT,
            current_root.type,
            current_root.props,
            instance=current_root.instance,
            alternate=current_root.index,
        )
        return tree

    def _run_cycle(self, tree: FiberTree, reason: str) -> None:
        cycle = RenderCycle(self, tree)
        self.cycle = cycle
        start_trace(self, tree.generation)
        logger.debug("cycle %d (%s) started", tree.generation, reason)

        try:
            self.phase = RenderPhase.TRAVERSING
            WorkLoop(cycle, self.adapter).run()

            self.phase = RenderPhase.COMMITTING
            try:
                unmount_cleanups = self._commit.commit_mutations(cycle)
            except BaseException:
                # the target may already be partly edited
                self._failed = True
                raise
            cycle.apply_staged_states()
            tree.previous = None
            self.current = tree
        except BaseException:
            cycle.discard()
            self.cycle = None
            self.phase = RenderPhase.IDLE
            end_trace("aborted")
            raise

        self.cycle = None
        self.phase = RenderPhase.FLUSHING_EFFECTS
        try:
            flush_effects(unmount_cleanups, cycle.pending_effects)
        finally:
            self.phase = RenderPhase.IDLE
            end_trace()
        logger.debug(
            "cycle %d committed: %d fibers, %d deletions, %d effects",
            tree.generation,
            len(tree),
            len(cycle.deletions),
            len(cycle.pending_effects),
        )


def create_renderer(
    adapter: HostAdapter, *, settings: Optional["config.Settings"] = None
) -> Renderer:
    return Renderer(adapter, settings=settings)
