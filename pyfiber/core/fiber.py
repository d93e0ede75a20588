from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Mapping, Optional

from .core import ElementKind


class EffectTag(Enum):
    NONE = "none"
    PLACEMENT = "placement"
    UPDATE = "update"
    DELETION = "deletion"


@dataclass(eq=False)
class Fiber:
    """One element's live instance at a tree position.

    Links are indices into the ``FiberTree`` that owns the fiber, except
    ``alternate`` which indexes the owner's ``previous`` generation.
    """

    index: int
    kind: ElementKind
    type: Any
    props: Mapping[str, Any]
    instance: Any = None
    parent: Optional[int] = None
    child: Optional[int] = None
    sibling: Optional[int] = None
    alternate: Optional[int] = None
    hooks: list = field(default_factory=list)
    effect_tag: EffectTag = EffectTag.NONE

    @property
    def name(self) -> str:
        if self.kind is ElementKind.TEXT:
            return "#text"
        return getattr(self.type, "__name__", str(self.type))

    @property
    def is_host(self) -> bool:
        return self.kind in (ElementKind.HOST, ElementKind.TEXT, ElementKind.ROOT)


class FiberTree:
    """Arena holding every fiber of one render generation.

    Dropping ``previous`` discards the whole prior generation at once.
    """

    def __init__(self, generation: int, previous: Optional["FiberTree"] = None):
        self.generation = generation
        self.previous = previous
        self.fibers: List[Fiber] = []

    def __len__(self):
        return len(self.fibers)

    def __getitem__(self, index: int) -> Fiber:
        return self.fibers[index]

    @property
    def root(self) -> Fiber:
        return self.fibers[0]

    def add(self, kind, type_, props, **links) -> Fiber:
        fiber = Fiber(len(self.fibers), kind, type_, props, **links)
        self.fibers.append(fiber)
        return fiber

    def get(self, index: Optional[int]) -> Optional[Fiber]:
        return None if index is None else self.fibers[index]

    def alternate_of(self, fiber: Fiber) -> Optional[Fiber]:
        if fiber.alternate is None or self.previous is None:
            return None
        return self.previous[fiber.alternate]

    def children_of(self, fiber: Fiber) -> Iterator[Fiber]:
        node = self.get(fiber.child)
        while node is not None:
            yield node
            node = self.get(node.sibling)

    def walk(self, start: Optional[Fiber] = None) -> Iterator[Fiber]:
        """Depth-first pre-order over ``start``'s subtree, without recursion."""
        start = self.root if start is None else start
        node = start
        while node is not None:
            yield node
            if node.child is not None:
                node = self.fibers[node.child]
                continue
            while node is not start and node.sibling is None:
                node = self.fibers[node.parent]
            if node is start:
                return
            node = self.fibers[node.sibling]

    def host_parent_instance(self, fiber: Fiber):
        """Instance of the nearest ancestor that carries one."""
        parent = self.get(fiber.parent)
        while parent is not None and parent.instance is None:
            parent = self.get(parent.parent)
        return None if parent is None else parent.instance

    def depth_of(self, fiber: Fiber) -> int:
        depth = 0
        while fiber.parent is not None:
            fiber = self.fibers[fiber.parent]
            depth += 1
        return depth
