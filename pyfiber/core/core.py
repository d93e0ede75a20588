# core.py ----------------------------------------------------
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import Enum
from functools import wraps
from types import MappingProxyType
from typing import Any, Mapping, Tuple

from .errors import HookCallError

TEXT_ELEMENT = "TEXT_ELEMENT"

# set by the work loop while a component function is being evaluated
_current_dispatcher = ContextVar("hook_dispatcher", default=None)


class ElementKind(Enum):
    ROOT = "root"
    COMPONENT = "component"
    HOST = "host"
    TEXT = "text"


def kind_of(type_) -> ElementKind:
    if type_ == TEXT_ELEMENT:
        return ElementKind.TEXT
    if isinstance(type_, str):
        return ElementKind.HOST
    if callable(type_):
        return ElementKind.COMPONENT
    raise TypeError(f"element type must be a tag string or a callable, got {type_!r}")


@dataclass(frozen=True)
class VirtualElement:
    type: Any
    props: Mapping[str, Any]
    kind: ElementKind = field(init=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "kind", kind_of(self.type))

    @property
    def children(self) -> Tuple["VirtualElement", ...]:
        return self.props.get("children", ())

    def __repr__(self):
        name = getattr(self.type, "__name__", self.type)
        if self.kind is ElementKind.TEXT:
            return f"<text {self.props.get('value')!r}>"
        return f"<{name} children={len(self.children)}>"


def create_text_element(value) -> VirtualElement:
    return VirtualElement(
        TEXT_ELEMENT, MappingProxyType({"value": str(value), "children": ()})
    )


def normalize_children(children) -> Tuple[VirtualElement, ...]:
    """Flatten nested lists/tuples, drop ``None``/``False`` and wrap scalars as text."""
    out = []
    stack = [iter(children)]
    while stack:
        try:
            child = next(stack[-1])
        except StopIteration:
            stack.pop()
            continue
        if isinstance(child, (list, tuple)):
            stack.append(iter(child))
        elif child is None or child is False:
            continue
        elif isinstance(child, VirtualElement):
            out.append(child)
        else:
            out.append(create_text_element(child))
    return tuple(out)


def create_element(type_, props=None, *children) -> VirtualElement:
    merged = dict(props or {})
    merged["children"] = normalize_children(children)
    return VirtualElement(type_, MappingProxyType(merged))


class _HookProxy:

    def __getattr__(self, name):
        # resolves to the dispatcher of the fiber currently being evaluated
        dispatcher = _current_dispatcher.get()
        if dispatcher is None:
            raise HookCallError(
                f"hooks.{name}() can only be used while a component is rendering."
            )
        return getattr(dispatcher, name)


hooks = _HookProxy()


def use_state(initial):
    return hooks.use_state(initial)


def use_effect(effect_fn, deps=None):
    return hooks.use_effect(effect_fn, deps)


def use_ref(initial=None):
    return hooks.use_ref(initial)


def use_memo(factory, deps=None):
    return hooks.use_memo(factory, deps)


def use_callback(fn, deps=None):
    return hooks.use_callback(fn, deps)


def component(fn):
    """Calling the decorated function builds an element instead of running it.

    ``Counter(label="x")`` is ``create_element(Counter.__wrapped__, {"label": "x"})``;
    positional arguments become children.
    """

    @wraps(fn)
    def wrapper(*children, **props):
        return create_element(fn, props, *children)

    return wrapper
