# pyfiber/core/__init__.py
from .core import (
    TEXT_ELEMENT,
    ElementKind,
    VirtualElement,
    component,
    create_element,
    hooks,
    use_callback,
    use_effect,
    use_memo,
    use_ref,
    use_state,
)
from .errors import (
    CommitError,
    ConfigurationError,
    HookCallError,
    HookOrderViolation,
    ReconcilerError,
    ReentrantTraversalError,
    RerenderLimitError,
)
from .fiber import EffectTag, Fiber, FiberTree
from .hook import EffectCell, MemoCell, RefCell, StateCell
from .runtime import Renderer, RenderPhase, create_renderer

__all__ = [
    "TEXT_ELEMENT",
    "ElementKind",
    "VirtualElement",
    "component",
    "create_element",
    "hooks",
    "use_callback",
    "use_effect",
    "use_memo",
    "use_ref",
    "use_state",
    "CommitError",
    "ConfigurationError",
    "HookCallError",
    "HookOrderViolation",
    "ReconcilerError",
    "ReentrantTraversalError",
    "RerenderLimitError",
    "EffectTag",
    "Fiber",
    "FiberTree",
    "EffectCell",
    "MemoCell",
    "RefCell",
    "StateCell",
    "Renderer",
    "RenderPhase",
    "create_renderer",
]
