from typing import Any, Callable, Dict, List, Optional

from pyfiber.core.core import TEXT_ELEMENT
from pyfiber.core.runtime import create_renderer

SCENE_ROOT = "ROOT_SCENE"


def host_props(props) -> Dict[str, Any]:
    return {k: v for k, v in (props or {}).items() if k != "children"}


class SceneNode:
    """Retained host instance: a tag, its props and attached children."""

    def __init__(self, type_: str, props=None, *, text: Optional[str] = None) -> None:
        self.type = type_
        self.props: Dict[str, Any] = host_props(props)
        self.text = text
        self.children: List["SceneNode"] = []
        self.parent: Optional["SceneNode"] = None
        self.redraws = 0
        self.renderer = None

    @property
    def is_text(self) -> bool:
        return self.type == TEXT_ELEMENT

    def text_content(self) -> str:
        if self.is_text:
            return self.text or ""
        return "".join(ch.text_content() for ch in self.children)

    def find_all(self, type_: str) -> List["SceneNode"]:
        found, stack = [], list(reversed(self.children))
        while stack:
            node = stack.pop()
            if node.type == type_:
                found.append(node)
            stack.extend(reversed(node.children))
        return found

    def find(self, type_: str) -> Optional["SceneNode"]:
        found = self.find_all(type_)
        return found[0] if found else None

    def dispatch(self, event: str, *args):
        """Invoke the ``on_<event>`` handler prop, if any."""
        handler = self.props.get(f"on_{event}")
        if handler is None:
            return None
        return handler(*args)

    def to_tuple(self):
        if self.is_text:
            return self.text
        return (self.type, tuple(ch.to_tuple() for ch in self.children))

    def __repr__(self):
        if self.is_text:
            return f"<SceneNode text={self.text!r}>"
        return f"<SceneNode {self.type} children={len(self.children)}>"


def create_container() -> SceneNode:
    return SceneNode(SCENE_ROOT)


class SceneAdapter:
    """Host adapter keeping an in-memory instance tree under a ``SceneNode`` root.

    ``on_finalize`` receives the root once per commit, after structural edits,
    which is where a whole-scene redraw (e.g. onto a canvas) belongs.
    """

    root_type = SCENE_ROOT

    def __init__(self, on_finalize: Optional[Callable[[SceneNode], None]] = None) -> None:
        self.on_finalize = on_finalize

    def create_instance(self, tag, props) -> SceneNode:
        return SceneNode(tag, props)

    def create_text_instance(self, text) -> SceneNode:
        return SceneNode(TEXT_ELEMENT, text=str(text))

    def append_child(self, parent: SceneNode, child: SceneNode) -> None:
        self._detach(child)
        parent.children.append(child)
        child.parent = parent

    def insert_before(self, parent: SceneNode, child: SceneNode, before: SceneNode) -> None:
        self._detach(child)
        try:
            idx = parent.children.index(before)
        except ValueError:
            idx = len(parent.children)
        parent.children.insert(idx, child)
        child.parent = parent

    def remove_child(self, parent: SceneNode, child: SceneNode) -> None:
        if parent is None or child not in parent.children:
            return
        parent.children.remove(child)
        child.parent = None

    def commit_update(self, instance: SceneNode, old_props, new_props) -> None:
        instance.props = host_props(new_props)

    def commit_text_update(self, instance: SceneNode, old_text, new_text) -> None:
        instance.text = "" if new_text is None else str(new_text)

    def finalize_container(self, root: SceneNode) -> None:
        root.redraws += 1
        if self.on_finalize is not None:
            self.on_finalize(root)

    @staticmethod
    def _detach(child: SceneNode) -> None:
        if child.parent is not None and child in child.parent.children:
            child.parent.children.remove(child)
        child.parent = None


def render(element, container: SceneNode, adapter: Optional[SceneAdapter] = None):
    """Render into ``container``, reusing the renderer bound to it on first use."""
    if container.renderer is None:
        container.renderer = create_renderer(adapter if adapter is not None else SceneAdapter())
    container.renderer.render(element, container)
    return container.renderer
