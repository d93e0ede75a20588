# pyfiber/host/html.py
from typing import Any, Callable, Dict, Optional
import html as _htmllib

from .scene import SceneAdapter, SceneNode

VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "wbr"}
)


_PREFIXED = ("data_", "aria_")


def _escape(value: Any) -> str:
    return _htmllib.escape("" if value is None else str(value), quote=True)


def _style_to_str(style: Any) -> str:
    """``{"font_size": "14px"}`` becomes ``font-size:14px``; strings pass through."""
    if not isinstance(style, dict):
        return str(style)
    return ";".join(f"{name.replace('_', '-')}:{val}" for name, val in style.items())


def _attr_name(prop: str) -> str:
    if prop == "class_":
        return "class"
    if prop.startswith(_PREFIXED):
        return prop.replace("_", "-")
    return prop


def _attrs_to_str(props: Dict[str, Any]) -> str:
    """Serialise the attribute-like host props of a scene node.

    Event handlers and other callables stay on the scene node only. ``None``
    and ``False`` drop the attribute, ``True`` writes it bare, and sequences
    are space-joined (``class_=["a", "b"]``).
    """
    attrs = []
    for prop, value in (props or {}).items():
        if prop == "children" or prop.startswith("on_") or callable(value):
            continue
        if value is None or value is False:
            continue
        name = _attr_name(prop)
        if value is True:
            attrs.append(name)
            continue
        if isinstance(value, (list, tuple)):
            value = " ".join(map(str, value))
        elif name == "style":
            value = _style_to_str(value)
        attrs.append(f'{name}="{_escape(value)}"')
    return "".join(" " + attr for attr in attrs)


def render_node(node: SceneNode) -> str:
    """Serialise ``node`` and its attached children, without recursion."""
    parts = []
    stack = [(node, False)]
    while stack:
        current, closing = stack.pop()
        if closing:
            parts.append(f"</{current.type}>")
            continue
        if current.is_text:
            parts.append(_escape(current.text))
            continue
        parts.append(f"<{current.type}{_attrs_to_str(current.props)}>")
        if current.type in VOID_TAGS:
            continue
        stack.append((current, True))
        stack.extend((ch, False) for ch in reversed(current.children))
    return "".join(parts)


def render_to_html(root: SceneNode) -> str:
    """Render the children of the container ``root`` into an HTML string."""
    return "".join(render_node(ch) for ch in root.children)


class HtmlAdapter(SceneAdapter):
    """Scene adapter that re-serialises the whole container after every commit.

    The markup of the last commit is kept in ``html``; ``on_html`` is called
    only when it changed.
    """

    def __init__(self, on_html: Optional[Callable[[str], None]] = None) -> None:
        super().__init__()
        self.on_html = on_html
        self.html: Optional[str] = None

    def finalize_container(self, root: SceneNode) -> None:
        super().finalize_container(root)
        html_now = render_to_html(root)
        if html_now != self.html:
            self.html = html_now
            if self.on_html is not None:
                self.on_html(html_now)
