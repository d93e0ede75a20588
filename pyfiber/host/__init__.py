# pyfiber/host/__init__.py
from .html import HtmlAdapter, render_to_html
from .scene import SceneAdapter, SceneNode, create_container, render

__all__ = [
    "HtmlAdapter",
    "render_to_html",
    "SceneAdapter",
    "SceneNode",
    "create_container",
    "render",
]
