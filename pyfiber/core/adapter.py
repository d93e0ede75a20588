from typing import Any, Mapping, Protocol

from .errors import ConfigurationError


class HostAdapter(Protocol):
    """Operations the commit engine calls on a rendering target.

    Instances are opaque to the reconciler. ``finalize_container``,
    ``insert_before`` and a ``root_type`` attribute are optional.
    """

    def create_instance(self, tag: str, props: Mapping[str, Any]) -> Any: ...

    def create_text_instance(self, text: str) -> Any: ...

    def append_child(self, parent: Any, child: Any) -> None: ...

    def remove_child(self, parent: Any, child: Any) -> None: ...

    def commit_update(
        self, instance: Any, old_props: Mapping[str, Any], new_props: Mapping[str, Any]
    ) -> None: ...

    def commit_text_update(self, instance: Any, old_text: str, new_text: str) -> None: ...


def require_operation(adapter, name: str, fiber=None):
    op = getattr(adapter, name, None)
    if not callable(op):
        where = f" needed for <{fiber.name}>" if fiber is not None else ""
        raise ConfigurationError(
            f"{type(adapter).__name__} does not implement {name}(){where}"
        )
    return op


def optional_operation(adapter, name: str):
    op = getattr(adapter, name, None)
    return op if callable(op) else None
