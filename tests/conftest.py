import pytest

from pyfiber.config import Settings
from pyfiber.core import create_renderer
from pyfiber.core import debug
from pyfiber.host.scene import SceneAdapter, create_container


def describe(node):
    if node is None:
        return None
    return repr(node.text) if node.is_text else node.type


class RecordingAdapter(SceneAdapter):
    """Scene adapter that logs every call made by the commit engine."""

    def __init__(self, on_finalize=None):
        super().__init__(on_finalize=on_finalize)
        self.calls = []

    def create_instance(self, tag, props):
        self.calls.append(("create_instance", tag))
        return super().create_instance(tag, props)

    def create_text_instance(self, text):
        self.calls.append(("create_text_instance", text))
        return super().create_text_instance(text)

    def append_child(self, parent, child):
        self.calls.append(("append_child", describe(parent), describe(child)))
        super().append_child(parent, child)

    def insert_before(self, parent, child, before):
        self.calls.append(
            ("insert_before", describe(parent), describe(child), describe(before))
        )
        super().insert_before(parent, child, before)

    def remove_child(self, parent, child):
        self.calls.append(("remove_child", describe(parent), describe(child)))
        super().remove_child(parent, child)

    def commit_update(self, instance, old_props, new_props):
        self.calls.append(("commit_update", describe(instance)))
        super().commit_update(instance, old_props, new_props)

    def commit_text_update(self, instance, old_text, new_text):
        self.calls.append(("commit_text_update", old_text, new_text))
        super().commit_text_update(instance, old_text, new_text)

    def finalize_container(self, root):
        self.calls.append(("finalize_container",))
        super().finalize_container(root)

    def mutations(self):
        return [c for c in self.calls if c[0] != "finalize_container"]

    def reset(self):
        self.calls.clear()


@pytest.fixture()
def settings():
    return Settings(trace=False, log_level="WARNING", max_nested_renders=20)


@pytest.fixture()
def adapter():
    return RecordingAdapter()


@pytest.fixture()
def container():
    return create_container()


@pytest.fixture()
def renderer(adapter, settings):
    return create_renderer(adapter, settings=settings)


@pytest.fixture()
def tracing():
    debug.clear_traces()
    debug.enable_tracing()
    yield
    debug.disable_tracing()
    debug.clear_traces()
