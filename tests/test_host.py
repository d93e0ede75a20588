from pyfiber.config import Settings
from pyfiber.core import create_element as h, create_renderer, use_state
from pyfiber.host import HtmlAdapter, SceneAdapter, create_container, render, render_to_html
from pyfiber.host.scene import SceneNode


def test_scene_adapter_basic_operations():
    adapter = SceneAdapter()
    root = create_container()
    div = adapter.create_instance("div", {"id": "a", "children": ()})
    text = adapter.create_text_instance(5)

    adapter.append_child(root, div)
    adapter.append_child(div, text)
    assert div.props == {"id": "a"}
    assert root.text_content() == "5"

    adapter.commit_text_update(text, "5", "6")
    adapter.commit_update(div, {"id": "a"}, {"id": "b", "children": ()})
    assert (text.text, div.props) == ("6", {"id": "b"})

    adapter.remove_child(root, div)
    adapter.remove_child(root, div)
    assert root.children == [] and div.parent is None


def test_append_moves_an_attached_node():
    adapter = SceneAdapter()
    a, b, node = SceneNode("a"), SceneNode("b"), SceneNode("x")
    adapter.append_child(a, node)
    adapter.append_child(b, node)
    assert a.children == [] and b.children == [node]


def test_finalize_runs_once_per_commit():
    redraws = []
    container = create_container()
    renderer = create_renderer(SceneAdapter(on_finalize=redraws.append), settings=Settings())

    renderer.render(h("rect", {"x": 1}), container)
    renderer.render(h("rect", {"x": 2}), container)

    assert redraws == [container, container]
    assert container.redraws == 2
    assert container.find("rect").props == {"x": 2}


def test_render_helper_binds_renderer_to_container(monkeypatch):
    monkeypatch.delenv("PYFIBER_MAX_NESTED_RENDERS", raising=False)
    container = create_container()
    first = render(h("p", None, "a"), container)
    second = render(h("p", None, "b"), container)

    assert first is second
    assert container.text_content() == "b"


def test_render_to_html_attribute_rules():
    adapter = SceneAdapter()
    root = create_container()
    div = adapter.create_instance(
        "div",
        {
            "class_": ["card", "wide"],
            "data_user_id": 7,
            "aria_label": "x",
            "style": {"font_size": "14px"},
            "hidden": True,
            "draggable": False,
            "title": None,
            "on_click": lambda: None,
        },
    )
    adapter.append_child(root, div)
    adapter.append_child(div, adapter.create_text_instance("<b>&"))
    adapter.append_child(div, adapter.create_instance("br", {}))

    assert render_to_html(root) == (
        '<div class="card wide" data-user-id="7" aria-label="x" '
        'style="font-size:14px" hidden>&lt;b&gt;&amp;<br></div>'
    )


def test_html_adapter_publishes_only_changes():
    published = []
    setters = []
    container = create_container()
    renderer = create_renderer(HtmlAdapter(on_html=published.append), settings=Settings())

    def Greeting(name):
        punct, set_punct = use_state("!")
        setters.append(set_punct)
        return h("h1", {"class_": "greet"}, "Hello ", name, punct)

    renderer.render(h(Greeting, {"name": "Ana"}), container)
    renderer.render(h(Greeting, {"name": "Ana"}), container)
    setters[0]("?")

    assert published == [
        '<h1 class="greet">Hello Ana!</h1>',
        '<h1 class="greet">Hello Ana?</h1>',
    ]
    assert renderer.adapter.html == published[-1]
