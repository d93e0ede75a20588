from pyfiber.core import EffectTag, ElementKind, create_element as h


def host_children(renderer, tag):
    tree = renderer.current
    parent = next(f for f in tree.walk() if f.type == tag)
    return list(tree.children_of(parent))


def test_initial_render_builds_scene(renderer, adapter, container):
    renderer.render(h("div", {"id": "app"}, h("span", None, "hi"), "tail"), container)

    assert container.to_tuple() == ("ROOT_SCENE", (("div", (("span", ("hi",)), "tail")),))
    assert ("create_instance", "div") in adapter.calls
    assert adapter.calls[-1] == ("finalize_container",)
    assert renderer.current.root.instance is container


def test_identical_render_is_adapter_silent(renderer, adapter, container):
    tree = h("div", {"class_": "a"}, h("b", None, "x"), 7)
    renderer.render(tree, container)
    adapter.reset()

    renderer.render(h("div", {"class_": "a"}, h("b", None, "x"), 7), container)

    assert adapter.mutations() == []
    assert all(
        f.effect_tag is EffectTag.UPDATE
        for f in renderer.current.walk()
        if f.kind is not ElementKind.ROOT
    )


def test_unchanged_tag_keeps_instance_and_only_updates(renderer, adapter, container):
    renderer.render(h("div", {"class_": "a"}, "x"), container)
    div = container.children[0]
    adapter.reset()

    renderer.render(h("div", {"class_": "b"}, "x"), container)

    assert container.children[0] is div
    assert div.props == {"class_": "b"}
    assert adapter.mutations() == [("commit_update", "div")]


def test_text_change_uses_text_update(renderer, adapter, container):
    renderer.render(h("p", None, "old"), container)
    adapter.reset()

    renderer.render(h("p", None, "new"), container)

    assert adapter.mutations() == [("commit_text_update", "old", "new")]
    assert container.text_content() == "new"


def test_positional_mismatch_is_deletion_plus_placement(renderer, adapter, container):
    renderer.render(h("div", None, h("span", None, "A"), h("p", None, "B"), h("b", None, "C")), container)
    adapter.reset()

    renderer.render(h("div", None, h("span", None, "A"), h("b", None, "C")), container)

    tags = [(f.type, f.effect_tag) for f in host_children(renderer, "div")]
    assert tags == [("span", EffectTag.UPDATE), ("b", EffectTag.PLACEMENT)]

    mutations = adapter.mutations()
    assert ("remove_child", "div", "p") in mutations
    assert ("remove_child", "div", "b") in mutations
    assert ("create_instance", "b") in mutations
    assert ("append_child", "div", "b") in mutations
    assert container.to_tuple() == ("ROOT_SCENE", (("div", (("span", ("A",)), ("b", ("C",)))),))


def test_deletions_commit_before_placements(renderer, adapter, container):
    renderer.render(h("div", None, h("p")), container)
    adapter.reset()

    renderer.render(h("div", None, h("em")), container)

    commit_ops = [c[0] for c in adapter.mutations() if not c[0].startswith("create")]
    assert commit_ops == ["remove_child", "append_child"]


def test_placement_goes_before_existing_sibling(renderer, adapter, container):
    renderer.render(h("div", None, h("span"), h("p")), container)
    adapter.reset()

    renderer.render(h("div", None, h("em"), h("p")), container)

    assert ("insert_before", "div", "em", "p") in adapter.mutations()
    assert [c.type for c in container.children[0].children] == ["em", "p"]


def test_shrinking_list_deletes_tail(renderer, adapter, container):
    renderer.render(h("ul", None, h("li", None, "1"), h("li", None, "2"), h("li", None, "3")), container)
    adapter.reset()

    renderer.render(h("ul", None, h("li", None, "1")), container)

    assert adapter.mutations().count(("remove_child", "ul", "li")) == 2
    assert container.text_content() == "1"


def test_component_children_attach_to_nearest_host(renderer, container):
    def Pair():
        return [h("i", None, "a"), h("u", None, "b")]

    renderer.render(h("div", None, h(Pair), h("hr")), container)

    assert [c.type for c in container.children[0].children] == ["i", "u", "hr"]


def test_deleting_component_detaches_every_top_level_instance(renderer, adapter, container):
    def Pair():
        return [h("i"), h("u")]

    def Single():
        return h("s")

    renderer.render(h("div", None, h(Pair)), container)
    adapter.reset()

    renderer.render(h("div", None, h(Single)), container)

    removed = [c for c in adapter.mutations() if c[0] == "remove_child"]
    assert removed == [("remove_child", "div", "i"), ("remove_child", "div", "u")]
    assert [c.type for c in container.children[0].children] == ["s"]


def test_component_receives_props_and_children(renderer, container):
    seen = {}

    def Box(title, children):
        seen["title"] = title
        return h("section", None, h("h1", None, title), children)

    def Plain(label):
        return label

    renderer.render(h(Box, {"title": "T"}, h(Plain, {"label": "body"})), container)

    assert seen == {"title": "T"}
    assert container.to_tuple() == (
        "ROOT_SCENE",
        (("section", (("h1", ("T",)), "body")),),
    )


def test_component_returning_nothing(renderer, container):
    def Empty():
        return None

    renderer.render(h("div", None, h(Empty), "x"), container)
    assert container.text_content() == "x"


def test_traversal_order_is_depth_first(renderer, container):
    order = []

    def Leaf(name):
        order.append(name)
        return None

    def Branch(name, children):
        order.append(name)
        return children

    renderer.render(
        h("div", None,
          h(Branch, {"name": "a"}, h(Leaf, {"name": "a1"}), h(Leaf, {"name": "a2"})),
          h(Branch, {"name": "b"}, h(Leaf, {"name": "b1"}))),
        container,
    )

    assert order == ["a", "a1", "a2", "b", "b1"]


def test_previous_generation_is_released(renderer, container):
    renderer.render(h("div"), container)
    first = renderer.current
    renderer.render(h("div"), container)

    assert renderer.current is not first
    assert renderer.current.generation == first.generation + 1
    assert renderer.current.previous is None
