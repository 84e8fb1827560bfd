from cellview.parsing import try_parse
from cellview.pipeline import BeautifyResult, beautify
from cellview.render import render_lines
from cellview.tree import ContainerNode, find_node, iter_containers, iter_nodes


def test_valid_json_is_not_flagged_as_repaired():
    result = beautify('{"a": {"b": 1}}')
    assert isinstance(result, BeautifyResult)
    assert result.value == {"a": {"b": 1}}
    assert result.repaired is False
    assert isinstance(result.tree, ContainerNode)


def test_truncated_json_needs_repair_enabled():
    assert beautify('{"a":1,"b":"trunc...') is None


def test_truncated_json_is_flagged_when_repaired():
    result = beautify('{"a":1,"b":"trunc...', repair_enabled=True)
    assert result.repaired is True
    assert result.value == {"a": 1}


def test_valid_json_is_parsed_without_repair_even_when_enabled():
    result = beautify('[1, 2, 3]', repair_enabled=True)
    assert result.repaired is False
    assert result.value == [1, 2, 3]


def test_plain_text_and_empty_text_are_skipped():
    assert beautify("hello", repair_enabled=True) is None
    assert beautify("", repair_enabled=True) is None


def test_empty_containers_are_skipped():
    assert beautify("{}") is None
    assert beautify(" [ ] ") is None
    assert beautify("{", repair_enabled=True) is None


def test_rebuild_resets_toggles():
    result = beautify('{"a": {"b": {"c": 1}}}')
    node = find_node(result.tree, ("a", "b"))
    node.toggle()
    assert node.expanded

    tree = result.rebuild()
    assert tree is result.tree
    assert not find_node(tree, ("a", "b")).expanded


def test_copy_text_is_pretty_json():
    result = beautify('{"a":[1,2]}')
    assert result.copy_text() == '{\n  "a": [\n    1,\n    2\n  ]\n}'
    assert try_parse(result.copy_text()) == result.value


def test_deeply_nested_json_builds_renders_and_copies():
    depth = 1200
    result = beautify("[" * depth + "]" * depth)
    assert len(list(iter_nodes(result.tree))) == depth
    assert len(render_lines(result.tree)) == 5

    for node in iter_containers(result.tree):
        if not node.expanded:
            node.toggle()
    assert len(render_lines(result.tree)) == 2 * depth - 1
    assert result.copy_text().count("\n") == 2 * depth - 2


def test_deeply_nested_truncated_json_is_repaired():
    depth = 1200
    result = beautify("[" * depth, repair_enabled=True)
    assert result.repaired is True
    assert len(list(iter_nodes(result.tree))) == depth - 1
