import pytest

from escape_fix.core.entities import repair_marker_artifacts, revert_entities, revert_entities_in_line
from escape_fix.scanning.fences import scan_regions
from escape_fix.scanning.models import split_lines


@pytest.mark.parametrize("broken, fixed", [
    ("style=&#123;&#123;flex:1&#125;&#125;", "style={{flex:1}}"),
    ("style={{#123;flex:1}}#125;", "style={{flex:1}}"),
    ("style={{#123;{{#123;flex:1}}#125;}}#125;", "style={{flex:1}}"),
    ("style=&#x7B;&#x7b;a&#x7D;&#x7d;", "style={{a}}"),
    ("style={{flex:1}}", "style={{flex:1}}"),
    ("a single &#123; entity", "a single &#123; entity"),
])
def test_revert_entities_in_line(broken, fixed):
    assert revert_entities_in_line(broken) == fixed


def test_revert_is_idempotent():
    once = revert_entities_in_line("{{#123;{{#123;{{#123;x")
    assert revert_entities_in_line(once) == once


def test_only_code_content_is_repaired():
    text = (
        "Prose keeps &#123;&#123; as written.\n"
        "```js\n"
        "<View style=&#123;&#123;flex:1&#125;&#125; />\n"
        "```\n"
    )
    lines = split_lines(text)
    new_lines, changed = revert_entities(lines, scan_regions(lines))

    assert changed == [2]
    assert new_lines[0] == lines[0]
    assert new_lines[2] == "<View style={{flex:1}} />\n"
    assert lines[2] != new_lines[2]


@pytest.mark.parametrize("broken, fixed", [
    ("{{% raw %}\n", "{% raw %}\n"),
    ("style={{% raw %}{{flex:1}}% endraw %}}\n", "style={% raw %}{{flex:1}}{% endraw %}\n"),
    ("{{{% raw %}x\n", "{% raw %}x\n"),
    ("{% raw %}{{a}}{% endraw %}}\n", "{% raw %}{{a}}{% endraw %}}\n"),
    ("plain text\n", "plain text\n"),
])
def test_mangled_markers_are_restored(broken, fixed):
    new_lines, changed = repair_marker_artifacts([broken], "{% raw %}", "{% endraw %}")
    assert new_lines == [fixed]
    assert changed == ([0] if broken != fixed else [])


def test_marker_repair_is_idempotent():
    once, _ = repair_marker_artifacts(["{{{% raw %}a% endraw %}}}\n"], "{% raw %}", "{% endraw %}")
    twice, changed = repair_marker_artifacts(once, "{% raw %}", "{% endraw %}")
    assert twice == once
    assert changed == []


def test_non_liquid_markers_have_no_artifacts():
    lines = ["{{% raw %}\n"]
    assert repair_marker_artifacts(lines, "<!-- raw -->", "<!-- endraw -->") == (lines, [])
