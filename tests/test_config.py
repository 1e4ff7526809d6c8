import re

import pytest

from escape_fix.config import EscapeConfig
from escape_fix.errors import ConfigError


def test_defaults(tmp_path):
    config = EscapeConfig.load(tmp_path)

    assert config.begin_marker == "{% raw %}"
    assert config.end_marker == "{% endraw %}"
    assert config.extensions == [".md", ".markdown"]
    assert "_site" in config.exclude_dirs
    assert config.build_command == "bundle exec jekyll build"
    assert config.workers == 4
    assert not config.dry_run


def test_values_from_config_file(tmp_path):
    (tmp_path / ".escape-fix.yml").write_text(
        "markers:\n"
        "  begin: '<!-- raw -->'\n"
        "  end: '<!-- endraw -->'\n"
        "extensions: [md, .mdx]\n"
        "exclude_dirs: [build]\n"
        "exclude_files: ['drafts/*']\n"
        "ignore_patterns: ['\\{\\{%']\n"
        "backup_suffix: .orig\n"
        "workers: 2\n"
        "revert_entities: true\n"
        "build:\n"
        "  command: make html\n"
        "  timeout: 90\n"
    )

    config = EscapeConfig.load(tmp_path)

    assert config.begin_marker == "<!-- raw -->"
    assert config.end_marker == "<!-- endraw -->"
    assert config.extensions == [".md", ".mdx"]
    assert config.exclude_dirs == ["build"]
    assert config.exclude_files == ["drafts/*"]
    assert [p.pattern for p in config.compiled_ignore_patterns()] == [r"\{\{%"]
    assert config.backup_suffix == ".orig"
    assert config.workers == 2
    assert config.revert_entities
    assert config.build_command == "make html"
    assert config.build_timeout == 90.0


def test_overrides_win_and_none_is_ignored(tmp_path):
    (tmp_path / ".escape-fix.yml").write_text("workers: 2\nbuild:\n  command: make html\n")

    config = EscapeConfig.load(tmp_path, workers=8, build_command=None, dry_run=True)

    assert config.workers == 8
    assert config.build_command == "make html"
    assert config.dry_run


def test_explicit_config_path(tmp_path):
    path = tmp_path / "custom.yml"
    path.write_text("workers: 1\n")
    assert EscapeConfig.load(tmp_path / "elsewhere", config_path=path).workers == 1


def test_missing_explicit_config_path(tmp_path):
    with pytest.raises(ConfigError, match="Config file not found"):
        EscapeConfig.load(tmp_path, config_path=tmp_path / "nope.yml")


@pytest.mark.parametrize("content, message", [
    ("workers: [1\n", "Invalid YAML"),
    ("- a\n- b\n", "must contain a YAML object"),
    ("markers: '{% raw %}'\n", "'markers' must be a mapping"),
    ("extensions: md\n", "'extensions' must be a list"),
    ("workers: many\n", "'workers' must be a number"),
    ("workers: 0\n", "workers must be at least 1"),
    ("markers:\n  begin: X\n  end: X\n", "must differ"),
    ("markers:\n  begin: ''\n", "must not be empty"),
    ("ignore_patterns: ['(']\n", "Invalid ignore pattern"),
    ("build:\n  timeout: 0\n", "timeout must be positive"),
    ("unknown_key: 1\n", None),
])
def test_invalid_config(tmp_path, content, message):
    (tmp_path / ".escape-fix.yml").write_text(content)
    if message is None:
        # Unknown keys are ignored
        EscapeConfig.load(tmp_path)
        return
    with pytest.raises(ConfigError, match=re.escape(message)):
        EscapeConfig.load(tmp_path)


def test_unknown_override_is_a_config_error(tmp_path):
    with pytest.raises(ConfigError, match="Invalid configuration"):
        EscapeConfig.load(tmp_path, colour="blue")
