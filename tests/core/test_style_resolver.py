# tests/core/test_style_resolver.py
import asyncio
import json
import logging

import pytest

from ampify.errors import StyleCompileError
from ampify.styles.config_discovery import discover_config, find_config_file
from ampify.styles.core import StylePlugin
from ampify.styles.registry import StylePluginRegistry
from ampify.styles.resolver import StyleResolver, strip_charset


def make_stylesheet(root, css, plugins=None, config_name=".stylesrc.json"):
    """Creates <root>/styles/main.css and a style configuration in <root>."""
    styles = root / "styles"
    styles.mkdir(parents=True, exist_ok=True)
    stylesheet = styles / "main.css"
    stylesheet.write_text(css, encoding="utf-8")
    if plugins is not None:
        (root / config_name).write_text(json.dumps({"plugins": plugins}))
    return stylesheet


def resolve(stylesheet, **kwargs):
    return asyncio.run(StyleResolver(stylesheet, **kwargs).resolve())


# --- Config discovery ---

def test_discover_config_searches_ancestors(tmp_path):
    stylesheet = make_stylesheet(tmp_path, "a{}", plugins={"comments": {}, "minify": {}})

    config = discover_config(stylesheet)

    assert config is not None
    assert config.source == (tmp_path / ".stylesrc.json").resolve()
    assert [p.name for p in config.plugins] == ["comments", "minify"]


def test_discover_config_prefers_nearest_file(tmp_path):
    stylesheet = make_stylesheet(tmp_path, "a{}", plugins=["minify"])
    (stylesheet.parent / "stylesrc.json").write_text(json.dumps({"plugins": ["comments"]}))

    config = discover_config(stylesheet)

    assert config.source == (stylesheet.parent / "stylesrc.json").resolve()
    assert [p.name for p in config.plugins] == ["comments"]


def test_discover_config_list_form_with_options(tmp_path):
    stylesheet = make_stylesheet(
        tmp_path, "a{}",
        plugins=["comments", ["autoprefix", {"properties": {"appearance": ["-webkit-"]}}]],
    )

    config = discover_config(stylesheet)

    assert config.plugins[1].name == "autoprefix"
    assert config.plugins[1].options == {"properties": {"appearance": ["-webkit-"]}}


def test_discover_config_rejects_invalid_json(tmp_path):
    stylesheet = make_stylesheet(tmp_path, "a{}")
    (tmp_path / ".stylesrc").write_text("{not json")

    with pytest.raises(ValueError):
        discover_config(stylesheet)


def test_find_config_file_from_directory(tmp_path):
    make_stylesheet(tmp_path, "a{}", plugins=[], config_name=".stylesrc")
    assert find_config_file(tmp_path) == (tmp_path / ".stylesrc").resolve()


# --- Plugins ---

def test_registry_discovers_builtin_plugins():
    names = StylePluginRegistry.get_all_names()
    assert {"autoprefix", "comments", "minify"} <= set(names)


def test_minify_plugin():
    minify = StylePluginRegistry.get_plugin("minify")
    assert minify("body {\n  color: red;\n  margin: 0 auto;\n}\n", {}) == "body{color:red;margin:0 auto}"


def test_comments_plugin_keeps_important_comments():
    comments = StylePluginRegistry.get_plugin("comments")
    css = "/*! license */a{}/* note */b{}"
    assert comments(css, {}) == "/*! license */a{}b{}"
    assert comments(css, {"all": True}) == "a{}b{}"


def test_autoprefix_plugin():
    autoprefix = StylePluginRegistry.get_plugin("autoprefix")

    result = autoprefix("a{user-select:none}", {})
    assert result == "a{-webkit-user-select:none;-moz-user-select:none;-ms-user-select:none;user-select:none}"

    # Declarations that are already prefixed stay as they are
    assert autoprefix("b{-webkit-appearance:none}", {}) == "b{-webkit-appearance:none}"


def test_autoprefix_custom_table():
    autoprefix = StylePluginRegistry.get_plugin("autoprefix")
    result = autoprefix("a{tab-size:4}", {"properties": {"tab-size": ["-moz-"]}})
    assert result == "a{-moz-tab-size:4;tab-size:4}"


# --- Resolver ---

def test_strip_charset_only_first_directive():
    assert strip_charset('@charset "UTF-8";body{color:red}') == "body{color:red}"
    assert strip_charset('@charset "a";@charset "b";') == '@charset "b";'


def test_resolve_strips_charset(tmp_path):
    stylesheet = make_stylesheet(tmp_path, '@charset "UTF-8";body{color:red}', plugins={})
    assert resolve(stylesheet) == "body{color:red}"


def test_resolve_runs_plugins_in_order(tmp_path):
    css = '@charset "UTF-8";\n/* header */\n.box {\n  appearance: none;\n}\n'
    stylesheet = make_stylesheet(tmp_path, css, plugins={"comments": {}, "autoprefix": {}, "minify": {}})

    assert resolve(stylesheet) == ".box{-webkit-appearance:none;-moz-appearance:none;appearance:none}"


def test_resolve_empty_stylesheet(tmp_path):
    stylesheet = make_stylesheet(tmp_path, "", plugins={"minify": {}})
    assert resolve(stylesheet) == ""


def test_resolve_missing_stylesheet(tmp_path):
    (tmp_path / ".stylesrc.json").write_text(json.dumps({"plugins": {}}))

    with pytest.raises(StyleCompileError, match="Cannot read stylesheet"):
        resolve(tmp_path / "styles" / "missing.css")


def test_resolve_without_configuration(tmp_path, monkeypatch):
    stylesheet = make_stylesheet(tmp_path, "a{}")
    monkeypatch.setattr("ampify.styles.resolver.discover_config", lambda path: None)

    with pytest.raises(StyleCompileError, match="No style configuration"):
        resolve(stylesheet)


def test_resolve_invalid_configuration(tmp_path):
    stylesheet = make_stylesheet(tmp_path, "a{}")
    (tmp_path / ".stylesrc.json").write_text('{"plugins": 42}')

    with pytest.raises(StyleCompileError, match="Invalid style configuration"):
        resolve(stylesheet)


def test_resolve_unknown_plugin(tmp_path):
    stylesheet = make_stylesheet(tmp_path, "a{}", plugins=["does-not-exist"])

    with pytest.raises(StyleCompileError, match="Unknown style plugin 'does-not-exist'"):
        resolve(stylesheet)


def test_resolve_plugin_failure(tmp_path, monkeypatch):
    def explode(css, options):
        raise RuntimeError("boom")

    StylePluginRegistry.discover()
    monkeypatch.setitem(StylePluginRegistry._plugins, "explode", StylePlugin("explode", explode))
    stylesheet = make_stylesheet(tmp_path, "a{}", plugins=["explode"])

    with pytest.raises(StyleCompileError, match="boom"):
        resolve(stylesheet)


def test_resolve_warns_above_budget(tmp_path, caplog):
    stylesheet = make_stylesheet(tmp_path, "body{color:red}", plugins={})

    with caplog.at_level(logging.WARNING, logger="ampify.styles.resolver"):
        css = resolve(stylesheet, max_bytes=5)

    assert css == "body{color:red}"
    assert "byte budget" in caplog.text


def test_resolve_reads_every_time(tmp_path):
    stylesheet = make_stylesheet(tmp_path, "a{color:red}", plugins={})
    resolver = StyleResolver(stylesheet)

    assert asyncio.run(resolver.resolve()) == "a{color:red}"
    stylesheet.write_text("a{color:blue}")
    assert asyncio.run(resolver.resolve()) == "a{color:blue}"


def test_resolve_uses_text_read_earlier(tmp_path):
    stylesheet = make_stylesheet(tmp_path, "a { color: red; }", plugins=["minify"])
    resolver = StyleResolver(stylesheet)

    async def scenario():
        css = await resolver.read()
        stylesheet.unlink()
        return await resolver.resolve(css)

    assert asyncio.run(scenario()) == "a{color:red}"
