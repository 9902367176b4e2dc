import json

import pytest

from ampify import app
from ampify.core.managers.config_manager import config_manager


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # main() would otherwise replace the root logging handlers used by pytest
    monkeypatch.setattr(app, "configure_logger", lambda *args, **kwargs: None)
    config_manager.reset()
    yield
    config_manager.reset()


@pytest.fixture
def site(tmp_path):
    (tmp_path / "index.html").write_text(
        '<html lang="nl"><head><title>Hoi</title></head><body><p>x</p><script>alert(1)</script></body></html>',
        encoding="utf-8",
    )
    (tmp_path / "styles").mkdir()
    (tmp_path / "styles" / "main.css").write_text("p { margin: 0; }", encoding="utf-8")
    (tmp_path / ".stylesrc.json").write_text(json.dumps({"plugins": ["minify"]}))
    return tmp_path


def test_build_success(site, capsys):
    exit_code = app.main(["build", "--root", str(site), "--no-progress"])

    assert exit_code == 0
    output = site / "amp" / "index.html"
    html = output.read_text(encoding="utf-8")
    assert html.startswith("<!DOCTYPE html><html amp lang=nl>")
    assert '<style amp-custom="">p{margin:0}</style>' in html
    assert "Wrote" in capsys.readouterr().out


def test_build_with_explicit_paths(site, tmp_path_factory):
    target = tmp_path_factory.mktemp("dist") / "page.html"

    exit_code = app.main([
        "build", "--root", str(site), "--output", str(target), "--no-progress",
    ])

    assert exit_code == 0
    assert target.exists()
    assert not (site / "amp").exists()


def test_build_with_config_override(site):
    exit_code = app.main([
        "build", "--root", str(site), "--set", "analytics.account=UA-7-7", "--no-progress",
    ])

    assert exit_code == 0
    assert '"account":"UA-7-7"' in (site / "amp" / "index.html").read_text(encoding="utf-8")


def test_build_invalid_override(site, capsys):
    assert app.main(["build", "--root", str(site), "--set", "no-equals-sign"]) == 1
    assert "Invalid override" in capsys.readouterr().out


def test_build_failure_is_reported(site, capsys):
    (site / "index.html").unlink()

    exit_code = app.main(["build", "--root", str(site), "--no-progress"])

    assert exit_code == 1
    assert "LoadError" in capsys.readouterr().err
    assert not (site / "amp").exists()


def test_build_data_error_is_reported(site, capsys):
    (site / "index.html").write_text(
        '<head><script type="application/ld+json">[1,</script></head><body></body>', encoding="utf-8"
    )

    assert app.main(["build", "--root", str(site), "--no-progress"]) == 1
    assert "DataError" in capsys.readouterr().err
    assert not (site / "amp" / "index.html").exists()


def test_shim_to_stdout(capsys):
    assert app.main(["shim"]) == 0
    out = capsys.readouterr().out
    assert 'link[rel="preload"]' in out
    assert "'stylesheet'" in out


def test_shim_to_file(tmp_path):
    target = tmp_path / "js" / "preload.js"

    assert app.main(["shim", "--output", str(target)]) == 0
    assert "querySelectorAll" in target.read_text(encoding="utf-8")


def test_no_subcommand_prints_help(capsys):
    assert app.main([]) == 1
    assert "usage: ampify" in capsys.readouterr().out


def test_unknown_arguments():
    assert app.main(["build", "--bogus"]) == 2


def test_build_invalid_config_value_is_reported(site, capsys):
    exit_code = app.main(["build", "--root", str(site), "--set", "styles.max_bytes=abc", "--no-progress"])

    assert exit_code == 1
    assert "❌ Build failed: ConfigError" in capsys.readouterr().err
    assert not (site / "amp").exists()
