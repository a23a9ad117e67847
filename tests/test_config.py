from __future__ import annotations

from pathlib import Path

from prism.config import GateSettings, gate_defaults, resolve_gate_settings


def _write_config(root: Path, text: str) -> Path:
    path = root / "prism.toml"
    path.write_text(text.strip() + "\n", encoding="utf-8")
    return path


def test_defaults_without_config_or_environment(tmp_path: Path) -> None:
    assert resolve_gate_settings(root=tmp_path, environ={}) == GateSettings()


def test_config_section_overrides_defaults(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[gate]
registry_path = "policy/registry.yaml"
base_ref = "trunk"
fetch_depth = 50
""",
    )
    settings = resolve_gate_settings(root=tmp_path, environ={})
    assert settings.registry_path == Path("policy/registry.yaml")
    assert settings.base_ref == "trunk"
    assert settings.fetch_depth == 50
    assert settings.intent_path == Path("INTENT.json")


def test_environment_beats_config_and_cli_beats_environment(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[gate]
intent_path = "from-config.json"
base_ref = "trunk"
""",
    )
    environ = {
        "INTENT_PATH": "from-env.json",
        "GITHUB_BASE_REF": "release",
        "PRISM_FETCH_DEPTH": "25",
    }
    from_env = resolve_gate_settings(root=tmp_path, environ=environ)
    assert from_env.intent_path == Path("from-env.json")
    assert from_env.base_ref == "release"
    assert from_env.fetch_depth == 25

    from_cli = resolve_gate_settings(
        {"intent_path": Path("from-cli.json"), "base_ref": "hotfix", "fetch_depth": None},
        root=tmp_path,
        environ=environ,
    )
    assert from_cli.intent_path == Path("from-cli.json")
    assert from_cli.base_ref == "hotfix"
    assert from_cli.fetch_depth == 25


def test_blank_or_invalid_values_fall_through(tmp_path: Path) -> None:
    _write_config(tmp_path, "[gate]\nfetch_depth = 0\n")
    settings = resolve_gate_settings(
        {"base_ref": "   "},
        root=tmp_path,
        environ={"GITHUB_BASE_REF": "", "PRISM_FETCH_DEPTH": "deep"},
    )
    assert settings.base_ref == "main"
    assert settings.fetch_depth == 200


def test_malformed_config_is_ignored(tmp_path: Path) -> None:
    config = _write_config(tmp_path, "[gate\nbase_ref = ")
    assert gate_defaults(config_path=config) == {}


def test_explicit_config_path(tmp_path: Path) -> None:
    config = tmp_path / "ci" / "gate.toml"
    config.parent.mkdir()
    config.write_text('[gate]\nremote = "upstream"\n', encoding="utf-8")
    settings = resolve_gate_settings(root=tmp_path, config_path=config, environ={})
    assert settings.remote == "upstream"


def test_under_anchors_paths_at_root(tmp_path: Path) -> None:
    settings = GateSettings().under(tmp_path)
    assert settings.intent_path == tmp_path / "INTENT.json"
    assert settings.registry_path == tmp_path / ".prism" / "surface_registry.yaml"
    assert settings.bootstrap_lock_path == tmp_path / ".prism" / "bootstrap.lock"
    assert settings.meaning_out_path == tmp_path / "meaning.json"
    assert settings.base_ref == "main"
