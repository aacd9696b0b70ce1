from pathlib import Path

import pytest

from linethin.config.loader import default_thinning, load_cfg, thinning_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for k in ("CFG_PROFILE", "LOG_LEVEL", "LINETHIN_LOG_LEVEL", "LINETHIN_MAX_PASSES", "LINETHIN_OUTPUT_ROOT"):
        monkeypatch.delenv(k, raising=False)


def _write(root: Path, rel: str, text: str):
    p = root / rel
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")


def test_builtin_defaults_without_yaml(tmp_path):
    cfg = load_cfg(tmp_path)
    assert cfg.logging.level == "INFO"
    assert cfg.thinning.iterations == 1
    assert cfg.thinning.max_passes == 10000
    assert cfg.limits.max_input_bytes == 50 * 1024 * 1024
    assert Path(cfg.paths.output_root).is_absolute()
    assert cfg.root == str(tmp_path)


def test_yaml_layers_and_profile(tmp_path, monkeypatch):
    _write(tmp_path, "configs/base.yaml", "logging:\n  level: WARNING\n")
    _write(tmp_path, "configs/thinning.yaml", "thinning:\n  iterations: 3\n  output_style: white-on-black\n")
    _write(tmp_path, "configs/profiles/tight.yaml", "thinning:\n  max_passes: 7\n")
    monkeypatch.setenv("CFG_PROFILE", "tight")

    cfg = load_cfg(tmp_path)
    assert cfg.logging.level == "WARNING"
    assert cfg.thinning.iterations == 3
    assert cfg.thinning.max_passes == 7
    # untouched defaults survive the merge
    assert cfg.thinning.preserve_endpoints is False


def test_env_resolver_in_yaml(tmp_path, monkeypatch):
    _write(tmp_path, "configs/base.yaml", "logging:\n  level: ${env:LOG_LEVEL,INFO}\n")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    assert load_cfg(tmp_path).logging.level == "DEBUG"


def test_settings_override_yaml(tmp_path, monkeypatch):
    _write(tmp_path, "configs/thinning.yaml", "thinning:\n  max_passes: 50\n")
    monkeypatch.setenv("LINETHIN_MAX_PASSES", "12")
    monkeypatch.setenv("LINETHIN_OUTPUT_ROOT", "out/here")
    cfg = load_cfg(tmp_path)
    assert cfg.thinning.max_passes == 12
    assert cfg.paths.output_root == str((tmp_path / "out/here").resolve())


def test_top_level_list_yaml_is_skipped(tmp_path):
    _write(tmp_path, "configs/thinning.yaml", "- iterations\n- 4\n")
    with pytest.warns(UserWarning, match="top-level list"):
        cfg = load_cfg(tmp_path)
    assert cfg.thinning.iterations == 1


def test_thinning_defaults_feed_a_config(tmp_path):
    _write(tmp_path, "configs/thinning.yaml", "thinning:\n  iterations: 2\n  preserve_endpoints: true\n")
    cfg = load_cfg(tmp_path)
    assert default_thinning(cfg) == {"iterations": 2, "preserveEndpoints": True, "outputStyle": "black-on-white"}
    assert thinning_config(cfg).preserve_endpoints is True


def test_repo_configs_load():
    cfg = load_cfg()
    assert cfg.thinning.output_style in ("black-on-white", "white-on-black")
