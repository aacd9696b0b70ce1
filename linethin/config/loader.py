# linethin/config/loader.py
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from omegaconf import OmegaConf, ListConfig
from dotenv import load_dotenv
from pathlib import Path
import os, warnings

from linethin.schema.types import ThinningConfig

# used when configs/*.yaml are not shipped (e.g. installed wheel)
DEFAULTS = {
    "logging": {"level": "INFO"},
    "thinning": {
        "iterations": 1,
        "preserve_endpoints": False,
        "output_style": "black-on-white",
        "max_passes": 10000,
    },
    "limits": {"max_input_bytes": 50 * 1024 * 1024},
    "paths": {"output_root": "./data/thinned"},
}

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LINETHIN_")

    LOG_LEVEL: Optional[str] = None
    MAX_PASSES: Optional[int] = None
    OUTPUT_ROOT: Optional[str] = None

def _abs(root: Path, p: str) -> str:
    pth = Path(p)
    return str((pth if pth.is_absolute() else (root / pth)).resolve())

def _merge_yaml(cfg, path_obj):
    """
    Load YAML and merge into cfg. A missing file is a no-op;
    a file whose root is a list is skipped with a warning.
    """
    p = Path(path_obj)
    if not p.exists():
        return cfg
    y = OmegaConf.load(p)
    if isinstance(y, ListConfig):
        warnings.warn(f"[loader] '{p}' has a top-level list; ignoring it.")
        return cfg
    return OmegaConf.merge(cfg, y)

def load_cfg(root=None):
    load_dotenv()

    def _env_resolver(var, default=None):
        return os.environ.get(var, default)
    OmegaConf.register_new_resolver("env", _env_resolver, replace=True)

    root = Path(root) if root else Path(__file__).resolve().parents[2]

    conf = OmegaConf.create(DEFAULTS)
    conf = _merge_yaml(conf, root / "configs" / "base.yaml")
    conf = _merge_yaml(conf, root / "configs" / "thinning.yaml")

    # ---- optional profile overlay ----
    profile = os.environ.get("CFG_PROFILE")
    if profile:
        conf = _merge_yaml(conf, root / "configs" / "profiles" / f"{profile}.yaml")

    # ---- env overrides win over yaml ----
    s = Settings()
    if s.LOG_LEVEL:
        conf.logging.level = s.LOG_LEVEL
    if s.MAX_PASSES is not None:
        conf.thinning.max_passes = s.MAX_PASSES
    if s.OUTPUT_ROOT:
        conf.paths.output_root = s.OUTPUT_ROOT

    conf = OmegaConf.create(OmegaConf.to_container(conf, resolve=True))
    conf.paths.output_root = _abs(root, conf.paths.output_root)
    conf.root = str(root)
    return conf

def default_thinning(cfg) -> dict:
    """Per-call defaults from cfg.thinning, keyed the way the upload form sends them."""
    t = cfg.thinning
    return {
        "iterations": int(t.iterations),
        "preserveEndpoints": bool(t.preserve_endpoints),
        "outputStyle": str(t.output_style),
    }

def thinning_config(cfg) -> ThinningConfig:
    return ThinningConfig.model_validate(default_thinning(cfg))
