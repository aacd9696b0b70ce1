# config validators
# linethin/utils/validators.py
from __future__ import annotations
import json
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from linethin.schema.errors import ConfigError
from linethin.schema.types import ITERATIONS_MAX, ITERATIONS_MIN, OUTPUT_STYLES, ThinningConfig

DEFAULT_MAX_INPUT_BYTES = 50 * 1024 * 1024

BAD_JSON = "Invalid config JSON"
BAD_STYLE = 'Invalid outputStyle. Must be "black-on-white" or "white-on-black"'
BAD_ITERATIONS = f"Invalid iterations. Must be between {ITERATIONS_MIN} and {ITERATIONS_MAX}"
BAD_ENDPOINTS = "Invalid preserveEndpoints. Must be true or false"

def _pick(c: Mapping[str, Any], alias: str, name: str):
    if alias in c: return True, c[alias]
    if name in c: return True, c[name]
    return False, None

def validate_config(c: Mapping[str, Any]) -> List[str]:
    """`iterations` and `outputStyle` are required; `preserveEndpoints` is optional."""
    err = []
    has, style = _pick(c, "outputStyle", "output_style")
    if not has or style not in OUTPUT_STYLES:
        err.append(BAD_STYLE)
    has, it = _pick(c, "iterations", "iterations")
    if not has or isinstance(it, bool) or not isinstance(it, int) or not ITERATIONS_MIN <= it <= ITERATIONS_MAX:
        err.append(BAD_ITERATIONS)
    has, pe = _pick(c, "preserveEndpoints", "preserve_endpoints")
    if has and pe is not None and not isinstance(pe, bool):
        err.append(BAD_ENDPOINTS)
    return err

def parse_config(raw) -> ThinningConfig:
    """
    Accept a ThinningConfig, a mapping, or a JSON object string and return a
    validated ThinningConfig. Raises ConfigError with a user-facing message.
    """
    if isinstance(raw, ThinningConfig):
        # re-check: model_construct() skips validation
        data: Dict[str, Any] = raw.model_dump(by_alias=True)
    elif isinstance(raw, (str, bytes, bytearray)):
        try:
            data = json.loads(raw)
        except ValueError as exc:   # JSONDecodeError, or undecodable bytes
            raise ConfigError(BAD_JSON) from exc
        if not isinstance(data, dict):
            raise ConfigError(BAD_JSON)
    elif isinstance(raw, Mapping):
        data = dict(raw)
    else:
        raise ConfigError(f"Unsupported config type: {type(raw).__name__}")

    if data.get("preserveEndpoints", data.get("preserve_endpoints", False)) is None:
        data.pop("preserveEndpoints", None); data.pop("preserve_endpoints", None)

    errors = validate_config(data)
    if errors:
        raise ConfigError("; ".join(errors))
    try:
        return ThinningConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config: {exc.error_count()} validation error(s)") from exc

def check_input_size(data: bytes, max_bytes: int = DEFAULT_MAX_INPUT_BYTES) -> None:
    if len(data) > max_bytes:
        raise ConfigError(f"Image is {len(data)} bytes; limit is {max_bytes} bytes")
