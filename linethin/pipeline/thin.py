# linethin/pipeline/thin.py
# image bytes -> binarize -> Zhang-Suen -> PNG bytes, never raising across the boundary
from __future__ import annotations
from pathlib import Path
from typing import Any, Mapping, Union

from loguru import logger

from linethin.cv.skeletonize import DEFAULT_MAX_PASSES, from_binary, skeletonize, to_binary
from linethin.schema.errors import ThinningError
from linethin.schema.types import ThinningConfig, ThinResult
from linethin.utils.image import decode_image, encode_png
from linethin.utils.io import read_bytes, write_bytes
from linethin.utils.timers import timer
from linethin.utils.validators import DEFAULT_MAX_INPUT_BYTES, check_input_size, parse_config

ConfigLike = Union[ThinningConfig, Mapping[str, Any], str, bytes]


def thin(image_bytes: bytes, config: ConfigLike,
         max_passes: int = DEFAULT_MAX_PASSES,
         max_input_bytes: int = DEFAULT_MAX_INPUT_BYTES) -> ThinResult:
    """
    Thin the strokes of an encoded image and return the result as PNG.

    `config` may be a ThinningConfig, a mapping, or the JSON string an upload
    form carries. Failures come back as `ThinResult(success=False, ...)` with
    `error_kind` set to "decode", "config" or "processing".
    """
    try:
        cfg = parse_config(config)
        check_input_size(image_bytes, max_input_bytes)
        pixels = decode_image(image_bytes)
        height, width = pixels.shape[:2]
        logger.info(f"[thin] {width}x{height} px, iterations={cfg.iterations}, "
                    f"preserve_endpoints={cfg.preserve_endpoints}, style={cfg.output_style}")

        with timer("thin"):
            mask = to_binary(pixels)
            mask, stats = skeletonize(mask, cfg.iterations, cfg.preserve_endpoints, max_passes=max_passes)
            png = encode_png(from_binary(mask, cfg.output_style))
    except ThinningError as e:
        if e.kind == "processing":
            logger.exception("[thin] processing error")
        else:
            logger.warning(f"[thin] {e.kind} error: {e}")
        return ThinResult.failure(str(e), e.kind)
    except Exception as e:
        logger.exception("[thin] unexpected failure")
        return ThinResult.failure(str(e) or "Unknown error during thinning", "processing")

    logger.info(f"[thin] removed {stats.removed} of {stats.foreground_before} foreground px "
                f"in {stats.passes} passes ({stats.state.value})")
    return ThinResult.ok(png, width, height, stats)


def thin_file(src: Union[str, Path], dst: Union[str, Path], config: ConfigLike, **kwargs) -> ThinResult:
    """Thin `src` and write the PNG to `dst`; nothing is written on failure."""
    try:
        data = read_bytes(src)
    except OSError as e:
        logger.warning(f"[thin] cannot read {src}: {e}")
        return ThinResult.failure(f"Could not read input file: {src}", "decode")

    result = thin(data, config, **kwargs)
    if result.success:
        write_bytes(result.image, dst)
        logger.info(f"[thin] wrote {dst}")
    return result
