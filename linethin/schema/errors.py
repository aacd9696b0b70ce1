# error taxonomy: decode / config / processing
# linethin/schema/errors.py
from __future__ import annotations


class ThinningError(ValueError):
    """Base class; `kind` is the tag carried into a failed ThinResult."""
    kind = "processing"


class DecodeError(ThinningError):
    kind = "decode"


class ConfigError(ThinningError):
    kind = "config"


class ProcessingError(ThinningError):
    kind = "processing"
