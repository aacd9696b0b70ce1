# linethin: Zhang-Suen skeletonization for raster line art
from linethin.pipeline.thin import thin, thin_file
from linethin.schema.errors import ConfigError, DecodeError, ProcessingError, ThinningError
from linethin.schema.types import ThinningConfig, ThinningState, ThinningStats, ThinResult

__all__ = [
    "thin",
    "thin_file",
    "ThinningConfig",
    "ThinningState",
    "ThinningStats",
    "ThinResult",
    "ThinningError",
    "DecodeError",
    "ConfigError",
    "ProcessingError",
]
