# pydantic models: ThinningConfig, ThinningStats, ThinResult
from __future__ import annotations
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

OutputStyle = Literal["black-on-white", "white-on-black"]
OUTPUT_STYLES = ("black-on-white", "white-on-black")

ITERATIONS_MIN = 1
ITERATIONS_MAX = 20

ErrorKind = Literal["decode", "config", "processing"]


class ThinningState(str, Enum):
    RUNNING = "running"
    CONVERGED = "converged"
    ITERATION_LIMIT_REACHED = "iteration-limit-reached"


class ThinningConfig(BaseModel):
    """
    Per-call thinning parameters. Accepts both snake_case names and the
    camelCase keys the upload form sends (`preserveEndpoints`, `outputStyle`).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    iterations: int = Field(1, ge=ITERATIONS_MIN, le=ITERATIONS_MAX)
    preserve_endpoints: bool = Field(False, alias="preserveEndpoints")
    output_style: OutputStyle = Field("black-on-white", alias="outputStyle")


class ThinningStats(BaseModel):
    passes: int = 0
    foreground_before: int = 0
    foreground_after: int = 0
    state: ThinningState = ThinningState.RUNNING

    @property
    def removed(self) -> int:
        return self.foreground_before - self.foreground_after


class ThinResult(BaseModel):
    success: bool
    image: Optional[bytes] = None        # encoded PNG on success
    width: Optional[int] = None
    height: Optional[int] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    stats: Optional[ThinningStats] = None

    @classmethod
    def ok(cls, image: bytes, width: int, height: int, stats: ThinningStats) -> "ThinResult":
        return cls(success=True, image=image, width=width, height=height, stats=stats)

    @classmethod
    def failure(cls, error: str, kind: ErrorKind = "processing") -> "ThinResult":
        return cls(success=False, error=error, error_kind=kind)
