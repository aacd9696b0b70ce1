import json
from pathlib import Path
from typing import Optional

import typer

from linethin.config.loader import default_thinning, load_cfg
from linethin.pipeline.thin import thin_file
from linethin.utils.io import write_json
from linethin.utils.logging import setup_logging
from linethin.utils.validators import BAD_JSON

app = typer.Typer(add_completion=False, help="Zhang-Suen line thinning for raster line art.")

FORM_KEYS = {"preserve_endpoints": "preserveEndpoints", "output_style": "outputStyle"}
IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tif", ".tiff", ".webp"}

def _call_config(cfg, iterations, preserve_endpoints, output_style, config_json) -> dict:
    """yaml defaults < --config-json < explicit flags"""
    data = default_thinning(cfg)
    if config_json:
        try:
            extra = json.loads(config_json)
        except json.JSONDecodeError:
            raise typer.BadParameter(BAD_JSON, param_hint="--config-json")
        if not isinstance(extra, dict):
            raise typer.BadParameter(BAD_JSON, param_hint="--config-json")
        data.update({FORM_KEYS.get(k, k): v for k, v in extra.items()})
    if iterations is not None: data["iterations"] = iterations
    if preserve_endpoints is not None: data["preserveEndpoints"] = preserve_endpoints
    if output_style is not None: data["outputStyle"] = output_style
    return data

def _limits(cfg) -> dict:
    return {
        "max_passes": int(cfg.thinning.max_passes),
        "max_input_bytes": int(cfg.limits.max_input_bytes),
    }

@app.command("thin")
def thin_one(
    input: Path = typer.Argument(..., exists=True, dir_okay=False, help="Input image"),
    output: Path = typer.Argument(..., dir_okay=False, help="Output PNG"),
    iterations: Optional[int] = typer.Option(None, "--iterations", "-n", help="Outer iterations (1-20)"),
    preserve_endpoints: Optional[bool] = typer.Option(None, "--preserve-endpoints/--no-preserve-endpoints"),
    output_style: Optional[str] = typer.Option(None, "--output-style", help="black-on-white | white-on-black"),
    config_json: Optional[str] = typer.Option(None, "--config-json", help="Config as a JSON object"),
):
    cfg = load_cfg()
    log = setup_logging(cfg.logging.level)
    call = _call_config(cfg, iterations, preserve_endpoints, output_style, config_json)

    result = thin_file(input, output, call, **_limits(cfg))
    if not result.success:
        log.error(f"[cli] {input}: {result.error}")
        typer.echo(f"error ({result.error_kind}): {result.error}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{output} {result.width}x{result.height} passes={result.stats.passes} "
               f"removed={result.stats.removed}")

@app.command("batch")
def thin_batch(
    input_dir: Path = typer.Argument(..., exists=True, file_okay=False, help="Folder of images"),
    output_dir: Optional[Path] = typer.Argument(None, file_okay=False, help="Defaults to paths.output_root"),
    pattern: str = typer.Option("*", "--pattern", help="Glob for input files; non-image suffixes are skipped"),
    iterations: Optional[int] = typer.Option(None, "--iterations", "-n"),
    preserve_endpoints: Optional[bool] = typer.Option(None, "--preserve-endpoints/--no-preserve-endpoints"),
    output_style: Optional[str] = typer.Option(None, "--output-style"),
    config_json: Optional[str] = typer.Option(None, "--config-json"),
):
    cfg = load_cfg()
    log = setup_logging(cfg.logging.level)
    call = _call_config(cfg, iterations, preserve_endpoints, output_style, config_json)
    out_root = output_dir or Path(cfg.paths.output_root)
    if out_root.resolve() == input_dir.resolve():
        raise typer.BadParameter("must differ from INPUT_DIR", param_hint="OUTPUT_DIR")

    files = sorted(p for p in input_dir.glob(pattern)
                   if p.is_file() and p.suffix.lower() in IMAGE_SUFFIXES)
    if not files:
        log.warning(f"[cli] no files matching {pattern} under {input_dir}")

    rows = []
    for src in files:
        dst = out_root / f"{src.stem}.png"
        r = thin_file(src, dst, call, **_limits(cfg))
        rows.append({
            "input": str(src),
            "output": str(dst) if r.success else None,
            "success": r.success,
            "width": r.width, "height": r.height,
            "passes": r.stats.passes if r.stats else None,
            "error": r.error, "error_kind": r.error_kind,
        })

    failed = sum(1 for r in rows if not r["success"])
    write_json({"config": call, "count": len(rows), "failed": failed, "files": rows},
               out_root / "summary.json")
    log.info(f"[cli] thinned {len(rows) - failed}/{len(rows)} files → {out_root}")
    typer.echo(f"{len(rows) - failed}/{len(rows)} ok, summary: {out_root / 'summary.json'}")
    if failed:
        raise typer.Exit(code=1)

if __name__ == "__main__":
    app()
