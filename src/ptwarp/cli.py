from __future__ import annotations

"""Command line interface for ptwarp using Typer."""

from pathlib import Path
from typing import Dict, List, NoReturn, Optional

import json
import logging

import numpy as np
import typer
from pydantic import ValidationError

from .config import Settings, load_settings
from .core import PtwModel, warp_samples
from .utils.logging import get_logger

app = typer.Typer(help="Parametric time warping of sampled signals")
logger = logging.getLogger(__name__)


def bad_parameter(message: str, param_hint: Optional[str] = None) -> NoReturn:
    """Abort the current command with a usage error."""

    raise typer.BadParameter(message, param_hint=param_hint)


def _parse_override_value(raw: str) -> object:
    lower = raw.lower()
    if lower in {"true", "false"}:
        return lower == "true"
    if lower in {"null", "none"}:
        return None
    for cast in (int, float):
        try:
            return cast(raw)
        except ValueError:
            pass
    if raw.startswith("[") or raw.startswith("{"):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            bad_parameter(f"invalid JSON override value: {raw}", param_hint="--set")
    return raw


def _apply_override(data: Dict[str, object], keys: List[str], value: object) -> None:
    target = data
    for depth, key in enumerate(keys[:-1]):
        existing = target.get(key)
        if not isinstance(existing, dict):
            bad_parameter(f"unknown configuration key: {'.'.join(keys[: depth + 1])}", param_hint="--set")
        target = existing
    if keys[-1] not in target:
        bad_parameter(f"unknown configuration key: {'.'.join(keys)}", param_hint="--set")
    target[keys[-1]] = value


def _parse_floats(raw: str, hint: str) -> List[float]:
    try:
        values = [float(item) for item in raw.split(",") if item.strip()]
    except ValueError:
        bad_parameter(f"expected comma separated numbers, got {raw!r}", param_hint=hint)
    if not values:
        bad_parameter("at least one coefficient is required", param_hint=hint)
    return values


def _load_array(path: Path, key: str | None = None) -> np.ndarray:
    """Load a ``.npy``/``.npz`` array or a comma separated text file."""

    if not path.exists():
        bad_parameter(f"file not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".npy":
        return np.load(path)
    if suffix == ".npz":
        with np.load(path) as archive:
            name = key if key in archive.files else archive.files[0]
            return archive[name]
    return np.loadtxt(path, delimiter=",", ndmin=2)


def _save_array(path: Path, data: np.ndarray) -> None:
    if path.suffix.lower() == ".csv":
        np.savetxt(path, np.atleast_2d(data), delimiter=",")
    else:
        np.save(path, data)


@app.callback()
def init(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        dir_okay=False,
        file_okay=True,
        exists=False,
        help="Path to a YAML or JSON configuration file.",
    ),
    set_overrides: List[str] = typer.Option(
        [],
        "--set",
        help="Override configuration values using dotted paths, e.g. fit.trwdth=10",
    ),
) -> None:
    """Initialise the Typer context with validated settings."""

    if config is not None and not config.exists():
        raise typer.BadParameter(f"configuration file not found: {config}")

    try:
        if config:
            settings = load_settings(config)
        elif isinstance(ctx.obj, Settings):
            settings = ctx.obj
        else:
            settings = Settings()
    except (RuntimeError, TypeError, ValueError) as exc:
        raise typer.BadParameter(f"failed to load configuration: {exc}") from exc

    if set_overrides:
        data = settings.model_dump(mode="json")
        for override in set_overrides:
            if "=" not in override:
                raise typer.BadParameter(
                    "overrides must be of the form --set section.key=value"
                )
            key, raw_value = override.split("=", 1)
            if not key:
                raise typer.BadParameter("override key cannot be empty")
            _apply_override(data, key.split("."), _parse_override_value(raw_value))
        try:
            settings = Settings.model_validate(data)
        except ValidationError as exc:
            raise typer.BadParameter(f"invalid configuration override: {exc}") from exc

    get_logger("ptwarp", level=settings.logging.level, fmt=settings.logging.format)
    ctx.obj = settings


@app.command()
def fit(
    ctx: typer.Context,
    ref: Path = typer.Argument(..., help="Reference signal(s), one per row (.npy or .csv)"),
    samp: Path = typer.Argument(..., help="Sample signal(s), one per row (.npy or .csv)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write coeffs/warped/crit_values to .npz"),
    warp_type: Optional[str] = typer.Option(None, "--warp-type", help="global or individual"),
    optim_crit: Optional[str] = typer.Option(None, "--optim-crit", help="RMS or WCC"),
    trwdth: Optional[int] = typer.Option(None, "--trwdth", help="Triangular smoothing half-width"),
    init_coef: Optional[str] = typer.Option(None, "--init-coef", help="Raw initial coefficients, e.g. 0,1,0"),
    try_restart: Optional[bool] = typer.Option(None, "--try-restart/--no-try-restart"),
    plot: bool = typer.Option(False, "--plot/--no-plot", help="Plot the first alignment"),
) -> None:
    """Fit polynomial warps aligning SAMP onto REF."""

    cfg: Settings = ctx.obj
    init = _parse_floats(init_coef, "--init-coef") if init_coef is not None else None

    try:
        model = PtwModel(warp_type, optim_crit, trwdth, settings=cfg)
        refs = _load_array(ref)
        samps = _load_array(samp)
        result = model.fit(refs, samps, init_coeffs=init, try_restart=try_restart)
    except ValueError as exc:
        logger.debug("fit failed", exc_info=True)
        bad_parameter(str(exc))

    if result is None:
        typer.echo("No samples to fit")
        raise typer.Exit(code=1)

    for i, (row, score) in enumerate(zip(result.coeffs, result.crit_values)):
        coeff_str = " ".join(f"{c:.6g}" for c in row)
        typer.echo(f"fit {i}: coeffs=[{coeff_str}] {result.optim_crit.value}={score:.6g}")

    if output:
        np.savez(output, coeffs=result.coeffs, warped=result.warped, crit_values=result.crit_values)
        typer.echo(f"saved fit to {output}")

    if plot:
        try:  # pragma: no cover - optional display
            from .viz.plot_alignment import plot_alignment
            import matplotlib.pyplot as plt

            refs_arr = np.atleast_2d(refs)
            plot_alignment(refs_arr[0], np.atleast_2d(samps)[0], result.warped[0], settings=cfg)
            if not cfg.viz.save:
                plt.show()
        except ImportError:  # pragma: no cover - graceful fallback
            typer.echo("Plotting unavailable")


@app.command()
def predict(
    ctx: typer.Context,
    samp: Path = typer.Argument(..., help="Sample signal(s), one per row (.npy or .csv)"),
    coeffs: Path = typer.Argument(..., help="Raw coefficients (.npy, .csv or a .npz written by fit)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write warped signals (.npy or .csv)"),
) -> None:
    """Warp SAMP with previously fitted raw COEFFS."""

    try:
        warped = warp_samples(_load_array(samp), _load_array(coeffs, key="coeffs"))
    except ValueError as exc:
        bad_parameter(str(exc))

    if output:
        _save_array(output, warped)
        typer.echo(f"saved {warped.shape[0]} warped signal(s) to {output}")
    else:
        for row in warped:
            typer.echo(" ".join(f"{v:.6g}" for v in row))


def main() -> None:
    """Execute the Typer application."""

    app()


if __name__ == "__main__":
    main()
