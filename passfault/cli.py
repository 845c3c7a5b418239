from __future__ import annotations

import importlib.metadata as md
import json
import math
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from .builder import build_composite
from .config import PassfaultConfig, load_config, resolve_config_path, setup_logging
from .core.composite import CompositeFinder
from .core.crack_time import HASH_SPEEDS, ThroughputConfig, crack_time, rounded_size_string
from .core.exceptions import DictionaryLoadError, InvalidThroughputConfiguration
from .domain.models import PathCost

# Typer application: tests import this
app = typer.Typer(no_args_is_help=True, add_completion=False, help="Passfault password analyzer")
console = Console()


def _fail(message: str) -> NoReturn:
    console.print(f"CLI error: {escape(message)}. See --help for more info.")
    raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Entry point for `passfault` command."""
    if ctx.invoked_subcommand is None:
        console.print("Passfault CLI - use `passfault --help` to see commands.")
        raise typer.Exit(code=0)


@app.command()
def version() -> None:
    """Print version information."""
    try:
        dist_version = md.version("passfault")
    except md.PackageNotFoundError:
        from . import __version__

        dist_version = __version__
    console.print(f"passfault {dist_version}")
    raise typer.Exit(code=0)


@app.command(name="config-validate")
def config_validate(path: Path = typer.Argument(Path("configs/passfault.yml"))) -> None:
    """Validate and show resolved configuration."""
    resolved = resolve_config_path(path)
    console.print(f"Using config: {resolved}")
    try:
        cfg = load_config(resolved)
    except Exception as exc:
        console.print(f"Config validation failed: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    throughput = cfg.crack_time.to_throughput()
    console.print("Config OK.")
    console.print(f"- parallel: {cfg.analysis.parallel}")
    console.print(f"- word lists: {', '.join(cfg.finders.word_lists) or 'all bundled'}")
    console.print(f"- strategies: {', '.join(s.value for s in cfg.finders.strategies)}")
    console.print(f"- crack speed: {throughput.crack_speed:g} H/s" if throughput else "- crack speed: not set")


@app.command(name="hash-functions")
def hash_functions() -> None:
    """List the hash functions known to the crack-time model."""
    for name, hf in sorted(HASH_SPEEDS.items()):
        console.print(f"{name:<12} {hf.hashes_per_second:>12.4g} H/s  {escape(hf.description)}")


def _load_cli_config(path: Path | None) -> PassfaultConfig:
    if path is not None:
        if not Path(path).expanduser().exists():
            _fail(f"config file not found: {path}")
        resolved = Path(path).expanduser()
    else:
        resolved = resolve_config_path(None)
        if not resolved.exists():
            return PassfaultConfig()
    try:
        return load_config(resolved)
    except (OSError, ValueError) as exc:
        _fail(f"invalid config {resolved}: {exc}")


def _cli_throughput(
    gpu: int | None,
    hash_function: str | None,
    hash_speed: float | None,
    cfg: PassfaultConfig,
) -> ThroughputConfig | None:
    if hash_speed is None and gpu is None and hash_function is None:
        return cfg.crack_time.to_throughput()
    if (gpu is None) != (hash_function is None) or (hash_speed is not None and gpu is not None):
        _fail("for crack time give either only -s, or both -g and -f")
    try:
        if hash_speed is not None:
            return ThroughputConfig(guesses_per_second=hash_speed)
        return ThroughputConfig(units=gpu, hash_function=hash_function)
    except InvalidThroughputConfiguration as exc:
        _fail(str(exc))


def _read_passwords(password: str | None, input_path: Path | None, min_length: int) -> list[str]:
    if password is not None and input_path is not None:
        _fail("use either -p or -i, never both")
    if password is None and input_path is None:
        _fail("give a password with -p or a file of passwords with -i")
    if password is not None:
        if len(password) < min_length:
            _fail(f"password too short, at least {min_length} characters are required")
        return [password]
    try:
        lines = Path(input_path).expanduser().read_text(encoding="utf-8").splitlines()
    except OSError:
        _fail(f"invalid path in -i option: {input_path}")
    passwords: list[str] = []
    for number, line in enumerate(lines, start=1):
        if not line:
            continue
        if len(line) < min_length:
            console.print(f"Skipping line {number}: password too short")
            continue
        passwords.append(line)
    return passwords


def _report(password: str, path: PathCost, throughput: ThroughputConfig | None) -> dict[str, Any]:
    report: dict[str, Any] = {"password": password, **path.to_dict()}
    report["total_complexity"] = rounded_size_string(path.total_cost)
    if throughput is not None:
        report["crack_time"] = crack_time(path.total_cost, throughput).to_dict()
    return report


def _print_report(path: PathCost, throughput: ThroughputConfig | None) -> None:
    console.print("\nMost crackable patterns:")
    for pattern in path.patterns:
        console.print(
            f"'{escape(pattern.match_string)}' matches the Rule: '{escape(pattern.description)}'"
            f" in '{escape(pattern.classification)}'"
        )
        console.print(f"\taround {rounded_size_string(pattern.cost)} passwords in this Rule")
        console.print(f"\tcontains {path.share(pattern) * 100:3.2f} percent of password strength")
    console.print(f"Total complexity (size of smallest search space): {rounded_size_string(path.total_cost)}")
    if throughput is None:
        return
    estimate = crack_time(path.total_cost, throughput)
    if throughput.hash_type is not None:
        console.print(
            f"Estimated '{throughput.hash_type.name}' cracking speed with {throughput.units} GPU(s): "
            f"{rounded_size_string(math.log2(throughput.crack_speed))} H/s"
        )
        console.print(
            f"Estimated time to crack '{throughput.hash_type.name}' password with "
            f"{throughput.units} GPU(s): {estimate.duration_display}"
        )
    else:
        console.print(f"Estimated time to crack at {throughput.crack_speed:g} H/s: {estimate.duration_display}")


def _analyze_one(composite: CompositeFinder, password: str):
    analysis = composite.analyze(password)
    if analysis.error is not None:
        console.print(f"Warning: {escape(str(analysis.error))}")
    return analysis.minimum_cost_decomposition()


@app.command()
def analyze(
    password: str | None = typer.Option(None, "--password", "-p", help="Password to be analyzed"),
    input_path: Path | None = typer.Option(None, "--input", "-i", help="File with one password per line"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write a JSON-lines report to this file"),
    gpu: int | None = typer.Option(None, "--gpu", "-g", help="Number of GPUs for crack time"),
    hash_function: str | None = typer.Option(None, "--hash-function", "-f", help="Hash function for crack time"),
    hash_speed: float | None = typer.Option(None, "--hash-speed", "-s", help="Hashes per second for crack time"),
    custom_dictionary: Path | None = typer.Option(None, "--custom-dictionary", "-d", help="Path to a custom word list"),
    custom_only: bool = typer.Option(False, "--custom-only", "-c", help="Use the custom dictionary only"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    config: Path | None = typer.Option(None, "--config", help="Config file"),
) -> None:
    """Find the patterns in passwords and estimate how long they take to crack."""
    cfg = _load_cli_config(config)
    setup_logging(cfg.logging, verbose=verbose)

    if custom_only and custom_dictionary is None:
        _fail("-c needs the path to a custom dictionary given with -d")
    if custom_dictionary is not None:
        cfg.finders = cfg.finders.model_copy(
            update={"custom_dictionary": custom_dictionary.expanduser(), "custom_only": custom_only}
        )
    throughput = _cli_throughput(gpu, hash_function, hash_speed, cfg)
    passwords = _read_passwords(password, input_path, cfg.analysis.min_password_length)

    try:
        composite = build_composite(cfg)
    except DictionaryLoadError as exc:
        _fail(f"invalid dictionary: {exc}")

    reports: list[dict[str, Any]] = []
    for pw in passwords:
        path = _analyze_one(composite, pw)
        if output is None:
            _print_report(path, throughput)
        else:
            reports.append(_report(pw, path, throughput))

    if output is not None:
        with Path(output).expanduser().open("w", encoding="utf-8") as fp:
            for report in reports:
                fp.write(json.dumps(report) + "\n")
        console.print(f"Wrote {len(reports)} report(s) to {output}")


def launch() -> None:
    """Entry point when executed as a module/script."""
    cli()


cli = typer.main.get_command(app)

__all__ = ["app", "cli"]

if __name__ == "__main__":
    launch()
