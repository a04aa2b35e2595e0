"""CLI entry point for molthumb."""

from __future__ import annotations

import json
import shutil
import tempfile
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from molthumb.config import MolThumbConfig, load_config
from molthumb.config.loader import DEFAULT_CONFIG_TEMPLATE
from molthumb.converter import ConversionFailure, ConverterRegistry, ThumbnailImage
from molthumb.handler import ChemicalHandler, create_handler
from molthumb.logging_setup import configure_logging
from molthumb.mime import guess_mime
from molthumb.storage import FilesystemRepository, LocalMediaFile

app = typer.Typer(
    name="molthumb",
    help="Recognize chemical table files and render them to PNG previews.",
)

config_app = typer.Typer(help="Manage molthumb configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: MolThumbConfig | None = None


def _get_config() -> MolThumbConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to molthumb.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    configure_logging(_config)


def _handler_for(file: Path, cfg: MolThumbConfig) -> ChemicalHandler:
    guess = guess_mime(file)
    handler = create_handler(guess.mime, cfg)
    if not handler.pipeline.is_capable():
        raise ValueError(
            f"Converter '{cfg.converter.active}' cannot render "
            f"{handler.source_format} files"
        )
    return handler


def _extract_metadata(handler: ChemicalHandler, file: Path) -> str | ConversionFailure:
    """Run metadata extraction on a scratch copy, as an upload would."""
    with tempfile.TemporaryDirectory(prefix="molthumb-") as tmp:
        upload = Path(tmp) / "upload"
        shutil.copyfile(file, upload)
        return handler.get_metadata(None, upload)


@app.command()
def sniff(
    files: list[Path] = typer.Argument(..., help="Files to classify"),
) -> None:
    """Show the MIME type detected for each file."""
    table = Table(title=f"MIME detection ({len(files)} files)")
    table.add_column("File", style="cyan")
    table.add_column("By content", style="green")
    table.add_column("By extension", style="yellow")
    table.add_column("MIME", style="bold")
    for f in files:
        if not f.is_file():
            rprint(f"[red]Error:[/red] not a file: {f}")
            raise typer.Exit(1)
        guess = guess_mime(f)
        table.add_row(
            str(f),
            guess.by_content or "-",
            guess.by_extension or "-",
            guess.mime,
        )
    rprint(table)


@app.command()
def render(
    file: Path = typer.Argument(..., help="Chemical table file to render"),
    output: str | None = typer.Option(None, "--output", "-o", help="PNG file to write"),
    width: int | None = typer.Option(None, "--width", "-w", help="Thumbnail width"),
    height: int | None = typer.Option(None, "--height", help="Thumbnail height"),
) -> None:
    """Render a chemical table file to PNG through the cached SVG."""
    cfg = _get_config()
    if not file.is_file():
        rprint(f"[red]Error:[/red] not a file: {file}")
        raise typer.Exit(1)

    try:
        handler = _handler_for(file, cfg)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    metadata = _extract_metadata(handler, file)
    if isinstance(metadata, ConversionFailure):
        rprint(f"[red]Conversion failed:[/red] {escape(metadata.message)}")
        raise typer.Exit(1)

    repo = FilesystemRepository(cfg.repository.root)
    media = LocalMediaFile(str(file.resolve()), repo, metadata=metadata)
    dst = Path(output) if output else file.with_suffix(".png")

    params: dict[str, int] = {"width": width or cfg.thumbnail.default_width}
    if height:
        params["height"] = height

    result = handler.do_transform(media, str(dst), dst.resolve().as_uri(), params)
    if not isinstance(result, ThumbnailImage):
        rprint(f"[red]Error:[/red] {escape(result.message)}")
        raise typer.Exit(1)

    rprint(
        Panel(
            f"[dim]Source:[/dim]  {file}\n"
            f"[dim]Format:[/dim]  {handler.source_format}\n"
            f"[dim]Output:[/dim]  {result.path}\n"
            f"[dim]Size:[/dim]    {result.width} × {result.height}",
            title="Render Result",
            border_style="green",
        )
    )


@app.command()
def metadata(
    file: Path = typer.Argument(..., help="Chemical table file"),
) -> None:
    """Extract metadata from a chemical table file."""
    cfg = _get_config()
    if not file.is_file():
        rprint(f"[red]Error:[/red] not a file: {file}")
        raise typer.Exit(1)

    try:
        handler = _handler_for(file, cfg)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    result = _extract_metadata(handler, file)
    if isinstance(result, ConversionFailure):
        rprint(f"[red]Conversion failed:[/red] {escape(result.message)}")
        raise typer.Exit(1)
    typer.echo(json.dumps(json.loads(result), indent=2))


@app.command()
def converters() -> None:
    """List configured converters."""
    cfg = _get_config()
    registry = ConverterRegistry(cfg.converter)

    table = Table(title=f"Converters (tool dir: {registry.tool_dir or 'PATH'})")
    table.add_column("Name", style="cyan")
    table.add_column("Command")
    table.add_column("Formats", style="green")
    table.add_column("Memory", justify="right")
    table.add_column("Active", justify="center")
    for name in registry.names():
        spec = registry.lookup(name)
        table.add_row(
            name,
            spec.command,
            ", ".join(spec.supported_formats),
            f"{spec.memory_kib} KiB",
            "[green]✓[/green]" if name == registry.active else "",
        )
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default molthumb.yaml in current directory."""
    target = Path("molthumb.yaml")
    if target.exists() and not force:
        rprint("[yellow]molthumb.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
