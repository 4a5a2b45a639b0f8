"""Model selection CLI entry point."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from .config import get_settings, load_model_providers_file
from .exceptions import ModelSelectionError
from .log import configure_logging
from .models import SelectionSource, auth_type_label
from .schemas import ModelSwitchMetadata
from .selection import ModelSelectionManager

app = typer.Typer(name="model-selection", help="Inspect and switch the active model")
console = Console()


def build_manager(
    auth_type: str | None = None,
    model: str | None = None,
    providers_file: Path | None = None,
) -> ModelSelectionManager:
    """Create a selection manager from options, falling back to settings."""
    settings = get_settings()
    providers_path = providers_file or settings.providers_file
    providers = load_model_providers_file(providers_path) if providers_path else None

    return ModelSelectionManager(
        initial_auth_type=auth_type or settings.auth_type,
        initial_model_id=model or settings.selected_model,
        model_providers_config=providers,
    )


def _models_table(manager: ModelSelectionManager, numbered: bool = False) -> Table:
    auth_type = auth_type_label(manager.current_auth_type)
    table = Table(title=f"Models ({auth_type})")
    if numbered:
        table.add_column("#", justify="right")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Description")
    table.add_column("Vision", justify="center")

    for index, model in enumerate(manager.get_available_models(), start=1):
        current = model.id == manager.current_model_id
        row = [
            escape(model.id),
            escape(model.label),
            escape(model.description or ""),
            "yes" if model.is_vision else "",
        ]
        if numbered:
            row.insert(0, str(index))
        table.add_row(*row, style="bold green" if current else None)

    return table


@app.callback()
def main(
    ctx: typer.Context,
    auth_type: str | None = typer.Option(None, "--auth-type", help="Auth type to use"),
    model: str | None = typer.Option(None, "--model", help="Persisted model id"),
    providers_file: Path | None = typer.Option(
        None, "--providers-file", help="JSON file with the user model catalog"
    ),
) -> None:
    """Inspect and switch models for an auth type."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)

    try:
        ctx.obj = build_manager(auth_type, model, providers_file)
    except ModelSelectionError as e:
        console.print(f"Error: {e.message}", style="bold red", markup=False)
        raise typer.Exit(code=1) from e


@app.command("list")
def list_models(ctx: typer.Context) -> None:
    """List models for the auth type, highlighting the current one"""
    manager: ModelSelectionManager = ctx.obj
    if not manager.get_available_models():
        console.print(
            f"No models configured for authType '{auth_type_label(manager.current_auth_type)}'",
            style="yellow",
        )
        return
    console.print(_models_table(manager))


@app.command()
def current(ctx: typer.Context) -> None:
    """Show the current model selection"""
    manager: ModelSelectionManager = ctx.obj
    try:
        info = manager.get_current_model()
    except ModelSelectionError as e:
        console.print(e.message, style="bold red", markup=False)
        raise typer.Exit(code=1) from e

    console.print(f"Auth type: {auth_type_label(info.auth_type)}")
    console.print(f"Model: {info.model_id} ({escape(info.model.name)})", style="green")
    console.print(f"Base URL: {info.model.base_url or '-'}")
    console.print(f"Source: {info.selection_source.value}")


@app.command()
def select(
    ctx: typer.Context,
    model_id: str | None = typer.Argument(None, help="Model id to switch to"),
) -> None:
    """Select a model, prompting when no id is given"""
    manager: ModelSelectionManager = ctx.obj
    models = manager.get_available_models()

    if model_id is None:
        if not models:
            console.print("No models available", style="yellow")
            raise typer.Exit(code=1)

        console.print(_models_table(manager, numbered=True))
        ids = [m.id for m in models]
        current = manager.current_model_id
        current_index = ids.index(current) if current in ids else 0
        choice = Prompt.ask(
            "Select model",
            console=console,
            choices=[str(i) for i in range(1, len(ids) + 1)],
            default=str(current_index + 1),
        )
        model_id = ids[int(choice) - 1]

    metadata = ModelSwitchMetadata(
        reason=SelectionSource.USER_MANUAL.value,
        context="Model switched via /model dialog",
    )
    try:
        model = asyncio.run(manager.switch_model(model_id, SelectionSource.USER_MANUAL, metadata))
    except ModelSelectionError as e:
        console.print(e.message, style="bold red", markup=False)
        raise typer.Exit(code=1) from e

    console.print(f"Switched to {model.id} ({escape(model.name)})", style="bold green")


if __name__ == "__main__":
    app()
