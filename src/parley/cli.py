from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import typer

from .adapters.openai_assistants import OpenAIPlatform
from .capabilities import suggest_model, supports_feature, supports_medium
from .config import load_config
from .errors import ConfigurationError, RemoteNotFoundError, UsageError
from .models import Assistant, Feature, LanguageModelLevel, Medium, Message, Thread

app = typer.Typer(add_completion=False, help="parley: drive remote assistants, threads and runs")

assistant_app = typer.Typer(help="Manage remote assistants")
app.add_typer(assistant_app, name="assistant")

thread_app = typer.Typer(help="Manage threads and runs")
app.add_typer(thread_app, name="thread")

_state: dict[str, Path | None] = {"config": None}


@app.callback()
def main(
    config: Path | None = typer.Option(None, "--config", help="Path to a JSON platform config"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _state["config"] = config


def _build_platform() -> OpenAIPlatform:
    try:
        return OpenAIPlatform.from_config(load_config(_state["config"]))
    except ConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _fail(exc: Exception) -> NoReturn:
    typer.secho(f"Error: {exc}", fg=typer.colors.RED)
    raise typer.Exit(code=2)


def _print_thread(thread: Thread) -> None:
    typer.echo(f"Thread: {thread.service_id}")
    typer.echo(f"  Run: {thread.run_id}")
    status = thread.status.value if thread.status else "unknown"
    typer.echo(f"  Status: {status} (raw: {thread.raw_status})")
    if thread.started_at:
        typer.echo(f"  Started: {thread.started_at.isoformat()}")
    if thread.completed_at:
        typer.echo(f"  Completed: {thread.completed_at.isoformat()}")
    if thread.expires_at:
        typer.echo(f"  Expires: {thread.expires_at.isoformat()}")


def _print_message(message: Message) -> None:
    typer.secho(f"[{message.created_at.isoformat()}] {message.role.value}", fg=typer.colors.CYAN, bold=True)
    for content in message.content:
        if content.type == "file":
            typer.echo(f"  <file {content.file_id} ({content.medium.value})>")
        else:
            typer.echo(f"  {content.value}")


@app.command("capabilities")
def capabilities_cmd(
    level: LanguageModelLevel = typer.Option(LanguageModelLevel.STANDARD, "--level", help="Model level"),
) -> None:
    """Show supported media, features and suggested models."""
    for medium in Medium:
        if not supports_medium(medium):
            typer.echo(f"{medium.value}: unsupported")
            continue
        features = [f.value for f in Feature if supports_feature(medium, f)]
        model = suggest_model(medium, level)
        typer.secho(f"{medium.value}: {model}", fg=typer.colors.GREEN)
        typer.echo(f"  Features: {', '.join(features) or 'none'}")


@assistant_app.command("find")
def assistant_find_cmd(
    action: str = typer.Option(..., "--action", "-a", help="Action tag"),
    model: str | None = typer.Option(None, "--model", help="Model override"),
) -> None:
    """Look up the remote assistant for an action and model."""
    platform = _build_platform()
    assistant = Assistant(action=action, language_model_name=model)
    if not platform.find_assistant(assistant):
        typer.echo(f"No assistant for action '{action}' ({platform.target_model(assistant)})")
        raise typer.Exit(code=1)

    typer.echo(f"Assistant: {assistant.service_id}")
    typer.echo(f"  Name: {assistant.name}")
    typer.echo(f"  Description: {assistant.description}")


@assistant_app.command("create")
def assistant_create_cmd(
    action: str = typer.Option(..., "--action", "-a", help="Action tag"),
    name: str | None = typer.Option(None, "--name", help="Assistant name"),
    instructions: str | None = typer.Option(None, "--instructions", help="System instructions"),
    description: str | None = typer.Option(None, "--description", help="Description"),
    model: str | None = typer.Option(None, "--model", help="Model override"),
    medium: Medium = typer.Option(Medium.TEXT, "--medium", help="Response medium"),
) -> None:
    """Create a new remote assistant without looking for an existing one."""
    platform = _build_platform()
    assistant = Assistant(
        action=action,
        name=name,
        instructions=instructions,
        description=description,
        language_model_name=model,
        medium=medium,
    )
    platform.create_assistant(assistant)
    typer.secho(f"Created assistant {assistant.service_id}", fg=typer.colors.GREEN)


@assistant_app.command("update")
def assistant_update_cmd(
    assistant_id: str = typer.Option(..., "--assistant-id", help="Remote assistant id"),
    action: str = typer.Option(..., "--action", "-a", help="Action tag"),
    name: str | None = typer.Option(None, "--name", help="Assistant name"),
    instructions: str | None = typer.Option(None, "--instructions", help="System instructions"),
    description: str | None = typer.Option(None, "--description", help="Description"),
    model: str | None = typer.Option(None, "--model", help="Model override"),
) -> None:
    """Overwrite a remote assistant's fields and model."""
    platform = _build_platform()
    assistant = Assistant(
        action=action,
        name=name,
        instructions=instructions,
        description=description,
        language_model_name=model,
        service_id=assistant_id,
    )
    try:
        platform.update_assistant(assistant)
    except RemoteNotFoundError as exc:
        _fail(exc)

    typer.secho(f"Updated assistant {assistant_id} ({assistant.language_model_name})", fg=typer.colors.GREEN)


@assistant_app.command("ensure")
def assistant_ensure_cmd(
    action: str = typer.Option(..., "--action", "-a", help="Action tag"),
    name: str | None = typer.Option(None, "--name", help="Assistant name"),
    instructions: str | None = typer.Option(None, "--instructions", help="System instructions"),
    description: str | None = typer.Option(None, "--description", help="Description"),
    model: str | None = typer.Option(None, "--model", help="Model override"),
    medium: Medium = typer.Option(Medium.TEXT, "--medium", help="Response medium"),
    level: LanguageModelLevel = typer.Option(LanguageModelLevel.STANDARD, "--level", help="Model level"),
) -> None:
    """Find the assistant for an action, creating or migrating it as needed."""
    platform = _build_platform()
    assistant = Assistant(
        action=action,
        name=name,
        instructions=instructions,
        description=description,
        language_model_name=model,
        medium=medium,
    )
    try:
        changed = platform.reconcile_assistant(assistant, level)
    except ConfigurationError as exc:
        _fail(exc)

    verb = "Created/updated" if changed else "Found"
    typer.secho(f"{verb} assistant {assistant.service_id}", fg=typer.colors.GREEN)


@assistant_app.command("delete")
def assistant_delete_cmd(
    assistant_id: str = typer.Argument(..., help="Remote assistant id"),
) -> None:
    """Delete a remote assistant. Already-deleted counts as success."""
    platform = _build_platform()
    assistant = Assistant(action="", service_id=assistant_id)
    if platform.delete_assistant(assistant):
        typer.secho(f"Deleted assistant {assistant_id}", fg=typer.colors.GREEN)
    else:
        typer.secho(f"Assistant {assistant_id} was not deleted", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)


@thread_app.command("start")
def thread_start_cmd(
    assistant_id: str = typer.Option(..., "--assistant-id", help="Remote assistant id"),
    action: str = typer.Option(..., "--action", "-a", help="Action tag"),
    instructions: str | None = typer.Option(None, "--instructions", help="Additional instructions"),
    medium: Medium = typer.Option(Medium.TEXT, "--medium", help="Thread medium"),
) -> None:
    """Create a thread and start its first run."""
    platform = _build_platform()
    assistant = Assistant(action=action, medium=medium, service_id=assistant_id)
    thread = Thread(action=action, medium=medium)
    platform.start_thread(assistant, thread, instructions)
    _print_thread(thread)


@thread_app.command("refresh")
def thread_refresh_cmd(
    thread_id: str = typer.Option(..., "--thread-id", help="Remote thread id"),
    run_id: str = typer.Option(..., "--run-id", help="Run id"),
) -> None:
    """Show the current state of a run."""
    platform = _build_platform()
    thread = Thread(action="", service_id=thread_id, run_id=run_id)
    platform.refresh_thread(thread)
    _print_thread(thread)


@thread_app.command("reply")
def thread_reply_cmd(
    text: str = typer.Argument(..., help="User message"),
    thread_id: str = typer.Option(..., "--thread-id", help="Remote thread id"),
    assistant_id: str = typer.Option(..., "--assistant-id", help="Remote assistant id"),
    medium: Medium = typer.Option(Medium.TEXT, "--medium", help="Thread medium"),
) -> None:
    """Send a user message and start a new run."""
    platform = _build_platform()
    assistant = Assistant(action="", medium=medium, service_id=assistant_id)
    thread = Thread(action="", medium=medium, service_id=thread_id)
    try:
        message = platform.reply(assistant, thread, text)
    except (UsageError, ConfigurationError) as exc:
        _fail(exc)

    _print_message(message)
    _print_thread(thread)


@thread_app.command("messages")
def thread_messages_cmd(
    thread_id: str = typer.Option(..., "--thread-id", help="Remote thread id"),
    limit: int = typer.Option(20, "--limit", help="Page size"),
    after: str | None = typer.Option(None, "--after", help="Cursor from a previous page"),
    medium: Medium = typer.Option(Medium.TEXT, "--medium", help="Thread medium"),
) -> None:
    """List messages, oldest first."""
    platform = _build_platform()
    thread = Thread(action="", medium=medium, service_id=thread_id)
    try:
        messages = platform.fetch_messages(thread, limit=limit, after=after)
    except ConfigurationError as exc:
        _fail(exc)

    if not messages:
        typer.echo("No messages.")
        return

    for message in messages:
        _print_message(message)
    if messages.has_more:
        typer.echo(f"More available: --after {messages.last_id}")


@thread_app.command("cancel")
def thread_cancel_cmd(
    thread_id: str = typer.Option(..., "--thread-id", help="Remote thread id"),
    run_id: str = typer.Option(..., "--run-id", help="Run id"),
) -> None:
    """Ask the service to cancel a run."""
    platform = _build_platform()
    thread = Thread(action="", service_id=thread_id, run_id=run_id)
    platform.cancel_run(thread)
    _print_thread(thread)


@thread_app.command("delete")
def thread_delete_cmd(
    thread_id: str = typer.Argument(..., help="Remote thread id"),
) -> None:
    """Delete a remote thread. Already-deleted counts as success."""
    platform = _build_platform()
    thread = Thread(action="", service_id=thread_id)
    if platform.delete_thread(thread):
        typer.secho(f"Deleted thread {thread_id}", fg=typer.colors.GREEN)
    else:
        typer.secho(f"Thread {thread_id} was not deleted", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
