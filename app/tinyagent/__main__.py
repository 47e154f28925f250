# app/tinyagent/__main__.py
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.prompt import Prompt

from .config import settings
from .core import Agent
from .errors import AgentError
from .providers import PROVIDERS, detect_provider
from .schemas import ProviderConfig
from .support import create_sentiment_agent, create_support_agent, sample_orders
from .weather import create_weather_agent

app = typer.Typer(add_completion=False)
console = Console()

# ---------- helpers ----------


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _require_provider() -> ProviderConfig:
    provider = detect_provider()
    if provider is None:
        names = ", ".join(p["env_var"] for p in PROVIDERS)
        console.print(f"[red]No provider API key found.[/] Set one of: {names}")
        raise typer.Exit(code=1)
    return provider


def _load_schema(path: str | None) -> dict | None:
    """Read an output schema from a JSON file; None passes through."""
    if not path:
        return None
    schema = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(schema, dict) or "type" not in schema:
        raise typer.BadParameter("schema must be a JSON object with a 'type'")
    return schema


def _format_result(data) -> str:
    if isinstance(data, (dict, list)):
        return json.dumps(data, indent=2, ensure_ascii=False)
    return "" if data is None else str(data)


def _chunk_printer(verbose: bool):
    """on_chunk callback: stream content tokens, optionally tool-call events."""
    def on_chunk(kind: str, payload: dict):
        if kind == "content":
            console.print(payload["content"], end="", markup=False, highlight=False)
        elif not verbose:
            return
        elif kind == "tool_call_start":
            console.print(f"\n[yellow]TOOL CALL[/] #{payload['index']} ({payload['id']})")
        elif kind == "tool_call_delta":
            console.print(payload["arguments"], end="", style="bright_black",
                          markup=False, highlight=False)
        elif kind == "tool_call_end":
            fn = payload["tool_call"]["function"]
            console.print(f"\n[green]TOOL READY[/]: {fn['name']}({fn['arguments']})")
    return on_chunk


def _run_once(agent: Agent, prompt: str, *, stream: bool, verbose: bool,
              max_iterations: int | None = None, history=None, deps=None):
    kwargs = {"stream": stream, "max_iterations": max_iterations,
              "message_history": history, "deps": deps}
    if stream:
        kwargs["on_chunk"] = _chunk_printer(verbose)
    try:
        result = agent.run_sync(prompt, **kwargs)
    except AgentError as e:
        console.print(f"\n[red]ERROR[/]: {type(e).__name__}: {e}")
        raise typer.Exit(code=1)

    if stream:
        console.print()
    console.rule("[white]Answer")
    console.print(_format_result(result.data), markup=False)
    console.rule()
    return result

# ---------- CLI commands ----------


@app.command("ask")
def ask_cmd(
    prompt: str = typer.Argument(..., help="What to ask the model"),
    system: str = typer.Option(None, "--system", "-s", help="System prompt"),
    schema: str = typer.Option(None, "--schema", help="JSON file with an output schema"),
    stream: bool = typer.Option(False, "--stream/--no-stream", help="Stream tokens"),
    max_iterations: int = typer.Option(None, "--max-iterations", "-n"),
    verbose: bool = typer.Option(False, "--verbose/--no-verbose", help="Show tool-call events"),
):
    provider = _require_provider()
    agent = Agent(
        model=provider.model,
        base_url=provider.base_url,
        api_key=provider.api_key,
        system_prompt=system,
        output_schema=_load_schema(schema),
    )
    _run_once(agent, prompt, stream=stream, verbose=verbose, max_iterations=max_iterations)


@app.command("weather")
def weather_cmd(
    location: str = typer.Argument(..., help="City to look up"),
    structured: bool = typer.Option(False, "--structured", help="Return a WeatherReport object"),
    stream: bool = typer.Option(False, "--stream/--no-stream"),
    verbose: bool = typer.Option(True, "--verbose/--no-verbose"),
):
    agent = create_weather_agent(_require_provider(), structured=structured)
    _run_once(agent, f"What's the weather like in {location}?",
              stream=stream, verbose=verbose)


@app.command("sentiment")
def sentiment_cmd(
    text: str = typer.Argument(..., help="Text to classify"),
    stream: bool = typer.Option(False, "--stream/--no-stream"),
):
    agent = create_sentiment_agent(_require_provider())
    _run_once(agent, text, stream=stream, verbose=False)


@app.command("orders")
def orders_cmd(
    request: str = typer.Argument(..., help="e.g. \"Update order ORD-456 to shipped\""),
    admin: bool = typer.Option(False, "--admin", help="Allow order updates"),
    stream: bool = typer.Option(False, "--stream/--no-stream"),
    verbose: bool = typer.Option(True, "--verbose/--no-verbose"),
):
    deps = {"orders": sample_orders(), "is_admin": admin}
    agent = create_support_agent(_require_provider())
    _run_once(agent, request, stream=stream, verbose=verbose, deps=deps)
    if verbose:
        console.print(f"[bright_black]orders after run: {deps['orders']}[/]")


@app.command("providers")
def providers_cmd():
    provider = detect_provider()
    for p in PROVIDERS:
        mark = "[green]✓[/]" if provider and provider.provider == p["name"] else " "
        console.print(f"{mark} {p['name']:<12} {p['env_var']:<18} {p['model']}")
    if provider is None:
        console.print("[red]none configured[/]")


@app.command("repl")
def repl_cmd(
    system: str = typer.Option(None, "--system", "-s", help="System prompt"),
    stream: bool = typer.Option(True, "--stream/--no-stream"),
):
    provider = _require_provider()
    agent = Agent(model=provider.model, base_url=provider.base_url,
                  api_key=provider.api_key, system_prompt=system)
    console.print(f"[bold]tinyagent REPL[/] ({provider.provider}, {provider.model}). "
                  "Type [yellow]/help[/] or [yellow]exit()[/].")
    history = []
    while True:
        try:
            line = Prompt.ask("[bold]>>[/]")
        except (EOFError, KeyboardInterrupt):
            console.print("\n[bold]bye![/]")
            break
        s = (line or "").strip()
        if not s:
            continue
        if s == "exit()":
            console.print("[bold]bye![/]")
            break
        if s == "/help":
            console.print("[green]/reset[/] — forget the conversation\n[yellow]exit()[/] — quit")
            continue
        if s == "/reset":
            history = []
            console.print("[bright_black]history cleared[/]")
            continue
        try:
            result = _run_once(agent, s, stream=stream, verbose=False, history=history)
        except typer.Exit:
            continue
        # drop the system message; the agent adds it again each run
        history = [m for m in result.messages if m.role != "system"]


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Logging level"),
):
    _setup_logging(log_level)


if __name__ == "__main__":
    app()
