"""
Main CLI application entry point.

This module contains the Typer application and command handlers for
LuidGPT: authentication, the model catalog, generation history,
workspaces and credits.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional
import asyncio
import json
import logging
import mimetypes
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from luidgpt import VERSION
from luidgpt.config import EnvFileLoader, get_settings, load_env_with_hierarchy
from luidgpt.core.client import LuidError, create_user_friendly_message
from luidgpt.core.session import LuidGPT
from luidgpt.models import (
    CreditBalance,
    CreditTransaction,
    LuidModel,
    ModelGeneration,
    Organization,
    ReplicateModel,
    SnakeModel,
    is_valid_email,
    is_valid_password,
    password_strength,
)

# Create the main Typer application
app = typer.Typer(
    name="luidgpt",
    help="LuidGPT - run AI models and manage credits from the terminal",
    add_completion=False,
    rich_markup_mode="rich",
)
auth_app = typer.Typer(help="Sign in, sign up and manage your session", no_args_is_help=True)
models_app = typer.Typer(help="Browse and run AI models", no_args_is_help=True)
generations_app = typer.Typer(help="Inspect and manage your generations", no_args_is_help=True)
workspaces_app = typer.Typer(help="Manage workspaces, members and invitations", no_args_is_help=True)
credits_app = typer.Typer(help="Credit balance, history and purchases", no_args_is_help=True)
config_app = typer.Typer(help="Show configuration", no_args_is_help=True)

app.add_typer(auth_app, name="auth")
app.add_typer(models_app, name="models")
app.add_typer(generations_app, name="generations")
app.add_typer(workspaces_app, name="workspaces")
app.add_typer(credits_app, name="credits")
app.add_typer(config_app, name="config")

# Rich console for output
console = Console()

logger = logging.getLogger(__name__)

STATUS_STYLES = {
    "completed": "green",
    "failed": "red",
    "cancelled": "red",
    "pending": "yellow",
    "processing": "blue",
}

JSON_OPTION = typer.Option(False, "--json", help="Print raw JSON instead of a table")


def create_session() -> LuidGPT:
    """Build the API session used by every command."""
    return LuidGPT(get_settings())


def configure_logging(level: str) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)],
        force=True,
    )
    logging.getLogger("luidgpt").setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def run_command(handler: Callable[[LuidGPT], Awaitable[None]]) -> None:
    """Run an async command handler with a session, turning errors into exit code 1."""

    async def _runner() -> None:
        async with create_session() as luid:
            await handler(luid)

    try:
        asyncio.run(_runner())
    except LuidError as e:
        console.print(f"[red]Error:[/red] {escape(create_user_friendly_message(e))}")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def print_json(data: Any) -> None:
    console.print_json(json.dumps(_jsonable(data)))


def _jsonable(data: Any) -> Any:
    if isinstance(data, LuidModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, SnakeModel):
        return data.model_dump(mode="json")
    if isinstance(data, (list, tuple)):
        return [_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: _jsonable(value) for key, value in data.items()}
    return data


def parse_input_value(value: str) -> Any:
    """Interpret a command-line value as JSON when possible, else keep the string."""
    try:
        return json.loads(value)
    except ValueError:
        return value


def parse_inputs(pairs: List[str], input_json: Optional[str]) -> Dict[str, Any]:
    """Merge ``--input-json`` with ``--input key=value`` pairs (pairs win)."""
    inputs: Dict[str, Any] = {}
    if input_json:
        loaded = json.loads(input_json)
        if not isinstance(loaded, dict):
            raise ValueError("--input-json must be a JSON object")
        inputs.update(loaded)
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid input '{pair}'. Use key=value")
        key, value = pair.split("=", 1)
        inputs[key.strip()] = parse_input_value(value.strip())
    return inputs


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"[bold blue]LuidGPT[/bold blue] version [green]{VERSION}[/green]")
        raise typer.Exit()


@app.callback()
def app_callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and responses"),
) -> None:
    """
    LuidGPT - AI model marketplace client.

    Browse 100+ models, run generations, and manage credits and workspaces.
    """
    load_env_with_hierarchy()
    try:
        settings = get_settings()
    except ValueError as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {escape(str(e))}")
        raise typer.Exit(1)
    configure_logging("DEBUG" if verbose or settings.debug else settings.log_level)


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------

def _status_text(status: str) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status.capitalize()}[/{style}]"


def _models_table(models: List[ReplicateModel], title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Model", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Provider")
    table.add_column("Credits", justify="right")
    table.add_column("Speed", style="dim")
    for model in models:
        table.add_row(
            model.model_id,
            model.name,
            model.provider_display_name or "-",
            str(model.effective_credit_cost),
            model.speed_estimate,
        )
    return table


def _generations_table(generations: List[ModelGeneration], title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Model", style="green")
    table.add_column("Status")
    table.add_column("Credits", justify="right")
    table.add_column("Time", style="dim")
    table.add_column("★")
    for generation in generations:
        table.add_row(
            generation.id,
            generation.model_id,
            _status_text(generation.status.value),
            str(generation.credits_used),
            generation.execution_time_display or "-",
            "★" if generation.is_favorite else "",
        )
    return table


def _print_generation(generation: ModelGeneration) -> None:
    lines = [
        f"[bold]Model:[/bold] {generation.model_id}",
        f"[bold]Status:[/bold] {_status_text(generation.status.value)}",
        f"[bold]Credits used:[/bold] {generation.credits_used}",
    ]
    if generation.title:
        lines.append(f"[bold]Title:[/bold] {generation.title}")
    if generation.execution_time_display:
        lines.append(f"[bold]Execution time:[/bold] {generation.execution_time_display}")
    if generation.error_message:
        lines.append(f"[bold red]Error:[/bold red] {generation.error_message}")
    for url in generation.all_output_urls:
        lines.append(f"[bold]Output ({generation.output_type.value}):[/bold] {url}")
    console.print(Panel("\n".join(lines), title=f"Generation {generation.id}", border_style="blue"))


def _print_balance(balance: CreditBalance, title: str = "Credit Balance") -> None:
    table = Table(title=title, show_header=False)
    table.add_column("Source", style="cyan")
    table.add_column("Credits", justify="right", style="green")
    table.add_row("Plan", balance.plan)
    table.add_row("Subscription", str(balance.subscription_credits))
    table.add_row("Purchased", str(balance.purchased_credits))
    table.add_row("Promotional", str(balance.promotional_credits))
    table.add_row("[bold]Total[/bold]", f"[bold]{balance.total_credits}[/bold]")
    if balance.next_reset:
        table.add_row("Next reset", balance.next_reset.strftime("%Y-%m-%d"))
    console.print(table)


def _transactions_table(transactions: List[CreditTransaction]) -> Table:
    table = Table(title="Credit Transactions", show_header=True, header_style="bold magenta")
    table.add_column("Date", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Balance", justify="right")
    table.add_column("Description")
    for transaction in transactions:
        sign = "-" if transaction.type == "deduct" else "+"
        table.add_row(
            transaction.created_at.strftime("%Y-%m-%d %H:%M"),
            transaction.type,
            f"{sign}{abs(transaction.amount)}",
            str(transaction.balance_after),
            transaction.description or "",
        )
    return table


def _workspaces_table(workspaces: List[Organization]) -> Table:
    table = Table(title="Workspaces", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Role")
    table.add_column("Members", justify="right")
    table.add_column("Credits", justify="right")
    for workspace in workspaces:
        table.add_row(
            workspace.id,
            workspace.name,
            workspace.role or "-",
            str(workspace.member_count or 0),
            workspace.credits_display,
        )
    return table


# ---------------------------------------------------------------------------
# auth
# ---------------------------------------------------------------------------

@auth_app.command("login")
def login_command(
    email: str = typer.Argument(..., help="Account email"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True, help="Account password"),
) -> None:
    """Sign in and store the session tokens."""

    async def handler(luid: LuidGPT) -> None:
        user = await luid.auth.login(email, password)
        console.print(f"[green]✓[/green] Signed in as [bold]{user.full_name}[/bold] ({user.email})")
        console.print(f"[dim]Credits:[/dim] {user.credits_display}")

    run_command(handler)


@auth_app.command("register")
def register_command(
    email: str = typer.Argument(..., help="Account email"),
    first_name: str = typer.Option(..., "--first-name", prompt=True),
    last_name: str = typer.Option(..., "--last-name", prompt=True),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True,
    ),
) -> None:
    """Create an account. A confirmation code is emailed when required."""
    if not is_valid_email(email):
        console.print("[red]Error:[/red] Please enter a valid email address.")
        raise typer.Exit(1)
    if not is_valid_password(password):
        console.print(
            f"[red]Error:[/red] Password strength: {password_strength(password)}. "
            "Use at least 8 characters with uppercase, lowercase, and numbers."
        )
        raise typer.Exit(1)

    async def handler(luid: LuidGPT) -> None:
        result = await luid.auth.complete_registration(email, password, first_name, last_name)
        if result.user is None:
            console.print(f"[green]✓[/green] {result.response.message or 'Account created.'}")
            console.print(f"[dim]Run 'luidgpt auth verify {email} <code>' with the code we emailed you.[/dim]")
        else:
            console.print(f"[green]✓[/green] Welcome, [bold]{result.user.full_name}[/bold]!")

    run_command(handler)


@auth_app.command("verify")
def verify_command(
    email: str = typer.Argument(..., help="Account email"),
    code: str = typer.Argument(..., help="Verification code from the email"),
) -> None:
    """Confirm your email address and sign in."""

    async def handler(luid: LuidGPT) -> None:
        user = await luid.auth.verify_email(email, code)
        console.print(f"[green]✓[/green] Email verified. Signed in as [bold]{user.full_name}[/bold]")

    run_command(handler)


@auth_app.command("resend-code")
def resend_code_command(email: str = typer.Argument(..., help="Account email")) -> None:
    """Send a new verification code."""

    async def handler(luid: LuidGPT) -> None:
        await luid.auth.resend_verification_code(email)
        console.print(f"[green]✓[/green] Verification code sent to {email}")

    run_command(handler)


@auth_app.command("forgot-password")
def forgot_password_command(email: str = typer.Argument(..., help="Account email")) -> None:
    """Email a password reset code."""

    async def handler(luid: LuidGPT) -> None:
        await luid.auth.forgot_password(email)
        console.print(f"[green]✓[/green] Reset code sent to {email}")

    run_command(handler)


@auth_app.command("reset-password")
def reset_password_command(
    email: str = typer.Argument(..., help="Account email"),
    code: str = typer.Argument(..., help="Reset code from the email"),
    new_password: str = typer.Option(
        ..., "--new-password", prompt=True, hide_input=True, confirmation_prompt=True,
    ),
) -> None:
    """Set a new password with a reset code."""
    if not is_valid_password(new_password):
        console.print("[red]Error:[/red] Password must be at least 8 characters with uppercase, lowercase, and numbers.")
        raise typer.Exit(1)

    async def handler(luid: LuidGPT) -> None:
        await luid.auth.reset_password(email, code, new_password)
        console.print("[green]✓[/green] Password updated. You can now sign in.")

    run_command(handler)


@auth_app.command("logout")
def logout_command() -> None:
    """Sign out and forget stored credentials."""

    async def handler(luid: LuidGPT) -> None:
        await luid.auth.logout()
        console.print("[green]✓[/green] Signed out")

    run_command(handler)


@auth_app.command("whoami")
def whoami_command(as_json: bool = JSON_OPTION) -> None:
    """Show the signed-in user."""

    async def handler(luid: LuidGPT) -> None:
        if not luid.auth.is_authenticated():
            console.print("[yellow]Not signed in.[/yellow] Run 'luidgpt auth login <email>'.")
            raise typer.Exit(1)
        user = await luid.auth.fetch_user_profile()
        if as_json:
            print_json(user)
            return
        credits_style = "red" if user.has_low_credits else "green"
        console.print(Panel(
            f"[bold]{user.full_name}[/bold] ({user.initials})\n"
            f"{user.email}\n"
            f"Credits: [{credits_style}]{user.credits_display}[/{credits_style}]",
            title="Account",
            border_style="blue",
        ))

    run_command(handler)


# ---------------------------------------------------------------------------
# models
# ---------------------------------------------------------------------------

@models_app.command("categories")
def categories_command(as_json: bool = JSON_OPTION) -> None:
    """List model categories."""

    async def handler(luid: LuidGPT) -> None:
        categories = await luid.models.get_categories()
        if as_json:
            print_json(categories)
            return
        table = Table(title="Categories", show_header=True, header_style="bold magenta")
        table.add_column("Slug", style="cyan")
        table.add_column("Name", style="green")
        table.add_column("Output")
        table.add_column("Models", justify="right")
        table.add_column("Credits", justify="right")
        for category in sorted(categories, key=lambda c: c.sort_order):
            table.add_row(
                category.slug,
                category.name,
                category.output_type.value,
                str(category.model_count if category.model_count is not None else "-"),
                str(category.credit_cost_default),
            )
        console.print(table)

    run_command(handler)


@models_app.command("list")
def list_models_command(
    slug: str = typer.Argument(..., help="Category slug, e.g. image-generation"),
    page: int = typer.Option(1, "--page", min=1),
    limit: Optional[int] = typer.Option(None, "--limit", min=1, max=100),
    as_json: bool = JSON_OPTION,
) -> None:
    """List the models of a category."""

    async def handler(luid: LuidGPT) -> None:
        models, pagination, category = await luid.models.get_category_models(
            slug, page=page, limit=limit or luid.settings.default_page_size,
        )
        if as_json:
            print_json(models)
            return
        title = category.name if category else slug
        console.print(_models_table(models, title))
        if pagination:
            console.print(f"[dim]Page {pagination.page} of {pagination.pages} ({pagination.total} models)[/dim]")

    run_command(handler)


@models_app.command("search")
def search_models_command(
    query: str = typer.Argument(..., help="Search text"),
    page: int = typer.Option(1, "--page", min=1),
    limit: Optional[int] = typer.Option(None, "--limit", min=1, max=100),
    as_json: bool = JSON_OPTION,
) -> None:
    """Search the model catalog."""

    async def handler(luid: LuidGPT) -> None:
        models, pagination = await luid.models.search_models(
            query, page=page, limit=limit or luid.settings.default_page_size,
        )
        if as_json:
            print_json(models)
            return
        if not models:
            console.print(f"[yellow]No models match '{query}'[/yellow]")
            return
        console.print(_models_table(models, f"Results for '{query}'"))
        if pagination and pagination.has_more:
            console.print(f"[dim]More results: --page {pagination.page + 1}[/dim]")

    run_command(handler)


@models_app.command("featured")
def featured_models_command(
    limit: int = typer.Option(10, "--limit", min=1, max=100),
    as_json: bool = JSON_OPTION,
) -> None:
    """Show featured models."""

    async def handler(luid: LuidGPT) -> None:
        models = await luid.models.get_featured_models(limit=limit)
        if as_json:
            print_json(models)
            return
        console.print(_models_table(models, "Featured Models"))

    run_command(handler)


@models_app.command("show")
def show_model_command(
    model_id: str = typer.Argument(..., help="Model id, e.g. openai/sora-2"),
    as_json: bool = JSON_OPTION,
) -> None:
    """Show model details."""

    async def handler(luid: LuidGPT) -> None:
        model = await luid.models.get_model(model_id)
        if as_json:
            print_json(model)
            return
        lines = [
            f"[bold]{model.name}[/bold] [dim]({model.model_id})[/dim]",
            model.description or "",
            "",
            f"[bold]Provider:[/bold] {model.provider_display_name or '-'}",
            f"[bold]Tier:[/bold] {model.tier.display_name}",
            f"[bold]Credits per run:[/bold] {model.effective_credit_cost}",
            f"[bold]Estimated time:[/bold] {model.estimated_time_display or model.speed_estimate}",
        ]
        if model.style_tags:
            lines.append(f"[bold]Styles:[/bold] {', '.join(model.style_tags)}")
        if model.quality_tag:
            lines.append(f"[bold]Quality:[/bold] {model.quality_tag}")
        if model.run_count is not None:
            lines.append(f"[bold]Runs:[/bold] {model.run_count}")
        console.print(Panel("\n".join(lines), title="Model", border_style="blue"))

    run_command(handler)


@models_app.command("schema")
def schema_command(
    model_id: str = typer.Argument(..., help="Model id, e.g. openai/sora-2"),
    as_json: bool = JSON_OPTION,
) -> None:
    """Show the input parameters a model accepts."""

    async def handler(luid: LuidGPT) -> None:
        schema = await luid.models.get_model_schema(model_id)
        if as_json:
            print_json(schema)
            return
        table = Table(title=f"Inputs for {model_id}", show_header=True, header_style="bold magenta")
        table.add_column("Name", style="cyan")
        table.add_column("Type")
        table.add_column("Required")
        table.add_column("Default", style="dim")
        table.add_column("Description")
        for name, prop in schema.properties.items():
            allowed = f" [dim](one of: {', '.join(map(str, prop.enum))})[/dim]" if prop.enum else ""
            table.add_row(
                name,
                prop.type or "-",
                "yes" if schema.is_required(name) else "",
                "" if prop.default is None else json.dumps(prop.default),
                (prop.description or "") + allowed,
            )
        console.print(table)

    run_command(handler)


@models_app.command("run")
def run_model_command(
    model_id: str = typer.Argument(..., help="Model id, e.g. openai/sora-2"),
    inputs: List[str] = typer.Option([], "--input", "-i", help="Input as key=value (repeatable)"),
    input_json: Optional[str] = typer.Option(None, "--input-json", help="Inputs as a JSON object"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", exists=True, dir_okay=False, help="File to upload"),
    workspace: Optional[str] = typer.Option(None, "--workspace", "-w", help="Charge a workspace"),
    title: Optional[str] = typer.Option(None, "--title"),
    tags: List[str] = typer.Option([], "--tag", help="Tag (repeatable)"),
    wait: bool = typer.Option(False, "--wait", help="Wait until the generation finishes"),
    as_json: bool = JSON_OPTION,
) -> None:
    """Run a model."""
    if file is not None and (workspace or title or tags):
        console.print("[red]Error:[/red] --workspace, --title and --tag cannot be combined with --file.")
        raise typer.Exit(1)

    async def handler(luid: LuidGPT) -> None:
        params = parse_inputs(inputs, input_json)
        if file is not None:
            mime_type = mimetypes.guess_type(file.name)[0] or "application/octet-stream"
            generation = await luid.models.run_model_with_file(
                model_id,
                file.read_bytes(),
                file.name,
                mime_type,
                {key: value if isinstance(value, str) else json.dumps(value) for key, value in params.items()},
            )
        else:
            generation = await luid.models.execute_model(
                model_id, params, organization_id=workspace, title=title, tags=tags or None,
            )

        if wait and not generation.status.is_finished:
            with console.status(f"Waiting for generation {generation.id}..."):
                generation = await luid.generations.wait_for_generation(
                    generation.id,
                    interval=luid.settings.poll_interval,
                    timeout=luid.settings.poll_timeout,
                )

        if as_json:
            print_json(generation)
        else:
            _print_generation(generation)

    run_command(handler)


# ---------------------------------------------------------------------------
# generations
# ---------------------------------------------------------------------------

@generations_app.command("list")
def list_generations_command(
    page: int = typer.Option(1, "--page", min=1),
    limit: Optional[int] = typer.Option(None, "--limit", min=1, max=100),
    workspace: Optional[str] = typer.Option(None, "--workspace", "-w"),
    category: Optional[str] = typer.Option(None, "--category"),
    model: Optional[str] = typer.Option(None, "--model"),
    status: Optional[str] = typer.Option(None, "--status"),
    favorites: bool = typer.Option(False, "--favorites", help="Only favorites"),
    as_json: bool = JSON_OPTION,
) -> None:
    """List your generations."""

    async def handler(luid: LuidGPT) -> None:
        generations, pagination = await luid.generations.list_generations(
            page=page,
            limit=limit or luid.settings.default_page_size,
            organization_id=workspace,
            category_slug=category,
            model_id=model,
            status=status,
            favorite=favorites or None,
        )
        if as_json:
            print_json(generations)
            return
        if not generations:
            console.print("[yellow]No generations yet[/yellow]")
            return
        console.print(_generations_table(generations, "Generations"))
        if pagination:
            console.print(f"[dim]Page {pagination.page} of {pagination.pages} ({pagination.total} total)[/dim]")

    run_command(handler)


@generations_app.command("show")
def show_generation_command(generation_id: str = typer.Argument(...), as_json: bool = JSON_OPTION) -> None:
    """Show one generation."""

    async def handler(luid: LuidGPT) -> None:
        generation = await luid.generations.get_generation(generation_id)
        if as_json:
            print_json(generation)
        else:
            _print_generation(generation)

    run_command(handler)


@generations_app.command("favorite")
def favorite_generation_command(generation_id: str = typer.Argument(...)) -> None:
    """Toggle the favorite flag of a generation."""

    async def handler(luid: LuidGPT) -> None:
        generation = await luid.generations.get_generation(generation_id)
        updated = await luid.generations.toggle_favorite(generation)
        state = "added to" if updated.is_favorite else "removed from"
        console.print(f"[green]✓[/green] Generation {updated.id} {state} favorites")

    run_command(handler)


@generations_app.command("update")
def update_generation_command(
    generation_id: str = typer.Argument(...),
    title: Optional[str] = typer.Option(None, "--title"),
    tags: List[str] = typer.Option([], "--tag", help="Replace tags (repeatable)"),
) -> None:
    """Rename or retag a generation."""

    async def handler(luid: LuidGPT) -> None:
        generation = await luid.generations.update_generation(generation_id, title=title, tags=tags or None)
        console.print(f"[green]✓[/green] Updated generation {generation.id}")

    run_command(handler)


@generations_app.command("delete")
def delete_generation_command(
    generation_id: str = typer.Argument(...),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a generation."""
    if not yes:
        typer.confirm(f"Delete generation {generation_id}?", abort=True)

    async def handler(luid: LuidGPT) -> None:
        await luid.generations.delete_generation(generation_id)
        console.print(f"[green]✓[/green] Deleted generation {generation_id}")

    run_command(handler)


@generations_app.command("cancel")
def cancel_generation_command(generation_id: str = typer.Argument(...)) -> None:
    """Cancel a running generation."""

    async def handler(luid: LuidGPT) -> None:
        generation = await luid.generations.cancel_generation(generation_id)
        console.print(f"Generation {generation.id}: {_status_text(generation.status.value)}")

    run_command(handler)


@generations_app.command("wait")
def wait_generation_command(
    generation_id: str = typer.Argument(...),
    interval: Optional[float] = typer.Option(None, "--interval", min=0.1),
    timeout: Optional[float] = typer.Option(None, "--timeout", min=1),
    as_json: bool = JSON_OPTION,
) -> None:
    """Wait for a generation to finish."""

    async def handler(luid: LuidGPT) -> None:
        with console.status(f"Waiting for generation {generation_id}..."):
            generation = await luid.generations.wait_for_generation(
                generation_id,
                interval=interval or luid.settings.poll_interval,
                timeout=timeout or luid.settings.poll_timeout,
            )
        if as_json:
            print_json(generation)
        else:
            _print_generation(generation)

    run_command(handler)


# ---------------------------------------------------------------------------
# workspaces
# ---------------------------------------------------------------------------

@workspaces_app.command("list")
def list_workspaces_command(as_json: bool = JSON_OPTION) -> None:
    """List your workspaces."""

    async def handler(luid: LuidGPT) -> None:
        workspaces = await luid.workspaces.list_workspaces()
        if as_json:
            print_json(workspaces)
            return
        if not workspaces:
            console.print("[yellow]You are not a member of any workspace[/yellow]")
            return
        console.print(_workspaces_table(workspaces))

    run_command(handler)


@workspaces_app.command("show")
def show_workspace_command(workspace_id: str = typer.Argument(...), as_json: bool = JSON_OPTION) -> None:
    """Show workspace details."""

    async def handler(luid: LuidGPT) -> None:
        workspace = await luid.workspaces.get_workspace(workspace_id)
        if as_json:
            print_json(workspace)
            return
        console.print(Panel(
            f"[bold]{workspace.name}[/bold] ({workspace.initials})\n"
            f"{workspace.description or ''}\n"
            f"Members: {workspace.member_count or 0}  Credits: {workspace.credits_display}  "
            f"Generations: {workspace.generations_count or 0}",
            title=f"Workspace {workspace.id}",
            border_style="blue",
        ))

    run_command(handler)


@workspaces_app.command("create")
def create_workspace_command(
    name: str = typer.Argument(...),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    logo: Optional[str] = typer.Option(None, "--logo"),
) -> None:
    """Create a workspace."""

    async def handler(luid: LuidGPT) -> None:
        workspace = await luid.workspaces.create_workspace(name, description=description, logo=logo)
        console.print(f"[green]✓[/green] Created workspace [bold]{workspace.name}[/bold] ({workspace.id})")

    run_command(handler)


@workspaces_app.command("update")
def update_workspace_command(
    workspace_id: str = typer.Argument(...),
    name: Optional[str] = typer.Option(None, "--name"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    logo: Optional[str] = typer.Option(None, "--logo"),
) -> None:
    """Update a workspace. Omitted fields are cleared."""

    async def handler(luid: LuidGPT) -> None:
        workspace = await luid.workspaces.update_workspace(
            workspace_id, name=name, description=description, logo=logo,
        )
        console.print(f"[green]✓[/green] Updated workspace [bold]{workspace.name}[/bold]")

    run_command(handler)


@workspaces_app.command("delete")
def delete_workspace_command(
    workspace_id: str = typer.Argument(...),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a workspace."""
    if not yes:
        typer.confirm(f"Delete workspace {workspace_id}?", abort=True)

    async def handler(luid: LuidGPT) -> None:
        await luid.workspaces.delete_workspace(workspace_id)
        console.print(f"[green]✓[/green] Deleted workspace {workspace_id}")

    run_command(handler)


@workspaces_app.command("members")
def members_command(workspace_id: str = typer.Argument(...), as_json: bool = JSON_OPTION) -> None:
    """List workspace members."""

    async def handler(luid: LuidGPT) -> None:
        members = await luid.workspaces.list_members(workspace_id)
        if as_json:
            print_json(members)
            return
        table = Table(title="Members", show_header=True, header_style="bold magenta")
        table.add_column("User", style="cyan")
        table.add_column("Name", style="green")
        table.add_column("Role")
        table.add_column("Joined", style="dim")
        for member in members:
            table.add_row(
                member.user.email if member.user else member.user_id,
                member.user.full_name if member.user else "-",
                member.role_display_name,
                member.joined_at.strftime("%Y-%m-%d"),
            )
        console.print(table)

    run_command(handler)


@workspaces_app.command("invite")
def invite_command(
    workspace_id: str = typer.Argument(...),
    email: str = typer.Argument(...),
    role: str = typer.Option("member", "--role", help="member or admin"),
) -> None:
    """Invite someone to a workspace."""

    async def handler(luid: LuidGPT) -> None:
        invitation = await luid.workspaces.create_invitation(workspace_id, email, role)
        console.print(f"[green]✓[/green] Invited {invitation.email} as {invitation.role}")

    run_command(handler)


@workspaces_app.command("invitations")
def invitations_command(
    workspace_id: Optional[str] = typer.Argument(None, help="Workspace id; omit to list invitations sent to you"),
    as_json: bool = JSON_OPTION,
) -> None:
    """List invitations of a workspace, or your own pending invitations."""

    async def handler(luid: LuidGPT) -> None:
        if workspace_id:
            invitations = await luid.workspaces.list_invitations(workspace_id)
        else:
            invitations = await luid.workspaces.list_pending_invitations()
        if as_json:
            print_json(invitations)
            return
        table = Table(title="Invitations", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="cyan")
        table.add_column("Email")
        table.add_column("Role")
        table.add_column("Status")
        table.add_column("Expires", style="dim")
        for invitation in invitations:
            status = "expired" if invitation.is_expired and invitation.status == "pending" else invitation.status
            table.add_row(
                invitation.id,
                invitation.email,
                invitation.role,
                status,
                invitation.expires_at.strftime("%Y-%m-%d"),
            )
        console.print(table)

    run_command(handler)


@workspaces_app.command("accept")
def accept_invitation_command(token: str = typer.Argument(..., help="Invitation token")) -> None:
    """Accept an invitation."""

    async def handler(luid: LuidGPT) -> None:
        workspace = await luid.workspaces.accept_invitation(token)
        console.print(f"[green]✓[/green] Joined workspace [bold]{workspace.name}[/bold]")

    run_command(handler)


@workspaces_app.command("leave")
def leave_workspace_command(
    workspace_id: str = typer.Argument(...),
    yes: bool = typer.Option(False, "--yes", "-y"),
) -> None:
    """Leave a workspace."""
    if not yes:
        typer.confirm(f"Leave workspace {workspace_id}?", abort=True)

    async def handler(luid: LuidGPT) -> None:
        await luid.workspaces.leave_workspace(workspace_id)
        console.print(f"[green]✓[/green] Left workspace {workspace_id}")

    run_command(handler)


@workspaces_app.command("credits")
def workspace_credits_command(
    workspace_id: str = typer.Argument(...),
    transactions: bool = typer.Option(False, "--transactions", help="Show the credit ledger"),
    limit: int = typer.Option(20, "--limit", min=1, max=100),
    as_json: bool = JSON_OPTION,
) -> None:
    """Show a workspace's credits."""

    async def handler(luid: LuidGPT) -> None:
        if transactions:
            items = await luid.workspaces.get_workspace_credit_transactions(workspace_id, limit=limit)
            if as_json:
                print_json(items)
            else:
                console.print(_transactions_table(items))
            return
        balance = await luid.workspaces.get_workspace_credits(workspace_id)
        if as_json:
            print_json(balance)
        else:
            _print_balance(balance, title="Workspace Credits")

    run_command(handler)


@workspaces_app.command("stats")
def workspace_stats_command(workspace_id: str = typer.Argument(...), as_json: bool = JSON_OPTION) -> None:
    """Show generation statistics for a workspace."""

    async def handler(luid: LuidGPT) -> None:
        stats = await luid.workspaces.get_workspace_generation_stats(workspace_id)
        if as_json:
            print_json(stats)
            return
        table = Table(title="Generation Stats", show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right", style="green")
        table.add_row("Total", str(stats.total))
        table.add_row("Completed", str(stats.completed))
        table.add_row("Failed", str(stats.failed))
        table.add_row("Processing", str(stats.processing))
        table.add_row("Credits used", str(stats.total_credits_used))
        console.print(table)

    run_command(handler)


# ---------------------------------------------------------------------------
# credits
# ---------------------------------------------------------------------------

@credits_app.command("balance")
def balance_command(as_json: bool = JSON_OPTION) -> None:
    """Show your credit balance."""

    async def handler(luid: LuidGPT) -> None:
        balance = await luid.credits.get_balance()
        if as_json:
            print_json(balance)
            return
        _print_balance(balance)
        if luid.credits.is_low(balance, luid.settings.low_credits_threshold):
            console.print("[yellow]Your balance is low.[/yellow] Run 'luidgpt credits packages' to top up.")

    run_command(handler)


@credits_app.command("transactions")
def transactions_command(
    page: int = typer.Option(1, "--page", min=1),
    limit: Optional[int] = typer.Option(None, "--limit", min=1, max=100),
    as_json: bool = JSON_OPTION,
) -> None:
    """Show credit history."""

    async def handler(luid: LuidGPT) -> None:
        transactions, pagination = await luid.credits.get_transactions(
            page=page, limit=limit or luid.settings.default_page_size,
        )
        if as_json:
            print_json(transactions)
            return
        console.print(_transactions_table(transactions))
        if pagination and pagination.has_more:
            console.print(f"[dim]More: --page {pagination.page + 1}[/dim]")

    run_command(handler)


@credits_app.command("packages")
def packages_command(as_json: bool = JSON_OPTION) -> None:
    """List credit packages available for purchase."""

    async def handler(luid: LuidGPT) -> None:
        packages = await luid.credits.get_packages()
        if as_json:
            print_json(packages)
            return
        table = Table(title="Credit Packages", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="cyan")
        table.add_column("Name", style="green")
        table.add_column("Credits", justify="right")
        table.add_column("Price", justify="right")
        table.add_column("Credits/$", justify="right", style="dim")
        table.add_column("")
        for package in packages:
            badge = "[bold yellow]Popular[/bold yellow]" if package.popular else ""
            if package.savings:
                badge = f"{badge} Save {package.savings}%".strip()
            table.add_row(
                package.id,
                package.name,
                str(package.credits),
                package.price_formatted,
                f"{package.credits_per_dollar:.1f}",
                badge,
            )
        console.print(table)

    run_command(handler)


@credits_app.command("buy")
def buy_command(package_id: str = typer.Argument(..., help="Package id from 'credits packages'")) -> None:
    """Start a checkout for a credit package."""

    async def handler(luid: LuidGPT) -> None:
        url = await luid.credits.create_checkout_session(package_id)
        console.print("[green]✓[/green] Complete your purchase at:")
        console.print(url, soft_wrap=True)

    run_command(handler)


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------

@config_app.command("show")
def config_show_command(as_json: bool = JSON_OPTION) -> None:
    """Show the effective configuration."""
    settings = get_settings()
    data = settings.to_dict()
    if as_json:
        print_json(data)
        return

    table = Table(title="Current Configuration", show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    for key, value in data.items():
        table.add_row(key, str(value))
    console.print(table)


@config_app.command("init")
def config_init_command(
    directory: Optional[Path] = typer.Option(None, "--dir", help="Target directory (default: ./.luidgpt)"),
    force: bool = typer.Option(False, "--force", help="Replace an existing .env file"),
) -> None:
    """Write an example .env file."""
    try:
        env_file = EnvFileLoader().create_example_env_file(directory, overwrite=force)
    except FileExistsError as e:
        console.print(f"[yellow]{escape(str(e))}[/yellow] Use --force to replace it.")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Created {env_file}")


def main() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()
