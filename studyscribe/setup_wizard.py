"""
Setup Wizard Module - Interactive configuration setup

This module walks first-time users through configuration:
- Gemini API key (from the environment or entered manually, validated)
- Model selection
- Data directory for the local record store

The wizard saves the configuration automatically when confirmed.
"""

from typing import Optional

from rich.console import Console
from rich.prompt import Prompt, Confirm
from rich.table import Table

from studyscribe.config import DEFAULT_MODEL, Config, get_api_key_from_env, save_config


# ============================================================================
# Constants
# ============================================================================

console = Console()

MODEL_CHOICES = [
    ("gemini-1.5-flash", "Fast, cost-effective"),
    ("gemini-1.5-pro", "Higher quality, slower"),
    ("gemini-2.0-flash", "Newer fast model"),
]

MAX_KEY_ATTEMPTS = 3


# ============================================================================
# Main Setup Flow
# ============================================================================

def run_setup_wizard() -> Optional[Config]:
    """
    Run the interactive setup wizard.

    Returns:
        Configured Config instance, or None if user cancelled
    """
    console.print("[bold cyan]Setup Wizard[/bold cyan]\n")

    config = Config()

    api_key = get_api_key()
    if api_key is None:
        return None
    config.api_key = api_key

    config.model = choose_model()

    data_dir = Prompt.ask(
        "\nData directory [dim](leave empty for the default)[/dim]",
        default=""
    )
    config.data_dir = data_dir.strip()

    display_config_summary(config)

    if not Confirm.ask("\nProceed with this configuration?", default=True):
        return None

    try:
        save_config(config)
        console.print("\n[bold green]Configuration saved successfully![/bold green]\n")
        return config
    except Exception as e:
        console.print(f"\n[bold red]Error saving configuration: {e}[/bold red]")
        return None


# ============================================================================
# Configuration Steps
# ============================================================================

def validate_api_key_format(api_key: str) -> tuple[bool, Optional[str]]:
    """
    Validate API key format (quick local check).

    Args:
        api_key: API key to validate

    Returns:
        (is_valid, error_message)
    """
    if not api_key or not api_key.strip():
        return False, "API key cannot be empty"

    # Gemini keys are typically 39 characters long
    if len(api_key.strip()) < 20:
        return False, "Gemini API key appears too short"

    return True, None


def validate_api_key_live(api_key: str) -> tuple[bool, Optional[str]]:
    """
    Validate API key by listing the available models.

    Args:
        api_key: API key to validate

    Returns:
        (is_valid, error_message)
    """
    try:
        import google.generativeai as genai
        genai.configure(api_key=api_key)
        list(genai.list_models())
        return True, None

    except Exception as e:
        error_str = str(e).lower()
        if 'api key' in error_str or 'api_key' in error_str or '401' in error_str or '403' in error_str:
            return False, "Invalid API key"
        elif 'network' in error_str or 'connection' in error_str or 'timeout' in error_str:
            return False, "Network error - could not validate key"
        else:
            return False, f"Validation failed: {str(e)[:100]}"


def get_api_key() -> Optional[str]:
    """
    Get API key from the environment or the user, with validation.

    Returns:
        API key, or None if not provided
    """
    console.print("[bold]Step 1: Gemini API Key[/bold]\n")

    env_key = get_api_key_from_env()
    if env_key:
        console.print("[green]API key found in environment variables[/green]")
        if Confirm.ask("Use this key?", default=True):
            return env_key

    console.print("[dim]Get your API key from: https://aistudio.google.com/app/apikey[/dim]\n")

    for attempt in range(MAX_KEY_ATTEMPTS):
        api_key = Prompt.ask("Enter your API key", password=True)

        if not api_key or not api_key.strip():
            console.print("[yellow]No API key provided[/yellow]")
            return None

        api_key = api_key.strip()

        is_valid_format, format_error = validate_api_key_format(api_key)
        if not is_valid_format:
            console.print(f"[red]{format_error}[/red]")
            if attempt < MAX_KEY_ATTEMPTS - 1 and not Confirm.ask("Try again?", default=True):
                return None
            continue

        console.print("[cyan]Validating API key...[/cyan]")
        is_valid_live, live_error = validate_api_key_live(api_key)
        if is_valid_live:
            console.print("[green]API key validated successfully[/green]")
            return api_key

        console.print(f"[red]{live_error}[/red]")
        if live_error and 'network' in live_error.lower():
            if Confirm.ask("Skip validation and use this key anyway?", default=False):
                return api_key

        if attempt < MAX_KEY_ATTEMPTS - 1 and not Confirm.ask("Try again?", default=True):
            return None

    console.print(f"[red]Maximum validation attempts ({MAX_KEY_ATTEMPTS}) exceeded[/red]")
    return None


def choose_model() -> str:
    """
    Prompt user to choose a Gemini model.

    Returns:
        Model name
    """
    console.print("\n[bold]Step 2: Choose Model[/bold]\n")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Option", style="cyan", width=8)
    table.add_column("Model", width=20)
    table.add_column("Notes", width=30)
    for i, (model, notes) in enumerate(MODEL_CHOICES, 1):
        table.add_row(str(i), model, notes)

    console.print(table)
    console.print()

    choices = [str(i) for i in range(1, len(MODEL_CHOICES) + 1)]
    default_choice = next(
        (str(i) for i, (model, _) in enumerate(MODEL_CHOICES, 1) if model == DEFAULT_MODEL),
        "1"
    )
    choice = Prompt.ask("Select model", choices=choices, default=default_choice)

    return MODEL_CHOICES[int(choice) - 1][0]


def display_config_summary(config: Config) -> None:
    """
    Show the configuration about to be saved.

    Args:
        config: Configuration to display
    """
    masked_key = f"{config.api_key[:4]}...{config.api_key[-4:]}" if len(config.api_key) > 8 else "****"

    table = Table(title="Configuration Summary", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("API Key", masked_key)
    table.add_row("Model", config.model)
    table.add_row("Data Directory", str(config.resolve_data_dir()))

    console.print()
    console.print(table)
