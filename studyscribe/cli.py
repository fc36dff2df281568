"""
CLI Module - Terminal shell and main application loop

This module provides the terminal-based user interface for StudyScribe.
It handles:
- Initial application startup and configuration detection
- Setup wizard invocation
- Tab selection (Tasks, Notes, PYQ, Assistant)
- Per-tab command loops
- Graceful shutdown
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Set, TypeVar

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt, Confirm
from rich.table import Table

from studyscribe import __version__
from studyscribe.app import StudyApp
from studyscribe.config import load_config, config_exists
from studyscribe.models import SUBJECTS, Note, Task
from studyscribe.notifications import ConsoleNotifier
from studyscribe.setup_wizard import run_setup_wizard
from studyscribe.storage import NOTES_KEY, TASKS_KEY


# ============================================================================
# Constants
# ============================================================================

APP_TITLE = "StudyScribe"

TABS = [
    ("1", "Tasks"),
    ("2", "Notes"),
    ("3", "PYQ"),
    ("4", "Assistant"),
]

DATE_FORMAT = "%Y-%m-%d"

console = Console()

T = TypeVar("T")


# ============================================================================
# Application Lifecycle
# ============================================================================

def setup_logging(verbose: bool = False) -> None:
    """
    Route log records through rich.

    Args:
        verbose: Log at DEBUG instead of WARNING
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def display_banner() -> None:
    """Display the application banner."""
    banner = f"""
[bold cyan]{APP_TITLE}[/bold cyan] [dim]v{__version__}[/dim]
Tasks, notes, exam question analysis and an AI study assistant
    """
    console.print(Panel(banner.strip(), border_style="cyan"))


def run_application() -> None:
    """
    Main application entry point.

    - If no config exists: Run setup wizard
    - If config exists: Load it, offering the wizard if it is invalid
    Then build the app context and start the shell.
    """
    display_banner()
    console.print()

    if not config_exists():
        console.print("[yellow]No configuration found. Let's get you set up.[/yellow]\n")
        config = run_setup_wizard()
        if config is None:
            console.print("\n[red]Setup cancelled. Exiting.[/red]")
            sys.exit(0)
    else:
        try:
            config = load_config()
        except (FileNotFoundError, ValueError) as e:
            console.print(f"[red]Error loading configuration: {e}[/red]")
            if not Confirm.ask("Would you like to reconfigure?", default=True):
                sys.exit(1)
            config = run_setup_wizard()
            if config is None:
                sys.exit(0)

    setup_logging(config.verbose)

    try:
        app = StudyApp.create(config, ConsoleNotifier(console))
    except Exception as e:
        console.print(f"[red]Failed to start {APP_TITLE}: {e}[/red]")
        console.print("[yellow]Please check your API key and configuration[/yellow]")
        sys.exit(1)

    run_shell(app)


def run_shell(app: StudyApp) -> None:
    """
    Tab selection loop.

    Args:
        app: Initialized application context
    """
    changed: Set[str] = set()
    unsubscribe = app.store.subscribe(changed.add)

    tab_handlers: Dict[str, Callable[[StudyApp, Set[str]], None]] = {
        "1": run_tasks_tab,
        "2": run_notes_tab,
        "3": run_pyq_tab,
        "4": run_assistant_tab,
    }

    try:
        while True:
            display_tabs(app)
            try:
                choice = Prompt.ask(
                    "Select tab",
                    choices=[key for key, _ in TABS] + ["q"],
                    default="1",
                )
            except (KeyboardInterrupt, EOFError):
                break

            if choice == "q":
                break

            try:
                tab_handlers[choice](app, changed)
            except KeyboardInterrupt:
                console.print()
            except EOFError:
                break
    finally:
        unsubscribe()

    console.print("\n[yellow]Goodbye![/yellow]")


def display_tabs(app: StudyApp) -> None:
    """Show the tab menu with a count per tab."""
    counts = {
        "1": f"{len(app.tasks.pending_tasks)} pending",
        "2": f"{len(app.store.notes)} notes",
        "3": "analyze questions",
        "4": f"subject: {app.doubts.subject}",
    }
    console.print()
    for key, name in TABS:
        console.print(f"  [cyan][{key}][/cyan] {name:<10} [dim]{counts[key]}[/dim]")
    console.print("  [cyan]\\[q][/cyan] Quit\n")


def read_command(prompt: str) -> tuple[str, str]:
    """Read 'command argument' from the user, lowercasing the command."""
    line = Prompt.ask(prompt).strip()
    command, _, argument = line.partition(" ")
    return command.lower(), argument.strip()


# ============================================================================
# Helper Functions
# ============================================================================

def parse_due_date(text: str) -> Optional[datetime]:
    """
    Parse a YYYY-MM-DD due date.

    Args:
        text: User input (empty for no due date)

    Returns:
        Midnight UTC on that day, or None for empty input

    Raises:
        ValueError: If the date is not in YYYY-MM-DD format
    """
    text = text.strip()
    if not text:
        return None
    return datetime.strptime(text, DATE_FORMAT).replace(tzinfo=timezone.utc)


def select_item(items: Sequence[T], argument: str) -> Optional[T]:
    """
    Pick an item by its 1-based position in a displayed list.

    Args:
        items: Items in display order
        argument: Position typed by the user

    Returns:
        The item, or None if the position is invalid
    """
    try:
        index = int(argument)
    except ValueError:
        console.print("[yellow]Please give the item number[/yellow]")
        return None

    if not 1 <= index <= len(items):
        console.print(f"[yellow]No item {index}[/yellow]")
        return None
    return items[index - 1]


def choose_subject(subjects: List[str], default: str) -> str:
    """Prompt for a subject from a fixed list."""
    for i, subject in enumerate(subjects, 1):
        console.print(f"  [cyan]{i:>2}[/cyan] {subject}")
    choice = Prompt.ask(
        "Subject",
        choices=[str(i) for i in range(1, len(subjects) + 1)],
        default=str(subjects.index(default) + 1),
    )
    return subjects[int(choice) - 1]


def print_text_panel(text: str, title: str, style: str = "cyan") -> None:
    console.print(Panel(escape(text), title=escape(title), border_style=style))


# ============================================================================
# Tasks Tab
# ============================================================================

TASKS_HELP = """
[bold]Task Commands:[/bold]

  [cyan]list[/cyan]          - Show all tasks
  [cyan]add[/cyan]           - Add a task (asks for title and due date)
  [cyan]toggle N[/cyan]      - Mark task N done / not done
  [cyan]delete N[/cyan]      - Delete task N
  [cyan]plan[/cyan]          - Generate one study task per note
  [cyan]back[/cyan]          - Return to the tab menu
"""


def display_tasks(app: StudyApp) -> List[Task]:
    """
    Show pending then completed tasks.

    Returns:
        Tasks in the order they were numbered
    """
    ordered = app.tasks.pending_tasks + app.tasks.completed_tasks
    if not ordered:
        console.print("[dim]No pending tasks. Ready to add some?[/dim]\n")
        return ordered

    table = Table(title="Smart Study Planner", show_header=True, header_style="bold green")
    table.add_column("#", style="cyan", width=4)
    table.add_column("Done", width=5)
    table.add_column("Task")
    table.add_column("Due", width=8)

    for i, task in enumerate(ordered, 1):
        due = f"{task.due_date:%b} {task.due_date.day}" if task.due_date else ""
        title = escape(task.title)
        if task.completed:
            title = f"[strike dim]{title}[/strike dim]"
        table.add_row(str(i), "✓" if task.completed else "", title, due)

    console.print(table)
    console.print(f"[dim]{app.tasks.status_line()}[/dim]\n")
    return ordered


def run_tasks_tab(app: StudyApp, changed: Set[str]) -> None:
    """Command loop for the Tasks tab."""
    ordered = display_tasks(app)
    changed.discard(TASKS_KEY)

    while True:
        command, argument = read_command("[bold green]tasks>[/bold green]")

        if command in ("back", "q", "exit"):
            return
        elif command in ("", "list"):
            pass
        elif command == "help":
            console.print(Panel(TASKS_HELP.strip(), title="Help", border_style="green"))
        elif command == "add":
            title = argument or Prompt.ask("Task title")
            try:
                due_date = parse_due_date(Prompt.ask("Due date (YYYY-MM-DD)", default=""))
            except ValueError:
                console.print("[yellow]Invalid date, expected YYYY-MM-DD[/yellow]")
                continue
            app.tasks.add_task(title, due_date)
        elif command == "toggle":
            task = select_item(ordered, argument)
            if task:
                app.tasks.toggle_task(task.id)
        elif command == "delete":
            task = select_item(ordered, argument)
            if task:
                app.tasks.delete_task(task.id)
        elif command == "plan":
            with console.status("[cyan]Planning...[/cyan]", spinner="dots"):
                app.tasks.generate_study_plan()
        else:
            console.print("[yellow]Unknown command. Type 'help' for commands.[/yellow]")

        if TASKS_KEY in changed or command == "list":
            ordered = display_tasks(app)
            changed.discard(TASKS_KEY)


# ============================================================================
# Notes Tab
# ============================================================================

NOTES_HELP = """
[bold]Note Commands:[/bold]

  [cyan]list[/cyan]          - Show all notes
  [cyan]new[/cyan]           - Write a new note
  [cyan]view N[/cyan]        - Show note N with its summary
  [cyan]edit N[/cyan]        - Edit note N
  [cyan]delete N[/cyan]      - Delete note N
  [cyan]summary N[/cyan]     - Generate an AI summary of note N
  [cyan]back[/cyan]          - Return to the tab menu
"""


def display_notes(notes: List[Note]) -> None:
    if not notes:
        console.print("[dim]No notes yet. Create your first note![/dim]\n")
        return

    table = Table(title="Notes", show_header=True, header_style="bold blue")
    table.add_column("#", style="cyan", width=4)
    table.add_column("Title")
    table.add_column("Subject", width=18)
    table.add_column("Summary", width=8)
    table.add_column("Created", width=12)

    for i, note in enumerate(notes, 1):
        table.add_row(
            str(i),
            escape(note.title),
            note.subject,
            "✓" if note.summary else "",
            note.created_at.strftime(DATE_FORMAT),
        )
    console.print(table)
    console.print()


def display_note(note: Note) -> None:
    console.print(Panel(escape(note.content) or "[dim](empty)[/dim]", title=escape(f"{note.title} - {note.subject}"), border_style="blue"))
    if note.summary:
        print_text_panel(note.summary, "Summary", style="green")


def read_multiline(prompt: str) -> str:
    """Read lines until a line containing only '.'."""
    console.print(f"{prompt} [dim](finish with a line containing only '.')[/dim]")
    lines = []
    while True:
        line = console.input()
        if line.strip() == ".":
            break
        lines.append(line)
    return "\n".join(lines)


def run_notes_tab(app: StudyApp, changed: Set[str]) -> None:
    """Command loop for the Notes tab."""
    notes = app.notes.notes
    display_notes(notes)
    changed.discard(NOTES_KEY)

    while True:
        command, argument = read_command("[bold blue]notes>[/bold blue]")

        if command in ("back", "q", "exit"):
            return
        elif command in ("", "list"):
            pass
        elif command == "help":
            console.print(Panel(NOTES_HELP.strip(), title="Help", border_style="blue"))
        elif command == "new":
            title = argument or Prompt.ask("Note title")
            subject = choose_subject(SUBJECTS, SUBJECTS[0])
            content = read_multiline("Content")
            app.notes.create_note(title, content, subject)
        elif command == "view":
            note = select_item(notes, argument)
            if note:
                display_note(note)
        elif command == "edit":
            note = select_item(notes, argument)
            if note:
                title = Prompt.ask("Note title", default=note.title)
                subject = choose_subject(SUBJECTS, note.subject)
                content = note.content
                if Confirm.ask("Rewrite content?", default=False):
                    content = read_multiline("Content")
                app.notes.update_note(note.id, title, content, subject)
        elif command == "delete":
            note = select_item(notes, argument)
            if note:
                app.notes.delete_note(note.id)
        elif command == "summary":
            note = select_item(notes, argument)
            if note:
                with console.status("[cyan]Summarizing...[/cyan]", spinner="dots"):
                    summary = app.notes.generate_summary(note.id)
                if summary:
                    print_text_panel(summary, "Summary", style="green")
        else:
            console.print("[yellow]Unknown command. Type 'help' for commands.[/yellow]")

        if NOTES_KEY in changed or command == "list":
            notes = app.notes.notes
            display_notes(notes)
            changed.discard(NOTES_KEY)


# ============================================================================
# PYQ Tab
# ============================================================================

def run_pyq_tab(app: StudyApp, changed: Set[str]) -> None:
    """Paste questions, pick a subject, and show the analysis."""
    console.print(Panel("Paste your previous year questions to get an analysis", title="PYQ Analyzer", border_style="cyan"))

    subject = choose_subject(SUBJECTS, SUBJECTS[0])
    questions = read_multiline("Questions")

    with console.status("[cyan]Analyzing...[/cyan]", spinner="dots"):
        analysis = app.pyq.analyze(questions, subject)

    if analysis:
        print_text_panel(analysis, f"Analysis - {subject}")


# ============================================================================
# Assistant Tab
# ============================================================================

ASSISTANT_HELP = """
[bold]Assistant Commands:[/bold]

  [cyan]/subject[/cyan]      - Change the subject of your questions
  [cyan]/task[/cyan]         - Save the last answer as a task
  [cyan]/note[/cyan]         - Save the last answer as a note (optionally summarized)
  [cyan]/history[/cyan]      - Show the conversation
  [cyan]/clear[/cyan]        - Start a new conversation
  [cyan]/back[/cyan]         - Return to the tab menu

  Anything else is sent to the assistant as a question.
"""


def display_transcript(app: StudyApp) -> None:
    for turn in app.doubts.transcript.turns:
        if turn.is_user:
            console.print(f"[bold cyan]You:[/bold cyan] {escape(turn.content)}")
        else:
            console.print(f"[bold magenta]Assistant:[/bold magenta] {escape(turn.content)}")
        console.print()


def last_answer(app: StudyApp) -> Optional[str]:
    for turn in reversed(app.doubts.transcript.turns[1:]):
        if not turn.is_user:
            return turn.content
    return None


def run_assistant_tab(app: StudyApp, changed: Set[str]) -> None:
    """Chat loop for the Assistant tab."""
    display_transcript(app)

    while True:
        line = Prompt.ask(f"[bold magenta]{app.doubts.subject}>[/bold magenta]").strip()
        if not line:
            continue

        command = line.lower()
        if command in ("/back", "/q", "/exit"):
            return
        elif command == "/help":
            console.print(Panel(ASSISTANT_HELP.strip(), title="Help", border_style="magenta"))
        elif command == "/subject":
            app.doubts.set_subject(choose_subject(app.doubts.subjects, app.doubts.subject))
        elif command == "/history":
            display_transcript(app)
        elif command == "/clear":
            app.doubts.clear()
            console.print("[green]✓ Started a new conversation[/green]\n")
        elif command in ("/task", "/note"):
            answer = last_answer(app)
            if answer is None:
                console.print("[yellow]No answer to save yet. Ask a question first![/yellow]")
                continue
            if command == "/task":
                save_answer_as_task(app)
            else:
                save_answer_as_note(app, answer)
        else:
            with console.status("[magenta]Thinking...[/magenta]", spinner="dots"):
                answer = app.doubts.ask(line)
            if answer:
                console.print(f"\n[bold magenta]Assistant:[/bold magenta] {escape(answer)}\n")


def save_answer_as_task(app: StudyApp) -> None:
    title = Prompt.ask("Task title")
    try:
        due_date = parse_due_date(Prompt.ask("Due date (YYYY-MM-DD)", default=""))
    except ValueError:
        console.print("[yellow]Invalid date, expected YYYY-MM-DD[/yellow]")
        return
    app.doubts.save_as_task(title, due_date)


def save_answer_as_note(app: StudyApp, answer: str) -> None:
    title = Prompt.ask("Note title")
    default_subject = app.doubts.subject if app.doubts.subject in SUBJECTS else SUBJECTS[0]
    subject = choose_subject(SUBJECTS, default_subject)

    summary = None
    if Confirm.ask("Generate a summary for this note?", default=False):
        with console.status("[cyan]Summarizing...[/cyan]", spinner="dots"):
            summary = app.doubts.summarize_selection(answer)

    app.doubts.save_as_note(title, answer, subject, summary=summary)


def main() -> None:
    """Console script entry point."""
    try:
        run_application()
    except KeyboardInterrupt:
        console.print("\n\nInterrupted by user. Exiting...")
        sys.exit(0)


# ============================================================================
# Module Testing
# ============================================================================

if __name__ == "__main__":
    main()
