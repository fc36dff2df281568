"""
Feature Panels

The four feature panels behind the Shell's tabs:
- TaskManager: study tasks, plus a study plan generated from notes
- NoteEditor: notes with on-demand AI summaries
- PYQAnalyzer: analysis of previous year questions
- DoubtResolver: chat assistant that can save answers as tasks or notes

Panels share one RecordStore and one AIGateway. CRUD actions are
synchronous; AI actions are guarded so the same action cannot be
triggered again while it is pending.
"""

from datetime import datetime
from typing import Callable, Dict, List, Optional, Set, TypeVar
import logging

from studyscribe.conversation import ChatTranscript
from studyscribe.gateway import AIGateway
from studyscribe.models import GENERAL_SUBJECT, SUBJECTS, Note, Task
from studyscribe.notifications import Notifier
from studyscribe.storage import RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

MIN_SUMMARY_LENGTH = 50
MIN_PYQ_LENGTH = 20


class Panel:
    """Base class tracking which AI actions are pending."""

    def __init__(self, gateway: AIGateway, notifier: Notifier):
        self.gateway = gateway
        self.notifier = notifier
        self._pending: Set[str] = set()

    def is_pending(self, action: str) -> bool:
        return action in self._pending

    def _run_request(self, action: str, call: Callable[[], T]) -> Optional[T]:
        """
        Run an AI call for one action, refusing overlapping calls.

        Args:
            action: Name of the triggering action
            call: Function performing the request

        Returns:
            The call's result, or None if the action was already pending
        """
        if action in self._pending:
            logger.debug(f"{type(self).__name__}.{action} already pending, ignoring")
            return None

        self._pending.add(action)
        try:
            return call()
        finally:
            self._pending.discard(action)


# ============================================================================
# Task Manager
# ============================================================================

class TaskManager(Panel):
    """Smart study planner."""

    GENERATE_PLAN = "generate_study_plan"

    def __init__(self, store: RecordStore, gateway: AIGateway, notifier: Notifier):
        super().__init__(gateway, notifier)
        self.store = store

    @property
    def tasks(self) -> List[Task]:
        return self.store.tasks

    @property
    def pending_tasks(self) -> List[Task]:
        return [task for task in self.store.tasks if not task.completed]

    @property
    def completed_tasks(self) -> List[Task]:
        return [task for task in self.store.tasks if task.completed]

    def status_line(self) -> str:
        total = len(self.store.tasks)
        plural = "" if total == 1 else "s"
        return f"{total} total task{plural} • {len(self.completed_tasks)} completed"

    def add_task(self, title: str, due_date: Optional[datetime] = None) -> Optional[Task]:
        if not title.strip():
            self.notifier.error("Task title cannot be empty")
            return None

        task = self.store.add_task(title, due_date)
        self.notifier.success("Task added successfully")
        return task

    def toggle_task(self, task_id: str) -> Optional[Task]:
        return self.store.toggle_task(task_id)

    def delete_task(self, task_id: str) -> bool:
        removed = self.store.delete_task(task_id)
        if removed:
            self.notifier.info("Task removed")
        return removed

    def generate_study_plan(self) -> List[Task]:
        """
        Generate one study task per stored note.

        Returns:
            Tasks that were appended (empty on refusal or failure)
        """
        notes = self.store.notes
        if not notes:
            self.notifier.error("No notes available to generate study plan")
            return []

        result = self._run_request(
            self.GENERATE_PLAN, lambda: self.gateway.generate_study_tasks(notes)
        )
        if not result:
            return []

        titles = parse_task_lines(result)
        if len(titles) > len(notes):
            logger.warning(
                f"Study plan returned {len(titles)} tasks for {len(notes)} notes, "
                f"keeping the first {len(notes)}"
            )
            titles = titles[:len(notes)]
        elif len(titles) < len(notes):
            logger.warning(f"Study plan returned {len(titles)} tasks for {len(notes)} notes")

        created = self.store.add_tasks(titles)
        self.notifier.success(f"Generated {len(created)} study tasks")
        return created


def parse_task_lines(text: str) -> List[str]:
    """Split a model reply into trimmed, non-blank task titles."""
    return [line.strip() for line in text.split("\n") if line.strip()]


# ============================================================================
# Note Editor
# ============================================================================

class NoteEditor(Panel):
    """Notes with AI summaries."""

    GENERATE_SUMMARY = "generate_summary"

    def __init__(self, store: RecordStore, gateway: AIGateway, notifier: Notifier):
        super().__init__(gateway, notifier)
        self.store = store

    @property
    def notes(self) -> List[Note]:
        return self.store.notes

    def _validate(self, title: str, subject: str) -> bool:
        if not title.strip():
            self.notifier.error("Note title cannot be empty")
            return False
        if subject not in SUBJECTS:
            self.notifier.error(f"Unknown subject: {subject}")
            return False
        return True

    def create_note(self, title: str, content: str, subject: str = SUBJECTS[0]) -> Optional[Note]:
        if not self._validate(title, subject):
            return None

        note = self.store.add_note(title, content, subject)
        self.notifier.success("Note created successfully")
        return note

    def update_note(self, note_id: str, title: str, content: str, subject: str) -> Optional[Note]:
        """
        Update a note's title, content and subject.

        A content change clears the stored summary.
        """
        if not self._validate(title, subject):
            return None

        existing = self.store.get_note(note_id)
        if existing is None:
            self.notifier.error("Note not found")
            return None

        changes: Dict[str, Optional[str]] = {"title": title, "content": content, "subject": subject}
        if content != existing.content:
            changes["summary"] = None

        note = self.store.update_note(note_id, **changes)
        self.notifier.success("Note updated successfully")
        return note

    def delete_note(self, note_id: str) -> bool:
        removed = self.store.delete_note(note_id)
        if removed:
            self.notifier.info("Note deleted")
        return removed

    def generate_summary(self, note_id: str) -> Optional[str]:
        """
        Summarize a stored note and keep the summary on the note.

        Returns:
            The summary, or None if refused or the request failed
        """
        note = self.store.get_note(note_id)
        if note is None:
            self.notifier.error("Note not found")
            return None

        if len(note.content.strip()) < MIN_SUMMARY_LENGTH:
            self.notifier.error("Please add more content to generate a summary")
            return None

        summary = self._run_request(
            self.GENERATE_SUMMARY, lambda: self.gateway.generate_summary(note.content)
        )
        if not summary:
            return None

        self.store.set_note_summary(note_id, summary)
        self.notifier.success("Summary generated successfully")
        return summary


# ============================================================================
# PYQ Analyzer
# ============================================================================

class PYQAnalyzer(Panel):
    """Previous year question analysis."""

    ANALYZE = "analyze"

    def __init__(self, gateway: AIGateway, notifier: Notifier):
        super().__init__(gateway, notifier)
        self.analysis = ""

    def analyze(self, questions: str, subject: str = SUBJECTS[0]) -> Optional[str]:
        if len(questions.strip()) < MIN_PYQ_LENGTH:
            self.notifier.error("Please add more questions to analyze")
            return None

        result = self._run_request(
            self.ANALYZE, lambda: self.gateway.analyze_pyqs(questions, subject)
        )
        if not result:
            return None

        self.analysis = result
        self.notifier.success("Analysis completed successfully")
        return result


# ============================================================================
# Doubt Resolver
# ============================================================================

class DoubtResolver(Panel):
    """Chat assistant for study doubts."""

    ASK = "ask"
    SUMMARIZE = "summarize_selection"

    def __init__(self, store: RecordStore, gateway: AIGateway, notifier: Notifier):
        super().__init__(gateway, notifier)
        self.store = store
        self.subject = GENERAL_SUBJECT
        self.transcript = ChatTranscript()

    @property
    def subjects(self) -> List[str]:
        return [GENERAL_SUBJECT] + SUBJECTS

    def set_subject(self, subject: str) -> bool:
        if subject not in self.subjects:
            self.notifier.error(f"Unknown subject: {subject}")
            return False
        self.subject = subject
        return True

    def ask(self, question: str) -> Optional[str]:
        """
        Ask a question in the current subject.

        The question is added to the transcript right away; the answer is
        added only if the request succeeds.
        """
        question = question.strip()
        if not question:
            return None

        self.transcript.add_user(question)
        answer = self._run_request(
            self.ASK, lambda: self.gateway.resolve_doubt(question, self.subject)
        )
        if answer:
            self.transcript.add_model(answer)
        return answer

    def save_as_task(self, title: str, due_date: Optional[datetime] = None) -> Optional[Task]:
        if not title.strip():
            self.notifier.error("Task title cannot be empty")
            return None

        task = self.store.add_task(title, due_date)
        self.notifier.success("Task added successfully")
        return task

    def summarize_selection(self, text: str) -> Optional[str]:
        if not text.strip():
            self.notifier.error("Nothing selected to summarize")
            return None
        return self._run_request(self.SUMMARIZE, lambda: self.gateway.generate_summary(text))

    def save_as_note(
        self,
        title: str,
        content: str,
        subject: str = SUBJECTS[0],
        summary: Optional[str] = None,
    ) -> Optional[Note]:
        if not title.strip():
            self.notifier.error("Note title cannot be empty")
            return None
        if subject not in SUBJECTS:
            self.notifier.error(f"Unknown subject: {subject}")
            return None

        note = self.store.add_note(title, content, subject, summary=summary or None)
        self.notifier.success("Note saved successfully")
        return note

    def clear(self) -> None:
        self.transcript.clear()
