"""
Persistent Record Store

This module provides durable storage for the two record collections (tasks
and notes). It has two layers:
- LocalStorage: a string-keyed, string-valued store kept in one JSON file
- RecordStore: the single in-memory owner of both collections, which mirrors
  every change to LocalStorage and notifies subscribers

Storage failures (unwritable directory, corrupted file) are not caught here;
they propagate as the underlying OSError / ValueError.
"""

import json
import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from studyscribe.models import Note, Task

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

STORAGE_FILENAME = "local_storage.json"

TASKS_KEY = "study-tasks"
NOTES_KEY = "study-notes"

_RECORD_TYPES = {
    TASKS_KEY: Task,
    NOTES_KEY: Note,
}


# ============================================================================
# Key-Value Storage
# ============================================================================

class LocalStorage:
    """
    Durable string-keyed store.

    All keys live in a single JSON object on disk. The file is read lazily
    on first access and rewritten in full on every change; refresh() drops
    the cached copy.
    """

    def __init__(self, path: Path):
        """
        Initialize the store.

        Args:
            path: JSON file backing the store (created on first write)
        """
        self.path = Path(path)
        self._items: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._items is None:
            if self.path.exists():
                with open(self.path, "r", encoding="utf-8") as f:
                    self._items = json.load(f)
            else:
                self._items = {}
        return self._items

    def _flush(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(items, f, ensure_ascii=False, indent=2)
        self._items = items

    def refresh(self) -> None:
        """Drop the cached contents so the next access re-reads the file."""
        self._items = None

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = dict(self._load())
        items[key] = value
        self._flush(items)

    def remove_item(self, key: str) -> None:
        items = self._load()
        if key in items:
            self._flush({k: v for k, v in items.items() if k != key})

    def keys(self) -> List[str]:
        return list(self._load().keys())


def load(storage: LocalStorage, collection_name: str) -> List[Any]:
    """
    Load a collection from storage.

    Args:
        storage: Backing key-value store
        collection_name: TASKS_KEY or NOTES_KEY

    Returns:
        Records in stored order (empty list if nothing is stored)
    """
    record_type = _RECORD_TYPES[collection_name]
    raw = storage.get_item(collection_name)
    if not raw:
        return []

    return [record_type.from_dict(item) for item in json.loads(raw)]


def save(storage: LocalStorage, collection_name: str, records: Iterable[Any]) -> None:
    """
    Serialize a collection and write it to storage.

    Args:
        storage: Backing key-value store
        collection_name: TASKS_KEY or NOTES_KEY
        records: Records to store, in display order
    """
    payload = json.dumps([record.to_dict() for record in records], ensure_ascii=False)
    storage.set_item(collection_name, payload)


# ============================================================================
# Record Store
# ============================================================================

Subscriber = Callable[[str], None]


class RecordStore:
    """
    Shared owner of the task and note collections.

    One instance is created by the application context and handed to every
    panel. Each mutation rewrites the affected collection in storage and
    then calls every subscriber with the collection name. A failed write
    raises and leaves the in-memory collections unchanged.
    """

    def __init__(self, storage: LocalStorage):
        """
        Initialize the record store and load both collections.

        Args:
            storage: Durable key-value store
        """
        self.storage = storage
        self._tasks: List[Task] = []
        self._notes: List[Note] = []
        self._subscribers: List[Subscriber] = []
        self.reload()

    @classmethod
    def open(cls, data_dir: Path) -> "RecordStore":
        """Create a store backed by the standard file inside data_dir."""
        return cls(LocalStorage(Path(data_dir) / STORAGE_FILENAME))

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a change listener.

        Args:
            callback: Called with TASKS_KEY or NOTES_KEY after each change

        Returns:
            Function that removes the listener
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _commit(self, collection_name: str, records: List[Any]) -> None:
        """Write records, then adopt them as the in-memory collection."""
        save(self.storage, collection_name, records)
        logger.debug(f"Saved {len(records)} records to {collection_name}")

        if collection_name == TASKS_KEY:
            self._tasks = records
        else:
            self._notes = records

        for callback in list(self._subscribers):
            callback(collection_name)

    def reload(self) -> None:
        """Re-read both collections from storage."""
        self.storage.refresh()
        self._tasks = load(self.storage, TASKS_KEY)
        self._notes = load(self.storage, NOTES_KEY)
        logger.debug(f"Loaded {len(self._tasks)} tasks and {len(self._notes)} notes")

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    @property
    def tasks(self) -> List[Task]:
        return [replace(task) for task in self._tasks]

    def get_task(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return replace(task)
        return None

    def add_task(self, title: str, due_date: Optional[datetime] = None) -> Task:
        task = Task(title=title, due_date=due_date)
        self._commit(TASKS_KEY, self._tasks + [task])
        return replace(task)

    def add_tasks(self, titles: Iterable[str]) -> List[Task]:
        """Append one task per title in a single write."""
        created = [Task(title=title) for title in titles]
        if not created:
            return []
        self._commit(TASKS_KEY, self._tasks + created)
        return [replace(task) for task in created]

    def toggle_task(self, task_id: str) -> Optional[Task]:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                toggled = replace(task, completed=not task.completed)
                self._commit(TASKS_KEY, self._tasks[:i] + [toggled] + self._tasks[i + 1:])
                return replace(toggled)
        return None

    def delete_task(self, task_id: str) -> bool:
        remaining = [task for task in self._tasks if task.id != task_id]
        if len(remaining) == len(self._tasks):
            return False
        self._commit(TASKS_KEY, remaining)
        return True

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    @property
    def notes(self) -> List[Note]:
        return [replace(note) for note in self._notes]

    def get_note(self, note_id: str) -> Optional[Note]:
        for note in self._notes:
            if note.id == note_id:
                return replace(note)
        return None

    def add_note(
        self,
        title: str,
        content: str,
        subject: str,
        summary: Optional[str] = None,
    ) -> Note:
        note = Note(title=title, content=content, subject=subject, summary=summary)
        self._commit(NOTES_KEY, self._notes + [note])
        return replace(note)

    def update_note(self, note_id: str, **changes: Any) -> Optional[Note]:
        """
        Replace fields on a stored note.

        Args:
            note_id: Note to update
            **changes: Field values (title, content, subject, summary)

        Returns:
            Updated note, or None if no note has that id
        """
        for i, note in enumerate(self._notes):
            if note.id == note_id:
                updated = replace(note, **changes)
                self._commit(NOTES_KEY, self._notes[:i] + [updated] + self._notes[i + 1:])
                return replace(updated)
        return None

    def set_note_summary(self, note_id: str, summary: Optional[str]) -> Optional[Note]:
        return self.update_note(note_id, summary=summary)

    def delete_note(self, note_id: str) -> bool:
        remaining = [note for note in self._notes if note.id != note_id]
        if len(remaining) == len(self._notes):
            return False
        self._commit(NOTES_KEY, remaining)
        return True
