"""
Record types shared by the store and the feature panels.

Stored records keep the camelCase field names used by the browser build
(dueDate, createdAt) so an exported store loads unchanged.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


SUBJECTS: List[str] = [
    "Mathematics",
    "Physics",
    "Chemistry",
    "Biology",
    "Computer Science",
    "History",
    "Geography",
    "Literature",
    "Economics",
    "Other",
]

GENERAL_SUBJECT = "General"


def new_id() -> str:
    """Generate a fresh record identifier."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Serialize a datetime as ISO-8601, treating naive values as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string, including the JavaScript 'Z' suffix."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Task:
    """A study task."""
    title: str
    id: str = field(default_factory=new_id)
    completed: bool = False
    due_date: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
        }
        # An absent due date is left out of the stored record
        if self.due_date is not None:
            data["dueDate"] = format_timestamp(self.due_date)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        due_date = data.get("dueDate")
        return cls(
            id=data["id"],
            title=data["title"],
            completed=bool(data.get("completed", False)),
            due_date=parse_timestamp(due_date) if due_date else None,
        )


@dataclass
class Note:
    """A study note with an optional AI-generated summary."""
    title: str
    content: str = ""
    subject: str = SUBJECTS[0]
    id: str = field(default_factory=new_id)
    summary: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "subject": self.subject,
            "createdAt": format_timestamp(self.created_at),
        }
        if self.summary:
            data["summary"] = self.summary
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Note":
        return cls(
            id=data["id"],
            title=data["title"],
            content=data.get("content", ""),
            subject=data.get("subject", SUBJECTS[0]),
            summary=data.get("summary") or None,
            created_at=parse_timestamp(data["createdAt"]),
        )
