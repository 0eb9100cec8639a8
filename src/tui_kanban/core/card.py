"""Card and Tag - the leaves of the data model."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from tui_kanban.core.constants import utc_now


class TagColor(Enum):
    """Terminal-neutral tag colors; the renderer decides how to draw them."""
    GRAY = "gray"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"

    @classmethod
    def parse(cls, value: "str | TagColor | None") -> "TagColor":
        """Accept a TagColor or its name, falling back to GRAY."""
        if isinstance(value, TagColor):
            return value
        if value:
            try:
                return cls(value.lower())
            except ValueError:
                pass
        return cls.GRAY


class CardStatus(Enum):
    """Where a card stands, independent of the list it sits in."""
    ACTIVE = "active"
    COMPLETED = "completed"
    STALE = "stale"


class CardPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    def next(self) -> "CardPriority":
        """The following priority, wrapping from HIGH back to LOW."""
        members = list(CardPriority)
        return members[(members.index(self) + 1) % len(members)]


@dataclass
class Tag:
    """A label shared by any number of cards."""
    id: int
    name: str
    color: TagColor = TagColor.GRAY

    def copy(self) -> "Tag":
        return Tag(id=self.id, name=self.name, color=self.color)


@dataclass
class Card:
    """
    A single task on a list.

    tag_ids is an ordered set: insertion order is kept and an id never
    appears twice. metadata is a free-form string map for extensions.
    """
    id: int
    title: str
    list_id: int
    description: str = ""
    tag_ids: list[int] = field(default_factory=list)
    due_date: date | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    status: CardStatus = CardStatus.ACTIVE
    priority: CardPriority = CardPriority.LOW
    created_at: datetime = field(default_factory=utc_now)
    modified_at: datetime = field(default_factory=utc_now)

    def copy(self) -> "Card":
        """Create an independent copy of this card."""
        return Card(
            id=self.id,
            title=self.title,
            list_id=self.list_id,
            description=self.description,
            tag_ids=list(self.tag_ids),
            due_date=self.due_date,
            metadata=dict(self.metadata),
            status=self.status,
            priority=self.priority,
            created_at=self.created_at,
            modified_at=self.modified_at,
        )

    def has_tag(self, tag_id: int) -> bool:
        return tag_id in self.tag_ids
