"""Typed rows for the sales, files and profiles tables plus the ephemeral import batch."""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Optional

from sales_dashboard.config import CATEGORY_ALL, CATEGORY_DEFAULT, DEFAULT_ROLE, FILE_CATEGORIES, ROLES


def parse_timestamp(value):
    """Postgres timestamptz string (or datetime) -> aware UTC datetime, None if missing."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip().replace("Z", "+00:00")
        # Postgres may emit 1-6 fractional digits; fromisoformat wants 3 or 6
        if "." in text:
            head, _, tail = text.partition(".")
            digits = ""
            rest = ""
            for i, ch in enumerate(tail):
                if not ch.isdigit():
                    rest = tail[i:]
                    break
                digits += ch
            text = f"{head}.{digits[:6].ljust(6, '0')}{rest}"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass
class SalesRecord:
    id: Optional[int]
    name: str
    value: float
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row.get("id"),
            name=str(row.get("name") or ""),
            value=float(row.get("value") or 0),
            created_at=parse_timestamp(row.get("created_at")),
        )

    def to_store(self):
        """JSON-safe dict for dcc.Store."""
        return {
            "id": self.id,
            "name": self.name,
            "value": self.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass
class SalesDraft:
    """Form state: a new record (id None) or an edit in progress."""
    name: str = ""
    value: float = 0.0
    id: Optional[int] = None

    @property
    def editing(self):
        return self.id is not None


@dataclass
class SalesStats:
    total: float = 0.0
    average: float = 0.0
    count: int = 0

    @classmethod
    def from_records(cls, records):
        values = [r.value for r in records]
        if not values:
            return cls()
        total = sum(values)
        return cls(total=total, average=round(total / len(values), 2), count=len(values))


def normalize_category(category):
    """Upload category: "All" or anything outside the closed set becomes the default."""
    if not category or category == CATEGORY_ALL or category not in FILE_CATEGORIES:
        return CATEGORY_DEFAULT
    return category


@dataclass
class FileRecord:
    id: Optional[str]
    name: str
    size: int
    type: str
    url: str
    category: str = CATEGORY_DEFAULT
    created_at: Optional[datetime] = None
    user_id: Optional[str] = None

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row.get("id"),
            name=row.get("name") or "",
            size=int(row.get("size") or 0),
            type=row.get("type") or "",
            url=row.get("url") or "",
            category=row.get("category") or CATEGORY_DEFAULT,
            created_at=parse_timestamp(row.get("created_at")),
            user_id=row.get("user_id"),
        )

    def to_insert(self):
        row = asdict(self)
        for key in ("id", "created_at"):
            row.pop(key)
        return row

    def to_store(self):
        row = asdict(self)
        row["created_at"] = self.created_at.isoformat() if self.created_at else None
        return row


@dataclass
class Preferences:
    notifications: bool = True
    theme: bool = False  # dark mode

    @classmethod
    def from_json(cls, data):
        data = data or {}
        return cls(
            notifications=bool(data.get("email_notifications", True)),
            theme=bool(data.get("dark_mode", False)),
        )

    def to_json(self):
        return {"email_notifications": self.notifications, "dark_mode": self.theme}


@dataclass
class Profile:
    id: str
    name: str = ""
    avatar_url: str = ""
    company: str = ""
    role: str = DEFAULT_ROLE
    preferences: Preferences = field(default_factory=Preferences)

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row["id"],
            name=row.get("name") or "",
            avatar_url=row.get("avatar_url") or "",
            company=row.get("company") or "",
            role=row.get("role") if row.get("role") in ROLES else DEFAULT_ROLE,
            preferences=Preferences.from_json(row.get("preferences")),
        )

    @classmethod
    def defaults_for(cls, user_id):
        return cls(id=user_id)

    def to_row(self):
        return {
            "id": self.id,
            "name": self.name,
            "avatar_url": self.avatar_url,
            "company": self.company,
            "role": self.role,
            "preferences": self.preferences.to_json(),
        }


@dataclass(frozen=True)
class Identity:
    id: str
    email: str = ""


@dataclass(frozen=True)
class ImportRow:
    name: str
    value: float

    def to_insert(self):
        return {"name": self.name, "value": self.value}


@dataclass
class ImportBatch:
    """Parsed rows waiting for an explicit commit. Never persisted."""
    rows: list
    source: str = ""

    def __len__(self):
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def preview(self, n=10):
        return self.rows[:n]

    @property
    def total(self):
        return sum(r.value for r in self.rows)

    def to_insert(self):
        return [r.to_insert() for r in self.rows]

    def to_store(self):
        return {"source": self.source, "rows": self.to_insert()}

    @classmethod
    def from_store(cls, data):
        rows = [ImportRow(name=str(r["name"]), value=float(r["value"])) for r in data.get("rows", [])]
        return cls(rows=rows, source=data.get("source", ""))
