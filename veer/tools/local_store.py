"""
JSON file key/value store for widget state (snippets, saved colors, quick
commands, break-reminder stats and UI settings).

Reads never fail: a missing file, a missing key or corrupt JSON all give
back the caller's default.
"""
import json
import logging
import os
import tempfile
import threading
import uuid
from datetime import UTC, datetime
from typing import Any, Dict, Iterable, List, Optional

from veer.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

SNIPPETS_KEY = "veer.snippets"
COLORS_KEY = "veer.colorpicker.colors"
QUICK_COMMANDS_KEY = "veer.quickcommands"
BREAK_STATS_KEY = "veer.breakreminder.stats"
SETTINGS_KEY = "veer.settings"

SNIPPET_LANGUAGES = [
    "javascript", "typescript", "python", "java", "cpp", "csharp", "php",
    "ruby", "go", "rust", "sql", "html", "css",
]
ACTION_TYPES = ("website", "application", "text")

PRESET_COMMANDS = [
    {
        "name": "Morning Routine",
        "alias": "morning",
        "description": "Open your morning apps and websites",
        "icon": "☀️",
        "actions": [
            {"type": "website", "value": "https://mail.google.com"},
            {"type": "website", "value": "https://calendar.google.com"},
            {"type": "website", "value": "https://news.google.com"},
        ],
    },
    {
        "name": "Dev Setup",
        "alias": "dev",
        "description": "Open development tools",
        "icon": "💻",
        "actions": [
            {"type": "application", "value": "code"},
            {"type": "website", "value": "https://github.com"},
            {"type": "application", "value": "cmd"},
        ],
    },
    {
        "name": "Social Media",
        "alias": "social",
        "description": "Open social media sites",
        "icon": "📱",
        "actions": [
            {"type": "website", "value": "https://twitter.com"},
            {"type": "website", "value": "https://linkedin.com"},
            {"type": "website", "value": "https://reddit.com"},
        ],
    },
    {
        "name": "Work Focus",
        "alias": "work",
        "description": "Open work-related tools",
        "icon": "🎯",
        "actions": [
            {"type": "website", "value": "https://notion.so"},
            {"type": "website", "value": "https://slack.com"},
            {"type": "application", "value": "outlook"},
        ],
    },
]


def _now() -> str:
    return datetime.now(UTC).isoformat()


class LocalStore:
    """Key/value store persisted as one JSON object on disk."""

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable local store {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._dump(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._dump(data)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._load())


class _Collection:
    """A list of dict records kept under one store key."""

    key = ""
    resource = ""

    def __init__(self, store: LocalStore):
        self.store = store

    def all(self) -> List[Dict[str, Any]]:
        items = self.store.get(self.key, [])
        return items if isinstance(items, list) else []

    def _save(self, items: List[Dict[str, Any]]) -> None:
        self.store.set(self.key, items)

    def get(self, item_id: str) -> Dict[str, Any]:
        for item in self.all():
            if item.get("id") == item_id:
                return item
        raise NotFoundError(self.resource, item_id)

    def delete(self, item_id: str) -> None:
        items = self.all()
        remaining = [item for item in items if item.get("id") != item_id]
        if len(remaining) == len(items):
            raise NotFoundError(self.resource, item_id)
        self._save(remaining)


def split_tags(tags: Any) -> List[str]:
    """Accept ``"a, b"`` or a list; drop blanks."""
    if tags is None:
        return []
    parts = tags.split(",") if isinstance(tags, str) else tags
    return [str(tag).strip() for tag in parts if str(tag).strip()]


class SnippetStore(_Collection):
    key = SNIPPETS_KEY
    resource = "Snippet"

    def add(self, title: str, code: str, language: str = "javascript", tags: Any = None) -> Dict[str, Any]:
        if not (title or "").strip() or not (code or "").strip():
            raise ValidationError("Title and code are required")
        snippet = {
            "id": str(uuid.uuid4()),
            "title": title.strip(),
            "code": code.strip(),
            "language": language,
            "tags": split_tags(tags),
            "createdAt": _now(),
        }
        self._save([snippet] + self.all())
        return snippet

    def search(self, query: str = "", language: Optional[str] = None) -> List[Dict[str, Any]]:
        """Match title, code or any tag (case-insensitive), optionally within one language."""
        needle = (query or "").lower()
        results = []
        for snippet in self.all():
            if language and language != "all" and snippet.get("language") != language:
                continue
            haystacks = [snippet.get("title", ""), snippet.get("code", "")] + list(snippet.get("tags") or [])
            if any(needle in str(text).lower() for text in haystacks):
                results.append(snippet)
        return results


class ColorStore(_Collection):
    key = COLORS_KEY
    resource = "Color"

    def add(self, hex_color: str, name: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Save a color; returns None when the hex is already saved."""
        items = self.all()
        if any(item.get("hex", "").lower() == hex_color.lower() for item in items):
            logger.info(f"Color {hex_color} already saved")
            return None
        color = {"id": str(uuid.uuid4()), "hex": hex_color, "createdAt": _now()}
        if name:
            color["name"] = name
        self._save([color] + items)
        return color


class QuickCommandStore(_Collection):
    key = QUICK_COMMANDS_KEY
    resource = "QuickCommand"

    def find_by_alias(self, alias: str) -> Optional[Dict[str, Any]]:
        alias = (alias or "").strip().lower()
        for command in self.all():
            if command.get("alias", "").lower() == alias:
                return command
        return None

    def add(
        self,
        name: str,
        alias: str,
        actions: Iterable[Dict[str, Any]],
        description: str = "",
        icon: str = "⚡",
    ) -> Dict[str, Any]:
        """
        Create a quick command.

        Raises:
            ValidationError: Missing name/alias, duplicate alias, no usable action
        """
        if not (name or "").strip() or not (alias or "").strip():
            raise ValidationError("Name and alias are required")
        if self.find_by_alias(alias):
            raise ValidationError("Alias already exists", field="alias", value=alias)
        valid_actions = [a for a in actions or [] if str(a.get("value") or "").strip()]
        if not valid_actions:
            raise ValidationError("Add at least one action", field="actions")
        for action in valid_actions:
            if action.get("type") not in ACTION_TYPES:
                raise ValidationError(
                    f"Invalid action type: {action.get('type')}. Use {', '.join(ACTION_TYPES)}",
                    field="actions",
                )
        command = {
            "id": str(uuid.uuid4()),
            "name": name.strip(),
            "alias": alias.strip().lower(),
            "description": (description or "").strip(),
            "icon": icon,
            "actions": valid_actions,
            "createdAt": _now(),
            "useCount": 0,
        }
        self._save(self.all() + [command])
        return command

    def import_preset(self, alias: str) -> Dict[str, Any]:
        for preset in PRESET_COMMANDS:
            if preset["alias"] == alias:
                return self.add(**preset)
        raise NotFoundError("Preset", alias)

    def record_use(self, command_id: str) -> Dict[str, Any]:
        """Increment a command's use count."""
        items = self.all()
        for command in items:
            if command.get("id") == command_id:
                command["useCount"] = int(command.get("useCount") or 0) + 1
                self._save(items)
                return command
        raise NotFoundError(self.resource, command_id)

    def by_popularity(self) -> List[Dict[str, Any]]:
        return sorted(self.all(), key=lambda c: c.get("useCount") or 0, reverse=True)


class BreakStats:
    """Counters for the break reminder widget."""

    def __init__(self, store: LocalStore):
        self.store = store

    def get(self) -> Dict[str, Any]:
        default = {"totalBreaks": 0, "totalExercises": 0, "lastBreakDate": None}
        stats = self.store.get(BREAK_STATS_KEY, default)
        return {**default, **stats} if isinstance(stats, dict) else default

    def record_break(self) -> Dict[str, Any]:
        stats = self.get()
        stats["totalBreaks"] += 1
        stats["lastBreakDate"] = _now()
        self.store.set(BREAK_STATS_KEY, stats)
        return stats

    def record_exercise(self) -> Dict[str, Any]:
        stats = self.get()
        stats["totalExercises"] += 1
        self.store.set(BREAK_STATS_KEY, stats)
        return stats
