# src/quadflow/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.task_models import Category, StatsSnapshot, Task

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], str]

logger = logging.getLogger(__name__)

SHORT_ID = 6
DEFAULT_TITLE_MAX_LENGTH = 100


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, parts[1:], emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("Any other text is captured into the inbox.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting ----

def format_task(task: Task) -> str:
    marker = "▶" if task.is_executing else " "
    done = " (done)" if not task.is_active else ""
    return f"{marker} {task.order:>2}. [{task.id[:SHORT_ID]}] {task.title}{done}"


def format_stats(stats: StatsSnapshot) -> str:
    d, w = stats.daily, stats.weekly
    breakdown = ", ".join(f"{c.value}={n}" for c, n in w.category_breakdown.items() if n)
    return (
        "Today:\n"
        f"  created: {d.created}  classified: {d.classified}  completed: {d.completed}\n"
        "This week:\n"
        f"  completion rate: {w.completion_rate * 100:.0f}%\n"
        f"  completions/day: {w.productivity:.1f}\n"
        f"  most active hour: {w.most_active_hour:02d}:00\n"
        f"  by category: {breakdown or '-'}"
    )


# ---- task references ----

def resolve_task(state: AppState, ref: str) -> Task | None:
    """
    Accepts:
      <id-prefix>        e.g. 3fa9c1
      <category>:<n>     e.g. work:2 (n-th active task in that category)
      <category>         shorthand for <category>:1
    """
    ref = ref.strip()
    if not ref:
        return None

    cat_part, _, pos_part = ref.partition(":")
    category = Category.from_value(cat_part)
    if category is not None:
        ranked = state.facade.list_by_category(category)
        try:
            pos = int(pos_part) if pos_part else 1
        except ValueError:
            return None
        return ranked[pos - 1] if 1 <= pos <= len(ranked) else None

    matches = [t for t in state.facade.snapshot() if t.id.startswith(ref.lower())]
    return matches[0] if len(matches) == 1 else None


def _require_task(state: AppState, args: list[str], usage: str) -> Task | str:
    if not args:
        return usage
    task = resolve_task(state, args[0])
    if task is None:
        return f"No single task matches '{args[0]}'."
    return task


def _current(state: AppState, task: Task) -> str:
    fresh = state.facade.get_task(task.id)
    if fresh is None:
        return "Task no longer exists."
    return f"{fresh.category.value}: {format_task(fresh)}"


# ---- capture ----

def capture(state: AppState, text: str) -> str:
    """Input-layer validation for new tasks (non-empty, length-bounded)."""
    title = text.strip()
    limit = int(getattr(state.settings, "title_max_length", DEFAULT_TITLE_MAX_LENGTH))
    if not title:
        return "Empty title; nothing captured."
    if len(title) > limit:
        return f"Title too long ({len(title)} > {limit} characters)."
    task = state.facade.add_task(title)
    return f"Captured to inbox: {format_task(task)}"


# ---- commands ----

def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    settings = state.settings
    store = state.task_store
    executing = state.facade.list_executing()
    return (
        "Status:\n"
        f"  Tasks: {len(state.facade.snapshot())}\n"
        f"  Executing: {format_task(executing).strip() if executing else '-'}\n"
        f"  Storage: {store.db_path if store is not None else 'memory only'}\n"
        f"  Expiry horizon: {getattr(settings, 'expiry_hours', 24.0):g}h"
    )


def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /list            -> every non-empty category
    /list <category> -> one category
    """
    if args:
        category = Category.from_value(args[0])
        if category is None:
            return f"Unknown category: {args[0]}. Use one of: {', '.join(c.value for c in Category)}."
        categories = [category]
    else:
        categories = list(Category)

    lines: list[str] = []
    for category in categories:
        tasks = state.facade.list_by_category(category)
        if not tasks and not args:
            continue
        lines.append(f"{category.value} ({len(tasks)}):")
        lines.extend(f"  {format_task(t)}" for t in tasks)
        if not tasks:
            lines.append("  (empty)")
    return "\n".join(lines) if lines else "No active tasks. Type anything to capture one."


def cmd_inbox(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return cmd_list(state, ["inbox"], emit)


def cmd_now(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    tops = state.facade.top_tasks()
    if not tops:
        return "Nothing to execute. Classify something from the inbox first."
    lines = ["Top tasks:"]
    lines.extend(f"  {t.category.value}: {format_task(t)}" for t in tops)
    return "\n".join(lines)


def cmd_classify(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    usage = "Usage: /classify <task> <work|life|study|hobby>"
    if len(args) < 2:
        return usage
    task = _require_task(state, args, usage)
    if isinstance(task, str):
        return task
    category = Category.from_value(args[1])
    if category is None or not category.is_classified:
        return usage
    state.facade.classify_task(task.id, category)
    return _current(state, task)


def cmd_category(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    usage = "Usage: /cat <task> <work|life|study|hobby|inbox>"
    if len(args) < 2:
        return usage
    task = _require_task(state, args, usage)
    if isinstance(task, str):
        return task
    category = Category.from_value(args[1])
    if category is None:
        return usage
    state.facade.change_category(task.id, category)
    return _current(state, task)


def cmd_move(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    usage = "Usage: /move <task> <position>"
    if len(args) < 2:
        return usage
    task = _require_task(state, args, usage)
    if isinstance(task, str):
        return task
    try:
        position = int(args[1])
    except ValueError:
        return usage
    state.facade.reorder_tasks_in_category(task.id, position, task.category)
    return _current(state, task)


def cmd_top(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task = _require_task(state, args, "Usage: /top <task>")
    if isinstance(task, str):
        return task
    state.facade.move_to_top(task.id)
    return _current(state, task)


def cmd_start(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /start <task> -> start or pause (only the #1 task of a category can run)
    """
    task = _require_task(state, args, "Usage: /start <task>")
    if isinstance(task, str):
        return task
    if task.order != 1 or not task.category.is_classified or not task.is_active:
        return "Only the #1 active task of a category can be started. Use /top first."
    state.facade.toggle_executing(task.id)
    return _current(state, task)


def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task = _require_task(state, args, "Usage: /done <task>")
    if isinstance(task, str):
        return task
    state.facade.complete_task(task.id)
    reply = f"Done: {task.title}"
    promoted = state.facade.list_executing()
    if task.is_executing and promoted is not None and promoted.category is task.category:
        reply += f"\nNow executing: {format_task(promoted).strip()}"
    return reply


def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task = _require_task(state, args, "Usage: /del <task>")
    if isinstance(task, str):
        return task
    state.facade.delete_task(task.id)
    return f"Deleted: {task.title}"


def cmd_cleanup(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    before = len(state.facade.snapshot())
    state.facade.cleanup_expired_tasks()
    removed = before - len(state.facade.snapshot())
    return f"Expired tasks removed: {removed}"


def cmd_stats(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    stats = state.facade.refresh_stats()
    summary = state.facade.completion_summary()
    return (
        f"{format_stats(stats)}\n"
        f"Completed today: {summary.total} (level {summary.level}, {summary.mood.replace('_', ' ')})"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show storage/executor status.")
registry.register("list", cmd_list, help_text="List tasks: /list [category].", aliases=["ls"])
registry.register("inbox", cmd_inbox, help_text="List captured, unclassified tasks.")
registry.register("now", cmd_now, help_text="Show the #1 task of every category.")
registry.register("classify", cmd_classify, help_text="Classify: /classify <task> <category>.", aliases=["c"])
registry.register("cat", cmd_category, help_text="Change category: /cat <task> <category>.")
registry.register("move", cmd_move, help_text="Reorder: /move <task> <position>.", aliases=["mv"])
registry.register("top", cmd_top, help_text="Swap a task into position 1: /top <task>.")
registry.register("start", cmd_start, help_text="Start/pause a #1 task: /start <task>.", aliases=["pause"])
registry.register("done", cmd_done, help_text="Complete a task: /done <task>.")
registry.register("del", cmd_delete, help_text="Delete a task: /del <task>.", aliases=["rm"])
registry.register("cleanup", cmd_cleanup, help_text="Remove tasks older than the expiry horizon.")
registry.register("stats", cmd_stats, help_text="Refresh and show daily/weekly stats.")
