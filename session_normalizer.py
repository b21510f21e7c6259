"""
Claude Code session log normalizer.

Turns the raw lines of a session .jsonl file into an optional SessionInfo
header and an ordered list of messages. Pure: no I/O, no logging.
"""

import json
from dataclasses import dataclass
from typing import Optional, Union

TOOL_RESULT_MARKER = "[Tool result"
TOOL_RESULT_PREVIEW_CHARS = 100


@dataclass(frozen=True)
class SessionInfo:
    session_id: str
    cwd: Optional[str] = None
    version: Optional[str] = None
    timestamp: Optional[str] = None


@dataclass(frozen=True)
class UserMessage:
    content: str
    timestamp: Optional[str] = None
    role = "user"


@dataclass(frozen=True)
class AssistantMessage:
    content: str
    timestamp: Optional[str] = None
    model: Optional[str] = None
    role = "assistant"


@dataclass(frozen=True)
class ThinkingMessage:
    content: str
    timestamp: Optional[str] = None
    role = "thinking"


Message = Union[UserMessage, AssistantMessage, ThinkingMessage]


# Log entry variants, one per `type` value we understand.

@dataclass(frozen=True)
class UserEntry:
    content: object
    session_id: Optional[str] = None
    cwd: Optional[str] = None
    version: Optional[str] = None
    timestamp: Optional[str] = None


@dataclass(frozen=True)
class AssistantEntry:
    blocks: tuple
    model: Optional[str] = None
    timestamp: Optional[str] = None


@dataclass(frozen=True)
class OtherEntry:
    type: Optional[str] = None


LogEntry = Union[UserEntry, AssistantEntry, OtherEntry]


@dataclass(frozen=True)
class Parsed:
    line_number: int
    entry: LogEntry


@dataclass(frozen=True)
class Skipped:
    line_number: int
    reason: str


def _message_field(record, key):
    message = record.get('message')
    if isinstance(message, dict):
        return message.get(key)
    return None


def to_entry(record):
    """Convert a decoded JSON object into one of the LogEntry variants."""
    entry_type = record.get('type')

    if entry_type == 'user':
        return UserEntry(
            content=_message_field(record, 'content'),
            session_id=record.get('sessionId'),
            cwd=record.get('cwd'),
            version=record.get('version'),
            timestamp=record.get('timestamp'),
        )

    if entry_type == 'assistant':
        content = _message_field(record, 'content')
        blocks = tuple(content) if isinstance(content, list) else ()
        return AssistantEntry(
            blocks=blocks,
            model=_message_field(record, 'model'),
            timestamp=record.get('timestamp'),
        )

    return OtherEntry(type=entry_type if isinstance(entry_type, str) else None)


def parse_line(line, line_number):
    """Decode a single log line into Parsed or Skipped."""
    if not line.strip():
        return Skipped(line_number, "blank line")

    try:
        record = json.loads(line)
    except ValueError as e:
        return Skipped(line_number, f"invalid JSON: {e}")

    if not isinstance(record, dict):
        return Skipped(line_number, f"expected an object, got {type(record).__name__}")

    return Parsed(line_number, to_entry(record))


def _split(lines):
    if isinstance(lines, str):
        return lines.split('\n')
    return lines


def parse_lines(lines):
    """
    Parse every non-blank line.

    Returns a list of Parsed / Skipped results in input order, so callers can
    log why a line was dropped.
    """
    results = []
    for line_number, line in enumerate(_split(lines), 1):
        if not line.strip():
            continue
        results.append(parse_line(line, line_number))
    return results


def _tool_result_text(content):
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for item in content:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict) and isinstance(item.get('text'), str):
                parts.append(item['text'])
        return '\n'.join(parts)
    return ''


def resolve_user_content(content):
    """
    Resolve the text of a user message.

    Plain strings are returned as-is. For a list of content blocks the first
    tool_result block becomes a "[Tool result: ...]" placeholder. Anything
    else resolves to None.
    """
    if isinstance(content, str):
        return content

    if isinstance(content, list):
        for item in content:
            if isinstance(item, dict) and item.get('type') == 'tool_result':
                preview = _tool_result_text(item.get('content'))[:TOOL_RESULT_PREVIEW_CHARS]
                return f"[Tool result: {preview or 'empty'}...]"

    return None


def normalize_entries(entries):
    """Reduce LogEntry values to (SessionInfo or None, messages)."""
    session_info = None
    messages = []

    for entry in entries:
        if isinstance(entry, UserEntry):
            if session_info is None and entry.session_id:
                session_info = SessionInfo(
                    session_id=entry.session_id,
                    cwd=entry.cwd,
                    version=entry.version,
                    timestamp=entry.timestamp,
                )

            content = resolve_user_content(entry.content)
            if content and not content.startswith(TOOL_RESULT_MARKER):
                messages.append(UserMessage(content, entry.timestamp))

        elif isinstance(entry, AssistantEntry):
            for block in entry.blocks:
                if not isinstance(block, dict):
                    continue
                block_type = block.get('type')
                if block_type == 'text' and block.get('text'):
                    messages.append(AssistantMessage(block['text'], entry.timestamp, entry.model))
                elif block_type == 'thinking' and block.get('thinking'):
                    messages.append(ThinkingMessage(block['thinking'], entry.timestamp))

    return session_info, messages


def normalize_lines(lines, include_thinking=True):
    """
    Normalize raw session log lines.

    Args:
        lines: The file contents as one string, or an iterable of lines
        include_thinking: Drop ThinkingMessage values when False

    Returns:
        Tuple of (SessionInfo or None, list of messages)
    """
    entries = [result.entry for result in parse_lines(lines) if isinstance(result, Parsed)]
    session_info, messages = normalize_entries(entries)

    if not include_thinking:
        messages = [msg for msg in messages if not isinstance(msg, ThinkingMessage)]

    return session_info, messages


def normalize_text(text):
    """Normalize the full contents of a session file."""
    return normalize_lines(text)
