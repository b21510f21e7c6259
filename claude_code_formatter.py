"""
Claude Code session formatter.
"""

import re
from datetime import datetime

from session_normalizer import AssistantMessage, ThinkingMessage, UserMessage

SOURCE_TAG = "CLAUDE"
UNKNOWN_DATE = "unknown-date"


def format_time(timestamp):
    """Clock time of an ISO timestamp, e.g. '14:03:59'."""
    try:
        return datetime.fromisoformat(timestamp.replace('Z', '+00:00')).strftime('%H:%M:%S')
    except (ValueError, AttributeError):
        return str(timestamp)


def _date_part(timestamp):
    if isinstance(timestamp, str) and timestamp:
        return timestamp.split('T')[0]
    return None


def to_markdown(session_info, messages, include_thinking=False, include_timestamps=True):
    """Render a normalized session as a Markdown document."""
    md = "# Claude Code Session\n\n"

    if session_info:
        md += f"**Session ID**: {session_info.session_id}\n"
        md += f"**Project**: {session_info.cwd}\n"
        md += f"**Date**: {_date_part(session_info.timestamp) or 'Unknown'}\n"
        md += f"**Claude Code Version**: {session_info.version or 'Unknown'}\n"
        md += "\n---\n\n"

    for msg in messages:
        if isinstance(msg, ThinkingMessage) and not include_thinking:
            continue

        timestamp = ''
        if include_timestamps and msg.timestamp:
            timestamp = f" _{format_time(msg.timestamp)}_"

        if isinstance(msg, UserMessage):
            md += f"## User{timestamp}\n\n{msg.content}\n\n"
        elif isinstance(msg, AssistantMessage):
            model = f" ({msg.model})" if msg.model else ''
            md += f"## Assistant{model}{timestamp}\n\n{msg.content}\n\n"
        elif isinstance(msg, ThinkingMessage):
            md += f"<details>\n<summary>Thinking{timestamp}</summary>\n\n{msg.content}\n\n</details>\n\n"

    return md


def session_date(session_info):
    """Date prefix for output files; falls back to 'unknown-date'."""
    if session_info is None:
        return UNKNOWN_DATE
    return _date_part(session_info.timestamp) or UNKNOWN_DATE


def project_slug(project_dir_name):
    """Slug from the last segment of an encoded project directory name."""
    last = project_dir_name.split('--')[-1].lower()
    return re.sub(r'[^a-z0-9]', '-', last)


def output_filename(project_dir_name, session_id, session_info):
    """Build '<date>-CLAUDE-<project>-<session prefix>.md'."""
    subject = f"{project_slug(project_dir_name)}-{session_id[:8]}"
    return f"{session_date(session_info)}-{SOURCE_TAG}-{subject}.md"


def decode_project_name(project_dir_name):
    """Readable form of an encoded project directory name."""
    return project_dir_name.replace('--', '/').replace('-', '\\')
