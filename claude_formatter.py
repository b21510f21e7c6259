"""
Claude web conversation formatter.
"""

import json
import re
from datetime import datetime

SOURCE_TAG = "CLAUDE"


class ExportFormatError(ValueError):
    """Raised when a JSON export is not a list of conversations."""


def message_text_parts(msg):
    """Text of a single message: its 'text' string, else its text blocks."""
    if isinstance(msg.get('text'), str) and msg['text']:
        return [msg['text']]

    parts = []
    for content_block in msg.get('content') or []:
        if isinstance(content_block, dict) and content_block.get('type') == 'text' and content_block.get('text'):
            parts.append(content_block['text'])
    return parts


def extract_text_content(conversation, limit=500):
    """Extract the text of all messages, cut to the first `limit` chars."""
    text = ''
    for msg in conversation.get('messages') or []:
        for part in message_text_parts(msg):
            text += part + ' '
    return text[:limit]


def format_datetime(value):
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00')).strftime('%Y-%m-%d %H:%M:%S')
    except (ValueError, AttributeError):
        return str(value)


def format_conversation(conversation):
    """Format a Claude web conversation as Markdown."""
    md = f"# {conversation.get('name') or 'Untitled'}\n\n"
    md += f"**ID**: {conversation.get('id')}\n"
    md += f"**Created**: {conversation.get('created_at')}\n"
    md += f"**Updated**: {conversation.get('updated_at')}\n"
    if conversation.get('model'):
        md += f"**Model**: {conversation['model']}\n"
    md += "\n---\n\n"

    for msg in conversation.get('messages') or []:
        role = "User" if msg.get('sender') == 'human' else "Assistant"

        md += f"## {role}"
        if msg.get('created_at'):
            md += f" _{format_datetime(msg['created_at'])}_"
        md += "\n\n"

        for part in message_text_parts(msg):
            md += part + "\n\n"

    return md


def generate_filename(conversation):
    """Build '<date>-CLAUDE-<name slug>.md' for a conversation."""
    created_at = conversation.get('created_at')
    date = created_at.split('T')[0] if isinstance(created_at, str) and created_at else 'unknown'

    name = re.sub(r'[^a-zA-Z0-9]', '-', conversation.get('name') or '').lower()[:50]
    name = re.sub(r'-+', '-', name).strip('-')
    return f"{date}-{SOURCE_TAG}-{name}.md"


def load_conversations(json_path):
    """Load conversations from a JSON export file."""
    try:
        with open(json_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ExportFormatError(f"{json_path} is not valid JSON: {e}") from e
    except OSError as e:
        raise ExportFormatError(f"{json_path} could not be read: {e}") from e

    if not isinstance(data, list):
        raise ExportFormatError(f"{json_path} does not contain a list of conversations")
    return data
