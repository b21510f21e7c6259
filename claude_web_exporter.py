#!/usr/bin/env python3
"""
Export conversations from claude.ai to Markdown files plus a JSON backup.

Needs the value of the claude.ai `sessionKey` cookie in CLAUDE_SESSION_KEY
(environment or .env file).
"""

import argparse
import json
import os
import sys
import time
from datetime import date
from pathlib import Path

import requests
from dotenv import load_dotenv

import claude_formatter
from utils import ClaudeWebClient

load_dotenv()

# Configuration
OUTPUT_DIR = Path(os.getenv("CLAUDE_ARCHIVE_DIR", Path(__file__).resolve().parent / "archived"))
PAGE_SIZE = 50
MAX_PAGES = 100  # 100 pages * 50 = 5000 conversations at most
PAGE_DELAY = 0.2
FETCH_DELAY = 0.3


def detect_org_id(client):
    """Organization id of the logged-in account, or None."""
    try:
        data = client.get_json("/api/auth/session")
    except (requests.RequestException, ValueError):
        print("Could not get organization from session.")
        return None

    try:
        return data['account']['memberships'][0]['organization']['uuid']
    except (KeyError, IndexError, TypeError):
        return None


def fetch_conversation_list(client, org_id, page_size=PAGE_SIZE, max_pages=MAX_PAGES, delay=PAGE_DELAY):
    """
    Fetch all conversation summaries, following the after_uuid cursor.

    Duplicates are dropped by uuid. Stops on an empty page, on a page that
    adds nothing new, or after max_pages pages.
    """
    conversations = []
    seen_uuids = set()
    cursor = None
    page_count = 0

    while True:
        params = {'limit': page_size}
        if cursor:
            params['after_uuid'] = cursor

        data = client.get_json(client.conversations_path(org_id), params=params)
        page_count += 1

        if not isinstance(data, list) or not data:
            break

        new_count = 0
        for conv in data:
            if conv.get('uuid') not in seen_uuids:
                seen_uuids.add(conv.get('uuid'))
                conversations.append(conv)
                new_count += 1

        if new_count == 0:
            print("  Detected duplicate page, stopping pagination.")
            break

        cursor = data[-1].get('uuid')
        print(f"  Page {page_count}: +{new_count} new ({len(conversations)} total)")

        if page_count >= max_pages:
            print(f"  Hit max page limit ({max_pages}), stopping.")
            break
        if not cursor:
            break

        time.sleep(delay)

    return conversations


def parse_selection(selection, total):
    """
    Turn 'all', '3-7' or '1,2,5' (1-based) into 0-based indices.
    Numbers that are invalid or out of range are ignored.
    """
    selection = selection.strip().lower()
    if selection == 'all':
        return list(range(total))

    if '-' in selection:
        try:
            start, end = (int(n.strip()) - 1 for n in selection.split('-', 1))
        except ValueError:
            return []
        return list(range(max(start, 0), min(end + 1, total)))

    indices = []
    for part in selection.split(','):
        try:
            index = int(part.strip()) - 1
        except ValueError:
            continue
        if 0 <= index < total:
            indices.append(index)
    return indices


def fetch_conversations(client, org_id, summaries, delay=FETCH_DELAY):
    """Fetch the full messages of each selected conversation."""
    export_data = []

    for summary in summaries:
        print(f"  Fetching: {summary.get('name')}...")
        try:
            full = client.get_json(
                client.conversations_path(org_id, summary['uuid']),
                params={'tree': 'True', 'rendering_mode': 'messages'},
            )
        except (requests.RequestException, ValueError) as e:
            print(f"  Error fetching {summary.get('name')}: {e}")
            continue

        export_data.append({
            'id': summary['uuid'],
            'name': summary.get('name'),
            'created_at': summary.get('created_at'),
            'updated_at': summary.get('updated_at'),
            'model': full.get('model'),
            'messages': full.get('chat_messages') or [],
        })

        time.sleep(delay)

    return export_data


def write_export(conversations, output_dir, today=None):
    """Write one Markdown file per conversation and a JSON backup. Returns the JSON path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    for conv in conversations:
        filename = claude_formatter.generate_filename(conv)
        with open(output_dir / filename, 'w', encoding='utf-8') as f:
            f.write(claude_formatter.format_conversation(conv))

    today = today or date.today().isoformat()
    json_path = output_dir / f"claude-conversations-export-{today}.json"
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(conversations, f, indent=2, ensure_ascii=False)
    return json_path


def build_parser():
    parser = argparse.ArgumentParser(description="Export claude.ai conversations")
    parser.add_argument("--org-id", default=os.getenv("CLAUDE_ORG_ID"), help="Organization id (auto-detected)")
    parser.add_argument("--select", help='Conversations to export: "all", "1-10" or "1,2,5"')
    parser.add_argument("--output-dir", type=Path, default=OUTPUT_DIR)
    parser.add_argument("--page-size", type=int, default=PAGE_SIZE)
    parser.add_argument("--max-pages", type=int, default=MAX_PAGES)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    session_key = os.getenv("CLAUDE_SESSION_KEY")
    if not session_key:
        print("Error: CLAUDE_SESSION_KEY environment variable not set.")
        print("Create a .env file with: CLAUDE_SESSION_KEY=your_session_cookie")
        return 1

    client = ClaudeWebClient(session_key)

    org_id = args.org_id or detect_org_id(client)
    if not org_id:
        print("Error: no organization id found. Pass --org-id or set CLAUDE_ORG_ID.")
        return 1
    print(f"Organization ID: {org_id}")

    print("Fetching conversation list...")
    summaries = fetch_conversation_list(client, org_id, page_size=args.page_size, max_pages=args.max_pages)
    print(f"Found {len(summaries)} total conversations")

    print("\nConversations:")
    for i, conv in enumerate(summaries, 1):
        created = (conv.get('created_at') or '').split('T')[0] or 'unknown date'
        print(f"  {i}. {conv.get('name')} ({created})")

    selection = args.select or input('\nEnter conversation numbers to export (e.g. "1,2,5" or "all" or "1-10"): ')
    if not selection.strip():
        print("No selection made. Aborting.")
        return 1

    selected = [summaries[i] for i in parse_selection(selection, len(summaries))]
    print(f"\nExporting {len(selected)} conversations...")

    conversations = fetch_conversations(client, org_id, selected)
    print(f"\nFetched {len(conversations)} conversations")

    json_path = write_export(conversations, args.output_dir)
    print(f"\nDone! Exported {len(conversations)} Markdown files + {json_path.name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
