#!/usr/bin/env python3
"""
Import Claude Code sessions from .jsonl files to readable Markdown.

Usage:
    python claude_code_importer.py                    # List available sessions
    python claude_code_importer.py <session-id>       # Import specific session
    python claude_code_importer.py --all              # Import all sessions
    python claude_code_importer.py --project <name>   # Import all sessions from a project
"""

import argparse
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv

import claude_code_formatter
from session_normalizer import Skipped, normalize_entries, parse_lines

load_dotenv()

logger = logging.getLogger(__name__)

# Configuration
CLAUDE_PROJECTS_DIR = Path(os.getenv("CLAUDE_PROJECTS_DIR", Path.home() / ".claude" / "projects"))
OUTPUT_DIR = Path(os.getenv("CLAUDE_ARCHIVE_DIR", Path(__file__).resolve().parent / "archived"))


def list_projects(projects_dir):
    """Names of all project directories, sorted."""
    return sorted(p.name for p in Path(projects_dir).iterdir() if p.is_dir())


def list_sessions(projects_dir):
    """
    Collect the sessions of every project.

    Returns a list of (project, sessions) tuples where each session is a dict
    with 'session_id', 'modified' (YYYY-MM-DD) and 'size_kb'. Projects without
    sessions are left out.
    """
    listing = []
    for project in list_projects(projects_dir):
        sessions = []
        for path in sorted((Path(projects_dir) / project).glob("*.jsonl")):
            stats = path.stat()
            sessions.append({
                'session_id': path.stem,
                'modified': datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc).strftime('%Y-%m-%d'),
                'size_kb': round(stats.st_size / 1024),
            })
        if sessions:
            listing.append((project, sessions))
    return listing


def find_session(projects_dir, session_id):
    """Find a session file by id. Returns (project, path) or None."""
    for project in list_projects(projects_dir):
        session_path = Path(projects_dir) / project / f"{session_id}.jsonl"
        if session_path.exists():
            return project, session_path
    return None


def parse_session_file(path):
    """Read a session log and normalize it. Skipped lines are logged at DEBUG."""
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        results = parse_lines(f.read())

    entries = []
    for result in results:
        if isinstance(result, Skipped):
            logger.debug("%s:%d skipped (%s)", path, result.line_number, result.reason)
        else:
            entries.append(result.entry)

    return normalize_entries(entries)


def import_session(projects_dir, output_dir, session_id, include_thinking=False, include_timestamps=True):
    """Import a single session. Returns the written path or None."""
    found = find_session(projects_dir, session_id)
    if not found:
        print(f"Session not found: {session_id}")
        return None

    project, session_path = found
    session_info, messages = parse_session_file(session_path)

    if not messages:
        print(f"Skipping empty session: {session_id}")
        return None

    markdown = claude_code_formatter.to_markdown(
        session_info,
        messages,
        include_thinking=include_thinking,
        include_timestamps=include_timestamps,
    )

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = claude_code_formatter.output_filename(project, session_id, session_info)
    output_path = output_dir / output_file

    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(markdown)
    print(f"Imported: {output_file} ({len(messages)} messages)")

    return output_path


def import_project(projects_dir, output_dir, project, **options):
    """Import all sessions from one project. Returns the written paths."""
    project_path = Path(projects_dir) / project
    if not project_path.exists():
        print(f"Project not found: {project}")
        return []

    session_ids = sorted(p.stem for p in project_path.glob("*.jsonl"))
    print(f"Importing {len(session_ids)} sessions from {project}...\n")

    written = []
    for session_id in session_ids:
        path = import_session(projects_dir, output_dir, session_id, **options)
        if path:
            written.append(path)
    return written


def import_all(projects_dir, output_dir, **options):
    """Import every session of every project."""
    written = []
    for project in list_projects(projects_dir):
        written.extend(import_project(projects_dir, output_dir, project, **options))
    return written


def print_sessions(projects_dir):
    print("\n=== Available Claude Code Sessions ===\n")

    for project, sessions in list_sessions(projects_dir):
        print(f"Project: {claude_code_formatter.decode_project_name(project)}")
        for session in sessions:
            print(f"  - {session['session_id']} ({session['modified']}, {session['size_kb']}KB)")
        print()

    print("Usage:")
    print("  python claude_code_importer.py <session-id>")
    print("  python claude_code_importer.py --all")
    print('  python claude_code_importer.py --project "C--Users-me-Desktop-code-neo"')


def build_parser():
    parser = argparse.ArgumentParser(
        description="Claude Code Session Importer",
        epilog="Output format: YYYY-MM-DD-CLAUDE-project-name-sessionid.md",
    )
    parser.add_argument("session_id", nargs="?", help="Import a specific session")
    parser.add_argument("--all", action="store_true", help="Import all sessions")
    parser.add_argument("--project", help="Import all sessions from a project")
    parser.add_argument("--thinking", action="store_true", help="Include thinking blocks")
    parser.add_argument("--no-timestamps", action="store_true", help="Leave out message times")
    parser.add_argument("--projects-dir", type=Path, default=CLAUDE_PROJECTS_DIR)
    parser.add_argument("--output-dir", type=Path, default=OUTPUT_DIR)
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped log lines")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.projects_dir.exists():
        print(f"Claude projects directory not found: {args.projects_dir}")
        return 1

    options = {
        'include_thinking': args.thinking,
        'include_timestamps': not args.no_timestamps,
    }

    if args.all:
        import_all(args.projects_dir, args.output_dir, **options)
    elif args.project:
        import_project(args.projects_dir, args.output_dir, args.project, **options)
    elif args.session_id:
        import_session(args.projects_dir, args.output_dir, args.session_id, **options)
    else:
        print_sessions(args.projects_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
