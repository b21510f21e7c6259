#!/usr/bin/env python3
"""
Convert a claude.ai JSON export into Markdown files sorted by topic.

Usage:
    python main.py <json-file>                      Interactive mode (ask for each)
    python main.py <json-file> --auto               Auto-categorize by keywords
    python main.py <json-file> --gemini             Let Gemini pick the category
    python main.py <json-file> --default coding     Put all in one category
"""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import categorizer
import claude_formatter

INTERACTIVE_CHOICES = {'1': 'coding', '2': 'ai-general', '3': 'investing'}


def ensure_category_dirs(base_dir):
    """Create one directory per category next to the export."""
    for category in categorizer.CATEGORIES:
        category_dir = Path(base_dir) / category
        if not category_dir.exists():
            category_dir.mkdir(parents=True)
            print(f"Created directory: {category_dir}")


def save_conversation(conversation, base_dir, category):
    """Write one conversation into its category directory. Returns the filename."""
    filename = claude_formatter.generate_filename(conversation)
    output_path = Path(base_dir) / category / filename
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(claude_formatter.format_conversation(conversation))
    return filename


def ask_category(conversation, index, total):
    """
    Ask the user where a conversation belongs.
    Returns a category name, or None to skip.
    """
    created = (conversation.get('created_at') or '').split('T')[0] or 'unknown'
    print(f"\n[{index}/{total}] {conversation.get('name')}")
    print(f"   Created: {created}")
    print(f"   Preview: {claude_formatter.extract_text_content(conversation)[:100]}...\n")

    while True:
        answer = input("Category? (1=coding, 2=ai-general, 3=investing, s=skip): ").strip().lower()
        if answer in INTERACTIVE_CHOICES:
            return INTERACTIVE_CHOICES[answer]
        if answer == 's':
            return None


def interactive_mode(conversations, base_dir):
    print("Interactive Mode - Categorize Each Conversation\n")

    saved = 0
    for i, conv in enumerate(conversations, 1):
        category = ask_category(conv, i, len(conversations))
        if not category:
            continue
        filename = save_conversation(conv, base_dir, category)
        print(f"   Saved to {category}/{filename}")
        saved += 1

    print(f"\nDone! Saved {saved} conversations")
    return saved


def auto_mode(conversations, base_dir, categorize=categorizer.categorize_by_keywords):
    """Categorize every conversation with `categorize` and save it. Returns the distribution."""
    print("Auto-Categorizing Conversations...\n")

    distribution = {category: 0 for category in categorizer.CATEGORIES}
    for i, conv in enumerate(conversations, 1):
        category = categorize(conv)
        distribution[category] += 1
        save_conversation(conv, base_dir, category)
        print(f"[{i}/{len(conversations)}] {category:<12} | {conv.get('name')}")

    print("\nDistribution:")
    for category, count in distribution.items():
        print(f"   {category:<12}: {count} conversations")
    return distribution


def default_mode(conversations, base_dir, category):
    print(f"Saving all conversations to: {category}\n")

    for i, conv in enumerate(conversations, 1):
        filename = save_conversation(conv, base_dir, category)
        print(f"[{i}/{len(conversations)}] {filename}")

    print(f"\nSaved {len(conversations)} conversations to {category}/")
    return len(conversations)


def build_parser():
    parser = argparse.ArgumentParser(description="Convert JSON export to organized Markdown files")
    parser.add_argument("json_file", type=Path)
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--auto", action="store_true", help="Auto-categorize using keywords")
    mode.add_argument("--gemini", action="store_true", help="Auto-categorize using Gemini")
    mode.add_argument("--default", metavar="CATEGORY", help="Put all in one category")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if not args.json_file.exists():
        print(f"File not found: {args.json_file}")
        return 1

    if args.default and args.default not in categorizer.CATEGORIES:
        print(f"Invalid category: {args.default}")
        print(f"   Valid options: {', '.join(categorizer.CATEGORIES)}")
        return 1

    print("Reading JSON file...")
    try:
        conversations = claude_formatter.load_conversations(args.json_file)
    except claude_formatter.ExportFormatError as e:
        print(f"Error parsing JSON: {e}")
        return 1
    print(f"Loaded {len(conversations)} conversations\n")

    base_dir = args.json_file.parent
    ensure_category_dirs(base_dir)

    if args.default:
        default_mode(conversations, base_dir, args.default)
    elif args.auto:
        auto_mode(conversations, base_dir)
    elif args.gemini:
        api_key = os.getenv("GEMINI_API_KEY")
        if not api_key:
            print("Error: GEMINI_API_KEY environment variable not set.")
            print("Create a .env file with: GEMINI_API_KEY=your_api_key_here")
            return 1
        print("Configuring Gemini...")
        client = categorizer.configure_gemini(api_key)
        auto_mode(conversations, base_dir, lambda conv: categorizer.categorize_with_gemini(client, conv))
    else:
        interactive_mode(conversations, base_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
