import json
import os
import tempfile
import unittest
from pathlib import Path

import claude_code_importer


class ClaudeCodeImporterTests(unittest.TestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.projects_dir = Path(tmpdir.name) / "projects"
        self.output_dir = Path(tmpdir.name) / "archived"
        self.projects_dir.mkdir()

    def _write_session(self, project: str, session_id: str, lines: list) -> Path:
        path = self.projects_dir / project / f"{session_id}.jsonl"
        path.parent.mkdir(parents=True, exist_ok=True)
        text = "\n".join(line if isinstance(line, str) else json.dumps(line) for line in lines)
        path.write_text(text, encoding="utf-8")
        return path

    def _conversation(self, session_id: str) -> list:
        return [
            {
                "type": "user",
                "sessionId": session_id,
                "cwd": "/home/me/neo",
                "version": "1.0.30",
                "timestamp": "2026-01-25T09:15:00Z",
                "message": {"role": "user", "content": "Fix the build"},
            },
            {
                "type": "assistant",
                "timestamp": "2026-01-25T09:15:05Z",
                "message": {
                    "model": "claude-sonnet",
                    "content": [
                        {"type": "thinking", "thinking": "Look at the Makefile"},
                        {"type": "text", "text": "Done."},
                    ],
                },
            },
        ]

    def test_list_sessions(self) -> None:
        self._write_session("-home-me-neo", "s1", self._conversation("s1"))
        (self.projects_dir / "empty-project").mkdir()

        listing = claude_code_importer.list_sessions(self.projects_dir)

        self.assertEqual(len(listing), 1)
        project, sessions = listing[0]
        self.assertEqual(project, "-home-me-neo")
        self.assertEqual(sessions[0]["session_id"], "s1")
        self.assertRegex(sessions[0]["modified"], r"^\d{4}-\d{2}-\d{2}$")

    def test_list_sessions_uses_utc_modified_date(self) -> None:
        path = self._write_session("proj", "s1", self._conversation("s1"))
        # 2026-01-25T23:30:00Z, which is already the 26th east of UTC
        os.utime(path, (1769383800, 1769383800))

        _, sessions = claude_code_importer.list_sessions(self.projects_dir)[0]

        self.assertEqual(sessions[0]["modified"], "2026-01-25")

    def test_find_session(self) -> None:
        path = self._write_session("proj", "abc", self._conversation("abc"))

        self.assertEqual(claude_code_importer.find_session(self.projects_dir, "abc"), ("proj", path))
        self.assertIsNone(claude_code_importer.find_session(self.projects_dir, "missing"))

    def test_parse_session_file_logs_skipped_lines(self) -> None:
        path = self._write_session("proj", "abc", ["{broken", *self._conversation("abc")])

        with self.assertLogs("claude_code_importer", level="DEBUG") as logs:
            session_info, messages = claude_code_importer.parse_session_file(path)

        self.assertEqual(session_info.session_id, "abc")
        self.assertEqual(len(messages), 3)
        self.assertIn("invalid JSON", logs.output[0])

    def test_import_session_writes_markdown(self) -> None:
        self._write_session("C--Users-me--neo", "a1b2c3d4-0000", self._conversation("a1b2c3d4-0000"))

        path = claude_code_importer.import_session(self.projects_dir, self.output_dir, "a1b2c3d4-0000")

        self.assertEqual(path.name, "2026-01-25-CLAUDE-neo-a1b2c3d4.md")
        markdown = path.read_text(encoding="utf-8")
        self.assertIn("## User _09:15:00_\n\nFix the build", markdown)
        self.assertIn("## Assistant (claude-sonnet) _09:15:05_\n\nDone.", markdown)
        self.assertNotIn("Makefile", markdown)

    def test_import_session_with_thinking(self) -> None:
        self._write_session("proj", "s1", self._conversation("s1"))

        path = claude_code_importer.import_session(
            self.projects_dir, self.output_dir, "s1", include_thinking=True, include_timestamps=False
        )

        markdown = path.read_text(encoding="utf-8")
        self.assertIn("<summary>Thinking</summary>", markdown)
        self.assertIn("Look at the Makefile", markdown)

    def test_empty_and_missing_sessions_are_skipped(self) -> None:
        self._write_session("proj", "empty", [{"type": "user", "message": {"content": [{"type": "tool_result"}]}}])

        self.assertIsNone(claude_code_importer.import_session(self.projects_dir, self.output_dir, "empty"))
        self.assertIsNone(claude_code_importer.import_session(self.projects_dir, self.output_dir, "nope"))
        self.assertFalse(self.output_dir.exists())

    def test_import_all(self) -> None:
        self._write_session("one", "s1", self._conversation("s1"))
        self._write_session("two", "s2", self._conversation("s2"))
        self._write_session("two", "s3", ["not json"])

        written = claude_code_importer.import_all(self.projects_dir, self.output_dir)

        self.assertEqual(sorted(p.name for p in written), [
            "2026-01-25-CLAUDE-one-s1.md",
            "2026-01-25-CLAUDE-two-s2.md",
        ])

    def test_import_missing_project(self) -> None:
        self.assertEqual(claude_code_importer.import_project(self.projects_dir, self.output_dir, "nope"), [])

    def test_main_imports_project(self) -> None:
        self._write_session("proj", "s1", self._conversation("s1"))

        code = claude_code_importer.main([
            "--project", "proj",
            "--projects-dir", str(self.projects_dir),
            "--output-dir", str(self.output_dir),
        ])

        self.assertEqual(code, 0)
        self.assertEqual([p.name for p in self.output_dir.iterdir()], ["2026-01-25-CLAUDE-proj-s1.md"])

    def test_main_missing_projects_dir(self) -> None:
        code = claude_code_importer.main(["--projects-dir", str(self.projects_dir / "nope")])
        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
