import unittest

import claude_code_formatter
from session_normalizer import AssistantMessage, SessionInfo, ThinkingMessage, UserMessage


class ToMarkdownTests(unittest.TestCase):
    def setUp(self) -> None:
        self.session_info = SessionInfo(
            session_id="abc12345-ffff",
            cwd="/home/me/neo",
            version="1.0.30",
            timestamp="2026-01-25T09:15:00.000Z",
        )
        self.messages = [
            UserMessage("Hello", "2026-01-25T09:15:00.000Z"),
            ThinkingMessage("pondering", "2026-01-25T09:15:02.000Z"),
            AssistantMessage("Hi there", "2026-01-25T09:15:03.000Z", "claude-opus"),
        ]

    def test_header_and_sections(self) -> None:
        md = claude_code_formatter.to_markdown(self.session_info, self.messages)

        self.assertTrue(md.startswith("# Claude Code Session\n\n"))
        self.assertIn("**Session ID**: abc12345-ffff\n", md)
        self.assertIn("**Project**: /home/me/neo\n", md)
        self.assertIn("**Date**: 2026-01-25\n", md)
        self.assertIn("**Claude Code Version**: 1.0.30\n", md)
        self.assertIn("## User _09:15:00_\n\nHello\n\n", md)
        self.assertIn("## Assistant (claude-opus) _09:15:03_\n\nHi there\n\n", md)

    def test_thinking_is_excluded_by_default(self) -> None:
        md = claude_code_formatter.to_markdown(self.session_info, self.messages)
        self.assertNotIn("pondering", md)
        self.assertNotIn("<details>", md)

    def test_thinking_rendered_as_details_block(self) -> None:
        md = claude_code_formatter.to_markdown(self.session_info, self.messages, include_thinking=True)
        self.assertIn("<details>\n<summary>Thinking _09:15:02_</summary>\n\npondering\n\n</details>\n\n", md)
        self.assertLess(md.index("Hello"), md.index("pondering"))
        self.assertLess(md.index("pondering"), md.index("Hi there"))

    def test_without_timestamps(self) -> None:
        md = claude_code_formatter.to_markdown(self.session_info, self.messages, include_timestamps=False)
        self.assertIn("## User\n\nHello", md)
        self.assertIn("## Assistant (claude-opus)\n\n", md)

    def test_missing_session_info_and_model(self) -> None:
        md = claude_code_formatter.to_markdown(None, [AssistantMessage("A")])
        self.assertEqual(md, "# Claude Code Session\n\n## Assistant\n\nA\n\n")

    def test_unknown_date_and_version(self) -> None:
        md = claude_code_formatter.to_markdown(SessionInfo(session_id="s"), [])
        self.assertIn("**Date**: Unknown\n", md)
        self.assertIn("**Claude Code Version**: Unknown\n", md)

    def test_unparseable_timestamp_is_shown_raw(self) -> None:
        self.assertEqual(claude_code_formatter.format_time("yesterday"), "yesterday")


class FilenameTests(unittest.TestCase):
    def test_output_filename(self) -> None:
        info = SessionInfo(session_id="a1b2c3d4-e5f6", timestamp="2026-01-25T10:00:00Z")
        name = claude_code_formatter.output_filename("C--Users-me-Desktop-code--neo_Purrfect.Blocks", "a1b2c3d4-e5f6", info)
        self.assertEqual(name, "2026-01-25-CLAUDE-neo-purrfect-blocks-a1b2c3d4.md")

    def test_unknown_date_fallback(self) -> None:
        self.assertEqual(claude_code_formatter.session_date(None), "unknown-date")
        self.assertEqual(claude_code_formatter.session_date(SessionInfo(session_id="s")), "unknown-date")
        self.assertEqual(
            claude_code_formatter.output_filename("-home-me-proj", "0123456789", None),
            "unknown-date-CLAUDE--home-me-proj-01234567.md",
        )

    def test_decode_project_name(self) -> None:
        self.assertEqual(claude_code_formatter.decode_project_name("C--Users-me"), "C/Users\\me")


if __name__ == "__main__":
    unittest.main()
