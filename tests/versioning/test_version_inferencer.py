import unittest
from datetime import datetime, timezone
from unittest.mock import Mock

from changelogger.vcs.git_client import Commit, GitError, Tag
from changelogger.versioning.inferencer import (
    VersionInferencer,
    detect_bump,
    latest_version_tag,
    version_from_tags,
)
from changelogger.versioning.project_metadata import MetadataError
from changelogger.versioning.semver import SemanticVersion


def commit(message: str) -> Commit:
    return Commit(sha="0" * 40, message=message, timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc))


def tags(*names: str):
    return [Tag(name=name) for name in names]


class FakePrompt:
    def __init__(self, answer):
        self.answer = answer
        self.calls = []

    def ask(self, prompt_text, placeholder, default):
        self.calls.append((prompt_text, placeholder, default))
        return self.answer


class TestVersionFromTags(unittest.TestCase):
    def test_breaking_change_bumps_major(self) -> None:
        result = version_from_tags(tags("v1.2.3"), [commit("feat: x"), commit("refactor\n\nBREAKING CHANGE: api")])
        self.assertEqual(result, "2.0.0")

    def test_lowercase_breaking_bumps_major(self) -> None:
        self.assertEqual(version_from_tags(tags("v1.2.3"), [commit("breaking: drop py2")]), "2.0.0")

    def test_feature_bumps_minor(self) -> None:
        self.assertEqual(version_from_tags(tags("v1.2.3"), [commit("feat: x"), commit("fix: y")]), "1.3.0")

    def test_fix_bumps_patch(self) -> None:
        self.assertEqual(version_from_tags(tags("1.0.0"), [commit("fix: y")]), "1.0.1")

    def test_bug_keyword_bumps_patch(self) -> None:
        self.assertEqual(version_from_tags(tags("v0.4.9"), [commit("Squash BUG in loader")]), "0.4.10")

    def test_no_signal_returns_latest_tag_unchanged(self) -> None:
        self.assertEqual(version_from_tags(tags("v1.2.3-beta"), [commit("docs: readme")]), "v1.2.3-beta")

    def test_no_version_tags(self) -> None:
        self.assertIsNone(version_from_tags(tags("release", "1.2", "nightly-2024"), [commit("feat: x")]))
        self.assertIsNone(version_from_tags([], [commit("feat: x")]))

    def test_latest_tag_uses_numeric_order(self) -> None:
        latest = latest_version_tag(tags("v1.9.0", "v1.10.0", "v1.2.0", "junk"))
        self.assertEqual(latest, ("v1.10.0", SemanticVersion(1, 10, 0)))

    def test_latest_tag_ties_are_deterministic(self) -> None:
        self.assertEqual(latest_version_tag(tags("v1.0.0", "1.0.0"))[0], "1.0.0")
        self.assertEqual(latest_version_tag(tags("1.0.0", "v1.0.0"))[0], "1.0.0")

    def test_detect_bump_priority(self) -> None:
        self.assertEqual(detect_bump([commit("fix and feat and breaking")]), "major")
        self.assertEqual(detect_bump([commit("fix: a"), commit("Feature: b")]), "minor")
        self.assertEqual(detect_bump([commit("hotfix")]), "patch")
        self.assertIsNone(detect_bump([commit("chore: tidy")]))
        self.assertIsNone(detect_bump([]))


class TestVersionInferencer(unittest.TestCase):
    def test_tags_win_over_other_sources(self) -> None:
        metadata = Mock()
        prompt = FakePrompt("9.9.9")
        inferencer = VersionInferencer(lambda: tags("v1.2.3"), metadata, prompt)
        self.assertEqual(inferencer.infer([commit("feat: x")], is_update=True), "1.3.0")
        metadata.read_declared_version.assert_not_called()
        self.assertEqual(prompt.calls, [])

    def test_declared_version_used_without_version_tags(self) -> None:
        metadata = Mock()
        metadata.read_declared_version.return_value = "3.1.4"
        prompt = FakePrompt("9.9.9")
        inferencer = VersionInferencer(lambda: tags("latest"), metadata, prompt)
        self.assertEqual(inferencer.infer([commit("feat: x")], is_update=False), "3.1.4")
        self.assertEqual(prompt.calls, [])

    def test_prompt_answer_is_trimmed(self) -> None:
        prompt = FakePrompt("  2.0.0-beta  ")
        inferencer = VersionInferencer(lambda: [], None, prompt)
        self.assertEqual(inferencer.infer([commit("x")], is_update=True), "2.0.0-beta")
        text, placeholder, default = prompt.calls[0]
        self.assertEqual(default, "Unreleased")
        self.assertIn("Unreleased", placeholder)

    def test_prompt_default_on_create_run(self) -> None:
        prompt = FakePrompt(None)
        VersionInferencer(lambda: [], None, prompt).infer([commit("x")], is_update=False)
        self.assertEqual(prompt.calls[0][2], "1.0.0")

    def test_cancelled_or_blank_prompt_falls_back_to_default(self) -> None:
        for answer in (None, "", "   "):
            with self.subTest(answer=answer):
                inferencer = VersionInferencer(lambda: [], None, FakePrompt(answer))
                self.assertEqual(inferencer.infer([commit("x")], is_update=True), "Unreleased")
                self.assertEqual(inferencer.infer([commit("x")], is_update=False), "1.0.0")

    def test_without_any_source_returns_default(self) -> None:
        inferencer = VersionInferencer(lambda: [])
        self.assertEqual(inferencer.infer([commit("feat: x")], is_update=False), "1.0.0")
        self.assertEqual(inferencer.infer([commit("feat: x")], is_update=True), "Unreleased")

    def test_provider_failures_fall_through(self) -> None:
        def broken_tags():
            raise GitError("fatal: bad object")

        metadata = Mock()
        metadata.read_declared_version.side_effect = MetadataError("bad package.json")
        prompt = FakePrompt("4.0.0")
        inferencer = VersionInferencer(broken_tags, metadata, prompt)
        with self.assertLogs("changelogger.versioning.inferencer", level="WARNING") as logs:
            self.assertEqual(inferencer.infer([commit("feat: x")], is_update=False), "4.0.0")
        self.assertEqual(len(logs.records), 2)

    def test_empty_declared_version_is_ignored(self) -> None:
        metadata = Mock()
        metadata.read_declared_version.return_value = ""
        inferencer = VersionInferencer(lambda: [], metadata, None)
        self.assertEqual(inferencer.infer([commit("x")], is_update=False), "1.0.0")


if __name__ == "__main__":
    unittest.main()
