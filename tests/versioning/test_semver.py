import unittest

from changelogger.versioning.semver import SemanticVersion


class TestSemanticVersion(unittest.TestCase):
    def test_parse_cases(self) -> None:
        cases = [
            ("1.2.3", SemanticVersion(1, 2, 3)),
            ("v10.0.7", SemanticVersion(10, 0, 7)),
            ("v2.0.0-rc.1", SemanticVersion(2, 0, 0)),
            ("1.2", None),
            ("release-1.2.3", None),
            ("V1.2.3", None),
            ("", None),
        ]
        for text, expected in cases:
            with self.subTest(text=text):
                self.assertEqual(SemanticVersion.parse(text), expected)

    def test_ordering_is_numeric(self) -> None:
        versions = [SemanticVersion(1, 10, 0), SemanticVersion(1, 9, 9), SemanticVersion(2, 0, 0)]
        self.assertEqual(max(versions), SemanticVersion(2, 0, 0))
        self.assertLess(SemanticVersion(1, 9, 9), SemanticVersion(1, 10, 0))

    def test_bumps_reset_lower_components(self) -> None:
        version = SemanticVersion(1, 2, 3)
        self.assertEqual(str(version.bump_major()), "2.0.0")
        self.assertEqual(str(version.bump_minor()), "1.3.0")
        self.assertEqual(str(version.bump_patch()), "1.2.4")


if __name__ == "__main__":
    unittest.main()
