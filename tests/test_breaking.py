"""Tests for commitgenie.breaking module."""

from commitgenie.breaking import STRUCTURAL_CHECKS, detect_breaking_changes
from commitgenie.config import BreakingChangeConfig, CommitGenieConfig
from commitgenie.models import FileChange, FileStatus

MODIFIED_TS = [FileChange(FileStatus.MODIFIED, "src/api.ts")]


class TestKeywords:
    """Tests for keyword evidence."""

    def test_keyword_match(self):
        """Test a default keyword is reported."""
        result = detect_breaking_changes("+// this API is deprecated", MODIFIED_TS)
        assert result.is_breaking is True
        assert result.reasons == ("Diff mentions 'deprecated'",)

    def test_keyword_case_insensitive(self):
        """Test keywords are matched against the lowercase diff."""
        result = detect_breaking_changes("+BREAKING CHANGE: config format", MODIFIED_TS)
        assert "Diff mentions 'breaking change'" in result.reasons

    def test_repeated_keyword_yields_one_reason(self):
        """Test the same keyword five times yields one reason."""
        diff = "\n".join(["+// incompatible"] * 5)
        result = detect_breaking_changes(diff, MODIFIED_TS)
        assert result.reasons == ("Diff mentions 'incompatible'",)

    def test_custom_keywords(self):
        """Test configured keywords replace the defaults."""
        config = CommitGenieConfig(breaking_change_detection=BreakingChangeConfig(keywords=["api-v2"]))
        assert detect_breaking_changes("+moved to API-V2", MODIFIED_TS, config).is_breaking is True
        assert detect_breaking_changes("+deprecated", MODIFIED_TS, config).is_breaking is False


class TestFileStatusEvidence:
    """Tests for deleted and renamed source files."""

    def test_deleted_source_file(self):
        """Test deleting a source file is breaking."""
        result = detect_breaking_changes("", [FileChange(FileStatus.DELETED, "src/legacy.ts")])
        assert result.reasons == ("Deleted source file: src/legacy.ts",)

    def test_deleted_docs_file_not_breaking(self):
        """Test deleting documentation is not breaking."""
        assert detect_breaking_changes("", [FileChange(FileStatus.DELETED, "docs/old.md")]).is_breaking is False

    def test_many_deleted_sources_one_reason(self):
        """Test several deletions contribute a single reason."""
        changes = [FileChange(FileStatus.DELETED, f"src/m{i}.ts") for i in range(5)]
        result = detect_breaking_changes("", changes)
        assert len(result.reasons) == 1
        assert result.reasons[0].endswith("(+2 more)")

    def test_renamed_source_file(self):
        """Test renaming a source file may break imports."""
        result = detect_breaking_changes("", [FileChange(FileStatus.RENAMED, "src/new_name.ts")])
        assert result.reasons == ("Renamed source file may break imports: src/new_name.ts",)

    def test_renamed_test_file_not_breaking(self):
        """Test renaming a test file is not breaking."""
        assert detect_breaking_changes("", [FileChange(FileStatus.RENAMED, "tests/test_a.py")]).is_breaking is False


class TestStructuralEvidence:
    """Tests for structural diff patterns."""

    def test_removed_export_function(self):
        """Test removing an exported function is breaking."""
        result = detect_breaking_changes("-export function oldApi()", MODIFIED_TS)
        assert result.is_breaking is True
        assert result.reasons == ("Removed exported function 'oldApi'", "Removed function 'oldApi'")

    def test_export_kept_is_not_removed(self):
        """Test an export present on both sides is not reported as removed."""
        diff = "-export const LIMIT = 10\n+export const LIMIT = 20"
        assert detect_breaking_changes(diff, MODIFIED_TS).is_breaking is False

    def test_changed_signature(self):
        """Test a changed parameter list is breaking."""
        diff = "-def fetch(url, timeout):\n+def fetch(url):"
        result = detect_breaking_changes(diff, [FileChange(FileStatus.MODIFIED, "client.py")])
        assert result.reasons == ("Changed signature of function 'fetch'",)

    def test_whitespace_in_signature_ignored(self):
        """Test reformatted parameters are not a signature change."""
        diff = "-def fetch(url,timeout):\n+def fetch(url, timeout):"
        assert detect_breaking_changes(diff, [FileChange(FileStatus.MODIFIED, "client.py")]).is_breaking is False

    def test_removed_class_member(self):
        """Test removing a public method is breaking."""
        diff = "-    def close(self):\n-        self.conn.close()"
        result = detect_breaking_changes(diff, [FileChange(FileStatus.MODIFIED, "db.py")])
        assert "Removed class member 'close'" in result.reasons

    def test_private_member_ignored(self):
        """Test removing a private method is not reported as a class member."""
        diff = "-    def _reset(self):\n-        pass"
        result = detect_breaking_changes(diff, [FileChange(FileStatus.MODIFIED, "db.py")])
        assert not any("class member" in r for r in result.reasons)

    def test_major_version_bump(self):
        """Test a major version bump in a manifest is breaking."""
        diff = (
            "diff --git a/package.json b/package.json\n"
            "--- a/package.json\n"
            "+++ b/package.json\n"
            "@@ -1,3 +1,3 @@\n"
            '-  "version": "1.4.2",\n'
            '+  "version": "2.0.0",\n'
        )
        result = detect_breaking_changes(diff, [FileChange(FileStatus.MODIFIED, "package.json")])
        assert result.reasons == ("Major version bump in package.json (1.x -> 2.x)",)

    def test_minor_version_bump_not_breaking(self):
        """Test a minor version bump is not breaking."""
        diff = (
            "diff --git a/pyproject.toml b/pyproject.toml\n"
            '-version = "1.4.2"\n'
            '+version = "1.5.0"\n'
        )
        assert detect_breaking_changes(diff, [FileChange(FileStatus.MODIFIED, "pyproject.toml")]).is_breaking is False

    def test_check_order(self):
        """Test the structural families are evaluated in a fixed order."""
        assert [name for name, _ in STRUCTURAL_CHECKS] == [
            "removed-export",
            "changed-signature",
            "removed-class-member",
            "major-version-bump",
        ]


class TestDetector:
    """Tests for detector-wide behaviour."""

    def test_disabled(self):
        """Test a disabled detector reports nothing."""
        config = CommitGenieConfig(breaking_change_detection=BreakingChangeConfig(enabled=False))
        result = detect_breaking_changes("-export function oldApi()", MODIFIED_TS, config)
        assert result.is_breaking is False
        assert result.reasons == ()

    def test_reason_order(self):
        """Test reasons follow keyword, deletion, structural, rename order."""
        changes = [
            FileChange(FileStatus.DELETED, "src/old.ts"),
            FileChange(FileStatus.RENAMED, "src/moved.ts"),
        ]
        result = detect_breaking_changes("-export class Client {}\n+// removed client", changes)
        assert result.reasons == (
            "Diff mentions 'removed'",
            "Deleted source file: src/old.ts",
            "Removed exported class 'Client'",
            "Renamed source file may break imports: src/moved.ts",
        )

    def test_arbitrary_text_never_raises(self):
        """Test odd diff content is simply no evidence."""
        result = detect_breaking_changes("@@ (( [[ \\ ** ??", MODIFIED_TS)
        assert result.is_breaking is False

    def test_deterministic(self):
        """Test identical inputs give identical results."""
        diff = "-export function oldApi()\n+// deprecated"
        assert detect_breaking_changes(diff, MODIFIED_TS) == detect_breaking_changes(diff, MODIFIED_TS)
