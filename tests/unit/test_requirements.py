"""Tests for Python requirements.txt parsing."""

from deprun.requirements import RequirementLine, parse_requirements


class TestPythonParser:
    """Test Python requirements.txt parsing."""

    def test_parse_single_requirement(self):
        """Should parse a single package requirement."""
        entries = parse_requirements("fastapi==0.85.0")

        assert len(entries) == 1
        entry = entries[0]
        assert entry.name == "fastapi"
        assert entry.spec == "==0.85.0"
        assert entry.pinned_version == "0.85.0"
        assert entry.line_number == 1

    def test_parse_multiple_requirements(self):
        entries = parse_requirements("fastapi==0.85.0\nuvicorn>=0.18.0\nrequests~=2.28.0")

        assert [e.name for e in entries] == ["fastapi", "uvicorn", "requests"]
        assert entries[1].spec == ">=0.18.0"
        assert entries[2].spec == "~=2.28.0"

    def test_only_exact_pins_have_versions(self):
        entries = parse_requirements(
            "a==1.0\nb>=1.0\nc~=1.0\nd==1.*\ne>=1.0,<2.0\nf\ng===2.0"
        )
        assert [e.pinned_version for e in entries] == [
            "1.0",
            None,
            None,
            None,
            None,
            None,
            "2.0",
        ]

    def test_parse_with_comments(self):
        """Should skip comment lines and inline comments."""
        content = """# Web framework
fastapi==0.85.0  # Fast API framework
# Server
uvicorn>=0.18.0"""

        entries = parse_requirements(content)

        assert len(entries) == 2
        assert entries[0].name == "fastapi"
        assert entries[0].pinned_version == "0.85.0"
        assert entries[0].line_number == 2
        assert entries[1].line_number == 4

    def test_parse_with_environment_markers(self):
        entries = parse_requirements('uvloop>=0.17.0; sys_platform != "win32"')

        entry = entries[0]
        assert entry.name == "uvloop"
        assert entry.spec == ">=0.17.0"
        assert entry.pinned_version is None

    def test_parse_with_extras(self):
        entries = parse_requirements("fastapi[all]==0.85.0")

        entry = entries[0]
        assert entry.name == "fastapi"
        assert entry.spec == "==0.85.0"
        assert entry.pinned_version == "0.85.0"

    def test_skips_vcs_urls_and_options(self):
        """Should skip anything that is not a registry requirement."""
        content = """fastapi==0.85.0
git+https://github.com/user/repo.git@v1.0.0#egg=custom-lib
-e ./local-package
-r other.txt
-c constraints.txt
--index-url https://example.org/simple
./vendored/pkg
custom @ https://example.org/custom.whl
uvicorn>=0.18.0"""

        entries = parse_requirements(content)

        assert [e.name for e in entries] == ["fastapi", "uvicorn"]

    def test_malformed_line_skipped(self):
        entries = parse_requirements("fastapi==0.85.0\n==not-a-name\nuvicorn>=0.18.0")
        assert [e.name for e in entries] == ["fastapi", "uvicorn"]

    def test_parse_empty_file(self):
        assert parse_requirements("") == []
        assert parse_requirements("# only\n# comments\n") == []

    def test_matches_normalized_name(self):
        entry = RequirementLine(name="Typing_Extensions", line_number=1)
        assert entry.matches("typing-extensions")
        assert not entry.matches("typing")
