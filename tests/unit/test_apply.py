"""Tests for applying pin updates to requirements files."""

import pytest

from deprun.apply import RequirementsApplier
from deprun.models import ErrorType


class TestRequirementsApplier:
    """Test rewriting requirements files in place."""

    def setup_method(self):
        """Setup test fixtures."""
        self.applier = RequirementsApplier()

    @pytest.mark.asyncio
    async def test_updates_pin(self, repo):
        result = await self.applier.apply(
            repo, "/src/requirements.txt", "fastapi", "1.0.0", "2.0.0", False
        )

        assert result.error_type == ErrorType.NONE
        assert (repo / "src" / "requirements.txt").read_text() == (
            "fastapi==2.0.0\nuvicorn>=0.18.0\n"
        )

    @pytest.mark.asyncio
    async def test_accepts_non_canonical_path(self, repo):
        result = await self.applier.apply(
            repo, "src\\requirements.txt", "fastapi", "1.0.0", "2.0.0", False
        )
        assert result.error_type == ErrorType.NONE

    @pytest.mark.asyncio
    async def test_missing_file(self, repo):
        result = await self.applier.apply(
            repo, "/nope/requirements.txt", "fastapi", "1.0.0", "2.0.0", False
        )
        assert result.error_type == ErrorType.MISSING_FILE

    @pytest.mark.asyncio
    async def test_transitive_not_possible(self, repo):
        result = await self.applier.apply(
            repo, "/src/requirements.txt", "fastapi", "1.0.0", "2.0.0", True
        )
        assert result.error_type == ErrorType.UPDATE_NOT_POSSIBLE

    @pytest.mark.asyncio
    async def test_version_mismatch_not_possible(self, repo):
        original = (repo / "src" / "requirements.txt").read_text()

        result = await self.applier.apply(
            repo, "/src/requirements.txt", "fastapi", "0.9.0", "2.0.0", False
        )

        assert result.error_type == ErrorType.UPDATE_NOT_POSSIBLE
        assert (repo / "src" / "requirements.txt").read_text() == original

    def test_preserves_extras_markers_comments(self):
        content = (
            "# pinned\n"
            'Fast_API[all] == 1.0.0 ; python_version >= "3.8"  # web\n'
            "other==1.0.0\n"
        )

        updated, replaced = self.applier.update_content(content, "fast-api", "1.0.0", "2.0.0")

        assert replaced == 1
        assert updated == (
            "# pinned\n"
            'Fast_API[all] == 2.0.0 ; python_version >= "3.8"  # web\n'
            "other==1.0.0\n"
        )

    def test_keeps_spacing_after_operator(self):
        updated, replaced = self.applier.update_content(
            "fastapi == 1.0.0\nuvicorn===0.18.0\n", "fastapi", "1.0.0", "2.0.0"
        )
        assert replaced == 1
        assert updated == "fastapi == 2.0.0\nuvicorn===0.18.0\n"

    def test_preserves_line_endings(self):
        updated, replaced = self.applier.update_content(
            "a==1.0\r\nb==1.0\r\n", "b", "1.0", "1.1"
        )
        assert replaced == 1
        assert updated == "a==1.0\r\nb==1.1\r\n"

    def test_does_not_touch_prefix_versions(self):
        updated, replaced = self.applier.update_content("a==1.0.1\n", "a", "1.0", "2.0")
        assert replaced == 0
        assert updated == "a==1.0.1\n"
