"""Tests for version information."""

from fakes import run_cli


def test_version_flag():
    """Test that --version flag works and shows version."""
    result = run_cli("--version")

    assert result.returncode == 0
    assert "notepile" in result.stdout
    assert "python" in result.stdout
    assert "platform" in result.stdout


def test_version_module():
    """Test that version is accessible from module."""
    from notepile import __version__

    assert __version__
    assert isinstance(__version__, str)
    # Should be in SemVer format
    parts = __version__.split('.')
    assert len(parts) >= 2  # At least MAJOR.MINOR
