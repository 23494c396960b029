"""Top-level package for the change ringing toolkit.

Provides subpackages:
- ringing_toolkit.core – Bell, Stage, Row, PlaceNotation, Block, Method
- ringing_toolkit.generation – block builder and termination policies
- ringing_toolkit.falseness – direct and relational truth checking
- ringing_toolkit.library – in-memory method catalog queries
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"

    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.4.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    # Fallback to importlib.metadata for installed package
    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("ringing-toolkit")
    except Exception:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
