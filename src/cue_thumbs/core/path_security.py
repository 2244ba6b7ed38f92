"""
Path security validation utilities for cue-thumbs.

Catalog file paths are mirrored under the output trees; these pure functions
keep a crafted FilePath (``../..`` or an absolute path) from escaping them.
"""

from pathlib import Path, PurePath


def relative_mirror_path(file_path: str) -> PurePath:
    """Pure function - strip any drive/root so the path is always relative.

    Backslash separators from Windows exports are normalised to ``/``.
    """
    pure = PurePath(file_path.replace("\\", "/"))
    if pure.anchor:
        return PurePath(*pure.parts[1:])
    return pure


def is_path_within_root(path: Path, root: Path) -> bool:
    """Pure function - validates that ``path`` stays inside ``root``.

    Uses Path.resolve() to collapse ``..`` and symlinks before comparing.

    Args:
        path: Candidate output path
        root: Allowed output root

    Returns:
        True if path is within root, False otherwise
    """
    try:
        path.resolve().relative_to(root.resolve())
        return True
    except ValueError:
        return False
    except (OSError, RuntimeError):
        # Path.resolve() can raise OSError for invalid paths or RuntimeError for recursion
        return False
