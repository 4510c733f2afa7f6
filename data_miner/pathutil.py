"""Path utilities for cross-platform Unreal asset path handling."""


def to_game_path_sep(path: str) -> str:
    """Normalize path separators to forward slashes for Unreal game paths.

    Use at the filesystem→game-path boundary. Unreal game paths always use
    forward slashes (e.g. /Game/Data/DT_Fashion), but on Windows ``pathlib``
    produces backslashes.
    """
    return path.replace("\\", "/")


def normalize_game_path(path: str) -> str:
    """Canonical form of a game path: forward slashes, no extension or object name.

    ``/Game/Data/DT_Fashion.DT_Fashion`` and ``Game/Data/DT_Fashion.uasset``
    both become ``/Game/Data/DT_Fashion``.
    """
    path = to_game_path_sep(path).strip()
    if not path.startswith("/"):
        path = "/" + path
    tail = path.rsplit("/", 1)[-1]
    if "." in tail:
        path = path[: len(path) - len(tail)] + tail.split(".", 1)[0]
    return path.rstrip("/")
