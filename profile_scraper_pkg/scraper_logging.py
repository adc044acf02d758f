import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional


def _stamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _emit(level: str, message: str, stream=None) -> None:
    print(f"[{level}] {_stamp()} - {message}", file=stream or sys.stdout)


def info(message: str) -> None:
    _emit("INFO", message)


def success(message: str) -> None:
    _emit("SUCCESS", message)


def warn(message: str) -> None:
    _emit("WARN", message)


def error(message: str) -> None:
    _emit("ERROR", message, sys.stderr)


def debug(enabled: bool, message: str) -> None:
    """Print a debug line only when the run was started with DEBUG on."""
    if enabled:
        _emit("DEBUG", message)


def add_debug(debug_list: List[str], tag: str) -> None:
    """Append a debug tag to the in-flight list.

    Short structured tags trace the strategies an attempt went through
    without dumping page content into the log.
    """
    debug_list.append(tag)


async def save_debug_files(page, prefix: str = "debug", directory: str = "/tmp") -> Optional[dict]:
    """Save a full-page screenshot and HTML content for diagnostics.

    Returns a map with file paths or None if saving fails. Gated by the
    DEBUG flag and only called when an attempt fails.
    """
    try:
        ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        screenshot_path = str(Path(directory) / f"{prefix}_{ts}.png")
        html_path = Path(directory) / f"{prefix}_{ts}.html"
        await page.screenshot(path=screenshot_path, full_page=True)
        content = await page.content()
        html_path.write_text(content, encoding="utf-8")
        return {"screenshot": screenshot_path, "html": str(html_path)}
    except Exception:
        return None
