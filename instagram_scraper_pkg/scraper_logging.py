import logging
import sys
import tempfile
import time
from pathlib import Path
from typing import List, Optional


def get_logger(name: str) -> logging.Logger:
    """Return a module logger writing to stderr.

    The handler is attached once per logger so repeated imports (uvicorn
    reload, tests) do not duplicate lines.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def add_debug(debug_list: List[str], tag: str) -> None:
    """Append a debug tag to the in-flight list.

    Tags are short and never carry credentials or cookie values.
    """
    debug_list.append(tag)


async def save_debug_files(page, prefix: str = "debug") -> Optional[dict]:
    """Save a full-page screenshot and the HTML content to the temp dir.

    Returns a map with file paths, or None if saving fails. Only called when
    the request sets `debug`.
    """
    try:
        ts = int(time.time() * 1000)
        base = Path(tempfile.gettempdir())
        screenshot_path = base / f"{prefix}_{ts}.png"
        html_path = base / f"{prefix}_{ts}.html"
        await page.screenshot(path=str(screenshot_path), full_page=True)
        html_path.write_text(await page.content(), encoding="utf-8")
        return {"screenshot": str(screenshot_path), "html": str(html_path)}
    except Exception as e:
        get_logger(__name__).warning("Could not save debug files: %s", e)
        return None
