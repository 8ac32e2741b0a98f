import asyncio
import logging
from pathlib import Path

from .errors import ReadError, WriteError


logger = logging.getLogger(__name__)


def _read_text(path: str) -> str:
    # no validation: undecodable bytes become U+FFFD
    return Path(path).read_bytes().decode("utf-8", errors="replace")


def _write_text(path: str, content: str) -> None:
    # newline="" keeps "\n" as written on every platform
    with Path(path).open("w", encoding="utf-8", newline="") as fh:
        fh.write(content)


async def read_value(path: str) -> str:
    """Return the whole content of ``path`` as text, untrimmed.

    The underlying OS error is not attached to the raised ``ReadError``; it is
    only visible in the debug log.
    """
    try:
        return await asyncio.to_thread(_read_text, path)
    except OSError as exc:
        logger.debug("Reading %s failed: %r", path, exc)
        raise ReadError() from None


async def write_text(path: str, content: str) -> None:
    """Create or overwrite ``path`` with ``content``. The parent directory must exist."""
    try:
        await asyncio.to_thread(_write_text, path, content)
    except OSError as exc:
        logger.debug("Writing %s failed: %r", path, exc)
        raise WriteError() from None
