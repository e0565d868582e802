"""
Progress reporting for batched uploads.

Reports the processed fraction after each batch, to an optional tqdm bar
and an optional callback.
"""

import time
from typing import Callable, Optional

from tqdm import tqdm

from table_uploader.utils.logging import get_logger

logger = get_logger(__name__)


class UploadProgress:
    """
    Progress tracker for one upload.

    Usage:
        >>> progress = UploadProgress(total_rows=25000, show_bar=True)
        >>> progress.start()
        >>> progress.update(10000)
        >>> progress.finish()
    """

    def __init__(
        self,
        total_rows: int,
        show_bar: bool = False,
        callback: Optional[Callable[[float], None]] = None,
        desc: str = "Uploading rows",
    ) -> None:
        self.total_rows = total_rows
        self.show_bar = show_bar
        self.callback = callback
        self.desc = desc
        self.processed_rows = 0
        self.start_time: Optional[float] = None
        self._pbar: Optional[tqdm] = None

    @property
    def fraction(self) -> float:
        if self.total_rows <= 0:
            return 1.0
        return self.processed_rows / self.total_rows

    def start(self) -> None:
        self.start_time = time.time()
        if self.show_bar:
            self._pbar = tqdm(total=self.total_rows, desc=self.desc, unit="row", ncols=100)

    def update(self, n: int) -> None:
        """Record ``n`` more rows as sent."""
        self.processed_rows += n
        if self._pbar:
            self._pbar.update(n)
        if self.callback:
            self.callback(self.fraction)

    def finish(self) -> None:
        if self._pbar:
            self._pbar.close()
            self._pbar = None
        elapsed = time.time() - self.start_time if self.start_time else 0.0
        logger.debug(
            "insert.progress.finished",
            total_rows=self.total_rows,
            processed_rows=self.processed_rows,
            elapsed_seconds=f"{elapsed:.2f}",
        )
