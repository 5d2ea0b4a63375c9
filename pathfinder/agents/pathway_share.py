"""
Pathway Share Agent
Builds the share summary for a pathway and hands it to the platform's native
share capability when one is available, or copies it to the clipboard.
"""

import time
from typing import Awaitable, Callable, Optional

import pyperclip

from pathfinder.models.config import ShareConfig
from pathfinder.models.pathway import TrainingPathway
from pathfinder.utils.logger import get_logger

STATUS_IDLE = "Share"
STATUS_SHARED = "Shared!"
STATUS_COPIED = "Copied!"
STATUS_COPY_FAILED = "Copy failed"
SHARE_TITLE = "AURA SKILL"

NativeShare = Callable[[dict], Awaitable[None]]


def share_text(pathway: TrainingPathway) -> str:
    return (
        f"Check out my career roadmap for {pathway.recommended_role} "
        f"generated by AURA SKILL!"
    )


class ShareAdapter:
    """Native share with clipboard fallback, plus a self-reverting status label."""

    def __init__(
        self,
        config: Optional[ShareConfig] = None,
        native_share: Optional[NativeShare] = None,
        copy_to_clipboard: Callable[[str], None] = pyperclip.copy,
        correlation_id: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize share adapter.

        Args:
            config: App URL and status revert delay
            native_share: Async share capability taking {title, text, url};
                None when the platform has none
            copy_to_clipboard: Clipboard writer
            correlation_id: Correlation ID for logging
            clock: Monotonic time source for the status revert
        """
        self.config = config or ShareConfig()
        self.native_share = native_share
        self.copy_to_clipboard = copy_to_clipboard
        self.clock = clock
        self._status = STATUS_IDLE
        self._revert_at: Optional[float] = None
        self.logger = get_logger(
            correlation_id=correlation_id, phase="display", component="pathway_share"
        )

    async def share(self, pathway: TrainingPathway) -> str:
        """
        Share the pathway summary.

        Returns:
            The status label after the attempt
        """
        text = share_text(pathway)
        url = self.config.app_url

        if self.native_share is not None:
            try:
                await self.native_share({"title": SHARE_TITLE, "text": text, "url": url})
            except Exception as e:
                # Cancelled or failed native share keeps the current label
                self.logger.warning("Native share failed", error=str(e))
            else:
                self._set_status(STATUS_SHARED)
                self.logger.info("Pathway shared", method="native")
        else:
            payload = f"{text} {url}".strip()
            try:
                self.copy_to_clipboard(payload)
            except pyperclip.PyperclipException as e:
                self.logger.warning("Clipboard copy failed", error=str(e))
                self._set_status(STATUS_COPY_FAILED)
            else:
                self._set_status(STATUS_COPIED)
                self.logger.info("Pathway shared", method="clipboard")

        self._schedule_revert()
        return self._status

    @property
    def status(self) -> str:
        """Current label; a shared or copied label reads as idle once its delay has passed."""
        if self._revert_at is not None and self.clock() >= self._revert_at:
            self._status = STATUS_IDLE
            self._revert_at = None
        return self._status

    def _set_status(self, status: str) -> None:
        self._status = status

    def _schedule_revert(self) -> None:
        self._revert_at = self.clock() + self.config.status_revert_seconds

    def close(self) -> None:
        """Cancel a pending status revert."""
        self._revert_at = None
