"""
Unit tests for pathway_share module.
"""

import time

import pyperclip
import pytest

from pathfinder.agents.pathway_share import (
    STATUS_COPIED,
    STATUS_COPY_FAILED,
    STATUS_IDLE,
    STATUS_SHARED,
    ShareAdapter,
    share_text,
)
from pathfinder.models.config import ShareConfig


def test_share_text_names_role(pathway):
    assert share_text(pathway) == (
        "Check out my career roadmap for Electronics Technician generated by AURA SKILL!"
    )


class TestClipboardFallback:
    """Test cases for the clipboard path."""

    @pytest.mark.asyncio
    async def test_copies_text_and_url(self, pathway):
        """Test that without native share the text and URL are copied."""
        # Arrange
        copied = []
        adapter = ShareAdapter(
            config=ShareConfig(app_url="https://aura.example.in"),
            copy_to_clipboard=copied.append,
        )

        # Act
        status = await adapter.share(pathway)

        # Assert
        assert status == STATUS_COPIED
        assert copied == [f"{share_text(pathway)} https://aura.example.in"]
        adapter.close()

    @pytest.mark.asyncio
    async def test_empty_app_url_copies_text_only(self, pathway):
        copied = []
        adapter = ShareAdapter(copy_to_clipboard=copied.append)

        await adapter.share(pathway)

        assert copied == [share_text(pathway)]
        adapter.close()

    @pytest.mark.asyncio
    async def test_clipboard_failure_sets_copy_failed(self, pathway):
        """Test that a clipboard error is reported, not raised."""

        def broken_clipboard(_text):
            raise pyperclip.PyperclipException("no clipboard mechanism")

        adapter = ShareAdapter(copy_to_clipboard=broken_clipboard)

        status = await adapter.share(pathway)

        assert status == STATUS_COPY_FAILED
        adapter.close()


class TestNativeShare:
    """Test cases for the native share path."""

    @pytest.mark.asyncio
    async def test_native_share_payload(self, pathway):
        """Test that native share receives title, text and url."""
        # Arrange
        received = []

        async def native(payload):
            received.append(payload)

        copied = []
        adapter = ShareAdapter(
            config=ShareConfig(app_url="https://aura.example.in"),
            native_share=native,
            copy_to_clipboard=copied.append,
        )

        # Act
        status = await adapter.share(pathway)

        # Assert
        assert status == STATUS_SHARED
        assert received == [
            {
                "title": "AURA SKILL",
                "text": share_text(pathway),
                "url": "https://aura.example.in",
            }
        ]
        assert copied == []
        adapter.close()

    @pytest.mark.asyncio
    async def test_cancelled_native_share_keeps_status(self, pathway):
        """Test that a dismissed share sheet leaves the label unchanged."""

        async def cancelled(_payload):
            raise RuntimeError("AbortError: share canceled")

        adapter = ShareAdapter(native_share=cancelled)

        status = await adapter.share(pathway)

        assert status == STATUS_IDLE
        adapter.close()


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestStatusRevert:
    """Test cases for the status label reset."""

    @pytest.mark.asyncio
    async def test_status_reverts_after_delay(self, pathway):
        """Test that the label returns to its resting text."""
        clock = FakeClock()
        adapter = ShareAdapter(
            config=ShareConfig(status_revert_seconds=2.5),
            copy_to_clipboard=lambda _text: None,
            clock=clock,
        )

        await adapter.share(pathway)
        clock.now += 2.4
        before = adapter.status
        clock.now += 0.1

        assert before == STATUS_COPIED
        assert adapter.status == STATUS_IDLE

    @pytest.mark.asyncio
    async def test_status_reverts_while_loop_is_blocked(self, pathway):
        """Test that the revert needs no event-loop turn, only elapsed time."""
        adapter = ShareAdapter(
            config=ShareConfig(status_revert_seconds=0.01),
            copy_to_clipboard=lambda _text: None,
        )

        await adapter.share(pathway)
        time.sleep(0.05)

        assert adapter.status == STATUS_IDLE

    @pytest.mark.asyncio
    async def test_failed_copy_label_also_reverts(self, pathway):
        def broken_clipboard(_text):
            raise pyperclip.PyperclipException("no clipboard mechanism")

        clock = FakeClock()
        adapter = ShareAdapter(copy_to_clipboard=broken_clipboard, clock=clock)

        await adapter.share(pathway)
        clock.now += adapter.config.status_revert_seconds

        assert adapter.status == STATUS_IDLE

    @pytest.mark.asyncio
    async def test_zero_delay_still_reports_attempt(self, pathway):
        """Test that share() returns the fresh label even with no delay."""
        adapter = ShareAdapter(
            config=ShareConfig(status_revert_seconds=0),
            copy_to_clipboard=lambda _text: None,
        )

        status = await adapter.share(pathway)

        assert status == STATUS_COPIED
        assert adapter.status == STATUS_IDLE

    @pytest.mark.asyncio
    async def test_close_cancels_pending_revert(self, pathway):
        """Test that closing stops the scheduled revert."""
        clock = FakeClock()
        adapter = ShareAdapter(
            config=ShareConfig(status_revert_seconds=0.01),
            copy_to_clipboard=lambda _text: None,
            clock=clock,
        )
        await adapter.share(pathway)

        adapter.close()
        clock.now += 1

        assert adapter.status == STATUS_COPIED
