"""Shared fixtures for resolver tests."""

import asyncio
from datetime import datetime, timedelta, UTC
from typing import Any, Dict, List, Optional

import pytest

from resolver.fetchers import BaseFetcher


SAMPLE_PSL = """
// This Source Code Form is subject to the terms of the Mozilla Public
// License, v. 2.0.

// ===BEGIN ICANN DOMAINS===

// com : https://www.iana.org/domains/root/db/com.html
com

// jp : https://en.wikipedia.org/wiki/.jp
jp
*.kobe.jp
!city.kobe.jp

// uk
uk
co.uk

// ck
*.ck
!www.ck

// IDN rule
公司.cn
cn

// ===END ICANN DOMAINS===
// ===BEGIN PRIVATE DOMAINS===

// Google, Inc.
blogspot.com

// ===END PRIVATE DOMAINS===
"""


class FakeFetcher(BaseFetcher):
    """Returns canned content and counts fetches.

    When ``gate`` is set, every fetch waits for it, so tests can hold a
    refresh open while other callers pile up.
    """

    def __init__(self, content: str = SAMPLE_PSL, error: Optional[Exception] = None):
        super().__init__("fake")
        self.content = content
        self.error = error
        self.gate: Optional[asyncio.Event] = None
        self.calls: List[str] = []

    async def fetch(self, url: str) -> Dict[str, Any]:
        self.calls.append(url)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return {"content": self.content, "metadata": {"source_url": url}}


class FakeClock:
    """Settable UTC clock."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def sample_psl_content():
    return SAMPLE_PSL


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 1, 1, 0, 0, 0, tzinfo=UTC))


@pytest.fixture
def make_fetcher():
    """Factory for FakeFetcher instances with custom content or errors."""
    return FakeFetcher
