"""Registrable domain resolver service."""

import asyncio
import contextlib
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC
from typing import Any, Callable, Iterable, List, Optional
import structlog
from common import InvalidHostError, UninitializedError
from common.constants import (
    PSL_STORAGE_KEY,
    PSL_UPDATE_INTERVAL_HOURS,
    PUBLIC_SUFFIX_LIST_URL,
)
from inet import hostname, urls as url_utils
from monitoring.metrics import ResolverMetrics
from schemas import PublicSuffixRuleSet
from resolver.fetchers import BaseFetcher
from resolver.matching import SuffixMatcher
from resolver.parsers import SuffixListParser
from resolver.stores import BaseStore

logger = structlog.get_logger()

Handler = Callable[[PublicSuffixRuleSet, SuffixMatcher], Any]


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class _Request:
    handler: Handler
    future: asyncio.Future


class RegistrableDomainResolver:
    """Computes registrable domains (eTLD+1) using the public suffix list.

    A single owner task holds the cached rule set and serves requests from a
    mailbox. The owner takes every request waiting in the mailbox and starts
    one refresh for that group; requests arriving while the refresh runs join
    the same group. Once the refresh settles, each request is answered from
    the same snapshot. Concurrent callers therefore never trigger more than
    one fetch, and a failed refresh is raised to every caller that waited on
    it.

    Usage:
        async with RegistrableDomainResolver(HTTPFetcher(), store) as resolver:
            domains = await resolver.get_registrable_domains(urls)
    """

    def __init__(
        self,
        fetcher: BaseFetcher,
        store: Optional[BaseStore] = None,
        parser: Optional[SuffixListParser] = None,
        list_url: str = PUBLIC_SUFFIX_LIST_URL,
        storage_key: str = PSL_STORAGE_KEY,
        ttl: timedelta = timedelta(hours=PSL_UPDATE_INTERVAL_HOURS),
        metrics: Optional[ResolverMetrics] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize resolver.

        Args:
            fetcher: Fetches the rule-list document
            store: Persistent rule-set store (may be attached later)
            parser: Rule-list parser (default: SuffixListParser())
            list_url: URL of the public suffix list
            storage_key: Store key for the cached rule set
            ttl: Maximum age of the cached rule set
            metrics: Optional Prometheus metrics
            clock: Returns the current UTC time
        """
        self.fetcher = fetcher
        self.parser = parser or SuffixListParser()
        self.list_url = list_url
        self.storage_key = storage_key
        self.ttl = ttl
        self.metrics = metrics
        self._clock = clock
        self._store = store
        self._rule_set: Optional[PublicSuffixRuleSet] = None
        self._matcher: Optional[SuffixMatcher] = None
        self._mailbox: Optional[asyncio.Queue] = None
        self._owner: Optional[asyncio.Task] = None
        self._in_flight: List[_Request] = []

    # ==================== Lifecycle ====================

    def attach_store(self, store: BaseStore) -> None:
        """Attach the persistent store; the cached snapshot is dropped."""
        self._store = store
        self._rule_set = None
        self._matcher = None

    @property
    def is_running(self) -> bool:
        return self._owner is not None and not self._owner.done()

    async def start(self) -> None:
        """Start the owner task. Calling it twice is a no-op."""
        if self.is_running:
            return
        self._mailbox = asyncio.Queue()
        self._owner = asyncio.create_task(self._run(), name="psl-resolver-owner")
        logger.debug("Resolver started", list_url=self.list_url)

    async def stop(self) -> None:
        """Stop the owner task and fail any request still waiting."""
        if self._owner is None:
            return

        self._owner.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._owner
        self._owner = None

        pending = list(self._in_flight)
        while self._mailbox is not None and not self._mailbox.empty():
            pending.append(self._mailbox.get_nowait())
        self._in_flight = []

        for request in pending:
            if not request.future.done():
                request.future.set_exception(UninitializedError("Resolver stopped"))

        logger.debug("Resolver stopped", failed_requests=len(pending))

    async def __aenter__(self) -> "RegistrableDomainResolver":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    # ==================== Owner task ====================

    async def _call(self, handler: Handler) -> Any:
        if not self.is_running:
            raise UninitializedError(
                "Resolver is not running; call start() or use 'async with'"
            )
        future = asyncio.get_running_loop().create_future()
        self._mailbox.put_nowait(_Request(handler, future))
        return await future

    async def _run(self) -> None:
        while True:
            first = await self._mailbox.get()
            self._in_flight = [first]
            while not self._mailbox.empty():
                self._in_flight.append(self._mailbox.get_nowait())

            refresh = asyncio.create_task(self._get_rules(), name="psl-rules-refresh")
            try:
                await self._attach_until_done(refresh)
            finally:
                if not refresh.done():
                    refresh.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await refresh

            self._serve(self._in_flight, refresh)
            self._in_flight = []

    async def _attach_until_done(self, refresh: asyncio.Task) -> None:
        """Add requests that arrive while ``refresh`` runs to the waiting group."""
        while not refresh.done():
            getter = asyncio.ensure_future(self._mailbox.get())
            try:
                await asyncio.wait(
                    {refresh, getter}, return_when=asyncio.FIRST_COMPLETED
                )
            finally:
                if not getter.done():
                    # An item already handed to a cancelled getter stays queued
                    getter.cancel()
            if getter.done() and not getter.cancelled():
                self._in_flight.append(getter.result())

    def _serve(self, batch: List[_Request], refresh: asyncio.Task) -> None:
        try:
            rule_set = refresh.result()
        except Exception as e:
            logger.error(
                "Rule refresh failed",
                error=str(e),
                error_type=type(e).__name__,
                waiting_requests=len(batch),
            )
            if self.metrics is not None:
                self.metrics.record_refresh_failure(e)
            for request in batch:
                if not request.future.done():
                    request.future.set_exception(e)
            return

        for request in batch:
            if request.future.done():
                continue
            try:
                result = request.handler(rule_set, self._matcher)
            except Exception as e:
                request.future.set_exception(e)
            else:
                request.future.set_result(result)

    # ==================== Rules ====================

    def _use_rule_set(self, rule_set: PublicSuffixRuleSet) -> None:
        self._rule_set = rule_set
        self._matcher = SuffixMatcher.from_rule_set(rule_set)
        if self.metrics is not None:
            self.metrics.record_rule_set(
                len(rule_set.rules), len(rule_set.exception_rules), rule_set.fetched_at
            )

    async def _get_rules(self) -> PublicSuffixRuleSet:
        if self._store is None:
            raise UninitializedError(
                "Rule store is not attached",
                context={"storage_key": self.storage_key},
            )

        now = self._clock()
        if self._rule_set is not None and not self._rule_set.is_stale(now, self.ttl):
            return self._rule_set

        rule_set = await self._store.get(self.storage_key)
        if rule_set.is_stale(now, self.ttl):
            logger.info(
                "Refreshing public suffix list",
                url=self.list_url,
                initialized=rule_set.initialized,
                fetched_at=rule_set.fetched_at.isoformat(),
            )
            text = await self.fetcher.fetch_text(self.list_url)
            parsed = self.parser.parse(text)
            rule_set = PublicSuffixRuleSet(
                rules=parsed.rules,
                exception_rules=parsed.exception_rules,
                fetched_at=now,
                initialized=True,
            )
            await self._store.set(self.storage_key, rule_set)
            if self.metrics is not None:
                self.metrics.record_refresh()
            logger.info(
                "Public suffix list refreshed",
                rules=len(rule_set.rules),
                exception_rules=len(rule_set.exception_rules),
            )

        self._use_rule_set(rule_set)
        return rule_set

    async def get_rules(self) -> PublicSuffixRuleSet:
        """Current rule set, refreshed first if it is stale."""
        return await self._call(lambda rule_set, matcher: rule_set)

    # ==================== Resolution ====================

    @staticmethod
    def _get_hostname(url: str) -> str:
        if not url_utils.is_http_scheme(url):
            return ""
        try:
            return hostname.get_host(url)
        except InvalidHostError:
            return ""

    def _get_dns_hostname(self, url: str) -> str:
        host = self._get_hostname(url)
        if host and hostname.is_ip_literal(host):
            return ""
        return host

    def _registrable_domain(self, url: str, matcher: SuffixMatcher) -> str:
        host = self._get_hostname(url)
        if not host:
            return ""
        if hostname.is_ip_literal(host):
            return host
        return matcher.registrable_domain(host)

    def _execute(self, url_list: List[str], matcher: SuffixMatcher) -> List[str]:
        domains = [self._registrable_domain(url, matcher) for url in url_list]
        if self.metrics is not None:
            self.metrics.record_resolved(len(url_list))
        return domains

    async def get_registrable_domains(self, url_list: Iterable[str]) -> List[str]:
        """
        Get the registrable domain of each URL.

        All URLs are resolved against one rule-set snapshot.

        Args:
            url_list: URLs with ASCII or Unicode hosts

        Returns:
            One entry per URL, in order: the registrable domain, the host
            itself for IP literals, or "" for URLs that are not http(s) or
            cannot be parsed

        Raises:
            UninitializedError: If the resolver is not running or has no store
            FetchError, ParseError, StoreError: If a needed refresh fails
        """
        url_list = list(url_list)
        return await self._call(
            lambda rule_set, matcher: self._execute(url_list, matcher)
        )

    async def get_unique_registrable_domains(self, url_list: Iterable[str]) -> List[str]:
        """
        Get the sorted, deduplicated hosts behind a set of URLs.

        Only http(s) URLs count. IP literal hosts are kept as they are; DNS
        hosts are reduced to their registrable domain. The result is sorted
        with ``inet.hostname.sort``.
        """
        hosts = []
        for url in url_list:
            if not url_utils.is_http_scheme(url):
                continue
            try:
                hosts.append(hostname.get_host(url))
            except InvalidHostError:
                logger.debug("Skipping URL with invalid host", url=url)

        ip_hosts = [host for host in hosts if hostname.is_ip_literal(host)]
        dns_hosts = [host for host in hosts if not hostname.is_ip_literal(host)]

        registrable = await self.get_registrable_domains(
            [f"http://{host}" for host in dns_hosts]
        )
        unique = set(ip_hosts)
        unique.update(registrable)
        return hostname.sort(unique)

    async def get_public_suffix(self, url: str) -> str:
        """Public suffix of a URL's host; "" for non-http(s) URLs and IP literals."""
        host = self._get_dns_hostname(url)
        if not host:
            return ""
        return await self._call(lambda rule_set, matcher: matcher.public_suffix(host))
