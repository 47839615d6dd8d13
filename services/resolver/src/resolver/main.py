"""Command-line entry point for resolving registrable domains."""

import asyncio
import argparse
import json
import locale
import sys
from typing import List, Optional
import structlog
from common import NetidentError, setup_logging
from monitoring.metrics import ResolverMetrics
from schemas import ResolvedDomain
from resolver.config import ResolverSettings, load_settings
from resolver.fetchers import HTTPFetcher
from resolver.parsers import SuffixListParser
from resolver.service import RegistrableDomainResolver
from resolver.stores import JsonFileStore

logger = structlog.get_logger()


def build_resolver(
    settings: ResolverSettings, metrics: Optional[ResolverMetrics] = None
) -> RegistrableDomainResolver:
    """Wire a resolver from settings: HTTP fetcher, JSON file cache."""
    fetcher = HTTPFetcher(
        timeout=settings.http.timeout,
        retries=settings.http.retries,
        backoff=settings.http.backoff,
    )
    return RegistrableDomainResolver(
        fetcher=fetcher,
        store=JsonFileStore(settings.cache_path),
        parser=SuffixListParser(
            include_private_domains=settings.include_private_domains
        ),
        list_url=settings.list_url,
        storage_key=settings.storage_key,
        ttl=settings.ttl,
        metrics=metrics,
    )


async def resolve(
    resolver: RegistrableDomainResolver, url_list: List[str], unique: bool
) -> List[str]:
    async with resolver:
        if unique:
            return await resolver.get_unique_registrable_domains(url_list)
        return await resolver.get_registrable_domains(url_list)


def format_output(url_list: List[str], domains: List[str], unique: bool, as_json: bool) -> str:
    if as_json:
        if unique:
            return json.dumps(domains)
        return json.dumps(
            [
                ResolvedDomain(url=url, registrable_domain=domain).model_dump()
                for url, domain in zip(url_list, domains)
            ]
        )
    if unique:
        return "\n".join(domains)
    return "\n".join(f"{url}\t{domain}" for url, domain in zip(url_list, domains))


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Resolve the registrable domain (eTLD+1) of URLs"
    )
    parser.add_argument(
        "urls",
        nargs="*",
        help="URLs to resolve (default: read one per line from stdin)",
    )
    parser.add_argument(
        "--unique",
        action="store_true",
        help="Print the sorted set of distinct registrable domains and IP hosts",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML settings file",
    )
    parser.add_argument(
        "--cache-dir",
        type=str,
        default=None,
        help="Directory for the cached public suffix list (overrides config)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs in JSON format",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    global logger
    logger = setup_logging(
        level=args.log_level,
        service_name="resolver",
        json_format=args.json_logs,
    )

    # --unique output is ordered with locale.strcoll
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning("Cannot set collation locale, using code point order", error=str(e))

    try:
        settings = load_settings(args.config)
    except NetidentError as e:
        logger.error("Invalid configuration", error=str(e))
        return 2

    if args.cache_dir:
        settings = settings.model_copy(update={"cache_dir": args.cache_dir})

    url_list = args.urls or [line.strip() for line in sys.stdin if line.strip()]
    if not url_list:
        logger.warning("No URLs given")
        return 0

    metrics = ResolverMetrics()
    resolver = build_resolver(settings, metrics)

    try:
        domains = asyncio.run(resolve(resolver, url_list, args.unique))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except NetidentError as e:
        logger.error("Resolution failed", error=str(e), error_type=type(e).__name__)
        return 1
    finally:
        metrics.push()

    print(format_output(url_list, domains, args.unique, args.json))
    return 0


if __name__ == "__main__":
    sys.exit(main())
