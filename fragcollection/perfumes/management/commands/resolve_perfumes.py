"""Resolve perfume product URLs from the command line, or queue them for RQ workers."""

import json

from django.core.management.base import BaseCommand, CommandError

from perfumes.fetchers.manager import build_fetcher
from perfumes.resolver import PerfumeResolver
from perfumes.serializers import PerfumeInfoSerializer
from perfumes.tasks import resolve_perfume_url
from perfumes.url_sanitizer import sanitize_url


class Command(BaseCommand):
    help = "Resolve perfume metadata for one or more product URLs."

    def add_arguments(self, parser):
        parser.add_argument("urls", nargs="+", type=str, help="Product page URLs")
        parser.add_argument(
            "--queue",
            action="store_true",
            help="Enqueue a background job per URL instead of resolving inline.",
        )
        parser.add_argument(
            "--strategy",
            type=str,
            default=None,
            help="Fetch strategy override (curl_cffi or zyte).",
        )

    def handle(self, *args, **options):
        urls = options["urls"]

        if options["queue"]:
            queued = 0
            for url in urls:
                try:
                    sanitize_url(url)
                except ValueError as exc:
                    self.stderr.write(f"  SKIP (invalid URL): {url} ({exc})")
                    continue
                resolve_perfume_url.delay(url)
                self.stdout.write(f"  QUEUED: {url}")
                queued += 1
            self.stdout.write(self.style.SUCCESS(f"\nDone: {queued} queued"))
            return

        try:
            fetcher = build_fetcher(options["strategy"])
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        resolver = PerfumeResolver(fetcher=fetcher)
        results = []
        for url in urls:
            try:
                perfume = resolver.resolve(url)
            except ValueError as exc:
                self.stderr.write(f"  SKIP (invalid URL): {url} ({exc})")
                continue
            results.append(PerfumeInfoSerializer(perfume).data)

        self.stdout.write(json.dumps(results, indent=2))
