#!/usr/bin/env python3
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from dogpiclib.config import DEFAULT_API_BASE, DEFAULT_USER_AGENT, PipelineConfig
from dogpiclib.engine import DogPicPipeline, get_dog_pics
from dogpiclib.metrics import log_summary
from dogpiclib.net import HttpClient
from dogpiclib.prometheus_exporter import PrometheusExporter


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch random dog images for the breed named in a file.")
    parser.add_argument("--input", dest="input_path", default="dog.txt", help="File holding the breed name.")
    parser.add_argument("--out", dest="output_path", default="dog-img.txt", help="File to write image URLs to.")
    parser.add_argument("--api-base", default=DEFAULT_API_BASE, help="Base URL of the dog API.")
    parser.add_argument("--timeout", type=float, default=None, help="HTTP read timeout in seconds (default: none).")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header to send.")
    parser.add_argument(
        "--mode",
        choices=["parallel", "single"],
        default="parallel",
        help="Fetch three images concurrently, or a single one.",
    )
    parser.add_argument("--metrics-file", dest="metrics_path", default=None, help="Write Prometheus metrics here.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase logging verbosity.")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> PipelineConfig:
    return PipelineConfig(
        input_path=args.input_path,
        output_path=args.output_path,
        api_base=args.api_base,
        request_timeout=max(1.0, args.timeout) if args.timeout is not None else None,
        user_agent=args.user_agent,
        metrics_path=args.metrics_path,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    log_level = logging.INFO
    if args.verbose >= 1:
        log_level = logging.DEBUG
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stdout,
    )

    config = build_config(args)
    http = HttpClient(config.user_agent, config.request_timeout, config.max_connections)
    pipeline = DogPicPipeline(config, http_client=http)

    try:
        ok = asyncio.run(get_dog_pics(pipeline, mode=args.mode))
    finally:
        http.close()
    log_summary(pipeline.metrics, logging.debug)

    if config.metrics_path:
        PrometheusExporter(pipeline.metrics, config.metrics_path).write()
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
