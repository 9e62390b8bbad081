"""Stress test for the bucket: producers push values while a consumer drains them."""

from __future__ import annotations

import argparse
import logging
import os
import random
import sys
import threading
import time
from collections.abc import Sequence
from typing import Optional

from .bucket import AtomicBucket
from .registry import AtomicCounter

__all__ = ["COUNTER_LOOP", "run_producer", "run_consumer", "main"]

logger = logging.getLogger(__name__)

COUNTER_LOOP = 1024
_BATCH = 32
_DEFAULT_DURATION = 60


class _UsageError(Exception):
    """Raised when the command line cannot be parsed."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise _UsageError(message)


def _build_parser(program: str) -> _Parser:
    parser = _Parser(prog=program, usage=f"{program} [options]", add_help=False)
    parser.add_argument(
        "-d", "--duration", metavar="INTEGER",
        help="number of seconds to run the crusher test",
    )
    parser.add_argument("-p", "--producers", metavar="INTEGER", help="number of producers")
    parser.add_argument("-h", "--help", action="store_true", help="print this help menu")
    return parser


def run_producer(
    done: threading.Event,
    counter: AtomicCounter,
    total: AtomicCounter,
    bucket: AtomicBucket[int],
) -> None:
    """Push random values in batches until ``done`` is set, reporting every 1024 values."""
    counter_local = 0
    total_local = 0
    rng = random.Random()

    while True:
        if counter_local == COUNTER_LOOP:
            total.increment(total_local)
            counter.increment(counter_local)
            total_local = 0
            counter_local = 0
            if done.is_set():
                break

        value = rng.randrange(1024)
        for _ in range(_BATCH):
            bucket.push(value)
        total_local += value * _BATCH
        counter_local += _BATCH

    logger.info("producer finished")


def run_consumer(
    done: threading.Event, bucket: AtomicBucket[int], interval: float = 1.0
) -> tuple[int, int]:
    """Drain the bucket every ``interval`` seconds; return ``(total, count)`` consumed.

    Stops once ``done`` is set and a drain finds the bucket empty.
    """
    counter = 0
    total = 0

    while True:
        is_done = done.is_set()
        start = time.monotonic()
        seen = [0, 0]

        def observe(values: Sequence[int]) -> None:
            seen[0] += len(values)
            seen[1] += sum(values)

        logger.debug("clearing")
        bucket.clear_with(observe)
        delta = time.monotonic() - start

        local_counter, local_total = seen
        if is_done and local_counter == 0:
            break

        total += local_total
        counter += local_counter

        remaining = interval - delta
        if remaining > 0:
            time.sleep(remaining)

    logger.info("consumer finished")
    return total, counter


def _parse_duration(text: Optional[str]) -> int:
    try:
        seconds = int(text if text is not None else str(_DEFAULT_DURATION))
    except ValueError:
        return _DEFAULT_DURATION
    return seconds if seconds >= 0 else _DEFAULT_DURATION


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the bucket crusher from the command line."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    if argv is None:
        argv = sys.argv[1:]
    program = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "bucket-crusher"
    parser = _build_parser(program)

    try:
        args = parser.parse_args(list(argv))
    except _UsageError as exc:
        logger.error("Failed to parse command line args: %s", exc)
        return 0

    if args.help:
        print(parser.format_help(), end="")
        return 0

    logger.info("bucket-crusher")

    duration = _parse_duration(args.duration)
    producers = int(args.producers if args.producers is not None else "1")

    logger.info("duration: %ss", duration)
    logger.info("producers: %d", producers)

    producer_done = threading.Event()
    producer_counter = AtomicCounter()
    producer_total = AtomicCounter()
    bucket: AtomicBucket[int] = AtomicBucket()

    consumer_done = threading.Event()
    consumer_result: list[tuple[int, int]] = []
    consumer = threading.Thread(
        target=lambda: consumer_result.append(run_consumer(consumer_done, bucket)),
        name="consumer",
    )
    consumer.start()

    producer_threads = [
        threading.Thread(
            target=run_producer,
            args=(producer_done, producer_counter, producer_total, bucket),
            name=f"producer-{index}",
        )
        for index in range(producers)
    ]
    for thread in producer_threads:
        thread.start()

    time.sleep(duration)

    producer_done.set()
    for thread in producer_threads:
        thread.join()

    consumer_done.set()
    consumer.join()

    if not consumer_result:
        logger.error("encountered problem for consumer")
        return 0

    ctotal, ccounter = consumer_result[0]
    logger.info(
        "Producer(s) reported: %d total, with %d values produced",
        producer_total.load(),
        producer_counter.load(),
    )
    logger.info("Consumer reported:    %d total, with %d values consumed", ctotal, ccounter)
    return 0


if __name__ == "__main__":
    sys.exit(main())