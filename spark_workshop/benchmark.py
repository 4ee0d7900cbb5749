"""Timing different ways of expressing the same query."""

import time
from dataclasses import dataclass
from typing import List, Mapping

from pyspark.sql import DataFrame

from spark_workshop.log import get_logger

logger = get_logger(__name__)


@dataclass
class BenchmarkResult:
    name: str
    seconds: float


def bench(name: str, transformed_df: DataFrame) -> BenchmarkResult:
    """Run the whole plan through the ``noop`` sink and time it."""
    t0 = time.perf_counter()
    transformed_df.write.format("noop").mode("overwrite").save()
    result = BenchmarkResult(name, time.perf_counter() - t0)
    logger.debug("benchmark_finished", name=name, seconds=round(result.seconds, 3))
    return result


def run_benchmarks(pipelines: Mapping[str, DataFrame]) -> List[BenchmarkResult]:
    return [bench(name, p_df) for name, p_df in pipelines.items()]


def format_results(results: List[BenchmarkResult]) -> str:
    lines = [
        "=== BENCHMARK RESULTS ===",
        f"{'Variant':30s} | {'Seconds':>7s}",
        "-" * 42,
    ]
    for result in results:
        lines.append(f"{result.name:30s} | {result.seconds:7.3f}")
    return "\n".join(lines)
