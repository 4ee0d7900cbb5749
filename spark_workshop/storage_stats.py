"""Look at what a write actually produced on disk."""

import os
from typing import Dict, List, Tuple, Union

import inflect
import numpy as np
from pyspark.sql import SparkSession

from spark_workshop.errors import DatasetOperationError

MB = 1024 ** 2


def collect_file_sizes(path: str) -> List[int]:
    """Sizes in bytes of the data files under ``path``.

    Spark bookkeeping files (``_SUCCESS``, ``_committed_*``, ``.crc``) are
    skipped.
    """
    if not os.path.isdir(path):
        raise DatasetOperationError(f"{path} is not a directory")

    sizes = []
    for root, dirs, files in os.walk(path):
        dirs[:] = [d for d in dirs if not d.startswith(("_", "."))]
        for name in files:
            if name.startswith(("_", ".")) or name.endswith(".crc"):
                continue
            sizes.append(os.path.getsize(os.path.join(root, name)))
    return sizes


def file_size_stats(sizes: List[int]) -> Dict[str, Union[int, float]]:
    if not sizes:
        raise DatasetOperationError("no data files to summarise")
    file_sizes = np.asarray(sizes, dtype=float)
    return {
        "Total files": len(sizes),
        "Total size (MB)": float(file_sizes.sum() / MB),
        "Median file size (MB)": float(np.median(file_sizes) / MB),
        "P10 file size (MB)": float(np.percentile(file_sizes, 10) / MB),
        "P90 file size (MB)": float(np.percentile(file_sizes, 90) / MB),
        "P99 file size (MB)": float(np.percentile(file_sizes, 99) / MB),
    }


def analyze_output(spark: SparkSession, path: str, fmt: str = "parquet", count_records: bool = False) -> List[Tuple[str, object]]:
    """Metric/value pairs describing the files written under ``path``."""
    stats_list = []

    if count_records:
        p = inflect.engine()
        record_count = spark.read.format(fmt).load(path).count()
        record_count_in_words = p.number_to_words(record_count)
        stats_list.append(("Record count", f"{record_count} ({record_count_in_words})"))

    stats_list.extend(file_size_stats(collect_file_sizes(path)).items())
    return stats_list
