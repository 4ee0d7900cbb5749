"""Dataset/DataFrame API demonstrations.

Each helper is a single PySpark call chain; the lessons call these so the
notebooks and the tests exercise the same code. PySpark has no typed
``Dataset``, so ``toDS`` and ``joinWith`` are expressed on DataFrames:

- ``to_dataset`` builds a frame from records and a schema
- ``join_with`` keeps each side of the join as its own struct column
"""

import contextlib
import dataclasses
import io
from functools import reduce
from typing import Iterable, Optional

from pyspark.sql import Column, DataFrame, Row, SparkSession
from pyspark.sql import functions as F
from pyspark.sql.types import StructType

from spark_workshop.errors import DatasetOperationError
from spark_workshop.records import PERSON_SCHEMA, parse_person_line

_JOIN_TYPES = {
    "inner": "inner",
    "cross": "cross",
    "outer": "full_outer",
    "full": "full_outer",
    "full_outer": "full_outer",
    "left": "left_outer",
    "left_outer": "left_outer",
    "right": "right_outer",
    "right_outer": "right_outer",
}

_LEFT_PRESENT = "__left_present"
_RIGHT_PRESENT = "__right_present"


def _as_tuple(record):
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return dataclasses.astuple(record)
    return record


def _as_row(record):
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return Row(**dataclasses.asdict(record))
    return record


def to_dataset(spark: SparkSession, records: Iterable, schema: StructType) -> DataFrame:
    """Build a DataFrame from dataclass records or plain tuples."""
    return spark.createDataFrame([_as_tuple(r) for r in records], schema)


def union_datasets(*frames: DataFrame, by_name: bool = False) -> DataFrame:
    """Union two or more frames, keeping duplicates (``UNION ALL``).

    Positional by default, like ``Dataset.union``; ``by_name`` matches columns
    by name instead.
    """
    if len(frames) < 2:
        raise DatasetOperationError(f"union needs at least two frames, got {len(frames)}")
    if by_name:
        return reduce(lambda acc, df: acc.unionByName(df), frames)
    return reduce(lambda acc, df: acc.union(df), frames)


def distinct_union(*frames: DataFrame) -> DataFrame:
    return union_datasets(*frames).distinct()


def join_with(left: DataFrame, right: DataFrame, condition: Column, how: str = "inner") -> DataFrame:
    """Join two frames keeping each side intact.

    The result has two struct columns, ``_1`` for the left row and ``_2`` for
    the right row. On outer joins the missing side is null rather than a
    struct of nulls.
    """
    join_type = _JOIN_TYPES.get(how.lower())
    if join_type is None:
        raise DatasetOperationError(
            f"Unsupported join type {how!r}; expected one of {sorted(_JOIN_TYPES)}"
        )

    marked_left = left.withColumn(_LEFT_PRESENT, F.lit(True))
    marked_right = right.withColumn(_RIGHT_PRESENT, F.lit(True))
    joined = marked_left.join(marked_right, condition, join_type)

    left_struct = F.struct(*[marked_left[c] for c in left.columns])
    right_struct = F.struct(*[marked_right[c] for c in right.columns])
    return joined.select(
        F.when(F.col(_LEFT_PRESENT).isNotNull(), left_struct).alias("_1"),
        F.when(F.col(_RIGHT_PRESENT).isNotNull(), right_struct).alias("_2"),
    )


def join_employees_departments(employees: DataFrame, departments: DataFrame, how: str = "inner") -> DataFrame:
    """Flat employee/department join on ``departmentId == id``."""
    join_type = _JOIN_TYPES.get(how.lower())
    if join_type is None:
        raise DatasetOperationError(f"Unsupported join type {how!r}")
    return (
        employees
        .join(departments, employees["departmentId"] == departments["id"], join_type)
        .select(
            employees["name"],
            employees["age"],
            employees["departmentId"],
            employees["salary"],
            departments["name"].alias("departmentName"),
        )
    )


def group_by_count(frame: DataFrame, *columns: str) -> DataFrame:
    if not columns:
        raise DatasetOperationError("group_by_count needs at least one column")
    return frame.groupBy(*columns).count().orderBy(*columns)


def salary_summary(employees: DataFrame) -> DataFrame:
    """Per-department headcount, salary and age figures."""
    return (
        employees
        .groupBy("departmentId")
        .agg(
            F.count(F.lit(1)).alias("headcount"),
            F.sum("salary").alias("totalSalary"),
            F.avg("salary").alias("avgSalary"),
            F.max("salary").alias("maxSalary"),
            F.min("age").alias("minAge"),
            F.max("age").alias("maxAge"),
        )
        .orderBy("departmentId")
    )


def average_age(frame: DataFrame) -> Optional[float]:
    value = frame.agg(F.avg("age")).first()[0]
    return None if value is None else float(value)


def rdd_to_dataset(spark: SparkSession, rdd, schema: Optional[StructType] = None) -> DataFrame:
    """Convert an RDD of Rows, tuples or dataclass records into a DataFrame.

    Without a schema Spark infers one, which needs Rows (dataclass records are
    turned into Rows first).
    """
    if schema is not None:
        return spark.createDataFrame(rdd.map(_as_tuple), schema)
    return spark.createDataFrame(rdd.map(_as_row))


def lines_to_people(spark: SparkSession, lines: Iterable[str]) -> DataFrame:
    """The text-file-to-Dataset exercise: ``"name,age"`` lines to a Person frame.

    Lines are parsed on the executors, so a malformed line only fails once an
    action runs.
    """
    rdd = spark.sparkContext.parallelize(list(lines)).map(parse_person_line)
    return rdd_to_dataset(spark, rdd, PERSON_SCHEMA)


def explain_plan(frame: DataFrame, extended: bool = True) -> str:
    """Return the text ``explain`` would print."""
    buffer = io.StringIO()
    with contextlib.redirect_stdout(buffer):
        frame.explain(mode="extended" if extended else "simple")
    return buffer.getvalue()
