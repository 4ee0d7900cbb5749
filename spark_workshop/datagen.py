"""Synthetic employees for the larger lessons.

``dbldatagen`` generates the numeric columns; a vectorized (pandas) UDF fills
in realistic names with Faker.
"""

from typing import Iterable, Optional, Union

import dbldatagen as dg
import pandas as pd
from faker import Faker
from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.functions import pandas_udf
from pyspark.sql.types import DoubleType, IntegerType, LongType, StringType, StructField, StructType

from spark_workshop.errors import DatasetOperationError
from spark_workshop.log import get_logger
from spark_workshop.records import Department

logger = get_logger(__name__)

MIN_AGE = 22
MAX_AGE = 65
MIN_SALARY = 40_000.0
MAX_SALARY = 250_000.0

employees_schema = StructType([
    StructField("employee_id", LongType(), False),
    StructField("age", IntegerType(), False),
    StructField("departmentId", IntegerType(), False),
    StructField("salary", DoubleType(), False),
])


def _name_udf(seed: Optional[int]):
    @pandas_udf(StringType())
    def fake_names(employee_ids: pd.Series) -> pd.Series:
        fake = Faker()
        if seed is not None:
            # one deterministic stream per batch, keyed on its first id
            fake.seed_instance(seed + int(employee_ids.iloc[0]) if len(employee_ids) else seed)
        return pd.Series([fake.name() for _ in range(len(employee_ids))])

    return fake_names


def generate_employees(
    spark: SparkSession,
    rows: int,
    departments: Iterable[Union[Department, int]],
    partitions: Optional[int] = None,
    seed: Optional[int] = None,
) -> DataFrame:
    """Generate ``rows`` employees spread over the given departments.

    ``employee_id`` runs from 1 to ``rows``; ages, department ids and salaries
    are random.
    """
    if rows < 1:
        raise DatasetOperationError(f"rows must be at least 1, got {rows}")
    department_ids = [d.id if isinstance(d, Department) else int(d) for d in departments]
    if not department_ids:
        raise DatasetOperationError("at least one department is needed")

    employees_dataspec = (
        dg.DataGenerator(
            spark,
            name="employees_data",
            rows=rows,
            partitions=partitions or spark.sparkContext.defaultParallelism,
            randomSeedMethod="hash_fieldname" if seed is not None else None,
            randomSeed=seed,
        )
        .withSchema(employees_schema)
        .withColumnSpec("employee_id", minValue=1, maxValue=rows)
        .withColumnSpec("age", minValue=MIN_AGE, maxValue=MAX_AGE, random=True)
        .withColumnSpec("departmentId", values=department_ids, random=True)
        .withColumnSpec("salary", minValue=MIN_SALARY, maxValue=MAX_SALARY, random=True)
    )

    employees_df = employees_dataspec.build(withStreaming=False)
    employees_df = employees_df.withColumn("name", _name_udf(seed)(employees_df.employee_id))

    logger.info("employees_generated", rows=rows, departments=len(department_ids))
    return employees_df.select("employee_id", "name", "age", "departmentId", "salary")


def write_dataset(frame: DataFrame, path: str, fmt: str = "parquet", mode: str = "overwrite") -> str:
    frame.write.format(fmt).mode(mode).save(path)
    logger.info("dataset_written", path=path, format=fmt, mode=mode)
    return path
