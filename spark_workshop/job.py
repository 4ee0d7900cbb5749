"""The packaged job the Slurm script hands to spark-submit.

Reads employees (or falls back to the sample records), summarises salaries per
department and writes the result.

    spark-submit spark_workshop/job.py --input /data/employees --output /data/summary
"""

import argparse
import sys
from typing import List, Optional

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql import functions as F

from spark_workshop.config import get_settings
from spark_workshop.datagen import write_dataset
from spark_workshop.datasets import salary_summary, to_dataset
from spark_workshop.log import configure_logging, get_logger
from spark_workshop.records import DEPARTMENT_SCHEMA, EMPLOYEE_SCHEMA, sample_departments, sample_employees
from spark_workshop.session import build_spark_session, stop_spark_session

logger = get_logger(__name__)


def department_report(spark: SparkSession, employees: DataFrame) -> DataFrame:
    departments = to_dataset(spark, sample_departments(), DEPARTMENT_SCHEMA)
    summary = salary_summary(employees)
    return (
        summary
        .join(departments, summary["departmentId"] == departments["id"], "left_outer")
        .select(summary["*"], F.coalesce(departments["name"], F.lit("unknown")).alias("departmentName"))
        .orderBy("departmentId")
    )


def run(spark: SparkSession, output_path: str, input_path: Optional[str] = None, fmt: str = "parquet") -> DataFrame:
    if input_path:
        reader = spark.read.format(fmt)
        if fmt == "csv":
            # csv carries no schema of its own
            reader = reader.schema(EMPLOYEE_SCHEMA).option("header", True)
        employees = reader.load(input_path)
    else:
        employees = to_dataset(spark, sample_employees(), EMPLOYEE_SCHEMA)

    report = department_report(spark, employees)
    write_dataset(report, output_path, fmt=fmt)
    return report


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Per-department salary report.")
    parser.add_argument("--input", help="Employees dataset; the sample records are used when omitted.")
    parser.add_argument("--output", required=True, help="Where to write the report.")
    parser.add_argument("--format", default="parquet", help="Input/output format.")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)

    spark = build_spark_session(app_name="DepartmentReport")
    try:
        report = run(spark, args.output, args.input, args.format)
        logger.info("report_written", output=args.output, departments=report.count())
    finally:
        stop_spark_session(spark)
    return 0


if __name__ == "__main__":
    sys.exit(main())
