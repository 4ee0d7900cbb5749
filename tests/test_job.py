"""Tests for the packaged department report job."""

import pytest

from spark_workshop.datasets import to_dataset
from spark_workshop.job import department_report, main, run
from spark_workshop.records import EMPLOYEE_SCHEMA, Employee

pytestmark = pytest.mark.spark


def test_department_report_names_departments(spark):
    employees = to_dataset(spark, [Employee("Ada", 36, 1, 10.0), Employee("Zoe", 27, 4, 20.0)], EMPLOYEE_SCHEMA)

    report = {r["departmentId"]: r["departmentName"] for r in department_report(spark, employees).collect()}

    assert report == {1: "Engineering", 4: "unknown"}


def test_run_with_sample_records(spark, tmp_path):
    output = str(tmp_path / "report")

    run(spark, output)

    written = spark.read.parquet(output).orderBy("departmentId").collect()
    assert [r["departmentId"] for r in written] == [1, 2, 3, 4]
    assert written[0]["headcount"] == 2


def test_run_reads_input(spark, tmp_path):
    source = str(tmp_path / "employees")
    to_dataset(spark, [Employee("Ada", 36, 2, 10.0)], EMPLOYEE_SCHEMA).write.parquet(source)

    report = run(spark, str(tmp_path / "report"), input_path=source)

    assert [(r["departmentName"], r["headcount"]) for r in report.collect()] == [("Sales", 1)]


def test_run_reads_csv_with_header(spark, tmp_path):
    source = str(tmp_path / "employees_csv")
    to_dataset(spark, [Employee("Ada", 36, 2, 10.0)], EMPLOYEE_SCHEMA).write.option("header", True).csv(source)

    report = run(spark, str(tmp_path / "report"), input_path=source, fmt="csv")

    assert [(r["departmentName"], r["headcount"], r["totalSalary"]) for r in report.collect()] == [("Sales", 1, 10.0)]


def test_main_writes_report(shared_spark_for_commands, tmp_path):
    output = str(tmp_path / "report")

    assert main(["--output", output]) == 0

    written = shared_spark_for_commands.read.parquet(output).orderBy("departmentId").collect()
    assert [r["departmentName"] for r in written][-1] == "unknown"
    assert len(written) == 4
