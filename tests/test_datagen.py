"""Tests for synthetic employee generation."""

import pytest

from spark_workshop.datagen import MAX_AGE, MAX_SALARY, MIN_AGE, MIN_SALARY, generate_employees, write_dataset
from spark_workshop.errors import DatasetOperationError
from spark_workshop.records import sample_departments

pytestmark = pytest.mark.spark


@pytest.fixture(scope="module")
def generated(spark):
    return generate_employees(spark, 200, sample_departments(), partitions=2, seed=42).cache()


def test_columns(generated):
    assert generated.columns == ["employee_id", "name", "age", "departmentId", "salary"]


def test_row_count_and_unique_ids(generated):
    assert generated.count() == 200
    assert generated.select("employee_id").distinct().count() == 200


def test_value_ranges(generated):
    stats = generated.selectExpr(
        "min(age)", "max(age)", "min(salary)", "max(salary)", "count(name)", "min(employee_id)", "max(employee_id)"
    ).first()

    assert MIN_AGE <= stats[0] <= stats[1] <= MAX_AGE
    assert MIN_SALARY <= stats[2] <= stats[3] <= MAX_SALARY
    assert stats[4] == 200
    assert (stats[5], stats[6]) == (1, 200)


def test_departments_come_from_input(generated):
    ids = {r["departmentId"] for r in generated.select("departmentId").distinct().collect()}

    assert ids <= {d.id for d in sample_departments()}


def test_accepts_plain_ids(spark):
    df = generate_employees(spark, 10, [7], partitions=1)

    assert {r["departmentId"] for r in df.collect()} == {7}


def test_rejects_empty_input(spark):
    with pytest.raises(DatasetOperationError):
        generate_employees(spark, 0, sample_departments())
    with pytest.raises(DatasetOperationError):
        generate_employees(spark, 10, [])


def test_write_dataset(spark, tmp_path, generated):
    path = write_dataset(generated, str(tmp_path / "employees"))

    assert spark.read.parquet(path).count() == 200
