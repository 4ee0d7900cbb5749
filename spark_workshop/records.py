"""Example records used throughout the lessons.

A Person, an Employee and a Department. They only exist to have something to
put into a Dataset.
"""

from dataclasses import dataclass

from pyspark.sql.types import DoubleType, IntegerType, StringType, StructField, StructType

from spark_workshop.errors import RecordParseError


@dataclass(frozen=True)
class Person:
    name: str
    age: int


@dataclass(frozen=True)
class Employee:
    name: str
    age: int
    departmentId: int
    salary: float


@dataclass(frozen=True)
class Department:
    id: int
    name: str


PERSON_SCHEMA = StructType([
    StructField("name", StringType(), True),
    StructField("age", IntegerType(), True),
])

EMPLOYEE_SCHEMA = StructType([
    StructField("name", StringType(), True),
    StructField("age", IntegerType(), True),
    StructField("departmentId", IntegerType(), True),
    StructField("salary", DoubleType(), True),
])

DEPARTMENT_SCHEMA = StructType([
    StructField("id", IntegerType(), False),
    StructField("name", StringType(), True),
])


def sample_people():
    return [
        Person("Michael", 29),
        Person("Andy", 30),
        Person("Justin", 19),
        Person("Berta", 42),
    ]


def sample_departments():
    return [
        Department(1, "Engineering"),
        Department(2, "Sales"),
        Department(3, "Marketing"),
    ]


def sample_employees():
    """Employees of the sample departments.

    ``Zoe`` points at department 4, which does not exist, so inner and outer
    joins give different answers.
    """
    return [
        Employee("Michael", 29, 1, 3000.0),
        Employee("Andy", 30, 2, 4500.0),
        Employee("Justin", 19, 1, 3500.0),
        Employee("Berta", 42, 2, 4000.0),
        Employee("Lena", 35, 3, 5200.0),
        Employee("Zoe", 27, 4, 3900.0),
    ]


def parse_person_line(line: str) -> Person:
    """Parse ``"name,age"`` into a Person."""
    parts = [part.strip() for part in line.split(",")]
    if len(parts) != 2:
        raise RecordParseError(line, f"expected 2 fields, got {len(parts)}")
    name, age = parts
    if not name:
        raise RecordParseError(line, "empty name")
    try:
        return Person(name, int(age))
    except ValueError:
        raise RecordParseError(line, f"age {age!r} is not an integer") from None
