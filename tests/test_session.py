"""Tests for session creation."""

import pytest

from spark_workshop.config import WorkshopSettings
from spark_workshop.session import apply_conf, build_spark_session

pytestmark = pytest.mark.spark


def test_fixture_session_uses_settings(spark):
    assert spark.sparkContext.master == "local[1]"
    assert spark.conf.get("spark.sql.shuffle.partitions") == "2"


def test_build_reuses_active_session_and_applies_conf(spark):
    settings = WorkshopSettings(shuffle_partitions=3, _env_file=None)
    previous = {
        key: spark.conf.get(key) for key in ("spark.sql.shuffle.partitions", "spark.sql.files.maxPartitionBytes")
    }

    session = build_spark_session(settings=settings, conf={"spark.sql.files.maxPartitionBytes": "32m"})
    try:
        assert session.sparkContext is spark.sparkContext
        assert session.conf.get("spark.sql.shuffle.partitions") == "3"
        assert session.conf.get("spark.sql.files.maxPartitionBytes") == "32m"
    finally:
        apply_conf(spark, previous)


def test_apply_conf_returns_previous_values(spark):
    previous = apply_conf(spark, {"spark.sql.shuffle.partitions": "5"})
    try:
        assert previous == {"spark.sql.shuffle.partitions": "2"}
        assert spark.conf.get("spark.sql.shuffle.partitions") == "5"
    finally:
        apply_conf(spark, previous)
