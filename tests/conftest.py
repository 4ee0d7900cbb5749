"""Shared fixtures."""

import os
import shutil

import pytest

from spark_workshop.config import reset_settings


def _java_available() -> bool:
    java_home = os.environ.get("JAVA_HOME")
    if java_home and os.access(os.path.join(java_home, "bin", "java"), os.X_OK):
        return True
    return shutil.which("java") is not None


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Each test sees settings built from its own environment."""
    for key in list(os.environ):
        if key.startswith("SPARK_WORKSHOP_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(scope="session")
def spark():
    if not _java_available():
        pytest.skip("Spark tests need a Java runtime")

    from spark_workshop.config import WorkshopSettings
    from spark_workshop.session import build_spark_session

    settings = WorkshopSettings(master="local[1]", shuffle_partitions=2, _env_file=None)
    session = build_spark_session(
        app_name="spark-workshop-tests",
        conf={"spark.ui.enabled": "false", "spark.sql.session.timeZone": "UTC"},
        settings=settings,
    )
    yield session
    session.stop()


@pytest.fixture
def shared_spark_for_commands(spark, monkeypatch):
    """Let commands that build and stop their own session run on the shared one."""
    monkeypatch.setenv("SPARK_WORKSHOP_SHUFFLE_PARTITIONS", spark.conf.get("spark.sql.shuffle.partitions"))
    monkeypatch.setenv("SPARK_WORKSHOP_MAX_PARTITION_BYTES", spark.conf.get("spark.sql.files.maxPartitionBytes"))
    monkeypatch.setattr("spark_workshop.session.stop_spark_session", lambda session: None)
    monkeypatch.setattr("spark_workshop.job.stop_spark_session", lambda session: None)
    return spark
