"""Unit tests for WorkshopSettings."""

import pytest
from pydantic import ValidationError

from spark_workshop.config import WorkshopSettings, get_settings, reset_settings


class TestWorkshopSettings:
    def test_defaults(self):
        settings = WorkshopSettings(_env_file=None)

        assert settings.master is None
        assert settings.shuffle_partitions == 20
        assert settings.slurm.nodes == 2
        assert settings.slurm.modules == ["spark"]
        assert settings.slurm.reservation is None

    def test_spark_conf(self):
        settings = WorkshopSettings(shuffle_partitions=8, max_partition_bytes="64m", _env_file=None)

        assert settings.spark_conf == {
            "spark.sql.shuffle.partitions": "8",
            "spark.sql.files.maxPartitionBytes": "64m",
        }

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SPARK_WORKSHOP_MASTER", "spark://head:7077")
        monkeypatch.setenv("SPARK_WORKSHOP_SLURM_NODES", "4")
        monkeypatch.setenv("SPARK_WORKSHOP_SLURM_RESERVATION", "workshop")
        monkeypatch.setenv("SPARK_WORKSHOP_SLURM_MODULES", '["java/17", "spark/3.5"]')

        settings = WorkshopSettings(_env_file=None)

        assert settings.master == "spark://head:7077"
        assert settings.slurm.nodes == 4
        assert settings.slurm.reservation == "workshop"
        assert settings.slurm.modules == ["java/17", "spark/3.5"]

    def test_invalid_partitions_rejected(self):
        with pytest.raises(ValidationError):
            WorkshopSettings(shuffle_partitions=0, _env_file=None)

    def test_env_file_feeds_nested_slurm_settings(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text(
            "SPARK_WORKSHOP_DATA_DIR=/data/ws\nSPARK_WORKSHOP_SLURM_RESERVATION=workshop\n"
        )

        settings = WorkshopSettings()

        assert settings.data_dir == "/data/ws"
        assert settings.slurm.reservation == "workshop"

    def test_log_level_is_case_insensitive(self):
        assert WorkshopSettings(log_level="debug", _env_file=None).log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            WorkshopSettings(log_level="verbose", _env_file=None)


def test_get_settings_is_cached():
    first = get_settings()
    assert get_settings() is first

    reset_settings()
    assert get_settings() is not first
