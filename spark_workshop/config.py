"""Workshop configuration.

Values come from environment variables (``SPARK_WORKSHOP_*``) or a local
``.env`` file, so the same notebooks run on a laptop and on the cluster.
"""

from typing import Dict, List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SlurmSettings(BaseSettings):
    """Defaults for generated Slurm batch scripts."""

    job_name: str = Field(default="spark-workshop", description="Slurm job name")
    nodes: int = Field(default=2, ge=1, description="Number of nodes to allocate")
    time_limit: str = Field(default="00:30:00", description="Wall-clock limit")
    ntasks_per_node: int = Field(default=1, ge=1, description="Tasks per node")
    cpus_per_task: int = Field(default=4, ge=1, description="CPUs per task")
    reservation: Optional[str] = Field(default=None, description="Reservation name")
    partition: Optional[str] = Field(default=None, description="Slurm partition")
    modules: List[str] = Field(default_factory=lambda: ["spark"], description="Modules to load")
    master_port: int = Field(default=7077, description="Standalone master port")
    sbatch: str = Field(default="sbatch", description="sbatch executable")

    model_config = SettingsConfigDict(
        env_prefix="SPARK_WORKSHOP_SLURM_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


class WorkshopSettings(BaseSettings):
    """Main workshop configuration."""

    slurm: SlurmSettings = Field(default_factory=SlurmSettings)

    app_name: str = Field(default="SparkDatasetWorkshop", description="Spark application name")
    # None leaves it to spark-submit --master (local[*] when run directly)
    master: Optional[str] = Field(default=None, description="Spark master URL")
    shuffle_partitions: int = Field(default=20, ge=1, description="spark.sql.shuffle.partitions")
    max_partition_bytes: str = Field(default="256m", description="spark.sql.files.maxPartitionBytes")
    data_dir: str = Field(default="/tmp/spark_workshop", description="Where lessons write output")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")

    model_config = SettingsConfigDict(
        env_prefix="SPARK_WORKSHOP_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @property
    def spark_conf(self) -> Dict[str, str]:
        return {
            "spark.sql.shuffle.partitions": str(self.shuffle_partitions),
            "spark.sql.files.maxPartitionBytes": self.max_partition_bytes,
        }


_settings_instance: WorkshopSettings | None = None


def get_settings() -> WorkshopSettings:
    """Get or create the settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = WorkshopSettings()
    return _settings_instance


def reset_settings() -> None:
    global _settings_instance
    _settings_instance = None
