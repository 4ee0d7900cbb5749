"""Slurm batch scripts for running the workshop jobs on the cluster.

The script starts a Spark standalone master on the first node of the
allocation, a worker per task on every node, submits the packaged job to that
master and tears the cluster down again. The ``#SBATCH`` format belongs to
Slurm; we only fill in the values.
"""

import os
import re
import shlex
import stat
import subprocess
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from spark_workshop.config import WorkshopSettings
from spark_workshop.errors import SlurmSubmissionError
from spark_workshop.log import get_logger

logger = get_logger(__name__)

# minutes | MM:SS | HH:MM:SS | D-HH | D-HH:MM | D-HH:MM:SS
TIME_LIMIT_RE = re.compile(r"^(?:\d+|\d+:\d{2}|\d+:\d{2}:\d{2}|\d+-\d+(?::\d{2}(?::\d{2})?)?)$")
SUBMITTED_RE = re.compile(r"Submitted batch job (\d+)")

WORKER_STARTUP_SECONDS = 10


class SlurmJobSpec(BaseModel):
    """Values that go into one batch script."""

    application: str = Field(..., min_length=1, description="Packaged job (.py, .jar or .zip)")
    application_args: List[str] = Field(default_factory=list)
    job_name: str = Field(default="spark-workshop", min_length=1)
    nodes: int = Field(default=2, ge=1)
    time_limit: str = Field(default="00:30:00")
    ntasks_per_node: int = Field(default=1, ge=1)
    cpus_per_task: int = Field(default=4, ge=1)
    reservation: Optional[str] = None
    partition: Optional[str] = None
    output: str = Field(default="spark-%j.out")
    modules: List[str] = Field(default_factory=lambda: ["spark"])
    master_port: int = Field(default=7077, ge=1, le=65535)
    executor_memory: Optional[str] = Field(default=None, pattern=r"^\d+[kKmMgGtT]?$")

    @field_validator("time_limit")
    @classmethod
    def check_time_limit(cls, value: str) -> str:
        if not TIME_LIMIT_RE.match(value):
            raise ValueError(f"{value!r} is not a Slurm time limit")
        return value

    @field_validator("job_name", "reservation", "partition", "output")
    @classmethod
    def no_whitespace(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and re.search(r"\s", value):
            raise ValueError("must not contain whitespace")
        return value

    @property
    def total_executor_cores(self) -> int:
        return self.nodes * self.ntasks_per_node * self.cpus_per_task


def spec_from_settings(settings: WorkshopSettings, application: str, **overrides) -> SlurmJobSpec:
    """Build a spec from configured defaults; keyword overrides win."""
    slurm = settings.slurm
    values = {
        "application": application,
        "job_name": slurm.job_name,
        "nodes": slurm.nodes,
        "time_limit": slurm.time_limit,
        "ntasks_per_node": slurm.ntasks_per_node,
        "cpus_per_task": slurm.cpus_per_task,
        "reservation": slurm.reservation,
        "partition": slurm.partition,
        "modules": list(slurm.modules),
        "master_port": slurm.master_port,
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    return SlurmJobSpec(**values)


def render_batch_script(spec: SlurmJobSpec) -> str:
    lines = [
        "#!/bin/bash",
        f"#SBATCH --job-name={spec.job_name}",
        f"#SBATCH --nodes={spec.nodes}",
        f"#SBATCH --time={spec.time_limit}",
        f"#SBATCH --ntasks-per-node={spec.ntasks_per_node}",
        f"#SBATCH --cpus-per-task={spec.cpus_per_task}",
        f"#SBATCH --output={spec.output}",
    ]
    if spec.reservation:
        lines.append(f"#SBATCH --reservation={spec.reservation}")
    if spec.partition:
        lines.append(f"#SBATCH --partition={spec.partition}")

    lines += ["", "set -eo pipefail", ""]
    lines += [f"module load {shlex.quote(module)}" for module in spec.modules]

    worker_memory = f" --memory {spec.executor_memory}" if spec.executor_memory else ""
    executor_memory = f" --executor-memory {spec.executor_memory}" if spec.executor_memory else ""
    app = " ".join(shlex.quote(part) for part in [spec.application, *spec.application_args])

    lines += [
        "",
        "# Standalone master on the first node of the allocation",
        'MASTER_HOST=$(scontrol show hostnames "$SLURM_JOB_NODELIST" | head -n 1)',
        f'MASTER_URL="spark://${{MASTER_HOST}}:{spec.master_port}"',
        f'"$SPARK_HOME/sbin/start-master.sh" --host "$MASTER_HOST" --port {spec.master_port}',
        "",
        "# One worker per task",
        f"srun --ntasks-per-node={spec.ntasks_per_node} --cpus-per-task={spec.cpus_per_task} \\",
        '    "$SPARK_HOME/bin/spark-class" org.apache.spark.deploy.worker.Worker \\',
        f'    --cores {spec.cpus_per_task}{worker_memory} "$MASTER_URL" &',
        "WORKERS_PID=$!",
        'trap \'kill "$WORKERS_PID" 2>/dev/null; "$SPARK_HOME/sbin/stop-master.sh"\' EXIT',
        f"sleep {WORKER_STARTUP_SECONDS}",
        "",
        f'spark-submit --master "$MASTER_URL" --total-executor-cores {spec.total_executor_cores}{executor_memory} \\',
        f"    {app}",
        "",
    ]
    return "\n".join(lines)


def write_batch_script(spec: SlurmJobSpec, path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_batch_script(spec))
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    logger.info("batch_script_written", path=str(path), nodes=spec.nodes, time_limit=spec.time_limit)
    return path


def submit(path, sbatch: str = "sbatch", dry_run: bool = False) -> Optional[str]:
    """Submit a batch script with ``sbatch`` and return the job id.

    With ``dry_run`` nothing is executed and None is returned.
    """
    command = [sbatch, os.fspath(path)]
    if dry_run:
        logger.info("sbatch_dry_run", command=" ".join(command))
        return None

    try:
        completed = subprocess.run(command, capture_output=True, text=True, check=False)
    except FileNotFoundError as exc:
        raise SlurmSubmissionError(f"{sbatch} not found; is Slurm available on this host?") from exc

    if completed.returncode != 0:
        logger.error("sbatch_failed", returncode=completed.returncode, stderr=completed.stderr.strip())
        raise SlurmSubmissionError(
            f"sbatch exited with {completed.returncode}",
            returncode=completed.returncode,
            stderr=completed.stderr,
        )

    match = SUBMITTED_RE.search(completed.stdout)
    if match is None:
        raise SlurmSubmissionError(
            f"Unexpected sbatch output: {completed.stdout.strip()!r}",
            returncode=completed.returncode,
            stderr=completed.stderr,
        )

    job_id = match.group(1)
    logger.info("job_submitted", job_id=job_id, script=os.fspath(path))
    return job_id
