# Databricks notebook source
# MAGIC %md
# MAGIC ## Running on the cluster with Slurm
# MAGIC
# MAGIC On the cluster nobody hands you a Spark cluster: you ask Slurm for nodes, start a standalone Spark master and workers inside that allocation, then `spark-submit` the job to it.
# MAGIC
# MAGIC The batch script declares:
# MAGIC - node count and wall-clock limit
# MAGIC - tasks per node (one Spark worker each) and cpus per task (cores per worker)
# MAGIC - the workshop reservation
# MAGIC
# MAGIC and then loads the `spark` module, starts the master, starts the workers with `srun` and submits `spark_workshop/job.py`.
# MAGIC
# MAGIC Run this notebook on the login node.

# COMMAND ----------

from spark_workshop.config import get_settings
from spark_workshop.slurm import spec_from_settings, render_batch_script, write_batch_script, submit

settings = get_settings()

# COMMAND ----------

job_spec = spec_from_settings(
    settings,
    "spark_workshop/job.py",
    application_args=["--output", f"{settings.data_dir}/department_report"],
    nodes=2,
    time_limit="00:30:00",
)
print(render_batch_script(job_spec))

# COMMAND ----------

script_path = write_batch_script(job_spec, "department_report.slurm")

# COMMAND ----------

# MAGIC %md
# MAGIC Flip `DRY_RUN` once the script looks right. `squeue -u $USER` shows the job; the log lands in `spark-<jobid>.out`.

# COMMAND ----------

DRY_RUN = True

job_id = submit(script_path, sbatch=settings.slurm.sbatch, dry_run=DRY_RUN)
print(f"Submitted batch job {job_id}" if job_id else f"Dry run: sbatch {script_path}")

# COMMAND ----------

# MAGIC %md
# MAGIC ### Read the report back
# MAGIC Once the job finished:

# COMMAND ----------

# from spark_workshop.session import build_spark_session
# spark = build_spark_session(app_name="Lesson05_ReadReport")
# spark.read.parquet(f"{settings.data_dir}/department_report").show()
