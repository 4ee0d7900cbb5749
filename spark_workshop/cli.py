"""``spark-workshop`` command line.

    spark-workshop check-env
    spark-workshop slurm render --application job.py --nodes 4 --output job.slurm
    spark-workshop slurm submit --application job.py --dry-run
    spark-workshop demo
    spark-workshop generate --rows 100000 --path /tmp/spark_workshop/employees
"""

import argparse
import os
import sys
from typing import List, Optional

from pydantic import ValidationError

from spark_workshop.config import get_settings
from spark_workshop.errors import WorkshopError
from spark_workshop.log import configure_logging


def _add_slurm_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--application", required=True, help="Packaged job to spark-submit.")
    parser.add_argument("--job-name", help="Slurm job name.")
    parser.add_argument("--nodes", type=int, help="Number of nodes.")
    parser.add_argument("--time", dest="time_limit", help="Wall-clock limit, e.g. 00:30:00.")
    parser.add_argument("--ntasks-per-node", type=int, help="Tasks (workers) per node.")
    parser.add_argument("--cpus-per-task", type=int, help="CPUs per task.")
    parser.add_argument("--reservation", help="Reservation name.")
    parser.add_argument("--partition", help="Slurm partition.")
    parser.add_argument("--executor-memory", help="Memory per worker/executor, e.g. 4G.")
    parser.add_argument("--output", help="Where to write the script.")
    parser.add_argument("app_args", nargs="*", help="Arguments passed to the application.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="spark-workshop", description="Spark Dataset workshop helpers.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("check-env", help="Verify the local setup.")

    slurm_parser = subparsers.add_parser("slurm", help="Render or submit the Slurm batch script.")
    slurm_sub = slurm_parser.add_subparsers(dest="slurm_command", required=True)
    render_parser = slurm_sub.add_parser("render", help="Print or write the batch script.")
    _add_slurm_arguments(render_parser)
    submit_parser = slurm_sub.add_parser("submit", help="Write the batch script and sbatch it.")
    _add_slurm_arguments(submit_parser)
    submit_parser.add_argument("--dry-run", action="store_true", help="Write the script but do not submit.")

    subparsers.add_parser("demo", help="Run the union/join/groupBy/RDD examples locally.")

    generate_parser = subparsers.add_parser("generate", help="Generate synthetic employees and write them out.")
    generate_parser.add_argument("--rows", type=int, default=100_000, help="Number of employees.")
    generate_parser.add_argument("--path", help="Output directory (defaults to <data_dir>/employees).")
    generate_parser.add_argument("--seed", type=int, help="Random seed.")

    return parser


def _spec_from_args(settings, args):
    from spark_workshop.slurm import spec_from_settings

    return spec_from_settings(
        settings,
        args.application,
        application_args=args.app_args or None,
        job_name=args.job_name,
        nodes=args.nodes,
        time_limit=args.time_limit,
        ntasks_per_node=args.ntasks_per_node,
        cpus_per_task=args.cpus_per_task,
        reservation=args.reservation,
        partition=args.partition,
        executor_memory=args.executor_memory,
    )


def cmd_check_env(settings, args) -> int:
    from spark_workshop.env_check import check_environment

    results = check_environment()
    for result in results:
        print(f"[{'OK' if result.ok else 'FAIL':4s}] {result.name:12s} {result.detail}")
    return 0 if all(result.ok for result in results) else 1


def cmd_slurm(settings, args) -> int:
    from spark_workshop.slurm import render_batch_script, submit, write_batch_script

    spec = _spec_from_args(settings, args)

    if args.slurm_command == "render":
        if args.output:
            write_batch_script(spec, args.output)
            print(f"Wrote {args.output}")
        else:
            print(render_batch_script(spec), end="")
        return 0

    script_path = write_batch_script(spec, args.output or f"{spec.job_name}.slurm")
    job_id = submit(script_path, sbatch=settings.slurm.sbatch, dry_run=args.dry_run)
    if job_id is None:
        print(f"Dry run: sbatch {script_path}")
    else:
        print(f"Submitted batch job {job_id}")
    return 0


def cmd_demo(settings, args) -> int:
    from spark_workshop import datasets
    from spark_workshop.benchmark import format_results, run_benchmarks
    from spark_workshop.records import (
        DEPARTMENT_SCHEMA,
        EMPLOYEE_SCHEMA,
        PERSON_SCHEMA,
        sample_departments,
        sample_employees,
        sample_people,
    )
    from spark_workshop.session import build_spark_session, stop_spark_session

    spark = build_spark_session(settings=settings)
    try:
        people = datasets.to_dataset(spark, sample_people(), PERSON_SCHEMA)
        more_people = datasets.lines_to_people(spark, ["Ada, 36", "Michael, 29"])
        employees = datasets.to_dataset(spark, sample_employees(), EMPLOYEE_SCHEMA)
        departments = datasets.to_dataset(spark, sample_departments(), DEPARTMENT_SCHEMA)

        print("\nunion (duplicates kept):")
        datasets.union_datasets(people, more_people).show()

        print("joinWith (left_outer):")
        pairs = datasets.join_with(
            employees, departments, employees["departmentId"] == departments["id"], "left_outer"
        )
        pairs.show(truncate=False)

        print("groupBy(departmentId).count():")
        datasets.group_by_count(employees, "departmentId").show()

        print("salary summary:")
        datasets.salary_summary(employees).show()

        print(f"average age: {datasets.average_age(people):.2f}\n")

        print("RDD -> Dataset:")
        rdd = spark.sparkContext.parallelize(sample_people())
        datasets.rdd_to_dataset(spark, rdd).show()

        print(format_results(run_benchmarks({
            "joinWith (struct pairs)": pairs,
            "join (flat)": datasets.join_employees_departments(employees, departments, "left"),
        })))
    finally:
        stop_spark_session(spark)
    return 0


def cmd_generate(settings, args) -> int:
    from spark_workshop.datagen import generate_employees, write_dataset
    from spark_workshop.records import sample_departments
    from spark_workshop.session import build_spark_session, stop_spark_session
    from spark_workshop.storage_stats import analyze_output

    path = args.path or os.path.join(settings.data_dir, "employees")
    spark = build_spark_session(settings=settings)
    try:
        employees = generate_employees(spark, args.rows, sample_departments(), seed=args.seed)
        write_dataset(employees, path)
        for metric, value in analyze_output(spark, path, count_records=True):
            print(f"{metric:25s} {value}")
    finally:
        stop_spark_session(spark)
    return 0


COMMANDS = {
    "check-env": cmd_check_env,
    "slurm": cmd_slurm,
    "demo": cmd_demo,
    "generate": cmd_generate,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
        configure_logging(settings.log_level, settings.json_logs)
        return COMMANDS[args.command](settings, args)
    except (WorkshopError, ValidationError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
