# Databricks notebook source
# MAGIC %pip install dbldatagen
# MAGIC %pip install Faker

# COMMAND ----------

# Parameters (on Databricks these make good dbutils.widgets)
NUM_EMPLOYEES = 1_000_000
shuffle_partitions = "20"

# COMMAND ----------

# MAGIC %md
# MAGIC ## groupBy and aggregation
# MAGIC
# MAGIC - `groupBy(...).count()` is the "hello world" of wide transformations: rows with the same key have to meet in one partition.
# MAGIC - `agg(...)` computes several aggregates in the same pass.
# MAGIC - Spark does a partial aggregation before the shuffle and a final one after it. Find both `HashAggregate` nodes in the plan.

# COMMAND ----------

from spark_workshop.session import build_spark_session, apply_conf
from spark_workshop.records import EMPLOYEE_SCHEMA, sample_departments, sample_employees
from spark_workshop.datasets import to_dataset, group_by_count, salary_summary, average_age, explain_plan
from spark_workshop.datagen import generate_employees, write_dataset
from spark_workshop.storage_stats import analyze_output
from spark_workshop.config import get_settings

spark = build_spark_session(app_name="Lesson04_GroupBy")
apply_conf(spark, {"spark.sql.shuffle.partitions": shuffle_partitions})

# COMMAND ----------

employees_df = to_dataset(spark, sample_employees(), EMPLOYEE_SCHEMA)

group_by_count(employees_df, "departmentId").show()

# COMMAND ----------

salary_summary(employees_df).show()
print(f"Average age: {average_age(employees_df):.1f}")

# COMMAND ----------

print(explain_plan(salary_summary(employees_df)))

# COMMAND ----------

# MAGIC %md
# MAGIC ### Same queries, more data
# MAGIC Generate employees with `dbldatagen`, names via Faker in a pandas UDF, and write them out.

# COMMAND ----------

WRITE_PATH = f"{get_settings().data_dir}/employees"

generated_df = generate_employees(spark, NUM_EMPLOYEES, sample_departments())
write_dataset(generated_df, WRITE_PATH)

# COMMAND ----------

for metric, value in analyze_output(spark, WRITE_PATH, count_records=True):
    print(f"{metric:25s} {value}")

# COMMAND ----------

employees_at_scale_df = spark.read.parquet(WRITE_PATH)
employees_at_scale_df.rdd.getNumPartitions()

# COMMAND ----------

salary_summary(employees_at_scale_df).show()

# COMMAND ----------

# MAGIC %md
# MAGIC Change `shuffle_partitions` and re-run the previous cell. How many tasks does the stage after the shuffle have?
