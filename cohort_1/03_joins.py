# Databricks notebook source
# MAGIC %md
# MAGIC ## Joins: `join` vs `joinWith`
# MAGIC
# MAGIC - `join` flattens both sides into one row.
# MAGIC - `joinWith` (Scala/Java Datasets) keeps each side as a whole object: the result is a Dataset of pairs `(_1, _2)`.
# MAGIC - PySpark has no `joinWith`, so `join_with` builds the two struct columns for us.
# MAGIC
# MAGIC Zoe works in department 4, which does not exist. Watch what happens to her under each join type.

# COMMAND ----------

from spark_workshop.session import build_spark_session
from spark_workshop.records import DEPARTMENT_SCHEMA, EMPLOYEE_SCHEMA, sample_departments, sample_employees
from spark_workshop.datasets import to_dataset, join_with, join_employees_departments, explain_plan
from spark_workshop.benchmark import run_benchmarks, format_results

spark = build_spark_session(app_name="Lesson03_Joins")

employees_df = to_dataset(spark, sample_employees(), EMPLOYEE_SCHEMA)
departments_df = to_dataset(spark, sample_departments(), DEPARTMENT_SCHEMA)

# COMMAND ----------

join_employees_departments(employees_df, departments_df).show()

# COMMAND ----------

join_employees_departments(employees_df, departments_df, how="left").show()

# COMMAND ----------

# MAGIC %md
# MAGIC ### joinWith

# COMMAND ----------

condition = employees_df["departmentId"] == departments_df["id"]

pairs_df = join_with(employees_df, departments_df, condition)
pairs_df.printSchema()
pairs_df.show(truncate=False)

# COMMAND ----------

# MAGIC %md
# MAGIC With an outer join the missing side is `null`, not a struct full of nulls.

# COMMAND ----------

outer_pairs_df = join_with(employees_df, departments_df, condition, how="left_outer")
outer_pairs_df.where("_2 IS NULL").show(truncate=False)

# COMMAND ----------

# MAGIC %md
# MAGIC Both sides are tiny, so the plan should show a `BroadcastHashJoin`. Try `spark.conf.set("spark.sql.autoBroadcastJoinThreshold", -1)` and re-run.

# COMMAND ----------

print(explain_plan(pairs_df))

# COMMAND ----------

print(format_results(run_benchmarks({
    "join (flat)": join_employees_departments(employees_df, departments_df),
    "joinWith (pairs)": pairs_df,
})))
