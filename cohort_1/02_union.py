# Databricks notebook source
# MAGIC %md
# MAGIC ## Union
# MAGIC
# MAGIC - `union` appends rows **by position** and keeps duplicates (it is SQL `UNION ALL`).
# MAGIC - `unionByName` matches columns by name, which matters as soon as two sources disagree on column order.
# MAGIC - Call `distinct()` afterwards if you want SQL `UNION`. That adds a shuffle; look for the `Exchange` in the plan.

# COMMAND ----------

from spark_workshop.session import build_spark_session
from spark_workshop.records import PERSON_SCHEMA, Person, sample_people
from spark_workshop.datasets import to_dataset, union_datasets, distinct_union, explain_plan

spark = build_spark_session(app_name="Lesson02_Union")

# COMMAND ----------

first_cohort_df = to_dataset(spark, sample_people(), PERSON_SCHEMA)
second_cohort_df = to_dataset(spark, [Person("Ada", 36), Person("Michael", 29)], PERSON_SCHEMA)

# COMMAND ----------

all_people_df = union_datasets(first_cohort_df, second_cohort_df)
all_people_df.show()
print(f"{all_people_df.count()} rows, Michael appears twice")

# COMMAND ----------

distinct_union(first_cohort_df, second_cohort_df).show()

# COMMAND ----------

# MAGIC %md
# MAGIC ### Position vs name
# MAGIC Flip the column order of one side and compare.

# COMMAND ----------

flipped_df = second_cohort_df.select("age", "name")

# union pairs age with name positionally
union_datasets(first_cohort_df, flipped_df).show()

# COMMAND ----------

union_datasets(first_cohort_df, flipped_df, by_name=True).show()

# COMMAND ----------

print(explain_plan(distinct_union(first_cohort_df, second_cohort_df)))
