# Databricks notebook source
# MAGIC %md
# MAGIC ## Creating Datasets
# MAGIC
# MAGIC - A **Dataset** is a distributed collection of records that all share one schema.
# MAGIC - In Scala you get a typed `Dataset[Person]` from `Seq(...).toDS()`. In PySpark the same thing is a DataFrame with an explicit schema.
# MAGIC - We will build the same Dataset three ways:
# MAGIC   1. from Python records + a `StructType`
# MAGIC   2. from an RDD of records (the RDD-to-Dataset conversion)
# MAGIC   3. from text lines parsed on the executors
# MAGIC
# MAGIC The records are deliberately boring: a Person has a name and an age.

# COMMAND ----------

from spark_workshop.session import build_spark_session
from spark_workshop.records import PERSON_SCHEMA, sample_people
from spark_workshop.datasets import to_dataset, rdd_to_dataset, lines_to_people, explain_plan

spark = build_spark_session(app_name="Lesson01_CreatingDatasets")

# COMMAND ----------

# MAGIC %md
# MAGIC ### 1. Records + schema (the `toDS` equivalent)

# COMMAND ----------

sample_people()

# COMMAND ----------

people_df = to_dataset(spark, sample_people(), PERSON_SCHEMA)
people_df.printSchema()
people_df.show()

# COMMAND ----------

# MAGIC %md
# MAGIC ### 2. RDD to Dataset
# MAGIC
# MAGIC `sparkContext.parallelize` gives an RDD. Without a schema Spark has to infer one from the rows; note that `age` comes back as `long`.

# COMMAND ----------

people_rdd = spark.sparkContext.parallelize(sample_people(), 2)
people_rdd.getNumPartitions()

# COMMAND ----------

inferred_df = rdd_to_dataset(spark, people_rdd)
inferred_df.printSchema()

# COMMAND ----------

typed_df = rdd_to_dataset(spark, people_rdd, PERSON_SCHEMA)
typed_df.printSchema()

# COMMAND ----------

# MAGIC %md
# MAGIC ### 3. Text lines to Dataset
# MAGIC
# MAGIC The classic exercise: read `name,age` lines, map them to Person records, convert. Parsing happens inside `map`, so nothing runs until an action.

# COMMAND ----------

lines = ["Michael, 29", "Andy, 30", "Justin, 19"]
from_text_df = lines_to_people(spark, lines)
from_text_df.show()

# COMMAND ----------

# MAGIC %md
# MAGIC Pop quiz: what happens if you add the line `"Berta, forty-two"`? When does it fail?

# COMMAND ----------

# lines_to_people(spark, lines + ["Berta, forty-two"]).show()

# COMMAND ----------

print(explain_plan(from_text_df))
