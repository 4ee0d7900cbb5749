"""Creating and tuning the SparkSession the lessons run on."""

from typing import Dict, Mapping, Optional

from pyspark.sql import SparkSession

from spark_workshop.config import WorkshopSettings, get_settings
from spark_workshop.log import get_logger

logger = get_logger(__name__)


def build_spark_session(
    app_name: Optional[str] = None,
    master: Optional[str] = None,
    conf: Optional[Mapping[str, str]] = None,
    settings: Optional[WorkshopSettings] = None,
) -> SparkSession:
    """Create (or reuse) a SparkSession.

    Settings supply the app name, master and the partitioning options; an
    explicit ``conf`` mapping wins over them.
    """
    settings = settings or get_settings()
    merged = dict(settings.spark_conf)
    merged.update(conf or {})

    builder = SparkSession.builder.appName(app_name or settings.app_name)
    if master or settings.master:
        builder = builder.master(master or settings.master)
    for key, value in merged.items():
        builder = builder.config(key, value)

    spark = builder.getOrCreate()
    # getOrCreate() may hand back an existing session; make sure runtime
    # options still reflect what was asked for.
    apply_conf(spark, {key: value for key, value in merged.items() if spark.conf.isModifiable(key)})

    logger.info(
        "spark_session_ready",
        app_name=spark.sparkContext.appName,
        master=spark.sparkContext.master,
        version=spark.version,
    )
    return spark


def apply_conf(spark: SparkSession, conf: Mapping[str, str]) -> Dict[str, Optional[str]]:
    """Set runtime options on a live session, returning the values they replaced."""
    previous = {}
    for key, value in conf.items():
        previous[key] = spark.conf.get(key, None)
        spark.conf.set(key, str(value))
    logger.debug("spark_conf_applied", conf=dict(conf))
    return previous


def stop_spark_session(spark: SparkSession) -> None:
    spark.stop()
    logger.info("spark_session_stopped")
