"""Tests for output inspection."""

import pytest

from spark_workshop.errors import DatasetOperationError
from spark_workshop.storage_stats import MB, analyze_output, collect_file_sizes, file_size_stats


def write_bytes(path, size):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)


class TestCollectFileSizes:
    def test_skips_bookkeeping_files(self, tmp_path):
        write_bytes(tmp_path / "part-00000.parquet", 100)
        write_bytes(tmp_path / "part-00001.parquet", 300)
        write_bytes(tmp_path / "_SUCCESS", 0)
        write_bytes(tmp_path / ".part-00000.parquet.crc", 12)
        write_bytes(tmp_path / "_spark_metadata" / "0", 50)

        assert sorted(collect_file_sizes(str(tmp_path))) == [100, 300]

    def test_walks_partition_directories(self, tmp_path):
        write_bytes(tmp_path / "departmentId=1" / "part-00000.parquet", 10)
        write_bytes(tmp_path / "departmentId=2" / "part-00000.parquet", 20)

        assert sorted(collect_file_sizes(str(tmp_path))) == [10, 20]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(DatasetOperationError):
            collect_file_sizes(str(tmp_path / "nope"))


class TestFileSizeStats:
    def test_stats(self):
        stats = file_size_stats([MB, 2 * MB, 3 * MB])

        assert stats["Total files"] == 3
        assert isinstance(stats["Total files"], int)
        assert stats["Total size (MB)"] == pytest.approx(6.0)
        assert stats["Median file size (MB)"] == pytest.approx(2.0)
        assert stats["P10 file size (MB)"] == pytest.approx(1.2)
        assert stats["P90 file size (MB)"] == pytest.approx(2.8)

    def test_empty(self):
        with pytest.raises(DatasetOperationError):
            file_size_stats([])


@pytest.mark.spark
def test_analyze_output_counts_records(spark, tmp_path):
    path = str(tmp_path / "numbers")
    spark.range(0, 21).coalesce(1).write.parquet(path)

    stats = dict(analyze_output(spark, path, count_records=True))

    assert stats["Record count"] == "21 (twenty-one)"
    assert stats["Total files"] == 1
