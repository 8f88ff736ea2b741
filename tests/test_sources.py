"""Tests for the tick sources."""

import tempfile
from pathlib import Path

import pytest

from tickload.config import ConfigError
from tickload.source import ProcStatTickSource, ProcessorIdentity, PsutilTickSource, get_source
from tickload.source.procfs import parse_cpuinfo
from tickload.ticks import TICK_COUNT

PROC_STAT = """\
cpu  4705 356 584 3699 23 23 0 0 0 0
cpu0 1393 280 217 1800 11 11 0 0 0 0
cpu1 3312 76 367 1899 12 12 0 0 0 0
intr 114930548 113199788 3 0 5 263 0 4 [... lots more numbers ...]
ctxt 1990473
btime 1062191376
"""


CPUINFO = """\
processor	: 0
vendor_id	: GenuineIntel
cpu family	: 6
model		: 158
model name	: Intel(R) Core(TM) i7-8700 CPU @ 3.20GHz
stepping	: 10
flags		: fpu vme de pse tsc msr pae mce cx8 apic sep lm constant_tsc

processor	: 1
vendor_id	: AuthenticAMD
model name	: second core
"""


def _sys_root(tmpdir: str, serial: str) -> Path:
    dmi = Path(tmpdir) / "sys" / "class" / "dmi" / "id"
    dmi.mkdir(parents=True)
    (dmi / "product_serial").write_text(serial, encoding="utf-8")
    return Path(tmpdir) / "sys"


def _proc_root(tmpdir: str, stat: str = PROC_STAT) -> Path:
    root = Path(tmpdir)
    (root / "cpuinfo").write_text(CPUINFO, encoding="utf-8")
    (root / "stat").write_text(stat, encoding="utf-8")
    (root / "uptime").write_text("350735.47 234388.90\n", encoding="utf-8")
    (root / "loadavg").write_text("0.20 0.18 0.12 1/80 11206\n", encoding="utf-8")
    return root


class TestProcStatTickSource:
    def test_aggregate_ticks(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            source = ProcStatTickSource(_proc_root(tmpdir))
            assert source.pull_aggregate_ticks() == (4705, 356, 584, 3699, 23, 23, 0)

    def test_per_core_ticks(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            source = ProcStatTickSource(_proc_root(tmpdir))
            rows = source.pull_per_core_ticks()
            assert len(rows) == source.logical_processor_count
            assert rows[0] == (1393, 280, 217, 1800, 11, 11, 0)
            # cores without a cpuN line report zeros
            for row in rows[2:]:
                assert row == (0,) * TICK_COUNT

    def test_missing_stat_file_reads_as_zero(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            source = ProcStatTickSource(tmpdir)
            assert source.pull_aggregate_ticks() == (0,) * TICK_COUNT
            assert all(not any(row) for row in source.pull_per_core_ticks())

    def test_uptime_and_load_average(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            source = ProcStatTickSource(_proc_root(tmpdir))
            assert source.system_uptime() == pytest.approx(350735.47)
            assert source.load_average(3) == [0.20, 0.18, 0.12]
            assert source.load_average(1) == [0.20]

    def test_no_native_load(self):
        source = ProcStatTickSource("/nonexistent")
        assert source.has_native_load is False
        assert source.native_instant_load() is None


    def test_processor_identity(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            source = ProcStatTickSource(_proc_root(tmpdir), _sys_root(tmpdir, "PF1ABC23\n"))
            identity = source.processor_identity()
            assert identity.vendor == "GenuineIntel"
            assert identity.name == "Intel(R) Core(TM) i7-8700 CPU @ 3.20GHz"
            assert identity.is_64bit is True
            assert identity.serial_number == "PF1ABC23"
            assert identity.identifier == "Intel64 Family 6 Model 158 Stepping 10"

    def test_processor_identity_without_files(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            identity = ProcStatTickSource(tmpdir, tmpdir).processor_identity()
            assert identity.vendor == "unknown"
            assert identity.serial_number is None
            assert identity.family == "?"


def test_parse_cpuinfo_reads_first_processor():
    info = parse_cpuinfo(CPUINFO)
    assert info["vendor_id"] == "GenuineIntel"
    assert info["model"] == "158"
    assert "second core" not in info.values()


def test_identifier_for_other_vendors():
    identity = ProcessorIdentity(vendor="AuthenticAMD", family="23", model="113", stepping="0")
    assert identity.identifier == "AuthenticAMD Family 23 Model 113 Stepping 0"
    assert ProcessorIdentity(vendor="GenuineIntel").identifier.startswith("x86 ")


class TestPsutilTickSource:
    def test_ticks_shape(self):
        source = PsutilTickSource()
        assert len(source.pull_aggregate_ticks()) == TICK_COUNT
        rows = source.pull_per_core_ticks()
        assert len(rows) >= 1
        assert all(len(row) == TICK_COUNT for row in rows)

    def test_counts(self):
        source = PsutilTickSource()
        assert source.logical_processor_count >= 1
        assert 1 <= source.physical_processor_count <= source.logical_processor_count

    def test_native_and_uptime(self):
        source = PsutilTickSource()
        assert source.has_native_load is True
        assert 0.0 <= source.native_instant_load() <= 100.0
        assert source.system_uptime() > 0
        assert len(source.load_average(3)) == 3

    def test_processor_identity(self):
        identity = PsutilTickSource().processor_identity()
        assert isinstance(identity.vendor, str)
        assert identity.name
        assert identity.identifier.endswith(identity.stepping)


def test_get_source():
    assert get_source("psutil").name == "psutil"
    assert get_source("procfs").name == "procfs"
    with pytest.raises(ConfigError):
        get_source("wmi")
