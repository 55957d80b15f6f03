"""
Tests for the key/value, probe-block, kernel and pattern extractors.
"""

from __future__ import annotations

import pytest

from hunter_core.infrastructure.parsers import (
    FormatError,
    NativeDumpParser,
    ParseError,
    Section,
    group_properties,
    parse_probe_blocks,
    parse_properties,
)
from hunter_core.infrastructure.parsers import pattern_extractors as patterns
from hunter_core.infrastructure.parsers.property_parser import categorize_property, parse_property_line
from hunter_core.infrastructure.shared import ErrorHandlingService
from hunter_core.logic.models import ProbeRecord, ProbeStatus, ProbeValue, ValueKind


# --- Probe values ---


@pytest.mark.parametrize("raw", [None, "", "   ", "null", "java.lang.SecurityException: denied"])
def test_probe_value_absent(raw):
    """Missing, blank, null and SecurityException values resolve to ABSENT."""
    value = ProbeValue.resolve(raw)
    assert value.is_absent
    assert value.as_text() is None
    assert not value.equals("null")


def test_probe_value_kinds():
    """Numbers, booleans and text are told apart at extraction."""
    assert ProbeValue.resolve("34").as_int() == 34
    assert ProbeValue.resolve("3.5").as_int() is None
    assert ProbeValue.resolve("3.5").as_float() == 3.5
    assert ProbeValue.resolve("1").as_flag() is True
    assert ProbeValue.resolve("TRUE").kind == ValueKind.BOOL
    assert ProbeValue.resolve("false").as_flag() is False
    assert ProbeValue.resolve("orange").kind == ValueKind.TEXT
    assert ProbeValue.resolve("orange").as_int() is None


# --- Property lines ---


def test_property_line_rules():
    """Only ``key = value`` lines with a non-empty key are properties."""
    assert parse_property_line("ro.build.id = UQ1A") == ("ro.build.id", ProbeValue.resolve("UQ1A"))
    assert parse_property_line("=== Build ===") is None
    assert parse_property_line("ro.build.id=UQ1A") is None
    assert parse_property_line(" = orphan") is None
    assert parse_property_line("") is None


def test_property_value_keeps_inner_separator():
    """Only the first separator splits key from value."""
    props = parse_properties("ro.build.description = a = b")
    assert props.text("ro.build.description") == "a = b"


def test_later_property_wins():
    """Repeated keys keep the last value."""
    props = parse_properties("ro.secure = 1\nro.secure = 0")
    assert props.get("ro.secure").equals("0")


def test_categorize_property_first_rule_wins():
    """usb beats security, fingerprint beats version; unknown keys are dropped."""
    assert categorize_property("sys.usb.config") == "usb"
    assert categorize_property("persist.sys.usb.secure") == "usb"
    assert categorize_property("ro.boot.flash.locked") == "security"
    assert categorize_property("ro.build.version.fingerprint") == "fingerprints"
    assert categorize_property("ro.build.id") == "build_ids"
    assert categorize_property("ro.build.display.id") == "other"
    assert categorize_property("ro.build.date.utc") == "build_dates"
    assert categorize_property("ro.build.version.sdk") == "version"
    assert categorize_property("gsm.version.baseband") == "version"
    assert categorize_property("ro.product.model") is None


def test_group_properties_drops_absent_and_non_integral_dates():
    """Absent values and non-integral build dates never appear in a group."""
    props = parse_properties(
        "ro.build.date.utc = 1706650000\n"
        "ro.vendor.build.date.utc = soon\n"
        "ro.secure = null\n"
        "sys.usb.config = mtp,adb"
    )
    groups = group_properties(props)
    assert groups["build_dates"] == {"ro.build.date.utc": 1706650000}
    assert groups["usb"] == {"sys.usb.config": "mtp,adb"}
    assert "security" not in groups


# --- Probe blocks ---


def test_probe_blocks_content_and_status():
    """Inline and continuation content are captured; exit codes map to statuses."""
    text = (
        "Path: /proc/cpuinfo\n"
        "Exit Code: 0\n"
        "Accessible: true\n"
        "Content: processor : 0\n"
        "    indented continuation\n"
        "---\n"
        "Path: /system/xbin/su\n"
        "Exit Code: 2\n"
        "Accessible: false\n"
        "Content: [EMPTY]\n"
        "---\n"
        "Path: /sys/fs/selinux/enforce\n"
        "Exit Code: 1\n"
        "Accessible: false\n"
        "Path: /proc/odd\n"
        "Exit Code: not-a-number\n"
    )
    records = parse_probe_blocks(text)
    assert [r.path for r in records] == ["/proc/cpuinfo", "/system/xbin/su", "/sys/fs/selinux/enforce", "/proc/odd"]
    assert records[0].content == "processor : 0\n    indented continuation"
    assert records[0].status == ProbeStatus.OK
    assert records[1].content == ""
    assert records[1].status == ProbeStatus.NOT_FOUND
    assert records[2].status == ProbeStatus.PERM_DENIED
    assert records[3].exit_code == -1
    assert records[3].status == ProbeStatus.ERROR


def test_truncated_content_prefix():
    """``Content (truncated):`` is treated like ``Content:``."""
    records = parse_probe_blocks("Path: /proc/self/maps\nExit Code: 0\nAccessible: true\nContent (truncated): 7f00 libc.so")
    assert records[0].content == "7f00 libc.so"


def test_accessible_but_failed_exit_is_not_ok():
    """An accessible probe with a non-zero exit code is not OK."""
    assert ProbeRecord(path="/x", exit_code=3, accessible=True).status == ProbeStatus.NOT_FOUND


# --- Full dump parsing ---


def test_native_dump_parser_extracts_everything(native_dump):
    """Every section of the sample dump reaches its parser."""
    dump = NativeDumpParser().parse(native_dump)
    assert dump.sections_parsed == 9
    assert dump.properties.text("ro.product.model") == "Pixel 6 Pro"
    assert dump.properties.text("ro.boot.verifiedbootstate") == "green"
    assert not dump.properties.has("ro.serialno")
    assert dump.kernel["release"] == "5.10.177-android13-4-00003-gabc"
    assert dump.properties.text("uname.sysname") == "Linux"
    assert dump.sysconf == {"page_size": 4096, "phys_pages": 2952340, "total_memory_mb": 11532, "cpu_cores": 8}
    assert dump.drm_device_id == "0a1b2c3d4e5f"
    assert dump.probe("/proc/cpuinfo").status == ProbeStatus.OK
    assert dump.probe("/sys/fs/selinux/enforce").status == ProbeStatus.PERM_DENIED


def test_routing_prefers_probe_parser():
    """``Environment & Security`` is a probe section even though it mentions Security."""
    parser = NativeDumpParser()
    routed = parser.route(Section(title="环境与安全检测 (Environment & Security)", body="Path: /x"))
    assert routed.parser_name == "probe_parser"
    assert parser.route(Section(title="Unknown Things", body="x")) is None


def test_risk_tags_section():
    """Risk tag names are upper-cased, details kept and duplicates dropped."""
    dump = NativeDumpParser().parse(
        "=== Risk Tags ===\nzygisk_detected\n- SUSPICIOUS_LIB:libRiru.so\nZYGISK_DETECTED\nnot a tag!\n"
    )
    assert dump.risk_tags == ["ZYGISK_DETECTED", "SUSPICIOUS_LIB:libRiru.so"]


def test_failing_section_parser_is_contained(native_dump):
    """A section parser that raises is skipped and recorded; siblings still parse."""

    class ExplodingDrm:
        parser_name = "exploding"

        def can_parse(self, section):
            return "DRM Info" in section.title

        def parse_section(self, section, dump):
            raise RuntimeError("boom")

    service = ErrorHandlingService()
    parser = NativeDumpParser()
    parser.parsers.insert(0, ExplodingDrm())
    dump = parser.parse(native_dump, service)

    assert dump.drm_device_id is None
    assert dump.properties.text("ro.product.model") == "Pixel 6 Pro"
    assert dump.sections_parsed == 8
    assert service.has_errors


# --- Platform field patterns ---


def test_pattern_extractors():
    """Pattern misses and blank captures are absent, never errors."""
    gl = "Renderer: Adreno (TM) 650 | Vendor: Qualcomm | Version: OpenGL ES 3.2"
    assert patterns.extract_value(gl, patterns.GPU_RENDERER_PATTERN) == "Adreno (TM) 650"
    assert patterns.extract_value(gl, patterns.GPU_VENDOR_PATTERN) == "Qualcomm"
    assert patterns.extract_value("no match here", patterns.GPU_RENDERER_PATTERN) is None
    assert patterns.extract_value(None, patterns.GPU_RENDERER_PATTERN) is None
    assert patterns.extract_drm_device_id("MediaDrm Device Unique ID: ABCDEF01") == "abcdef01"
    assert patterns.extract_drm_device_id("MediaDrm Device Unique ID: not-hex") is None


def test_sensor_records(platform_dump):
    """Quoted and bare sensor fields are extracted per ``Sensor:`` line."""
    records = patterns.extract_sensor_records(platform_dump["sensorInfo"] + "\nTotal sensors: 6")
    assert len(records) == 6
    assert records[0] == {
        "name": "LSM6DSR Accelerometer",
        "vendor": "STMicro",
        "type": "1",
        "version": "1",
        "maxRange": "78.4532",
        "power": "0.17",
    }


def test_parse_error_messages():
    """Parse errors carry their section context in the message."""
    error = FormatError("memory JSON object", "Expecting value", section_title="memoryInfo")
    assert isinstance(error, ParseError)
    assert str(error) == "Format error: expected memory JSON object (Expecting value) (section: memoryInfo)"
    assert str(ParseError("bad line", line_number=3)) == "bad line (line: 3)"
