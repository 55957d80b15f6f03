"""
End-to-end tests for the analysis service on both collection tiers.
"""

from __future__ import annotations

import hashlib
import json

from hunter_core.heuristics import EmulatorDetector
from hunter_core.logic.models import AnalysisConfig
from hunter_core.logic.services import AnalysisService


def _sha(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


# --- Native tier ---


def test_clean_native_dump(analysis_service, native_dump):
    """A locked production device is clean with a stable id."""
    result = analysis_service.analyze_native(native_dump).to_dict()
    assert result["riskReport"] == "clean (risk score 0/100)"
    assert result["riskScore"] == 0
    assert not any([result["isEmulator"], result["isRooted"], result["isDebugMode"], result["hasZygiskInjection"]])
    assert len(result["nativeDeviceId"]) == 64
    assert result["nativeDeviceId"] == analysis_service.analyze_native(native_dump).device_id


def test_rooted_native_dump(analysis_service, native_dump):
    """An unlocked, orange-state device is rooted and explains why."""
    raw = native_dump.replace("ro.boot.flash.locked = 1", "ro.boot.flash.locked = 0").replace(
        "ro.boot.verifiedbootstate = green", "ro.boot.verifiedbootstate = orange"
    )
    result = analysis_service.analyze_native(raw)
    assert result.is_rooted
    assert result.risk_score == 40
    assert result.risk_report == (
        "risks found (risk score 40/100):\n"
        "[HIGH] bootloader unlocked\n"
        "[HIGH] verified boot state: orange\n"
        "[INFO] risk tag: BOOTLOADER_UNLOCKED"
    )


def test_adb_and_zygisk(analysis_service, native_dump):
    """ADB plus a Zygisk tag scores debug, injection and the remaining tag."""
    raw = native_dump.replace("sys.usb.config = mtp", "sys.usb.config = mtp,adb")
    raw += "=== Risk Tags ===\nZYGISK_DETECTED\n"
    result = analysis_service.analyze_native(raw)
    assert result.is_debug_mode
    assert result.has_injection
    assert result.risk_score == 80
    assert "[HIGH] suspicious injection: ZYGISK_DETECTED" in result.risk_report
    assert "[INFO] risk tag: USB_DEBUG_ENABLED" in result.risk_report
    assert "[HIGH] ADB enabled" in result.risk_report


def test_emulator_native_dump(analysis_service, emulator_native_dump):
    """Emulator evidence flags the device and lists every rule that fired."""
    result = analysis_service.analyze_native(emulator_native_dump)
    assert result.is_emulator
    assert not result.is_rooted
    assert result.risk_score == 40
    assert result.risk_report.splitlines() == [
        "risks found (risk score 40/100):",
        "[HIGH] emulator hardware: ranchu",
        "[SUSPECT] abnormal CPU structure: 0 distinct CPU parts",
        "[SUSPECT] emulator kernel: 5.15.41-android14-ranchu",
        "[SUSPECT] test-keys build signature",
        "[SUSPECT] critical kernel files missing: 2",
        "[LOW] generic build host: ubuntu-build-01",
    ]


def test_score_is_capped(analysis_service, emulator_native_dump):
    """Every category firing still scores at most 100."""
    raw = emulator_native_dump + (
        "=== Security & Boot State ===\nro.boot.flash.locked = 0\nro.debuggable = 1\n"
        "=== Risk Tags ===\nZYGISK_DETECTED\n"
    )
    result = analysis_service.analyze_native(raw)
    assert result.is_emulator and result.is_rooted and result.is_debug_mode and result.has_injection
    assert result.risk_score == 100


def test_dump_without_sections(analysis_service):
    """Text without sections is analysed as an empty document."""
    result = analysis_service.analyze_native("garbage without banners")
    assert result.risk_score == 0
    assert result.risk_report == "clean (risk score 0/100)"
    assert result.device_id == _sha("||0||||")
    assert not result.is_emulator


def test_native_document_entry_point(analysis_service, native_dump):
    """A pre-built document, as dict or JSON, analyses like the dump it came from."""
    document = analysis_service.build_native_document(native_dump)
    expected = analysis_service.analyze_native(native_dump)
    assert analysis_service.analyze_native_document(document) == expected
    assert analysis_service.analyze_native_document(json.dumps(document)) == expected


def test_unusable_native_document(analysis_service):
    """Malformed input produces a failed result instead of raising."""
    for payload in ("{not json", "[1, 2]"):
        result = analysis_service.analyze_native_document(payload)
        assert result.failed
        assert result.risk_score == -1
        assert result.device_id == ""
        assert result.risk_report.startswith("analysis failed: ")


def test_disabled_detector_and_custom_weight(emulator_native_dump):
    """Configuration turns detectors off and changes their weight."""
    disabled = AnalysisService(AnalysisConfig.from_dict({"detectors": {"emulator": {"enabled": False}}}))
    result = disabled.analyze_native(emulator_native_dump)
    assert not result.is_emulator
    assert result.risk_report == "clean (risk score 0/100)"

    light = AnalysisService(AnalysisConfig.from_dict({"detectors": {"emulator": {"weight": 15}}}))
    assert light.analyze_native(emulator_native_dump).risk_score == 15


def test_failing_detector_is_contained(analysis_service, emulator_native_dump):
    """A detector that raises does not fire and does not fail the analysis."""

    class BrokenEmulator(EmulatorDetector):
        def analyze(self, document, tier):
            raise RuntimeError("boom")

    analysis_service.detectors[0] = BrokenEmulator()
    result = analysis_service.analyze_native(emulator_native_dump)
    assert not result.failed
    assert not result.is_emulator
    assert result.risk_score == 0


# --- Platform tier ---


def test_clean_platform_dump(analysis_service, platform_dump):
    """A clean device reports a clean environment and carries no score."""
    result = analysis_service.analyze_platform(platform_dump).to_dict()
    assert set(result) == {"deviceId", "riskReport", "isEmulator", "isDebugMode"}
    assert result["riskReport"] == "device environment clean"
    assert not result["isEmulator"]
    assert not result["isDebugMode"]


def test_platform_dump_as_json(analysis_service, platform_dump):
    """JSON text and the decoded payload give the same result."""
    assert analysis_service.analyze_platform(json.dumps(platform_dump)) == analysis_service.analyze_platform(platform_dump)


def test_platform_id_ignores_sensor_line_order(analysis_service, platform_dump):
    """Reordering the raw sensor lines never changes the platform device id."""
    original = analysis_service.analyze_platform(platform_dump).device_id
    platform_dump["sensorInfo"] = "\n".join(reversed(platform_dump["sensorInfo"].split("\n")))
    assert analysis_service.analyze_platform(platform_dump).device_id == original


def test_native_id_is_stable_on_rerun(analysis_service, native_dump):
    """Analysing the same native dump twice gives the same id and report."""
    first = analysis_service.analyze_native(native_dump)
    second = analysis_service.analyze_native(native_dump)
    assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())


def test_platform_emulator(analysis_service, platform_dump):
    """A software renderer and few sensors flag an emulator."""
    platform_dump["glRendererInfo"] = "Renderer: llvmpipe (LLVM 12.0.0, 256 bits) | Vendor: Mesa"
    platform_dump["sensorInfo"] = "\n".join(platform_dump["sensorInfo"].split("\n")[:2])
    result = analysis_service.analyze_platform(platform_dump)
    assert result.is_emulator
    assert result.risk_report == (
        "risks found:\n"
        "[HIGH] emulator GPU renderer: llvmpipe (LLVM\n"
        "[SUSPECT] abnormally low sensor count: 2"
    )


def test_platform_usb_debugging(analysis_service, platform_dump):
    """USB debugging only counts while the device is plugged into a computer."""
    platform_dump["buildInfo"] = platform_dump["buildInfo"].replace("sys.usb.config = mtp", "sys.usb.config = mtp,adb")
    on_charger = analysis_service.analyze_platform(platform_dump)
    assert not on_charger.is_debug_mode
    assert on_charger.risk_report == "device environment clean"

    platform_dump["batteryInfo"] = platform_dump["batteryInfo"].replace("Plugged: AC", "Plugged: USB")
    on_computer = analysis_service.analyze_platform(platform_dump)
    assert on_computer.is_debug_mode
    assert on_computer.risk_report == "risks found:\n[HIGH] USB debugging enabled while connected to a computer"


def test_platform_unlocked_bootloader(analysis_service, platform_dump):
    """An unlocked bootloader is reported on the platform tier."""
    platform_dump["buildInfo"] = platform_dump["buildInfo"].replace(
        "ro.boot.flash.locked = 1", "ro.boot.flash.locked = 0"
    )
    result = analysis_service.analyze_platform(platform_dump)
    assert result.is_rooted
    assert result.risk_report == "risks found:\n[MEDIUM] bootloader unlocked"


def test_unusable_platform_payload(analysis_service):
    """An unusable payload analyses as an empty document."""
    result = analysis_service.analyze_platform("not json")
    assert not result.failed
    assert result.risk_report == "device environment clean"
    assert result.device_id == _sha("||0|0|[]")
