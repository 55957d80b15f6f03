"""
Pytest fixtures for hunter-core tests: realistic native and platform dumps.
"""

from __future__ import annotations

import copy

import pytest

from hunter_core.logic.models import AnalysisConfig
from hunter_core.logic.services import AnalysisService

NATIVE_DUMP = """Native collector v2 (pid 4711)
=== System Properties ===
ro.board.platform = gs101
ro.product.name = raven
ro.product.device = raven
ro.product.model = Pixel 6 Pro
ro.build.fingerprint = google/raven/raven:14/UQ1A.240205.004/11269751:user/release-keys
ro.build.id = UQ1A.240205.004
ro.build.display.id = UQ1A.240205.004
ro.build.tags = release-keys
ro.build.description = raven-user 14 UQ1A.240205.004 11269751 release-keys
ro.build.version.security_patch = 2024-02-05
ro.build.version.sdk = 34
ro.build.version.incremental = 11269751
ro.product.cpu.abi = arm64-v8a
gsm.version.baseband = g5123b-130914-240105-B-11289453
ro.build.host = abfarm-release-2004-0125
ro.build.user = android-build
ro.build.date.utc = 1706650000
ro.serialno = SecurityException: getprop denied

=== Security & Boot State ===
ro.boot.flash.locked = 1
ro.boot.verifiedbootstate = green
ro.boot.vbmeta.device_state = locked
ro.boot.vbmeta.digest = 8f1c2a9be0d4
ro.secure = 1
ro.debuggable = 0
ro.treble.enabled = true

=== USB Config ===
sys.usb.config = mtp
sys.usb.state = mtp
init.svc.adbd = stopped

=== Kernel Info via uname ===
System Name: Linux
Node Name: localhost
Release: 5.10.177-android13-4-00003-gabc
Version: #1 SMP PREEMPT Mon Jan 8 2024
Machine: aarch64
Domain Name: (none)

=== System Config via sysconf ===
Page Size: 4096 bytes
Physical Pages: 2952340
Total Physical Memory: 11532 MB
CPU Cores (Online): 8

=== DRM Info ===
MediaDrm Device Unique ID (Hex): 0a1b2c3d4e5f

=== Hardware & Kernel Features ===
Path: /proc/cpuinfo
Exit Code: 0
Accessible: true
Content: processor : 0
BogoMIPS : 49.15
Features : fp asimd evtstrm aes pmull sha1 sha2 crc32
CPU part : 0xd05
processor : 4
CPU part : 0xd41
processor : 6
CPU part : 0xd44
Hardware : Tensor
---
Path: /proc/meminfo
Exit Code: 0
Accessible: true
Content: MemTotal: 11808768 kB
MemFree: 523456 kB
SwapTotal: 4194300 kB
---
Path: /sys/devices/system/cpu/possible
Exit Code: 0
Accessible: true
Content: 0-7
---

=== Environment & Security ===
Path: /sys/fs/selinux/enforce
Exit Code: 1
Accessible: false
Content: [EMPTY]
---
Path: /system/bin/su
Exit Code: 2
Accessible: false
Content: [EMPTY]
---
Path: /proc/sys/kernel/random/boot_id
Exit Code: 0
Accessible: true
Content: 1b4e28ba-2fa1-11d2-883f-0016d3cca427
---
Path: /proc/sys/kernel/random/entropy_avail
Exit Code: 0
Accessible: true
Content: 256
---

=== Mounts & Inputs ===
Path: /proc/self/mountinfo
Exit Code: 0
Accessible: true
Content: 22 1 253:0 / / ro,relatime shared:1 - ext4 /dev/block/dm-0 ro
23 22 0:20 / /dev rw,nosuid,relatime shared:2 - tmpfs tmpfs rw,mode=755
---
"""

PLATFORM_DUMP = {
    "androidId": "9774d56d682e549c",
    "serialNumber": "unknown",
    "bluetoothAddress": "02:00:00:00:00:00",
    "drmInfo": "MediaDrm Device Unique ID: 0A1B2C3D4E5F\nSecurity Level: L1",
    "glRendererInfo": "Renderer: Mali-G78 MP20 r32p1 | Vendor: ARM | Version: OpenGL ES 3.2",
    "memoryInfo": {
        "ram_total_bytes": 8589934592,
        "ram_available_bytes": 3221225472,
        "ram_used_bytes": 5368709120,
        "ram_usage_percent": "62.50%",
        "ram_low_memory": "false",
        "ram_threshold_bytes": 226492416,
        "ram_memory_class": "256 MB",
        "ram_memory_class_mb": 256,
        "internal_storage_total_bytes": 137438953472,
        "internal_storage_available_bytes": 68719476736,
        "internal_storage_used_bytes": 68719476736,
        "internal_storage_usage_percent": "50.00%",
        "external_storage_state": "mounted",
        "app_heap_max_bytes": 268435456,
        "app_heap_total_bytes": 16777216,
        "app_heap_free_bytes": 4194304,
        "app_heap_used_bytes": 12582912,
        "app_uid": 10234,
    },
    "batteryInfo": (
        "Battery Level: 85%\nStatus: Charging\nPlugged: AC\nHealth: Good\n"
        "Voltage: 4321 mV\nTemperature: 29.5°C"
    ),
    "buildInfo": (
        "=== Build Info ===\n"
        "ro.build.fingerprint = google/raven/raven:14/UQ1A.240205.004/11269751:user/release-keys\n"
        "ro.build.id = UQ1A.240205.004\n"
        "ro.build.version.sdk = 34\n"
        "ro.build.date.utc = 1706650000\n"
        "ro.boot.flash.locked = 1\n"
        "ro.debuggable = 0\n"
        "sys.usb.config = mtp\n"
        "ro.build.host = abfarm-release-2004-0125\n"
        "ro.product.model = Pixel 6 Pro"
    ),
    "phoneInfo": "SIM State: READY",
    "settings": "adb_enabled=0",
    "volumeInfo": "Music: 7/15",
    "sensorInfo": "\n".join([
        'Sensor: {Sensor name="LSM6DSR Accelerometer", vendor="STMicro", version=1, type=1, maxRange=78.4532, power=0.17}',
        'Sensor: {Sensor name="LSM6DSR Gyroscope", vendor="STMicro", version=1, type=4, maxRange=34.906586, power=0.55}',
        'Sensor: {Sensor name="MMC56X3X Magnetometer", vendor="memsic", version=1, type=2, maxRange=3200.0, power=0.4}',
        'Sensor: {Sensor name="TMD3702V Light", vendor="AMS", version=1, type=5, maxRange=60000.0, power=0.1}',
        'Sensor: {Sensor name="TMD3702V Proximity", vendor="AMS", version=1, type=8, maxRange=5.0, power=0.1}',
        'Sensor: {Sensor name="BMP380 Pressure", vendor="Bosch", version=1, type=6, maxRange=1100.0, power=0.004}',
    ]),
    "accountInfo": "Accounts: 1",
}


@pytest.fixture
def native_dump() -> str:
    """Native dump of a clean, locked production device."""
    return NATIVE_DUMP


@pytest.fixture
def platform_dump() -> dict:
    """Platform collector payload of a clean device (deep copy, safe to mutate)."""
    return copy.deepcopy(PLATFORM_DUMP)


@pytest.fixture
def emulator_native_dump() -> str:
    """Native dump of an emulator: ranchu hardware, single CPU part, test-keys, missing kernel files."""
    return """=== System Properties ===
ro.product.model = sdk_gphone64_x86_64
ro.build.tags = test-keys
ro.build.host = ubuntu-build-01
ro.product.cpu.abi = x86_64

=== Kernel Info via uname ===
Release: 5.15.41-android14-ranchu
Machine: x86_64

=== Hardware & Kernel Features ===
Path: /proc/cpuinfo
Exit Code: 0
Accessible: true
Content: processor : 0
Hardware : ranchu
---
Path: /proc/meminfo
Exit Code: 2
Accessible: false
Content: [EMPTY]
---
Path: /sys/devices/system/cpu/possible
Exit Code: 2
Accessible: false
Content: [EMPTY]
---
"""


@pytest.fixture
def analysis_service() -> AnalysisService:
    """Analysis service with the default configuration."""
    return AnalysisService(AnalysisConfig())
