"""
Document builders.

Assemble extracted and normalized values into the canonical, category
structured document of each collection tier. A category appears only when
at least one of its fields was derived, and one category failing never
prevents its siblings from being built.
"""

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Union

from hunter_core.infrastructure.parsers import FormatError, NativeDumpParser, ParsedNativeDump, group_properties, parse_properties
from hunter_core.infrastructure.parsers import pattern_extractors as patterns
from hunter_core.infrastructure.processors import field_normalizers as normalize
from hunter_core.infrastructure.shared.error_handling import ErrorHandlingService, safe_execute
from hunter_core.logic.models import PlatformRawDump, ProbeStatus

Document = Dict[str, Any]

CPUINFO_PATH = "/proc/cpuinfo"
MEMINFO_PATH = "/proc/meminfo"
MOUNTINFO_PATH = "/proc/self/mountinfo"
MOUNTS_PATH = "/proc/mounts"
MAPS_PATH = "/proc/self/maps"
SELINUX_ENFORCE_PATH = "/sys/fs/selinux/enforce"
BOOT_ID_PATH = "/proc/sys/kernel/random/boot_id"
ENTROPY_PATH = "/proc/sys/kernel/random/entropy_avail"

SUSPICIOUS_LIB_PATTERN = re.compile(r'([\w.+-]*(?:zygisk|riru|lsposed|frida)[\w.+-]*\.so)', re.IGNORECASE)


def _compact(mapping: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value was not derived."""
    return {key: value for key, value in mapping.items() if value is not None}


class _CategoryBuilder:
    """Shared category assembly with per-category failure containment."""

    def __init__(self, component: str, error_service: Optional[ErrorHandlingService] = None):
        self.component = component
        self.error_service = error_service or ErrorHandlingService()
        self.logger = logging.getLogger(f"builder.{component}")

    def _add_category(self, document: Document, name: str, build: Callable[[], Any]) -> None:
        value = safe_execute(
            build,
            default_value=None,
            operation=f"build_{name}",
            component=self.component,
            service=self.error_service
        )
        if value:
            document[name] = value
        else:
            self.logger.debug(f"Category '{name}' has no derived fields, omitted")


class NativeDocumentBuilder(_CategoryBuilder):
    """
    Builds the native-tier document.

    Categories: device_identity, security_states, native_probes,
    kernel_props and risk_tags.
    """

    # Document field -> (kind, property keys); the first present key wins
    IDENTITY_FIELDS = (
        ('board', 'text', ('ro.board.platform',)),
        ('product', 'text', ('ro.product.name', 'ro.product.device')),
        ('model', 'text', ('ro.product.model',)),
        ('fingerprint_string', 'text', ('ro.build.fingerprint', 'ro.build.build.fingerprint')),
        ('build_id', 'text', ('ro.build.id',)),
        ('display_id', 'text', ('ro.build.display.id',)),
        ('build_tags', 'text', ('ro.build.tags',)),
        ('build_description', 'text', ('ro.build.description',)),
        ('security_patch', 'text', ('ro.build.version.security_patch',)),
        ('sdk_version', 'int', ('ro.build.version.sdk',)),
        ('incremental', 'text', ('ro.build.version.incremental',)),
        ('cpu_abi', 'text', ('ro.product.cpu.abi',)),
        ('baseband', 'text', ('gsm.version.baseband',)),
        ('build_host', 'text', ('ro.build.host',)),
        ('build_user', 'text', ('ro.build.user',)),
        ('build_date_utc', 'int', ('ro.build.date.utc',)),
    )

    SECURITY_TEXT_FIELDS = (
        ('vb_state', 'ro.boot.verifiedbootstate'),
        ('vbmeta_device_state', 'ro.boot.vbmeta.device_state'),
        ('vbmeta_digest', 'ro.boot.vbmeta.digest'),
        ('adbd_service_status', 'init.svc.adbd'),
        ('usb_state', 'sys.usb.state'),
    )

    # Document field -> (property key, value meaning True)
    SECURITY_FLAG_FIELDS = (
        ('bootloader_locked', 'ro.boot.flash.locked', '1'),
        ('oem_unlock_allowed', 'sys.oem_unlock_allowed', '1'),
        ('ro_secure', 'ro.secure', '1'),
        ('debuggable', 'ro.debuggable', '1'),
        ('treble_enabled', 'ro.treble.enabled', 'true'),
    )

    def __init__(self, parser: Optional[NativeDumpParser] = None,
                 error_service: Optional[ErrorHandlingService] = None):
        super().__init__("native_builder", error_service)
        self.parser = parser or NativeDumpParser()

    def build(self, raw: Optional[str]) -> Document:
        """
        Build the native document from dump text.

        Args:
            raw: Native dump text

        Returns:
            Canonical document; ``{}`` when nothing could be derived
        """
        dump = safe_execute(
            lambda: self.parser.parse(raw, self.error_service),
            default_value=None,
            operation="parse_dump",
            component=self.component,
            service=self.error_service
        )
        if dump is None:
            return {}
        if dump.is_empty:
            self.logger.debug("No recognised sections in native dump")
            return {}
        return self.build_from_parsed(dump)

    def build_from_parsed(self, dump: ParsedNativeDump) -> Document:
        document: Document = {}
        self._add_category(document, 'device_identity', lambda: self._build_device_identity(dump))
        self._add_category(document, 'security_states', lambda: self._build_security_states(dump))
        self._add_category(document, 'native_probes', lambda: self._build_native_probes(dump))
        self._add_category(document, 'kernel_props', lambda: self._build_kernel_props(dump))
        self._add_category(document, 'risk_tags', lambda: self._build_risk_tags(dump))
        return document

    def _build_device_identity(self, dump: ParsedNativeDump) -> Document:
        props = dump.properties
        identity: Document = {}

        for field_name, kind, keys in self.IDENTITY_FIELDS:
            if kind == 'int':
                identity[field_name] = props.get(keys[0]).as_int()
            else:
                identity[field_name] = props.first_text(*keys)

        identity['drm_device_id'] = dump.drm_device_id
        return _compact(identity)

    def _build_security_states(self, dump: ParsedNativeDump) -> Document:
        props = dump.properties
        states: Document = {}

        for field_name, key, true_value in self.SECURITY_FLAG_FIELDS:
            if props.has(key):
                states[field_name] = props.get(key).equals(true_value)

        for field_name, key in self.SECURITY_TEXT_FIELDS:
            value = props.text(key)
            if value is not None:
                states[field_name] = value

        if props.has('sys.usb.config'):
            states['adb_enabled'] = props.get('sys.usb.config').contains('adb')

        enforcing = self._infer_selinux_enforcing(dump)
        if enforcing is not None:
            states['selinux_enforcing'] = enforcing

        return states

    @staticmethod
    def _infer_selinux_enforcing(dump: ParsedNativeDump) -> Optional[bool]:
        """
        Best-effort SELinux mode from the enforce-file probe.

        An unprivileged read of the enforce file is refused with a
        permission error under an enforcing policy, so exit code 1 counts as
        enforcing. A successful read reports the mode directly.
        """
        probe = dump.probe(SELINUX_ENFORCE_PATH)
        if probe is None:
            return None
        if not probe.accessible:
            return probe.exit_code == 1
        return probe.content.strip() == "1"

    def _build_native_probes(self, dump: ParsedNativeDump) -> Document:
        probes: Document = {}

        cpuinfo = dump.probe(CPUINFO_PATH)
        if cpuinfo is not None and cpuinfo.accessible:
            probes['cpu_structure'] = normalize.normalize_cpu_structure(cpuinfo.content)

        mountinfo = dump.probe(MOUNTINFO_PATH)
        if mountinfo is not None and mountinfo.accessible:
            mounts_hash = normalize.normalize_mounts(mountinfo.content)
            if mounts_hash:
                probes['mounts_hash'] = mounts_hash

        if dump.probes:
            probes['file_access_map'] = {
                path: record.status.value for path, record in dump.probes.items()
            }

        meminfo = dump.probe(MEMINFO_PATH)
        if meminfo is not None and meminfo.accessible:
            probes['memory_structure'] = normalize.normalize_memory_structure(
                meminfo.content, dump.sysconf.get('total_memory_mb')
            )

        return probes

    def _build_kernel_props(self, dump: ParsedNativeDump) -> Document:
        props: Document = {
            'uname_release': dump.kernel.get('release'),
            'machine': dump.kernel.get('machine'),
        }

        for field_name in ('page_size', 'phys_pages', 'cpu_cores'):
            value = dump.sysconf.get(field_name)
            if value is not None and value > 0:
                props[field_name] = value

        boot_id = dump.probe(BOOT_ID_PATH)
        if boot_id is not None and boot_id.accessible:
            props['boot_id_format'] = normalize.boot_id_format(boot_id.content)

        entropy = dump.probe(ENTROPY_PATH)
        if entropy is not None and entropy.accessible:
            props['entropy_level'] = normalize.entropy_level(entropy.content)

        return _compact(props)

    def _build_risk_tags(self, dump: ParsedNativeDump) -> List[str]:
        props = dump.properties
        tags: List[str] = []

        def add(tag: str):
            if tag not in tags:
                tags.append(tag)

        if props.get('sys.usb.config').contains('adb'):
            add('USB_DEBUG_ENABLED')

        if props.has('ro.boot.flash.locked') and not props.get('ro.boot.flash.locked').equals('1'):
            add('BOOTLOADER_UNLOCKED')

        for tag in dump.risk_tags:
            add(tag)

        for path in (MOUNTINFO_PATH, MOUNTS_PATH):
            probe = dump.probe(path)
            if probe is not None and probe.status == ProbeStatus.OK and 'magisk' in probe.content.lower():
                add('MAGISK_MOUNT_DETECTED')

        maps = dump.probe(MAPS_PATH)
        if maps is not None and maps.status == ProbeStatus.OK:
            for match in SUSPICIOUS_LIB_PATTERN.finditer(maps.content):
                add(f"SUSPICIOUS_LIB:{match.group(1)}")

        return tags


class PlatformDocumentBuilder(_CategoryBuilder):
    """
    Builds the platform-tier document.

    Categories: identity, hardware, system, media, sensors, account and,
    when the dump embeds a native dump, native.
    """

    def __init__(self, native_builder: Optional[NativeDocumentBuilder] = None,
                 error_service: Optional[ErrorHandlingService] = None):
        super().__init__("platform_builder", error_service)
        self.native_builder = native_builder or NativeDocumentBuilder(error_service=self.error_service)

    def build(self, dump: Union[PlatformRawDump, Dict[str, Any], str, None]) -> Document:
        """
        Build the platform document.

        Args:
            dump: Raw dump instance, collector payload dict or JSON string

        Returns:
            Canonical document; ``{}`` when the payload is unusable
        """
        raw = safe_execute(
            lambda: PlatformRawDump.coerce(dump),
            default_value=None,
            operation="load_dump",
            component=self.component,
            service=self.error_service
        )
        if raw is None:
            return {}

        document: Document = {}
        self._add_category(document, 'identity', lambda: self._build_identity(raw))
        self._add_category(document, 'hardware', lambda: self._build_hardware(raw))
        self._add_category(document, 'system', lambda: self._build_system(raw))
        self._add_category(document, 'media', lambda: _compact({
            'volume_info': normalize.clean_string(raw.volume_info),
            'drm_info': normalize.clean_string(raw.drm_info),
        }))
        self._add_category(document, 'sensors', lambda: self._build_sensors(raw))
        self._add_category(document, 'account', lambda: _compact({
            'account_info': normalize.clean_string(raw.account_info),
        }))
        if raw.native_build_info and raw.native_build_info.strip():
            self._add_category(document, 'native', lambda: self.native_builder.build(raw.native_build_info))
        return document

    def _build_identity(self, raw: PlatformRawDump) -> Document:
        return _compact({
            'android_id': normalize.clean_string(raw.android_id),
            'serial_number': normalize.clean_string(raw.serial_number),
            'bluetooth_address': normalize.clean_string(raw.bluetooth_address),
            'drm_device_id': patterns.extract_drm_device_id(raw.drm_info),
        })

    def _build_hardware(self, raw: PlatformRawDump) -> Document:
        hardware: Document = {}
        self._add_category(hardware, 'gpu', lambda: self._build_gpu(raw.gl_renderer_info))
        self._add_category(hardware, 'memory', lambda: self._build_memory(raw.memory_info))
        self._add_category(hardware, 'battery', lambda: self._build_battery(raw.battery_info))
        return hardware

    def _build_gpu(self, gl_info: Optional[str]) -> Document:
        renderer = normalize.clean_string(patterns.extract_value(gl_info, patterns.GPU_RENDERER_PATTERN))
        return _compact({
            'renderer': normalize.extract_gpu_model(renderer),
            'vendor': normalize.clean_string(patterns.extract_value(gl_info, patterns.GPU_VENDOR_PATTERN)),
        })

    def _build_memory(self, memory_info: Optional[str]) -> Document:
        if not memory_info or not memory_info.strip():
            return {}

        try:
            data = json.loads(memory_info)
        except ValueError as e:
            raise FormatError("memory JSON object", str(e)) from e
        if not isinstance(data, dict):
            raise FormatError("memory JSON object", type(data).__name__)

        return _MemoryBlob(data).build()

    def _build_battery(self, battery_info: Optional[str]) -> Document:
        if not battery_info:
            return {}

        battery: Document = {}

        level = patterns.extract_value(battery_info, patterns.BATTERY_LEVEL_PATTERN)
        battery['level_percent'] = _to_float(level)

        battery['status'] = normalize.clean_string(
            patterns.extract_value(battery_info, patterns.BATTERY_STATUS_PATTERN))
        battery['plugged'] = normalize.clean_string(
            patterns.extract_value(battery_info, patterns.BATTERY_PLUGGED_PATTERN))
        battery['health'] = normalize.clean_string(
            patterns.extract_value(battery_info, patterns.BATTERY_HEALTH_PATTERN))

        voltage = _to_float(patterns.extract_value(battery_info, patterns.BATTERY_VOLTAGE_PATTERN))
        if voltage is not None:
            battery['voltage_v'] = normalize.round_half_up(voltage / 10.0) / 100

        temperature = patterns.extract_value(battery_info, patterns.BATTERY_TEMPERATURE_PATTERN)
        battery['temperature_celsius'] = _to_float(temperature)

        return _compact(battery)

    def _build_system(self, raw: PlatformRawDump) -> Document:
        return _compact({
            'build_properties': group_properties(parse_properties(raw.build_info)) or None,
            'phone_info': normalize.clean_string(raw.phone_info),
            'settings': normalize.clean_string(raw.settings),
        })

    def _build_sensors(self, raw: PlatformRawDump) -> Document:
        sensors = [_normalize_sensor(record) for record in patterns.extract_sensor_records(raw.sensor_info)]
        if not sensors:
            return {}
        return {
            'sensor_list': sensors,
            'sensor_count': len(sensors),
        }


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def _to_int(value: Any) -> Optional[int]:
    number = _to_float(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def _normalize_sensor(record: Dict[str, str]) -> Document:
    return _compact({
        'name': record.get('name'),
        'vendor': record.get('vendor'),
        'type': _to_int(record.get('type')),
        'version': _to_int(record.get('version')),
        'max_range': _to_float(record.get('maxRange')),
        'power': _to_float(record.get('power')),
    })


class _MemoryBlob:
    """Reads the platform memory JSON blob; sizes are in bytes."""

    def __init__(self, data: Dict[str, Any]):
        self.data = data

    def number(self, key: str) -> Optional[float]:
        return _to_float(self.data.get(key))

    def gb(self, key: str) -> Optional[float]:
        return normalize.bytes_to_gb(self.number(key))

    def mb(self, key: str) -> Optional[float]:
        return normalize.bytes_to_mb(self.number(key))

    def percent(self, key: str) -> Optional[float]:
        return normalize.parse_percentage(self.data.get(key))

    def reported(self, key: str) -> bool:
        """True when the collector reported the field (not missing or N/A)."""
        value = self.data.get(key)
        return value is not None and value != "N/A"

    def positive(self, key: str) -> bool:
        value = self.number(key)
        return value is not None and value > 0

    def build(self) -> Document:
        memory: Document = {}

        if self.positive('ram_total_bytes'):
            ram = {
                'total_gb': self.gb('ram_total_bytes'),
                'available_gb': self.gb('ram_available_bytes'),
                'used_gb': self.gb('ram_used_bytes'),
                'usage_percent': self.percent('ram_usage_percent'),
                'low_memory': _to_bool(self.data.get('ram_low_memory')),
                'threshold_gb': self.gb('ram_threshold_bytes'),
            }
            if self.reported('ram_hidden_app_threshold'):
                ram['hidden_app_threshold_gb'] = self.gb('ram_hidden_app_threshold_bytes')
            if self.reported('ram_secondary_server_threshold'):
                ram['secondary_server_threshold_gb'] = self.gb('ram_secondary_server_threshold_bytes')
            memory['ram'] = _compact(ram)

        memory_class: Document = {}
        if self.reported('ram_memory_class') and self.positive('ram_memory_class_mb'):
            memory_class['standard_mb'] = _to_int(self.data['ram_memory_class_mb'])
        if self.reported('ram_large_memory_class') and self.positive('ram_large_memory_class_mb'):
            memory_class['large_mb'] = _to_int(self.data['ram_large_memory_class_mb'])
        memory_class = _compact(memory_class)
        if memory_class:
            memory['memory_class'] = memory_class

        if self.positive('internal_storage_total_bytes'):
            memory['internal_storage'] = _compact({
                'total_gb': self.gb('internal_storage_total_bytes'),
                'available_gb': self.gb('internal_storage_available_bytes'),
                'used_gb': self.gb('internal_storage_used_bytes'),
                'usage_percent': self.percent('internal_storage_usage_percent'),
            })

        external_state = self.data.get('external_storage_state')
        if self.positive('external_storage_total_bytes'):
            external = {
                'total_gb': self.gb('external_storage_total_bytes'),
                'available_gb': self.gb('external_storage_available_bytes'),
                'used_gb': self.gb('external_storage_used_bytes'),
                'usage_percent': self.percent('external_storage_usage_percent'),
            }
            if external_state is not None and external_state != "mounted":
                external['state'] = external_state
            memory['external_storage'] = _compact(external)
        elif external_state is not None:
            memory['external_storage'] = {'state': external_state}

        if self.positive('app_heap_max_bytes'):
            memory['app_heap'] = _compact({
                'max_mb': self.mb('app_heap_max_bytes'),
                'allocated_mb': self.mb('app_heap_total_bytes'),
                'free_mb': self.mb('app_heap_free_bytes'),
                'used_mb': self.mb('app_heap_used_bytes'),
                'usage_percent': self.percent('app_heap_usage_percent'),
            })

        app_info: Document = {}
        if self.positive('app_uid'):
            app_info['uid'] = _to_int(self.data['app_uid'])
        if self.positive('app_memory_total_bytes'):
            app_info['memory_total_gb'] = self.gb('app_memory_total_bytes')
            app_info['memory_available_gb'] = self.gb('app_memory_available_bytes')
        app_info = _compact(app_info)
        if app_info:
            memory['app_info'] = app_info

        return memory


def build_native_document(raw: Optional[str], error_service: Optional[ErrorHandlingService] = None) -> Document:
    """Build the native-tier document of a dump."""
    return NativeDocumentBuilder(error_service=error_service).build(raw)


def build_platform_document(dump: Union[PlatformRawDump, Dict[str, Any], str, None],
                            error_service: Optional[ErrorHandlingService] = None) -> Document:
    """Build the platform-tier document of a dump."""
    return PlatformDocumentBuilder(error_service=error_service).build(dump)
