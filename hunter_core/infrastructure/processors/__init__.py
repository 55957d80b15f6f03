"""
Processors that normalize extracted values into canonical forms.
"""

from .field_normalizers import (
    boot_id_format,
    bytes_to_gb,
    bytes_to_mb,
    clean_string,
    entropy_level,
    extract_gpu_model,
    format_list,
    is_error_string,
    lookup,
    normalize_cpu_structure,
    normalize_memory_structure,
    normalize_mounts,
    parse_percentage,
    round_half_up,
    sha256_hex,
    sorted_sensor_names,
    structural_hash,
)

__all__ = [
    'boot_id_format',
    'bytes_to_gb',
    'bytes_to_mb',
    'clean_string',
    'entropy_level',
    'extract_gpu_model',
    'format_list',
    'is_error_string',
    'lookup',
    'normalize_cpu_structure',
    'normalize_memory_structure',
    'normalize_mounts',
    'parse_percentage',
    'round_half_up',
    'sha256_hex',
    'sorted_sensor_names',
    'structural_hash',
]
