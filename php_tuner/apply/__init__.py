"""Writing calculated PHP-FPM settings into pool config files."""

from .applier import (
    ApplyResult,
    apply_configuration,
    confirm,
    find_config_file,
    find_service_name,
    list_config_files,
    restart_service,
    validate_config_path,
)
from .backup import backup_path_for, write_backup
from .patcher import ConfigPatchResult, patch_config, relevant_settings

__all__ = [
    "ApplyResult",
    "ConfigPatchResult",
    "apply_configuration",
    "backup_path_for",
    "confirm",
    "find_config_file",
    "find_service_name",
    "list_config_files",
    "patch_config",
    "relevant_settings",
    "restart_service",
    "validate_config_path",
    "write_backup",
]
