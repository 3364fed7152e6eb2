from npm_buttons.detect.package_manager import (
    LOCKFILES,
    PackageManagerDetector,
    PackageManagerKind,
    build_run_command,
    detect,
    kind_from_package_manager_field,
)

__all__ = [
    "LOCKFILES",
    "PackageManagerDetector",
    "PackageManagerKind",
    "build_run_command",
    "detect",
    "kind_from_package_manager_field",
]
