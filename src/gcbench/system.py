"""Interpreter characterization for benchmark reports.

Captures the running interpreter's version, implementation and the
runtime flags that change performance characteristics (JIT, free
threading, debug build, GC thresholds), so a saved report says what it
measured.
"""

from __future__ import annotations

import gc
import platform
import sys
import sysconfig
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class PythonProfile:
    """Characterization of the running Python interpreter."""

    executable: str = ""
    version: str = ""
    implementation: str = ""  # CPython, PyPy, etc.
    compiler: str = ""  # e.g. "GCC 13.2.0"
    platform: str = ""
    jit_available: bool = False
    jit_enabled: bool = False
    gil_disabled: bool = False
    debug_build: bool = False
    gc_thresholds: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PythonProfile:
        """Deserialize from a dict, ignoring unknown fields."""
        known = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known}
        return cls(**filtered)


def capture_python_profile() -> PythonProfile:
    """Characterize the interpreter running gcbench."""
    profile = PythonProfile(
        executable=sys.executable,
        version=platform.python_version(),
        implementation=platform.python_implementation(),
        compiler=platform.python_compiler(),
        platform=platform.platform(terse=True),
        debug_build=hasattr(sys, "gettotalrefcount"),
        gc_thresholds=list(gc.get_threshold()),
    )

    jit = getattr(sys, "_jit", None)
    if jit is not None:
        try:
            profile.jit_available = bool(jit.is_available())
            profile.jit_enabled = bool(jit.is_enabled())
        except AttributeError:
            pass

    is_gil_enabled = getattr(sys, "_is_gil_enabled", None)
    if is_gil_enabled is not None:
        profile.gil_disabled = not is_gil_enabled()
    else:
        profile.gil_disabled = bool(sysconfig.get_config_var("Py_GIL_DISABLED"))

    return profile


def format_python_profile(profile: PythonProfile) -> str:
    """Format a Python profile for terminal display."""
    lines = [f"Python:   {profile.version} ({profile.implementation})"]
    if profile.compiler:
        lines.append(f"Compiler: {profile.compiler}")
    if profile.platform:
        lines.append(f"Platform: {profile.platform}")

    flags: list[str] = []
    if profile.jit_enabled:
        flags.append("JIT enabled")
    elif profile.jit_available:
        flags.append("JIT available (disabled)")
    if profile.gil_disabled:
        flags.append("GIL disabled (free-threaded)")
    if profile.debug_build:
        flags.append("debug build")
    if flags:
        lines.append(f"Flags:    {', '.join(flags)}")
    if profile.gc_thresholds:
        lines.append(f"GC:       thresholds {tuple(profile.gc_thresholds)}")

    return "\n".join(lines)
