from __future__ import annotations

from .configuration import RunnerConfig, build_config, parse_config
from .executor import ExecutionRecord, IsolatedExecutor, decode_wait_status
from .reporter import Report, Reporter, format_header

__all__ = [
    "ExecutionRecord",
    "IsolatedExecutor",
    "Report",
    "Reporter",
    "RunnerConfig",
    "build_config",
    "decode_wait_status",
    "format_header",
    "parse_config",
]
