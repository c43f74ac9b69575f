"""Localized labels and default failure messages."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"

_DEFAULTS: dict[str, object] = {
    "boards": {"daily": "日刊", "weekly": "周刊", "monthly": "月刊"},
    "parts": {"main": "主榜", "new": "新曲榜"},
    "issue": "第 {issue} 期",
    "titles": {"board": "排名文件", "data": "数据文件"},
    "steps": {"check": "检查", "update": "更新", "process": "处理"},
    "actions": {"retry": "重试", "running": "处理中...", "done": "完成", "close": "关闭"},
    "failures": {"upload": "上传失败", "check": "检查失败", "update": "更新失败", "process": "处理失败"},
}


@dataclass(slots=True)
class Messages:
    boards: dict[str, str] = field(default_factory=dict)
    parts: dict[str, str] = field(default_factory=dict)
    issue: str = "{issue}"
    titles: dict[str, str] = field(default_factory=dict)
    steps: dict[str, str] = field(default_factory=dict)
    actions: dict[str, str] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    def failure(self, step: str) -> str:
        return self.failures.get(step, "")

    def issue_label(self, issue: int) -> str:
        return self.issue.format(issue=issue)


def _merge(base: dict, incoming: dict | None) -> dict:
    merged = {key: (dict(value) if isinstance(value, dict) else value) for key, value in base.items()}
    for key, value in (incoming or {}).items():
        if key not in merged:
            continue
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key].update({k: str(v) for k, v in value.items()})
        elif value is not None:
            merged[key] = value
    return merged


def load_messages(locale: str = "zh") -> Messages:
    """Load ``messages.<locale>.yaml``, filling gaps with the built-in defaults."""

    path = CONFIG_DIR / f"messages.{locale}.yaml"
    data: dict | None = None
    if path.exists():
        with path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp)
    merged = _merge(_DEFAULTS, data if isinstance(data, dict) else None)
    return Messages(**merged)
