from __future__ import annotations

import json
import os
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _now_iso() -> str:
    return datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%fZ')


def _safe_str(x: Any) -> str:
    try:
        return str(x)
    except Exception:
        return '<unprintable>'


class LoggingHandler:
    """
    File logging sink with per-aspect gating, configured from the [LOG] section.

    - Format: JSONL or plain text
    - File policy: per-run timestamped file in [LOG].dir or explicit [LOG].file
    - Nothing goes to the terminal: the TUI owns it while the slideshow runs
    - Truncation: long strings in data payloads are cut at [LOG].truncate_chars
    """

    # Aspect level mapping
    _LEVELS = {  # numeric for comparisons
        'off': 0,
        'minimal': 1,
        'basic': 1,
        'detail': 2,
        'trace': 3,
    }

    _DEFAULTS = {  # default levels when aspect unset and no global verbosity
        'settings': 'basic',
        'navigation': 'off',
        'render': 'basic',
        'tui': 'off',
        'errors': 'basic',
    }

    def __init__(self, config) -> None:
        self._config = config
        self._active: bool = self._get_bool('active', False)
        self._format: str = (_safe_str(self._get('format', 'json') or 'json')).strip().lower()
        if self._format not in ('json', 'text'):
            self._format = 'json'
        try:
            self._truncate: int = int(self._get('truncate_chars', 2000) or 2000)
        except (TypeError, ValueError):
            self._truncate = 2000
        self._verbosity_base: Optional[str] = (self._get('verbosity', None) or None)
        if isinstance(self._verbosity_base, str):
            self._verbosity_base = self._verbosity_base.strip().lower()
        # Pre-parse per-aspect levels
        self._aspects: Dict[str, int] = {}
        for asp, default in self._DEFAULTS.items():
            raw = self._get(f'log_{asp}', None)
            if isinstance(raw, str) and raw.strip():
                level_name = raw.strip().lower()
            elif isinstance(self._verbosity_base, str):
                level_name = self._verbosity_base
            else:
                level_name = default
            self._aspects[asp] = self._LEVELS.get(level_name, self._LEVELS['off'])

        self._run_id = datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')
        self._log_path: Optional[str] = None
        if self._active:
            self._log_path = self._open_logfile()
        self._write = self._writer_json if self._format == 'json' else self._writer_text

    # --- Public helpers -------------------------------------------------
    def active(self) -> bool:
        return bool(self._active and self._log_path)

    @property
    def path(self) -> Optional[str]:
        return self._log_path

    def is_enabled(self, aspect: str, min_level: str = 'basic') -> bool:
        """Return True if logging is active and the given aspect meets the min level."""
        return self._should_log(aspect, min_level)

    def settings(self, effective: dict) -> None:
        if not self._should_log('settings', 'basic'): return
        self._write(self._prepare_payload('settings', 'config', 'settings', 'info', effective))

    def config_warning(self, kind: str, details: dict) -> None:
        if not self._should_log('settings', 'basic'): return
        self._write(self._prepare_payload(kind, 'config', 'settings', 'warning', details))

    def navigation_event(self, kind: str, details: dict, component: str = 'core.navigator') -> None:
        if not self._should_log('navigation', 'basic'): return
        self._write(self._prepare_payload(kind, component, 'navigation', 'info', details))

    def render_event(self, kind: str, details: dict, component: str = 'core.slides', severity: str = 'info') -> None:
        if not self._should_log('render', 'basic'): return
        self._write(self._prepare_payload(kind, component, 'render', severity, details))

    def render_detail(self, kind: str, details: dict, component: str = 'utils.image') -> None:
        """Render detail-level helper. Emits only when [LOG].log_render >= detail."""
        if not self._should_log('render', 'detail'): return
        self._write(self._prepare_payload(kind, component, 'render', 'info', details))

    def tui_event(self, kind: str, details: dict, component: str = 'tui') -> None:
        if not self._should_log('tui', 'basic'): return
        self._write(self._prepare_payload(kind, component, 'tui', 'info', details))

    def error(self, where: str, exc: BaseException, *, stack: Optional[str] = None) -> None:
        if not self._should_log('errors', 'basic'): return
        s = stack or ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        self._write(self._prepare_payload('error', where, 'errors', 'error', {'message': _safe_str(exc), 'stack': s}))

    # --- Internals ------------------------------------------------------
    def _get(self, key: str, fallback: Any = None) -> Any:
        try:
            return self._config.get_option('LOG', key, fallback)
        except Exception:
            return fallback

    def _get_bool(self, key: str, fallback: bool) -> bool:
        value = self._get(key, fallback)
        if isinstance(value, str):
            return value.strip().lower() in ('true', 'yes', '1', 'on')
        return bool(value)

    def _open_logfile(self) -> Optional[str]:
        try:
            # Application root is the directory containing main.py; one level above utils/
            app_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

            explicit = _safe_str(self._get('file', '') or '').strip()
            per_run = self._get_bool('per_run', True)
            raw_dir = _safe_str(self._get('dir', 'logs') or 'logs')

            # Absolute stays; relative -> app_root/<dir>
            raw_dir = os.path.expanduser(raw_dir)
            log_dir = raw_dir if os.path.isabs(raw_dir) else os.path.join(app_root, raw_dir)
            os.makedirs(log_dir, exist_ok=True)

            if explicit:
                explicit = os.path.expanduser(explicit)
                path = explicit if os.path.isabs(explicit) else os.path.join(log_dir, explicit)
            else:
                filename = f'quote-slides-{self._run_id}.log' if per_run else 'quote-slides.log'
                path = os.path.join(log_dir, filename)

            os.makedirs(os.path.dirname(path) or log_dir, exist_ok=True)

            # Touch file
            with open(path, 'a', encoding='utf-8'):
                pass
            return path
        except OSError:
            return None

    def _level_for(self, aspect: str) -> int:
        return self._aspects.get(aspect, 0)

    def _should_log(self, aspect: str, min_level_name: str) -> bool:
        if not self._active or not self._log_path:
            return False
        lvl = self._level_for(aspect)
        required = self._LEVELS.get(min_level_name, 1)
        return lvl >= required

    def _truncate_data(self, data: Any) -> Any:
        if isinstance(data, str):
            if self._truncate and len(data) > self._truncate:
                return data[: self._truncate] + '…'
            return data
        if isinstance(data, dict):
            return {_safe_str(k): self._truncate_data(v) for k, v in data.items()}
        if isinstance(data, (list, tuple)):
            return [self._truncate_data(x) for x in data]
        return data

    def _prepare_payload(self, event: str, component: str, aspect: str, severity: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'ts': _now_iso(),
            'run_id': self._run_id,
            'event': event,
            'component': component,
            'aspect': aspect,
            'severity': severity,
            'data': self._truncate_data(data or {}),
        }

    def _append(self, line: str) -> None:
        try:
            with open(self._log_path, 'a', encoding='utf-8') as f:
                f.write(line + '\n')
        except OSError:
            # A log sink that cannot be written is disabled rather than crashing the slideshow
            self._active = False

    def _writer_json(self, payload: Dict[str, Any]) -> None:
        try:
            line = json.dumps(payload, ensure_ascii=False)
        except (TypeError, ValueError):
            safe = dict(payload)
            safe['data'] = _safe_str(payload.get('data'))
            line = json.dumps(safe, ensure_ascii=False)
        self._append(line)

    def _writer_text(self, payload: Dict[str, Any]) -> None:
        data = payload.get('data') or {}
        # Flatten one line with key=val previews
        pairs = []
        for k, v in (data.items() if isinstance(data, dict) else []):
            vv = v
            if isinstance(vv, (dict, list)):
                try:
                    vv = json.dumps(vv, ensure_ascii=False)
                except (TypeError, ValueError):
                    vv = _safe_str(vv)
            pairs.append(f"{k}={vv}")
        line = (
            f"[{payload.get('ts')}] {payload.get('severity')} {payload.get('component')} "
            f"{payload.get('aspect')}:{payload.get('event')} " + ' '.join(pairs)
        )
        self._append(line.rstrip())
