"""
ScriptInvoker — run JXA / AppleScript bodies through osascript.

Design
──────
• Every script is written to a file inside a fresh TemporaryDirectory and
  executed by path. Script text never travels on the command line, so no
  shell quoting or escaping can break it.
• The temporary directory is removed on every exit path: success, non-zero
  exit, timeout and spawn failure.
• One fresh osascript process per call; no retries. subprocess.run kills
  the child when the timeout expires.
• The subprocess runner and the target-process probe are injectable so the
  module is testable without macOS.

Raises
──────
ScriptTimeoutError     — the process exceeded job.timeout
ScriptProcessError     — osascript exited non-zero or could not be started
TargetNotRunningError  — non-zero exit and DEVONthink is not running
"""

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Callable, Optional

import psutil

from src.config import BridgeConfig
from src.exceptions import ScriptProcessError, ScriptTimeoutError, TargetNotRunningError
from .models import Dialect, ScriptJob

__all__ = ["ScriptInvoker"]

logger = logging.getLogger(__name__)

_TEMP_PREFIX = "dtplus_"
_SCRIPT_STEM = {
    Dialect.STRUCTURED: "dtplus-jxa",
    Dialect.NAVIGATION: "dtplus-as",
}
# Longest stderr excerpt carried into a user-visible message
_MAX_ERROR_CHARS = 300


class ScriptInvoker:
    """
    Executes ScriptJobs via osascript and returns their trimmed stdout.

    Usage (production)::

        invoker = ScriptInvoker(BridgeConfig.from_env())
        raw = invoker.run_structured('JSON.stringify({ok: true})')

    Usage (tests)::

        fake_run = MagicMock(return_value=CompletedProcess([], 0, "{}", ""))
        invoker = ScriptInvoker(_run=fake_run, _target_probe=lambda: True)
    """

    def __init__(
        self,
        config: Optional[BridgeConfig] = None,
        _run: Optional[Callable[..., Any]] = None,
        _target_probe: Optional[Callable[[], Optional[bool]]] = None,
    ) -> None:
        self._config = config or BridgeConfig()
        self._run = _run or subprocess.run
        self._target_probe = _target_probe or self._default_target_probe

    @property
    def config(self) -> BridgeConfig:
        return self._config

    # ── Public API ────────────────────────────────────────────────────────────

    def run_structured(self, body: str, timeout: Optional[float] = None) -> str:
        """Run a JXA script; its output is expected to be JSON."""
        return self.run(ScriptJob(Dialect.STRUCTURED, body, timeout or self._config.timeout))

    def run_navigation(self, body: str, timeout: Optional[float] = None) -> str:
        """Run an AppleScript script; its output is raw delimited text."""
        return self.run(ScriptJob(Dialect.NAVIGATION, body, timeout or self._config.timeout))

    def run(self, job: ScriptJob) -> str:
        """
        Execute *job* and return stdout with trailing whitespace removed.

        Raises:
            ScriptTimeoutError: job.timeout elapsed; the process was killed.
            ScriptProcessError: osascript missing or exited non-zero.
        """
        with tempfile.TemporaryDirectory(prefix=_TEMP_PREFIX) as tmp:
            script_path = Path(tmp) / f"{_SCRIPT_STEM[job.dialect]}{job.suffix}"
            script_path.write_text(job.body, encoding="utf-8")

            cmd = [self._config.osascript, *job.flags, str(script_path)]
            logger.debug("Running %s", job)
            try:
                result = self._run(
                    cmd,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    timeout=job.timeout,
                )
            except subprocess.TimeoutExpired as exc:
                raise ScriptTimeoutError(
                    f"{job.dialect.value} script timed out after {job.timeout:g}s"
                ) from exc
            except OSError as exc:
                raise ScriptProcessError(
                    f"Cannot execute {self._config.osascript}: {exc.strerror or exc}"
                ) from exc

            if result.returncode != 0:
                detail = _sanitize_stderr(result.stderr or "", script_path)
                logger.info(
                    "%s script exited with code %d: %s",
                    job.dialect.value, result.returncode, detail,
                )
                if self._target_probe() is False:
                    raise TargetNotRunningError(
                        f"{self._config.app_name} is not running. "
                        "Launch it and try again."
                    )
                message = f"{job.dialect.value} script failed (exit code {result.returncode})"
                if detail:
                    message += f": {detail}"
                raise ScriptProcessError(message)

        output = (result.stdout or "").rstrip()
        logger.debug("%s script returned %d chars", job.dialect.value, len(output))
        return output

    # ── Internals ─────────────────────────────────────────────────────────────

    def _default_target_probe(self) -> Optional[bool]:
        """
        Return True/False if DEVONthink is / is not running, None if unknown.
        """
        needle = self._config.process_name.lower()
        try:
            for proc in psutil.process_iter(["name"]):
                name = proc.info.get("name") or ""
                if needle in name.lower():
                    return True
        except psutil.Error as exc:
            logger.debug("Process scan failed: %s", exc)
            return None
        return False


def _sanitize_stderr(stderr: str, script_path: Path) -> str:
    """First non-empty stderr line with the temp script path masked, length-capped."""
    for line in stderr.splitlines():
        line = line.strip()
        if not line:
            continue
        for path in (str(script_path.resolve()), str(script_path)):
            line = line.replace(path, "<script>")
        if len(line) > _MAX_ERROR_CHARS:
            line = line[:_MAX_ERROR_CHARS] + "…"
        return line
    return ""
