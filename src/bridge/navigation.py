"""AppleScriptGroupNavigator — AbstractGroupNavigator over AppleScript."""

import logging

from src.runtime.builders import build_children_script
from src.runtime.invoker import ScriptInvoker
from .base import AbstractGroupNavigator
from .models import GroupChild
from .normalizers import parse_navigation_output

__all__ = ["AppleScriptGroupNavigator"]

logger = logging.getLogger(__name__)


class AppleScriptGroupNavigator(AbstractGroupNavigator):
    """Lists direct group children with `get record at ... in database named ...`."""

    def __init__(self, invoker: ScriptInvoker) -> None:
        self._invoker = invoker

    def list_children(self, group_path: str, database: str, max_docs: int) -> list[GroupChild]:
        script = build_children_script(self._invoker.config.app_id, group_path, database, max_docs)
        logger.info("Listing %s in %s (max %d)", group_path, database, max_docs)
        raw = self._invoker.run_navigation(script)
        if not raw:
            return []
        return parse_navigation_output(raw)[:max_docs]
