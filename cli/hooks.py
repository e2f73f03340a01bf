"""Callbacks that run after a command finishes."""

from typing import Callable, Dict, List

import click
from loguru import logger


Hook = Callable[[click.Context], None]


class PostCommandHooks:
    """Ordered callbacks keyed by the name of the command they follow."""

    def __init__(self):
        self._hooks: Dict[str, List[Hook]] = {}

    def register(self, command: str, hook: Hook) -> None:
        self._hooks.setdefault(command, []).append(hook)

    def hooks_for(self, command: str) -> List[Hook]:
        return list(self._hooks.get(command, []))

    def run(self, command: str, ctx: click.Context) -> None:
        for hook in self.hooks_for(command):
            logger.debug(f"Running post-command hook {getattr(hook, '__name__', hook)} for {command}")
            hook(ctx)
