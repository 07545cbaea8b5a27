from __future__ import annotations

from typing import NoReturn


class Redirect(Exception):
    """Control transfer to another path. The app turns it into a 303 response."""

    def __init__(self, path: str):
        super().__init__(path)
        self.path = path


def redirect(path: str) -> NoReturn:
    raise Redirect(path)
