from __future__ import annotations


class BuildError(Exception):
    """Raised when the site cannot be built."""


class LayoutError(BuildError):
    def __init__(self, path: str, layout: str) -> None:
        super().__init__(f"Unknown layout '{layout}' in {path}")
        self.path = path
        self.layout = layout


class MinifyError(BuildError):
    def __init__(self, output_path: str, reason: object) -> None:
        super().__init__(f"Could not minify {output_path}: {reason}")
        self.output_path = output_path
