"""Shared rendering helpers for CLI views."""

import click

from paytrack.domain.status import get_status_info

SHORT_ID_LENGTH = 8


def short_id(document_id: str) -> str:
    return document_id[:SHORT_ID_LENGTH]


def status_badge(code: str, width: int = 0) -> str:
    """Render a status label padded to width and colored by its registry entry."""
    info = get_status_info(code)
    label = f"{info.label:<{width}}" if width else info.label
    if info.color is None:
        return label
    return click.style(label, fg=info.color)


def rule(width: int = 100) -> None:
    click.echo("-" * width)
