"""
HTML rendering of directory contents.
"""

import html
from pathlib import Path
from typing import List, Tuple
from urllib.parse import quote


def _entries(directory: Path) -> List[Tuple[str, bool]]:
    entries = [(entry.name, entry.is_dir()) for entry in directory.iterdir()]
    # Directories first, then case-insensitive by name
    return sorted(entries, key=lambda item: (not item[1], item[0].lower()))


def render_listing(directory: Path, pathname: str = "/") -> str:
    """
    Render the entries of directory as an HTML list.

    Links are relative so they resolve against the base href emitted
    in front of the listing.
    """
    title = html.escape(pathname)
    items = []
    if pathname not in ("", "/"):
        items.append('<li><a href="../">../</a></li>')

    for name, is_dir in _entries(directory):
        label = name + "/" if is_dir else name
        href = quote(name) + ("/" if is_dir else "")
        items.append(f'<li><a href="{html.escape(href)}">{html.escape(label)}</a></li>')

    return (
        f"<title>{title}</title>"
        "<style>"
        "body{font-family:system-ui,sans-serif;margin:2rem;}"
        "ul{list-style:none;padding:0;}"
        "li{padding:0.2rem 0;}"
        "a{text-decoration:none;}"
        "</style>"
        f"<h1>{title}</h1>"
        f"<ul>{''.join(items)}</ul>"
    )
