"""
HTML fragments composed into served documents.
"""

from spaserve.paths import directory_href

LIVERELOAD_SCRIPT = """
<script>
  const source = new EventSource('/livereload');
  const reload = () => location.reload(true);
  source.onmessage = reload;
  source.onerror = () => (source.onopen = reload);
  console.log('[spaserve] listening for file changes');
</script>
"""


def base_document(pathname: str = "") -> str:
    """Charset and base href so relative references resolve against pathname."""
    return f'<!doctype html><meta charset="utf-8"/><base href="{directory_href(pathname)}"/>'


def livereload_script(enabled: bool) -> str:
    return LIVERELOAD_SCRIPT if enabled else ""
