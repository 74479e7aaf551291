"""
In-memory storage.

Nothing here outlives the process: panels and uploaded media are
single-session by nature.
"""

from typing import Any, Dict, Tuple

# Media storage: locator token -> (payload, content type)
# Entries exist exactly while their MediaLease is unreleased.
media_store: Dict[str, Tuple[bytes, str]] = {}

# Panel storage: panel_id -> PreviewPanel
panel_store: Dict[str, Any] = {}
