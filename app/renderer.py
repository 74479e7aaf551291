"""
HTML rendering for the preview page.

Each selected device is drawn as a framed screen sized by its resolution
times the panel scale, filled with the current media (cover-fit) or a
placeholder, with a caption underneath.
"""

from html import escape
from typing import Optional

from app.catalog import ECHO_SHOW_DEVICES
from app.config import MAX_SCALE, MIN_SCALE, SCALE_STEP
from app.models import DevicePreview, MediaKind, MediaReference, ViewMode
from app.panel import PreviewPanel

EMPTY_STATE_MESSAGE = "Select at least one device to preview"

STYLES = """
        * {
            box-sizing: border-box;
        }

        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, sans-serif;
            background: linear-gradient(135deg, #0f172a 0%, #1e293b 50%, #0f172a 100%);
            min-height: 100vh;
            margin: 0;
            padding: 16px;
            color: #fff;
        }

        .container {
            max-width: 1280px;
            margin: 0 auto;
        }

        h1 {
            text-align: center;
            color: #22d3ee;
            margin-bottom: 4px;
            font-size: 1.5rem;
        }

        .subtitle {
            text-align: center;
            color: #94a3b8;
            font-size: 0.85rem;
            margin-bottom: 24px;
        }

        .controls {
            display: flex;
            flex-wrap: wrap;
            gap: 16px;
            align-items: flex-start;
            background: rgba(30, 41, 59, 0.5);
            border: 1px solid rgba(51, 65, 85, 0.5);
            border-radius: 16px;
            padding: 16px;
            margin-bottom: 16px;
        }

        .control {
            flex: 1;
            min-width: 220px;
            position: relative;
        }

        .control label, .control-label {
            display: block;
            font-size: 0.85rem;
            color: #cbd5e1;
            margin-bottom: 8px;
        }

        .upload-zone {
            border: 2px dashed #475569;
            border-radius: 12px;
            padding: 12px;
            text-align: center;
            cursor: pointer;
            color: #94a3b8;
            font-size: 0.8rem;
        }

        .upload-zone.loaded {
            border-color: rgba(34, 197, 94, 0.5);
            color: #4ade80;
        }

        .upload-zone.dragging {
            border-color: #22d3ee;
        }

        .upload-zone input {
            display: none;
        }

        button {
            cursor: pointer;
            border: none;
            border-radius: 8px;
            padding: 8px 12px;
            background: rgba(51, 65, 85, 0.5);
            color: #cbd5e1;
        }

        button.active {
            background: #06b6d4;
            color: #fff;
        }

        .dropdown-menu {
            position: absolute;
            z-index: 100;
            width: 100%;
            margin-top: 8px;
            background: #1e293b;
            border: 1px solid #475569;
            border-radius: 12px;
            overflow: hidden;
        }

        .dropdown-actions {
            display: flex;
            gap: 8px;
            padding: 8px;
            border-bottom: 1px solid #334155;
        }

        .dropdown-actions button {
            flex: 1;
            font-size: 0.75rem;
        }

        .device-option {
            width: 100%;
            display: flex;
            justify-content: space-between;
            text-align: left;
            border-radius: 0;
            background: transparent;
        }

        .device-option.selected {
            background: rgba(6, 182, 212, 0.1);
        }

        .device-option small {
            display: block;
            color: #64748b;
        }

        .previews {
            display: flex;
            justify-content: center;
        }

        .previews.grid {
            flex-wrap: wrap;
            gap: 24px;
        }

        .previews.stack {
            flex-direction: column;
            align-items: center;
            gap: 32px;
        }

        .device {
            display: flex;
            flex-direction: column;
            align-items: center;
        }

        .device-frame {
            position: relative;
            border-radius: 16px;
            padding: 12px;
            background: linear-gradient(145deg, #1a1a2e 0%, #0f0f1a 100%);
            box-shadow: 0 25px 50px -12px rgba(0, 0, 0, 0.5), inset 0 1px 1px rgba(255,255,255,0.05);
        }

        .camera {
            position: absolute;
            top: 4px;
            left: 50%;
            width: 8px;
            height: 8px;
            margin-left: -4px;
            border-radius: 50%;
            background: #334155;
        }

        .screen {
            position: relative;
            overflow: hidden;
            border-radius: 8px;
            background: #000;
        }

        .screen img, .screen video {
            width: 100%;
            height: 100%;
            object-fit: cover;
            display: block;
        }

        .placeholder {
            width: 100%;
            height: 100%;
            display: flex;
            flex-direction: column;
            align-items: center;
            justify-content: center;
            color: #64748b;
            font-size: 0.75rem;
            background: linear-gradient(135deg, #1e293b, #0f172a);
        }

        .caption {
            margin-top: 12px;
            text-align: center;
            font-size: 0.75rem;
            color: #64748b;
        }

        .caption strong {
            display: block;
            color: #e2e8f0;
            font-size: 0.85rem;
        }

        .caption .preview-size {
            color: rgba(34, 211, 238, 0.7);
        }

        .empty-state {
            text-align: center;
            padding: 64px 0;
            color: #64748b;
        }

        .reference {
            margin-top: 32px;
            background: rgba(30, 41, 59, 0.3);
            border: 1px solid rgba(51, 65, 85, 0.5);
            border-radius: 12px;
            padding: 16px;
        }

        .reference table {
            width: 100%;
            border-collapse: collapse;
            font-size: 0.75rem;
        }

        .reference th, .reference td {
            text-align: left;
            padding: 8px 12px;
            border-bottom: 1px solid #334155;
            color: #94a3b8;
        }

        .reference td:first-child {
            color: #e2e8f0;
        }
"""


def render_media(media: Optional[MediaReference], device_id: str, is_playing: bool) -> str:
    """The screen contents: the current media, or a placeholder."""
    if media is None:
        return (
            '<div class="placeholder"><span>&#128421;</span>'
            "<span>No media</span></div>"
        )

    src = escape(media.locator, quote=True)
    # Inline handler so failures before the page script runs are still reported
    onerror = 'onerror="reportMediaError(this)"'
    if media.kind == MediaKind.VIDEO:
        autoplay = " autoplay" if is_playing else ""
        return (
            f'<video src="{src}" data-device-id="{escape(device_id, quote=True)}" '
            f"{onerror}{autoplay} loop muted playsinline></video>"
        )
    return (
        f'<img src="{src}" alt="Preview" '
        f'data-device-id="{escape(device_id, quote=True)}" {onerror}>'
    )


def render_device(
    preview: DevicePreview, media: Optional[MediaReference], is_playing: bool
) -> str:
    device = preview.device
    size_style = (
        f"width: {preview.width}px; height: {preview.height}px; "
        f"min-width: {preview.width}px; min-height: {preview.height}px;"
    )
    return f"""
        <div class="device" id="device-{escape(device.id, quote=True)}">
            <div class="device-frame">
                <div class="screen" style="{size_style}">
                    {render_media(media, device.id, is_playing)}
                </div>
                <div class="camera"></div>
            </div>
            <div class="caption" title="{escape(preview.caption, quote=True)}">
                <strong>{escape(device.name)}</strong>
                <div>{escape(device.screen_size)} &bull; {device.width}×{device.height} &bull; {escape(device.year)}</div>
                <div class="preview-size">Preview: {preview.width}×{preview.height}px</div>
            </div>
        </div>"""


def render_empty_state() -> str:
    return f"""
        <div class="empty-state">
            <div>&#128421;</div>
            <p>{EMPTY_STATE_MESSAGE}</p>
        </div>"""


def render_previews(panel: PreviewPanel) -> str:
    previews = panel.previews()
    if not previews:
        return render_empty_state()

    mode = "grid" if panel.view_mode == ViewMode.GRID else "stack"
    devices = "".join(
        render_device(preview, panel.media, panel.is_playing) for preview in previews
    )
    return f'\n        <div class="previews {mode}" id="previews">{devices}\n        </div>'


def render_reference_table() -> str:
    rows = "".join(
        f"""
                <tr>
                    <td>{escape(device.name)}</td>
                    <td>{escape(device.screen_size)}</td>
                    <td>{device.width}×{device.height}</td>
                    <td>{device.aspect_ratio}</td>
                    <td>{escape(device.year)}</td>
                </tr>"""
        for device in ECHO_SHOW_DEVICES
    )
    return f"""
        <div class="reference">
            <h2>Echo Show Device Reference</h2>
            <table>
                <thead>
                    <tr>
                        <th>Device</th>
                        <th>Screen</th>
                        <th>Resolution</th>
                        <th>Aspect Ratio</th>
                        <th>Year</th>
                    </tr>
                </thead>
                <tbody>{rows}
                </tbody>
            </table>
        </div>"""


def render_upload_zone(panel: PreviewPanel) -> str:
    if panel.media is None:
        body = "<div>&#8679;</div><div>Drop image/video or click</div>"
        css = "upload-zone"
    else:
        icon = "&#127909;" if panel.media.kind == MediaKind.VIDEO else "&#128444;"
        body = (
            f"<span>{icon}</span> <span>{escape(panel.media.filename)}</span> "
            '<button type="button" title="Remove" '
            'onclick="event.stopPropagation(); clearMedia()">&times;</button>'
        )
        css = "upload-zone loaded"
    return f"""
            <div class="control">
                <label>Media Upload</label>
                <div class="{css}" id="upload-zone" onclick="document.getElementById('file-input').click()">
                    <input type="file" id="file-input" accept="image/*,video/*">
                    {body}
                </div>
            </div>"""


def render_device_selector(panel: PreviewPanel) -> str:
    menu = ""
    if panel.dropdown_open:
        options = "".join(
            f"""
                        <button type="button" class="device-option{' selected' if device.id in panel.selected else ''}"
                            onclick="post('devices/{escape(device.id, quote=True)}/toggle')">
                            <span>{escape(device.name)} ({escape(device.year)})
                                <small>{escape(device.screen_size)} &bull; {device.width}×{device.height}</small>
                            </span>
                            <span>{'&#10003;' if device.id in panel.selected else ''}</span>
                        </button>"""
            for device in ECHO_SHOW_DEVICES
        )
        menu = f"""
                <div class="dropdown-menu">
                    <div class="dropdown-actions">
                        <button type="button" onclick="post('devices/select-all')">Select All</button>
                        <button type="button" onclick="post('devices/clear-all')">Clear All</button>
                    </div>
                    <div>{options}
                    </div>
                </div>"""
    arrow = "&#9650;" if panel.dropdown_open else "&#9660;"
    return f"""
            <div class="control" id="device-selector">
                <label>Select Devices</label>
                <button type="button" onclick="post('dropdown/toggle')" style="width: 100%; text-align: left;">
                    {panel.selection_label} {arrow}
                </button>{menu}
            </div>"""


def render_view_controls(panel: PreviewPanel) -> str:
    grid_css = "active" if panel.view_mode == ViewMode.GRID else ""
    stack_css = "active" if panel.view_mode == ViewMode.STACK else ""
    return f"""
            <div>
                <span class="control-label">View</span>
                <button type="button" class="{grid_css}" title="Grid View" onclick="setViewMode('grid')">Grid</button>
                <button type="button" class="{stack_css}" title="Stack View" onclick="setViewMode('stack')">Stack</button>
                <div style="margin-top: 8px; width: 128px;">
                    <label class="control-label" for="scale">Scale: {panel.scale_percent}%</label>
                    <input type="range" id="scale" min="{MIN_SCALE}" max="{MAX_SCALE}" step="{SCALE_STEP}"
                        value="{panel.scale}" aria-label="Preview scale percentage"
                        onchange="setScale(this.value)">
                </div>
            </div>"""


def render_playback_controls(panel: PreviewPanel) -> str:
    if not panel.is_video:
        return ""
    label = "Pause All" if panel.is_playing else "Play All"
    glyph = "&#10074;&#10074;" if panel.is_playing else "&#9654;"
    return f"""
            <div>
                <span class="control-label">Playback</span>
                <button type="button" id="play-toggle" title="{label}" onclick="togglePlayback()">{glyph}</button>
                <button type="button" title="Restart All" onclick="restartPlayback()">&#8634;</button>
            </div>"""


def render_page(panel: PreviewPanel, base_url: str = "") -> str:
    """The complete preview page for a panel."""
    panel_url = f"{base_url.rstrip('/')}/panels/{panel.panel_id}"
    dropdown_open = "true" if panel.dropdown_open else "false"

    return f"""
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Echo Show Screen Tester</title>
    <style>{STYLES}    </style>
    <script>
        const PANEL_URL = '{panel_url}';

        function reportMediaError(element) {{
            console.error('Media failed to load:', element.src);
            fetch(`${{PANEL_URL}}/media/errors`, {{
                method: 'POST',
                headers: {{ 'Content-Type': 'application/json' }},
                body: JSON.stringify({{
                    device_id: element.dataset.deviceId,
                    locator: element.getAttribute('src'),
                    message: 'media failed to load'
                }})
            }});
        }}
    </script>
</head>
<body>
    <div class="container">
        <h1>Echo Show Screen Tester</h1>
        <p class="subtitle">Test your media across multiple Echo Show screen sizes simultaneously</p>

        <div class="controls">{render_upload_zone(panel)}{render_device_selector(panel)}{render_view_controls(panel)}{render_playback_controls(panel)}
        </div>
{render_previews(panel)}
{render_reference_table()}
    </div>

    <script>
        const DROPDOWN_OPEN = {dropdown_open};

        async function post(path, body) {{
            const options = {{ method: 'POST' }};
            if (body !== undefined) {{
                options.headers = {{ 'Content-Type': 'application/json' }};
                options.body = JSON.stringify(body);
            }}
            const resp = await fetch(`${{PANEL_URL}}/${{path}}`, options);
            location.reload();
            return resp;
        }}

        async function put(path, body) {{
            await fetch(`${{PANEL_URL}}/${{path}}`, {{
                method: 'PUT',
                headers: {{ 'Content-Type': 'application/json' }},
                body: JSON.stringify(body)
            }});
            location.reload();
        }}

        function setScale(value) {{
            put('scale', {{ scale: parseFloat(value) }});
        }}

        function setViewMode(mode) {{
            put('view-mode', {{ view_mode: mode }});
        }}

        async function uploadFile(file, path) {{
            const formData = new FormData();
            formData.append('file', file);
            await fetch(`${{PANEL_URL}}/${{path}}`, {{ method: 'POST', body: formData }});
            location.reload();
        }}

        async function clearMedia() {{
            await fetch(`${{PANEL_URL}}/media`, {{ method: 'DELETE' }});
            location.reload();
        }}

        function videos() {{
            return Array.from(document.querySelectorAll('video[data-device-id]'));
        }}

        function playVideo(video) {{
            video.play().catch((err) => {{
                fetch(`${{PANEL_URL}}/playback/rejections`, {{
                    method: 'POST',
                    headers: {{ 'Content-Type': 'application/json' }},
                    body: JSON.stringify({{ device_id: video.dataset.deviceId, message: String(err) }})
                }});
            }});
        }}

        async function togglePlayback() {{
            const resp = await fetch(`${{PANEL_URL}}/playback/toggle`, {{ method: 'POST' }});
            if (!resp.ok) return;
            const state = await resp.json();
            videos().forEach((video) => state.is_playing ? playVideo(video) : video.pause());
            const button = document.getElementById('play-toggle');
            button.innerHTML = state.is_playing ? '&#10074;&#10074;' : '&#9654;';
            button.title = state.is_playing ? 'Pause All' : 'Play All';
        }}

        async function restartPlayback() {{
            const resp = await fetch(`${{PANEL_URL}}/playback/restart`, {{ method: 'POST' }});
            if (!resp.ok) return;
            videos().forEach((video) => {{
                video.currentTime = 0;
                playVideo(video);
            }});
        }}

        videos().forEach((video) => {{
            video.addEventListener('loadeddata', () => {{
                if (video.autoplay) playVideo(video);
            }});
        }});

        const zone = document.getElementById('upload-zone');
        document.getElementById('file-input').addEventListener('change', (event) => {{
            const file = event.target.files && event.target.files[0];
            if (file) uploadFile(file, 'media');
        }});
        zone.addEventListener('dragover', (event) => {{
            event.preventDefault();
            zone.classList.add('dragging');
        }});
        zone.addEventListener('dragleave', () => zone.classList.remove('dragging'));
        zone.addEventListener('drop', (event) => {{
            event.preventDefault();
            event.stopPropagation();
            zone.classList.remove('dragging');
            const file = event.dataTransfer.files && event.dataTransfer.files[0];
            if (file) uploadFile(file, 'media/drop');
        }});

        // Close the device dropdown on pointer-down outside it, only while open
        if (DROPDOWN_OPEN) {{
            const selector = document.getElementById('device-selector');
            document.addEventListener('mousedown', (event) => {{
                if (!selector.contains(event.target)) {{
                    post('dropdown/pointer-down', {{ inside: false }});
                }}
            }});
        }}
    </script>
</body>
</html>
    """
