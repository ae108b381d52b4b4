from typing import List

# Option defaults
DEFAULT_MARKER_DISPLAY_DURATION = 1.0  # seconds
DEFAULT_OSD_DURATION = 1.5  # seconds
DEFAULT_MARKER_PREFIX = "Marker"

# Navigation
NAVIGATION_EPSILON = 0.5  # seconds
HELP_OSD_DURATION = 10  # seconds

# Derived file names
MARKERS_ASS_EXTENSION = ".markers.ass"
MARKERS_TXT_EXTENSION = ".markers.txt"
FALLBACK_MARKERS_FILE = "markers.ass"
OPTIONS_FILE_NAME = "auto_markers.conf"

# mpv IPC
MAX_WAIT_FOR_SOCKET = 10  # seconds
SOCKET_POLL_INTERVAL = 0.1  # seconds
SOCKET_TIMEOUT = 2.0  # seconds
RETRY_DELAY = 0.5  # seconds
MAX_RETRIES = 3
SCRIPT_MESSAGE_TARGET = "auto-markers"

# Key bindings: (key, action)
KEY_BINDINGS = [
    ("+", "add_marker"),
    ("Ctrl++", "remove_last_marker"),
    ("Ctrl+Shift++", "clear_markers"),
    ("Ctrl+e", "export_markers_text"),
    ("Ctrl+Left", "goto_previous_marker"),
    ("Ctrl+Right", "goto_next_marker"),
    ("Ctrl+h", "show_help"),
]

# ASS document header, written before the [Events] records
ASS_HEADER: List[str] = [
    "[Script Info]",
    "Title: MPV Markers",
    "ScriptType: v4.00+",
    "Collisions: Normal",
    "PlayResX: 1920",
    "PlayResY: 1080",
    "Timer: 100.0000",
    "",
    "[V4+ Styles]",
    "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, "
    "BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, "
    "BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding",
    "Style: Default,Arial,28,&H00FFFFFF,&H000000FF,&H00000000,&H80000000,"
    "1,0,0,0,100,100,0,0,1,2,1,2,10,10,10,1",
    "",
    "[Events]",
    "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text",
]
