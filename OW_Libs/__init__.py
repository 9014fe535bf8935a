"""
OW_Libs - Open Watermark Library Modules

This package contains core functionality for the Open Watermark project,
organized into specialized sub-packages:

- ImageEditingLib: Image loading/saving, grayscale, watermark tiling and the editing session
- HistoryLib: Durable, append-only operation history
- ShellLib: Command registry and the interactive console menu
"""

__version__ = "0.1.0"
