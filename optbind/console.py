# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global console instance for optbind CLI applications."""
from rich.console import Console

from optbind.themes import get_theme

console = Console(theme=get_theme())
