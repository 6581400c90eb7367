"""config_loading.py

    python examples/config_loading.py remote rm origin upstream
"""
from pathlib import Path

from optbind.config import loader

cli = loader(Path(__file__).parent / "tester.yaml")

if __name__ == "__main__":
    cli.go_and_exit()
