from pathlib import Path

BASE_DIR: Path = Path(__file__).parent.parent.absolute()
