import os
import subprocess
import sys
from pathlib import Path

from sqlalchemy.engine import make_url


def _env_default(name: str, value: str) -> None:
    current = os.environ.get(name)
    if current is None or current.strip() == "":
        os.environ[name] = value


def _prepare_environment() -> None:
    _env_default("APP_PORT", "8000")
    _env_default("DATABASE_URL", "sqlite+pysqlite:////data/pointhub.db")
    _env_default("SEED_DEMO_DATA", "false")
    _env_default("LOG_LEVEL", "INFO")


def _ensure_storage_paths() -> None:
    database_url = os.environ["DATABASE_URL"]
    try:
        parsed_url = make_url(database_url)
    except Exception:
        return

    if not parsed_url.drivername.startswith("sqlite"):
        return

    db_path = parsed_url.database
    if not db_path or db_path == ":memory:":
        return

    Path(db_path).parent.mkdir(parents=True, exist_ok=True)


def _run(cmd: list[str]) -> None:
    print(">", " ".join(cmd), flush=True)
    subprocess.run(cmd, check=True)


def main() -> None:
    _prepare_environment()
    _ensure_storage_paths()

    print("Starting standalone PointHub backend with:", flush=True)
    print(f"  DATABASE_URL={os.environ['DATABASE_URL']}", flush=True)
    print(f"  SEED_DEMO_DATA={os.environ['SEED_DEMO_DATA']}", flush=True)

    _run([sys.executable, "-m", "alembic", "upgrade", "head"])
    if os.environ["SEED_DEMO_DATA"].strip().lower() in {"1", "true", "yes", "on"}:
        _run([sys.executable, "scripts/seed_demo_data.py"])

    os.execvp(
        "uvicorn",
        [
            "uvicorn",
            "app.main:app",
            "--host",
            "0.0.0.0",
            "--port",
            os.environ["APP_PORT"],
        ],
    )


if __name__ == "__main__":
    main()
