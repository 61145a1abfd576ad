#!/usr/bin/env python3
"""
HobbyHub server launcher.

    python run.py                         serve using ENVIRONMENT (default development)
    python run.py --env production        serve with .env.production
    python run.py --check                 print the resolved settings and exit
    python run.py --migrate               apply alembic migrations up to head
    python run.py --create-sample staging write .env.staging.sample
"""

import argparse
import os
import sys
from pathlib import Path

from hobbyhub.config.loader import (
    ConfigLoader,
    describe_settings,
    load_config_for_environment,
    startup_problems,
)
from hobbyhub.config.settings import Environment, Settings

ROOT = Path(__file__).resolve().parent


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="HobbyHub nearby discovery API")
    parser.add_argument("--env", choices=[e.value for e in Environment], default=None)
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--reload", action="store_true")

    action = parser.add_mutually_exclusive_group()
    action.add_argument("--check", action="store_true", help="Print settings and startup problems, then exit")
    action.add_argument("--migrate", action="store_true", help="Run 'alembic upgrade head' against DATABASE_URL")
    action.add_argument("--create-sample", metavar="ENV", help="Write a sample .env file for ENV")
    return parser.parse_args(argv)


def migrate(settings: Settings) -> None:
    from alembic import command
    from alembic.config import Config

    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "alembic"))
    # configparser interpolation treats % specially
    config.set_main_option("sqlalchemy.url", settings.database.url.replace("%", "%%"))
    command.upgrade(config, "head")


def serve(settings: Settings) -> None:
    import uvicorn

    # The worker processes build their own settings from the environment.
    os.environ["ENVIRONMENT"] = settings.environment.value
    env_file = Path(f".env.{settings.environment.value}")

    uvicorn.run(
        "hobbyhub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=1 if settings.reload else settings.workers,
        log_level=settings.log_level.value.lower(),
        env_file=str(env_file) if env_file.exists() else None,
    )


def main(argv=None) -> int:
    args = parse_args(argv)

    if args.create_sample:
        print(f"Wrote {ConfigLoader.create_sample_env_file(args.create_sample)}")
        return 0

    settings = load_config_for_environment(args.env)
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    if args.reload:
        settings.reload = True

    for line in describe_settings(settings):
        print(line)

    problems = startup_problems(settings)
    for problem in problems:
        print(f"  ! {problem}", file=sys.stderr)

    if args.check:
        if not ConfigLoader.validate_environment_config(settings.environment.value):
            print(f"  ! .env.{settings.environment.value} is missing or invalid", file=sys.stderr)
            return 1
        return 1 if problems else 0
    if problems:
        return 1

    if args.migrate:
        migrate(settings)
        return 0

    serve(settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
