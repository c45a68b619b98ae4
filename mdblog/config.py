import argparse
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server settings.

    Environment overrides use the ``MDBLOG_`` prefix (``MDBLOG_SRC``,
    ``MDBLOG_PORT``, ...); keyword arguments win over the environment.
    """

    src: Path = Field(Path("./pages/"), description="blog folder")
    tmpl: Path = Field(Path("./templates/"), description="template folder")
    files: Path = Field(Path("./files/"), description="static files folder")
    comments: Path = Field(Path("./comments/"), description="comment folder")
    host: str = "0.0.0.0"
    port: int = Field(8001, ge=0, le=65535)
    refresh: float = Field(30.0, gt=0, description="index refresh interval in seconds")
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix="MDBLOG_",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdblog", description="Serve a folder of markdown pages with comments."
    )
    parser.add_argument("--src", help="blog folder (default ./pages/)")
    parser.add_argument("--tmpl", help="template folder (default ./templates/)")
    parser.add_argument("--files", help="static files folder (default ./files/)")
    parser.add_argument("--comments", help="comment folder (default ./comments/)")
    parser.add_argument("--host", help="listen address (default 0.0.0.0)")
    parser.add_argument("--port", type=int, help="listen port (default 8001)")
    parser.add_argument("--refresh", type=float, help="index refresh interval in seconds (default 30)")
    parser.add_argument("--log-level", dest="log_level", help="logging level (default INFO)")
    return parser


def settings_from_args(argv=None) -> Settings:
    args = build_parser().parse_args(argv)
    return Settings(**{k: v for k, v in vars(args).items() if v is not None})
