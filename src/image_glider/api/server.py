"""
uvicorn で API サーバーを起動する
"""
import argparse

import uvicorn

from ..runtime_logging import setup_logging
from .app import create_app
from .config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="image-glider-api", description="ImageGlider API サーバー")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--verbose", "-v", action="store_true", help="DEBUGログを表示する")
    args = parser.parse_args()

    setup_logging(console_level="DEBUG" if args.verbose else "INFO")
    uvicorn.run(create_app(settings), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
