from __future__ import annotations

import argparse
import sys
from typing import Optional

from .app import create_app


try:
    import uvicorn
except ModuleNotFoundError as exc:  # pragma: no cover - import failure path
    uvicorn = None
    _IMPORT_ERROR = exc
else:
    _IMPORT_ERROR = None


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Serve the bfkit compile and run endpoints (/api/ast, /api/compile, /api/run)"
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on (default: 8000)")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when bfkit sources change",
    )
    args = parser.parse_args(argv)

    if uvicorn is None:
        print(f"Serving the bfkit API needs uvicorn: {_IMPORT_ERROR}", file=sys.stderr)
        return 1

    if args.reload:
        # Reloading needs an import string so the worker can rebuild the app.
        uvicorn.run("bfkit.webui.app:create_app", factory=True, host=args.host, port=args.port, reload=True)
    else:
        uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
