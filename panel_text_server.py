import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

import uvicorn
from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

# --- shared core -----------------------------------------------------------
from transcoder_core import LogLevel, read_input, setup_logging

from panel_store import PanelStore, check_name

VISCII_MEDIA_TYPE = "application/octet-stream"

# ---------------------------------------------------------------------------
# CLI / argparse helpers
# ---------------------------------------------------------------------------


def parse_args(argv: Sequence[str] | None = None):
    p = argparse.ArgumentParser("LED Panel Text Feed")
    p.add_argument(
        "messages",
        nargs="*",
        help="UTF-8 text files to preload; each is stored under its file stem",
    )
    p.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    p.add_argument("--port", type=int, default=8000, help="Web server port")
    p.add_argument(
        "--cors",
        nargs="*",
        default=["*"],
        help="Allowed CORS origins (default: '*')",
    )
    p.add_argument(
        "--upper",
        action="store_true",
        help="Uppercase preloaded messages",
    )
    p.add_argument(
        "-l",
        "--log-level",
        default=LogLevel.INFO.value,
        choices=[lvl.value for lvl in LogLevel],
        help="Logging level",
    )
    return p.parse_args(argv)


def preload(store: PanelStore, paths: Sequence[str], *, uppercase: bool) -> None:
    """Store each UTF-8 file under its stem (trailing newlines dropped)."""
    for path in paths:
        name = Path(path).stem
        panel = store.upsert(name, read_input(path).rstrip(b"\r\n"), uppercase=uppercase)
        logging.info("Loaded message %r (%d bytes)", name, panel.length)


# ---------------------------------------------------------------------------
# FastAPI app factory
# ---------------------------------------------------------------------------


def build_app(store: PanelStore, allowed_origins: list[str]) -> FastAPI:
    app = FastAPI(title="Panel Text Feed", default_response_class=ORJSONResponse)

    # CORS ------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    # Routes ----------------------------------------------------------------
    @app.get("/messages", response_class=Response)
    async def messages():
        """Return all messages as JSON (VISCII bytes hex-encoded)."""
        return Response(store.to_json_bytes(), media_type="application/json")

    @app.get("/messages/{name}", response_class=Response)
    async def message(name: str):
        """Return the terminated VISCII bytes of one message."""
        panel = store.get(name)
        if panel is None:
            raise HTTPException(status_code=404, detail=f"Unknown message {name!r}")
        return Response(
            panel.data,
            media_type=VISCII_MEDIA_TYPE,
            headers={"X-Panel-Length": str(panel.length)},
        )

    @app.put("/messages/{name}")
    async def put_message(name: str, request: Request, upper: bool = False):
        """Store the UTF-8 request body under *name*."""
        try:
            key = check_name(name)
            panel = store.upsert(key, await request.body(), uppercase=upper)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {"name": key, "length": panel.length, "viscii": panel.text.hex()}

    @app.delete("/messages/{name}", status_code=204, response_class=Response)
    async def delete_message(name: str):
        if not store.remove(name):
            raise HTTPException(status_code=404, detail=f"Unknown message {name!r}")
        return Response(status_code=204)

    return app


# ---------------------------------------------------------------------------
# Main routine
# ---------------------------------------------------------------------------


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(LogLevel(args.log_level))

    store = PanelStore()
    try:
        preload(store, args.messages, uppercase=args.upper)
    except (OSError, ValueError) as exc:
        logging.exception("Failed to preload messages: %s", exc)
        return 1

    logging.info("Panel feed 👉 http://%s:%d/messages", args.host, args.port)

    try:
        uvicorn.run(
            build_app(store, args.cors),
            host=args.host,
            port=args.port,
            log_level=args.log_level.lower(),
        )
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
