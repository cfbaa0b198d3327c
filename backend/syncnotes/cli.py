from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, TextIO

from syncnotes import config
from syncnotes.client.editor import TextBuffer
from syncnotes.client.errors import InitializationFailed, SaveFailed
from syncnotes.client.remote import RemoteNoteClient
from syncnotes.client.session import NoteSessionController


async def run_session(remote: RemoteNoteClient, drafts: Iterable[str], out: TextIO) -> int:
    """
    Initialize one note and save every draft to it in order.

    Each save is awaited before the next draft is loaded into the buffer, so
    there is never more than one save in flight.
    """
    session = NoteSessionController(remote)

    out.write("Loading...\n")
    try:
        await session.initialize()
    except InitializationFailed as e:
        out.write(f"Could not start a session: {e}\n")
        return 1
    out.write(f"Editing note {session.note_id}\n")

    editor = TextBuffer(session.content)
    for draft in drafts:
        editor.set_content(draft)
        out.write("Saving...\n")
        try:
            saved = await session.save_from(editor)
        except SaveFailed as e:
            out.write(f"{e}\n")
            return 1
        out.write(f"Saved note {saved.id} ({len(saved.content)} chars)\n")
    return 0


async def _push(base_url: str, timeout: float, files: list[str]) -> int:
    drafts = [Path(f).read_text(encoding="utf-8") for f in files]
    async with RemoteNoteClient(base_url=base_url, timeout_seconds=timeout) as remote:
        return await run_session(remote, drafts, sys.stdout)


def _serve(host: str, port: int) -> int:
    import uvicorn

    uvicorn.run("syncnotes.main:app", host=host, port=port)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="syncnotes")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the notes API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=3000)

    push = sub.add_parser("push", help="save files, in order, as successive versions of a new note")
    push.add_argument("files", nargs="+")
    push.add_argument("--base-url", default=config.base_url())
    push.add_argument("--timeout", type=float, default=config.timeout_seconds())

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        return _serve(args.host, args.port)
    return asyncio.run(_push(args.base_url, args.timeout, args.files))


if __name__ == "__main__":
    raise SystemExit(main())
