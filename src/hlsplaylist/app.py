import logging
import os

from flask import Flask, abort, request
from flask.typing import ResponseReturnValue
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from hlsplaylist.cli import main
from hlsplaylist.hls import PlaylistError, parse

MAX_CONTENT_LENGTH = int(os.getenv("HLSPLAYLIST_MAX_CONTENT_LENGTH", 16 * 2 ** 20))

_logger = logging.getLogger("hlsplaylist")

app = Flask("hlsplaylist")
app.config["JSONIFY_PRETTYPRINT_REGULAR"] = True
app.config["MAX_CONTENT_LENGTH"] = MAX_CONTENT_LENGTH
app.cli.add_command(main)
app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1)  # type: ignore


@app.get("/")
def root() -> ResponseReturnValue:
    return {"status": "ok"}


@app.post("/playlists")
def create_playlist() -> ResponseReturnValue:
    text = request.get_data(as_text=True)
    if not text.strip():
        abort(400, "Missing playlist body")
    try:
        playlist = parse(text)
    except PlaylistError as error:
        _logger.info("Rejected playlist: %s", error)
        abort(422, str(error))
    return playlist.to_dict()


@app.errorhandler(HTTPException)
def handle_error(error: HTTPException) -> ResponseReturnValue:
    return {
        "error": {"name": error.name.lower(), "description": error.description}
    }, error.code
