from __future__ import annotations

from pathlib import Path

from flask import Flask, jsonify, make_response, request, send_from_directory

from pairview.inputs import live_filter
from pairview.params import ViewParams
from pairview.render import configure_headless_matplotlib
from pairview.service import (
    create_session,
    display_settings,
    export_view,
    get_session,
    lines_to_payload,
    probe_position,
    resize,
    submit,
    summary,
)

configure_headless_matplotlib()

BASE_DIR = Path(__file__).resolve().parent
STATIC_DIR = BASE_DIR / "static"

app = Flask(__name__, static_folder=str(STATIC_DIR), static_url_path="/static")

JSON_OBJECT_REQUIRED = "request body must be a JSON object"


def _optional_width(value: object):
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError("width_px must be a number") from exc


def _json_object():
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        return None
    return payload


def _not_an_object():
    return jsonify({"error": JSON_OBJECT_REQUIRED}), 400


def _view_payload(session) -> dict:
    return {
        "token": session.token,
        "chars_per_line": session.chars_per_line,
        "lines": lines_to_payload(session.lines),
        "summary": summary(session),
        "display": display_settings(session.params),
    }


@app.get("/")
def index():
    return send_from_directory(STATIC_DIR, "index.html")


@app.get("/api/config")
def api_config():
    return jsonify(display_settings(ViewParams()))


@app.post("/api/filter")
def api_filter():
    payload = _json_object()
    if payload is None:
        return _not_an_object()
    return jsonify({"value": live_filter(str(payload.get("value", "")))})


@app.post("/api/render")
def api_render():
    payload = _json_object()
    if payload is None:
        return _not_an_object()
    token = str(payload.get("token", "")).strip()
    try:
        if token:
            session = get_session(token)
        else:
            session = create_session(ViewParams.from_payload(payload.get("params")))
        width_px = _optional_width(payload.get("width_px"))
    except Exception as exc:
        return jsonify({"error": str(exc)}), 400

    accepted = submit(
        session,
        payload.get("first_sequence"),
        payload.get("second_sequence"),
    )
    if not accepted:
        body = {"token": session.token, "field_errors": session.field_errors}
        body["error"] = session.root_error or next(iter(session.field_errors.values()))
        return jsonify(body), 400

    resize(session, width_px)
    return jsonify(_view_payload(session))


@app.post("/api/layout")
def api_layout():
    payload = _json_object()
    if payload is None:
        return _not_an_object()
    token = str(payload.get("token", "")).strip()
    if not token:
        return jsonify({"error": "token is required"}), 400

    try:
        session = get_session(token)
        resize(session, _optional_width(payload.get("width_px")))
    except Exception as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify(_view_payload(session))


@app.post("/api/probe")
def api_probe():
    payload = _json_object()
    if payload is None:
        return _not_an_object()
    token = str(payload.get("token", "")).strip()
    index = payload.get("index")

    if not token:
        return jsonify({"error": "token is required"}), 400
    if index is None:
        return jsonify({"error": "index is required"}), 400

    try:
        session = get_session(token)
        probe = probe_position(session, int(index))
    except Exception as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify(probe)


@app.post("/api/export")
def api_export():
    payload = _json_object()
    if payload is None:
        return _not_an_object()
    token = str(payload.get("token", "")).strip()
    fmt = str(payload.get("format", "svg")).strip().lower()

    if not token:
        return jsonify({"error": "token is required"}), 400

    try:
        session = get_session(token)
        blob = export_view(session, fmt)
    except Exception as exc:
        return jsonify({"error": str(exc)}), 400

    mime = "image/svg+xml" if fmt == "svg" else "image/png"
    filename = f"sequence_pair.{fmt}"

    response = make_response(blob)
    response.headers["Content-Type"] = mime
    response.headers["Content-Disposition"] = f"attachment; filename={filename}"
    return response


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=5000, debug=True, threaded=False)
