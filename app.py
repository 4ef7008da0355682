import os
import threading
import traceback
import uuid
from datetime import datetime

from flask import Flask, request, jsonify, session, send_from_directory
from flask_cors import CORS
from werkzeug.exceptions import BadRequest, HTTPException, RequestEntityTooLarge

from huffman import HuffmanCoder
from serialization import encode_document, decode_document

# -----------------------------------------------------------
# CONFIGURATION
# -----------------------------------------------------------
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
WEB_DIR = os.path.join(BASE_DIR, "web")

HOST = os.environ.get("HUFFMAN_HOST", "0.0.0.0")
PORT = int(os.environ.get("HUFFMAN_PORT", 8080))
DEBUG = os.environ.get("HUFFMAN_DEBUG", "").lower() in ("1", "true", "yes")
MAX_CONTENT_LENGTH = int(os.environ.get("HUFFMAN_MAX_CONTENT_LENGTH", 1024 * 1024))
MAX_CODER_SESSIONS = max(1, int(os.environ.get("HUFFMAN_MAX_SESSIONS", 1000)))

API_VERSION = "1.0"

# -----------------------------------------------------------
# FLASK APP SETUP
# -----------------------------------------------------------
app = Flask(__name__, static_folder=None)
app.secret_key = os.environ.get("HUFFMAN_SECRET_KEY", "huffman-dev-key")  # ⚠️ set in production
app.config["MAX_CONTENT_LENGTH"] = MAX_CONTENT_LENGTH
CORS(app)

# -----------------------------------------------------------
# CODER SESSIONS
# -----------------------------------------------------------
class CoderSession:
    """One coder per client session. The lock keeps its calls from overlapping."""
    def __init__(self):
        self.coder = HuffmanCoder()
        self.lock = threading.Lock()


CODER_SESSIONS = {}
CODER_SESSIONS_LOCK = threading.Lock()


def get_coder_session():
    coder_id = session.get("coder_id")
    with CODER_SESSIONS_LOCK:
        entry = CODER_SESSIONS.get(coder_id)
        if entry is None:
            # Oldest session goes first when the registry is full
            while CODER_SESSIONS and len(CODER_SESSIONS) >= MAX_CODER_SESSIONS:
                CODER_SESSIONS.pop(next(iter(CODER_SESSIONS)))
            coder_id = uuid.uuid4().hex
            entry = CoderSession()
            CODER_SESSIONS[coder_id] = entry
            session["coder_id"] = coder_id
        return entry


# -----------------------------------------------------------
# HELPER FUNCTIONS
# -----------------------------------------------------------
def log(message):
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{timestamp}] {message}")


def read_text():
    """Raw request body, or the 'text' field of a JSON body."""
    if request.is_json:
        data = request.get_json(silent=True)
        if isinstance(data, dict) and isinstance(data.get("text"), str):
            return data["text"].encode("utf-8")
        return b""
    return request.get_data()


@app.before_request
def log_request():
    line = f"{request.method} {request.path}"
    if request.content_length:
        line += f" (Content-Length: {request.content_length})"
    log(line)


@app.errorhandler(RequestEntityTooLarge)
def request_too_large(e):
    return jsonify({"error": "Request body too large"}), 413


# -----------------------------------------------------------
# API ROUTES
# -----------------------------------------------------------
@app.route("/api/status")
def status():
    return jsonify({"status": "running", "backend": "Python", "version": API_VERSION})


@app.route("/api/encode", methods=["POST"])
def encode_route():
    try:
        text = read_text()
        print(f"  [ENCODE] Input length: {len(text)} chars")

        if not text:
            return jsonify({"error": "No text provided"}), 400

        entry = get_coder_session()
        with entry.lock:
            encoded = entry.coder.compress(text)
            document = encode_document(entry.coder, text, encoded)

        print(f"  [ENCODE] Output length: {len(encoded)} bits")
        return jsonify(document)

    except HTTPException:
        raise
    except Exception as e:
        print("Error in /api/encode:", e)
        traceback.print_exc()
        return jsonify({"error": "Internal Server Error"}), 500


@app.route("/api/decode", methods=["POST"])
def decode_route():
    try:
        try:
            data = request.get_json(force=True)
        except BadRequest:
            print("  [DECODE] ERROR: Malformed JSON")
            return jsonify({"error": "Invalid request format - malformed JSON"}), 400

        # Well-formed JSON that is not an object (null, lists, numbers) has no 'encoded' field
        encoded = data.get("encoded") if isinstance(data, dict) else None
        if not isinstance(encoded, str):
            print("  [DECODE] ERROR: 'encoded' field not found in body")
            return jsonify({"error": "Invalid request format - 'encoded' field not found"}), 400

        print(f"  [DECODE] Input length: {len(encoded)} bits")

        entry = get_coder_session()
        with entry.lock:
            decoded = entry.coder.decode(encoded)
            document = decode_document(entry.coder, decoded)

        print(f"  [DECODE] Output length: {len(decoded)} chars")
        print(f"  [DECODE] Match with original: {'YES' if document['match'] else 'NO'}")
        return jsonify(document)

    except HTTPException:
        raise
    except Exception as e:
        print("Error in /api/decode:", e)
        traceback.print_exc()
        return jsonify({"error": "Internal Server Error"}), 500


# -----------------------------------------------------------
# STATIC FILES
# -----------------------------------------------------------
@app.route("/")
def home():
    return send_from_directory(WEB_DIR, "index.html")


@app.route("/<path:filename>")
def web_file(filename):
    return send_from_directory(WEB_DIR, filename)


# -----------------------------------------------------------
if __name__ == "__main__":
    log(f"Server listening on http://{HOST}:{PORT}")
    log(f"Serving static files from {WEB_DIR}")
    app.run(host=HOST, port=PORT, debug=DEBUG, threaded=True)
