"""
main.py — Red-Black Tree Service (Flask)
=========================================
JSON backend for the browser-side tree simulator.  The renderer owns all
drawing and animation; this server owns the tree.

Routes:
  GET  /api/state               – current tree snapshot, stats, history position
  POST /api/insert              – insert {"key"}
  POST /api/delete              – delete {"key"} or {"id"}
  GET  /api/search?key=         – BST descent, returns found node + path
  GET  /api/traverse?order=     – bfs | pre | in | post | dfs  (optional &key= to stop at a node)
  GET  /api/node/<id>           – stats for one node
  POST /api/tree/generate       – random tree {"count", "seed"}
  POST /api/undo                – previous version
  POST /api/redo                – next version
  POST /api/reset               – empty tree, history cleared
  GET  /api/algorithms          – traversal registry

State management:
  Each browser session gets an id in the Flask session cookie.  The tree
  versions themselves live in a process-local store keyed by that id
  (in-memory, least recently used session evicted past MAX_SESSIONS).

Configuration (defaults in DEFAULT_CONFIG, overridable through RBTREE_*
environment variables, e.g. RBTREE_MAX_HISTORY=50):
    SECRET_KEY, MAX_HISTORY, MAX_NODES, MAX_SESSIONS, KEY_MIN, KEY_MAX,
    DEFAULT_GENERATE_COUNT
"""

import logging
import random
import secrets
import threading
import uuid
from collections import OrderedDict
from typing import Any, Dict, Optional

from flask import Blueprint, Flask, current_app, jsonify, request, session

from rbtree import RedBlackTree, get_traversal, list_traversals, traversal_search
from engine import TreeHistory, compute_stats, node_stats

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    "MAX_HISTORY":            100,
    "MAX_NODES":              256,
    "MAX_SESSIONS":           1000,
    "KEY_MIN":                -999,     # the simulator's input box takes 3 digits
    "KEY_MAX":                999,
    "DEFAULT_GENERATE_COUNT": 10,
}


# ---------------------------------------------------------------------------
# History store
# ---------------------------------------------------------------------------
class HistoryStore:
    """
    Per-session TreeHistory objects behind one lock.  At most
    max_sessions are kept; the least recently used one is evicted.
    """

    def __init__(self, max_versions: int, max_sessions: int):
        self.max_versions = max_versions
        self.max_sessions = max_sessions
        self.lock = threading.Lock()
        self._histories: "OrderedDict[str, TreeHistory]" = OrderedDict()

    def get(self, sid: str) -> TreeHistory:
        history = self._histories.get(sid)
        if history is not None:
            self._histories.move_to_end(sid)
            return history

        history = TreeHistory(max_versions=self.max_versions)
        self._histories[sid] = history
        while len(self._histories) > self.max_sessions:
            evicted, _ = self._histories.popitem(last=False)
            logger.info("evicted history of session %s", evicted)
        return history

    def __contains__(self, sid: str) -> bool:
        return sid in self._histories

    def __len__(self) -> int:
        return len(self._histories)


def get_store() -> HistoryStore:
    return current_app.extensions["rbtree"]


def get_history() -> TreeHistory:
    """Session's history, creating the session id on first use.  Caller holds the lock."""
    if "sid" not in session:
        session["sid"] = uuid.uuid4().hex
    return get_store().get(session["sid"])


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------
class BadInput(ValueError):
    pass


def parse_key(raw: Any) -> int:
    if raw is None or raw == "":
        raise BadInput("Missing key")
    if isinstance(raw, bool):
        raise BadInput(f"Key must be an integer, got {raw!r}")
    if isinstance(raw, int):
        key = raw
    elif isinstance(raw, str):
        try:
            key = int(raw.strip())
        except ValueError:
            raise BadInput(f"Key must be an integer, got {raw!r}") from None
    else:
        raise BadInput(f"Key must be an integer, got {raw!r}")

    lo, hi = current_app.config["KEY_MIN"], current_app.config["KEY_MAX"]
    if not lo <= key <= hi:
        raise BadInput(f"Key {key} outside [{lo}, {hi}]")
    return key


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def tree_payload(history: TreeHistory, **extra) -> Dict[str, Any]:
    tree = history.current
    payload = {
        "tree":    tree.to_dict(),
        "stats":   compute_stats(tree).to_dict(),
        "history": history.to_dict(),
    }
    payload.update(extra)
    return payload


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------
api = Blueprint("api", __name__, url_prefix="/api")


@api.errorhandler(BadInput)
def handle_bad_input(err: BadInput):
    return jsonify({"error": str(err)}), 400


@api.route("/state", methods=["GET"])
def api_state():
    with get_store().lock:
        return jsonify(tree_payload(get_history()))


@api.route("/insert", methods=["POST"])
def api_insert():
    key = parse_key(json_body().get("key"))
    with get_store().lock:
        history = get_history()
        tree = history.current
        if key not in tree and len(tree) >= current_app.config["MAX_NODES"]:
            return jsonify({"error": f"Tree is full ({len(tree)} nodes)"}), 400

        new_tree = tree.insert(key)
        inserted = history.push(new_tree)
        if inserted:
            logger.info("inserted %d (size %d)", key, len(new_tree))
        else:
            logger.info("insert %d ignored: value exists", key)

        return jsonify(tree_payload(
            history,
            inserted=inserted,
            key=key,
            fixup=[step._asdict() for step in new_tree.fixup_trace] if inserted else [],
        ))


@api.route("/delete", methods=["POST"])
def api_delete():
    data = json_body()
    with get_store().lock:
        history = get_history()
        tree = history.current

        if data.get("id"):
            node = tree.find_by_id(str(data["id"]))
            key: Optional[int] = node.key if node is not None else None
        else:
            key = parse_key(data.get("key"))

        deleted = False
        if key is not None:
            deleted = history.push(tree.delete(key))
        if deleted:
            logger.info("deleted %d (size %d)", key, len(history.current))

        return jsonify(tree_payload(history, deleted=deleted, key=key))


@api.route("/search", methods=["GET"])
def api_search():
    key = parse_key(request.args.get("key"))
    with get_store().lock:
        tree = get_history().current
    node = tree.search(key)
    return jsonify({
        "key":   key,
        "found": node is not None,
        "node":  node.to_dict() if node is not None else None,
        "path":  [n.id for n in tree.descent_path(key)],
    })


@api.route("/traverse", methods=["GET"])
def api_traverse():
    order = request.args.get("order", "bfs")
    info = get_traversal(order)
    if info is None:
        return jsonify({"error": f"Unknown traversal order: {order}"}), 400

    raw_key = request.args.get("key")
    key = parse_key(raw_key) if raw_key not in (None, "") else None

    with get_store().lock:
        tree = get_history().current

    if key is None:
        path, found = list(info.fn(tree)), None
    else:
        path, found = traversal_search(tree, key, info.key)

    return jsonify({
        "order": info.key,
        "label": info.label,
        "path":  [n.id for n in path],
        "keys":  [n.key for n in path],
        "found": found.id if found is not None else None,
    })


@api.route("/node/<node_id>", methods=["GET"])
def api_node(node_id: str):
    with get_store().lock:
        tree = get_history().current
    card = node_stats(tree, node_id)
    if card is None:
        return jsonify({"error": f"No node with id {node_id}"}), 404
    return jsonify(card.to_dict())


@api.route("/tree/generate", methods=["POST"])
def api_tree_generate():
    data  = json_body()
    cfg   = current_app.config
    count = data.get("count", cfg["DEFAULT_GENERATE_COUNT"])
    seed  = data.get("seed")

    span = cfg["KEY_MAX"] - cfg["KEY_MIN"] + 1
    if not isinstance(count, int) or isinstance(count, bool) or not 0 <= count <= min(cfg["MAX_NODES"], span):
        return jsonify({"error": f"Invalid count: {count!r}"}), 400

    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, (int, str))):
        return jsonify({"error": f"Invalid seed: {seed!r}"}), 400

    rng  = random.Random(seed)
    keys = rng.sample(range(cfg["KEY_MIN"], cfg["KEY_MAX"] + 1), count)

    with get_store().lock:
        history = get_history()
        history.push(RedBlackTree.from_keys(keys))
        logger.info("generated tree of %d keys (seed=%r)", count, seed)
        return jsonify(tree_payload(history, keys=keys))


@api.route("/undo", methods=["POST"])
def api_undo():
    with get_store().lock:
        history = get_history()
        if not history.undo():
            return jsonify({"error": "Nothing to undo"}), 400
        return jsonify(tree_payload(history))


@api.route("/redo", methods=["POST"])
def api_redo():
    with get_store().lock:
        history = get_history()
        if not history.redo():
            return jsonify({"error": "Nothing to redo"}), 400
        return jsonify(tree_payload(history))


@api.route("/reset", methods=["POST"])
def api_reset():
    with get_store().lock:
        history = get_history()
        history.reset()
        return jsonify(tree_payload(history))


@api.route("/algorithms", methods=["GET"])
def api_algorithms():
    return jsonify([
        {
            "key":         t.key,
            "label":       t.label,
            "aliases":     t.aliases,
            "description": t.description,
        }
        for t in list_traversals()
    ])


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_CONFIG, SECRET_KEY=secrets.token_hex(32))
    app.config.from_prefixed_env("RBTREE")
    if config:
        app.config.update(config)

    app.extensions["rbtree"] = HistoryStore(
        max_versions=app.config["MAX_HISTORY"],
        max_sessions=app.config["MAX_SESSIONS"],
    )
    app.register_blueprint(api)
    return app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    print("=" * 60)
    print("  Red-Black Tree Service")
    print("  Starting Flask server...")
    print("  Open http://localhost:5000/api/state")
    print("=" * 60)
    app.run(debug=True, port=5000)
