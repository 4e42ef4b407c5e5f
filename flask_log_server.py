from flask import Flask, render_template_string, Response
import time
import json
import logging
from threading import Lock

from config import LOG_BUFFER_SIZE, LOG_SERVER_HOST, LOG_SERVER_PORT

log = logging.getLogger('werkzeug')
log.setLevel(logging.ERROR)
app = Flask(__name__)
LOGS = {}
LOG_COUNTS = {}
WALLET_STATUS = {}
logs_lock = Lock()

TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <title>Taker Lite Miner</title>
    <style>
        body { font-family: monospace; background: #23272e; color: #c0caf5; margin: 0; padding: 20px; }
        pre { background: #181926; padding: 1em; border-radius: 8px; max-height: 70vh; overflow-y: scroll; white-space: pre-wrap; word-break: break-word;}
        a { color: #5ad4e6; text-decoration: none; }
        .log-entry { margin-bottom: 2px; }
        .wallet-list { display: flex; flex-wrap: wrap; gap: 10px; margin-bottom: 20px; }
        .wallet-item { padding: 8px 12px; border-radius: 6px; background: #2a2f3a; display: flex; flex-direction: column; min-width: 220px;}
        .wallet-address { font-weight: bold; margin-bottom: 4px; }
        .status-mined { color: #9ece6a; }
        .status-cooldown { color: #7aa2f7; }
        .status-failed { color: #f7768e; }
        .status-running { color: #e0af68; }
        @media (max-width: 900px) {
            .wallet-list { flex-direction: column; }
            .wallet-item { min-width: 90vw; }
        }
    </style>
</head>
<body>
    <h2>Taker Lite Miner</h2>

    <div class="wallet-list">
    {% for addr in addresses %}
        <div class="wallet-item">
            <div class="wallet-address">
                <a href="/log/{{addr}}" {% if addr == address %}style="font-weight:bold"{% endif %}>{{addr[:8]}}...{{addr[-6:]}}</a>
            </div>
            {% set st = statuses.get(addr, {"status": "idle"}) %}
            <div class="status status-{{ css_class(st['status']) }}" data-addr="{{addr}}">
                Status: {{ st['status'] }}
            </div>
        </div>
    {% endfor %}
    </div>

    {% if address %}
    <h3>Live logs for: {{address}}</h3>
    <pre id="logbox"></pre>
    <script>
        let logbox = document.getElementById('logbox');
        let es = new EventSource("/stream/{{address}}");
        es.onmessage = function(e) {
            try {
                const data = JSON.parse(e.data);
                if (data.type === 'initial') {
                    logbox.textContent = '';
                    data.logs.forEach(log => {
                        const entry = document.createElement('div');
                        entry.className = 'log-entry';
                        entry.textContent = log;
                        logbox.appendChild(entry);
                    });
                } else if (data.type === 'update') {
                    const newEntry = document.createElement('div');
                    newEntry.className = 'log-entry';
                    newEntry.textContent = data.log;
                    logbox.appendChild(newEntry);
                }
                logbox.scrollTop = logbox.scrollHeight;
            } catch (err) {
                console.error("Error parsing message:", err);
            }
        };
        es.onerror = function() {
            const errorMsg = document.createElement('div');
            errorMsg.className = 'log-entry';
            errorMsg.style.color = '#ff5555';
            errorMsg.textContent = "[SSE disconnected, reload page]";
            logbox.appendChild(errorMsg);
        };
    </script>
    {% endif %}

    <script>
        function updateAllStatuses() {
            document.querySelectorAll('.status[data-addr]').forEach(elem => {
                const addr = elem.getAttribute('data-addr');
                fetch(`/status/${addr}`)
                    .then(res => res.json())
                    .then(data => {
                        elem.textContent = `Status: ${data.status}`;
                    })
                    .catch(err => console.warn(`Status fetch error for ${addr}:`, err));
            });
        }
        setInterval(updateAllStatuses, 5000);
    </script>
</body>
</html>
"""


def css_class(status):
    if status in ("mined", "cooldown"):
        return status
    if status == "idle":
        return "cooldown"
    if status.endswith("_failed"):
        return "failed"
    return "running"


@app.route("/")
def index():
    return render_template_string(
        TEMPLATE,
        addresses=list(LOGS.keys()),
        address=None,
        statuses=WALLET_STATUS,
        css_class=css_class,
    )


@app.route("/log/<address>")
def show_log(address):
    return render_template_string(
        TEMPLATE,
        addresses=list(LOGS.keys()),
        address=address,
        statuses=WALLET_STATUS,
        css_class=css_class,
    )


@app.route('/stream/<address>')
def stream(address):
    def event_stream():
        seen, logs = read_since(address, 0)
        yield f"data: {json.dumps({'type': 'initial', 'logs': logs})}\n\n"
        while True:
            seen, fresh = read_since(address, seen)
            if fresh:
                for line in fresh:
                    yield f"data: {json.dumps({'type': 'update', 'log': line})}\n\n"
            else:
                time.sleep(0.2)
    return Response(event_stream(), mimetype="text/event-stream")


@app.route("/status/<address>")
def status(address):
    status_data = WALLET_STATUS.get(address, {"status": "idle", "updated": None})
    return {
        "status": status_data.get("status", "idle"),
        "updated": status_data.get("updated"),
    }


def run_flask():
    app.run(host=LOG_SERVER_HOST, port=LOG_SERVER_PORT, debug=False, use_reloader=False)


def set_wallet_status(address, status):
    """Update wallet status"""
    WALLET_STATUS[address] = {
        "status": status,
        "updated": time.strftime("%Y-%m-%d %H:%M:%S", time.localtime()),
    }


def record_log(address, msg):
    """Append a line to the wallet's log buffer"""
    timestamp = time.strftime("%H:%M:%S", time.localtime())
    formatted_msg = f"[{timestamp}] {msg}"
    with logs_lock:
        LOGS.setdefault(address, []).append(formatted_msg)
        LOG_COUNTS[address] = LOG_COUNTS.get(address, 0) + 1
        if len(LOGS[address]) > LOG_BUFFER_SIZE:
            LOGS[address] = LOGS[address][-LOG_BUFFER_SIZE:]
    return formatted_msg


def read_since(address, seen):
    """Return (total lines ever logged, lines logged after ``seen``).

    The buffer is trimmed from the front, so new lines are taken from the tail.
    """
    with logs_lock:
        total = LOG_COUNTS.get(address, 0)
        if total <= seen:
            return total, []
        return total, LOGS.get(address, [])[-(total - seen):]
