"""The single HTML page served at ``/``.

The view markup is rendered server-side; the inline script only reports
toggles back to the API and swaps in new markup pushed over the websocket.
"""

from __future__ import annotations

PAGE_STYLE = """
body { font-family: system-ui, sans-serif; margin: 0; background: #f6f7f9; color: #1d2330; }
header { display: flex; gap: .5rem; align-items: center; padding: .6rem 1rem;
         background: #1d2330; color: #fff; position: sticky; top: 0; }
header h1 { font-size: 1rem; margin: 0 auto 0 0; }
header button { border: 0; border-radius: 4px; padding: .3rem .8rem; cursor: pointer; }
#status { font-size: .8rem; opacity: .7; }
#dumps { padding: 1rem; }
.no-dumps { color: #888; text-align: center; margin-top: 3rem; }
.dump-item { background: #fff; border: 1px solid #dde1e7; border-radius: 6px; margin-bottom: .6rem; }
.dump-summary { display: flex; gap: 1rem; padding: .5rem .8rem; cursor: pointer; }
.dump-timestamp { font-weight: 600; }
.dump-file { color: #5a6478; font-family: monospace; }
.dump-format { margin-left: auto; font-size: .75rem; color: #8a93a5; }
.dump-tree, .dump-output, .dump-widget { font-family: monospace; font-size: .85rem;
         padding: .4rem .8rem .8rem; margin: 0; overflow-x: auto; }
.dump-output { white-space: pre-wrap; }
.tree-children { margin-left: 1.2rem; }
.tree-inline > .tree-children { display: inline; margin: 0; }
.tree-inline > .tree-children > .tree-leaf { display: inline; }
.tree-inline > .tree-children > .tree-leaf:not(:last-child)::after { content: ", "; }
.tree-node > summary { cursor: pointer; }
.tree-summary, .json-empty { color: #8a93a5; }
.json-key, .dump-key { color: #8b3fb0; }
.json-index { color: #8a93a5; }
.json-string { color: #23863b; }
.json-number { color: #1c5fb8; }
.json-bool, .json-null { color: #b0502c; }
.dump-class { color: #1c5fb8; font-weight: 600; }
.dump-count { color: #8a93a5; }
.dump-arrow { color: #8a93a5; }
.sf-dump-compact { display: none; }
.sf-dump-toggle { cursor: pointer; text-decoration: none; }
"""

PAGE_SCRIPT = """
const container = document.getElementById("dumps");
const statusLine = document.getElementById("status");

function post(url, body) {
  return fetch(url, {
    method: "POST",
    headers: {"Content-Type": "application/json"},
    body: JSON.stringify(body || {}),
  });
}

// toggle does not bubble, listen in the capture phase
document.addEventListener("toggle", (event) => {
  const el = event.target;
  if (!el.dataset || !el.dataset.key) return;
  post("/api/view/toggle", {key: el.dataset.key, open: el.open});
}, true);

container.addEventListener("click", (event) => {
  const anchor = event.target.closest("a[data-toggle-index]");
  if (!anchor) return;
  event.preventDefault();
  const panel = anchor.closest("[data-key^='panel:']");
  if (!panel) return;
  post("/api/view/widget", {
    identity: panel.dataset.key,
    index: Number(anchor.dataset.toggleIndex),
    recursive: event.ctrlKey || event.metaKey,
  });
});

document.getElementById("refresh").addEventListener("click", () => post("/api/refresh"));
document.getElementById("clear").addEventListener("click", () => fetch("/api/dumps", {method: "DELETE"}));

function connect() {
  const scheme = location.protocol === "https:" ? "wss" : "ws";
  const socket = new WebSocket(`${scheme}://${location.host}/ws`);
  socket.onopen = () => { statusLine.textContent = "live"; };
  socket.onmessage = (event) => {
    if (event.data === "pong") return;
    const message = JSON.parse(event.data);
    if (message.type === "view") {
      container.innerHTML = message.html;
      statusLine.textContent = `${message.count} dumps`;
    }
  };
  socket.onclose = () => {
    statusLine.textContent = "disconnected";
    setTimeout(connect, 2000);
  };
  setInterval(() => { if (socket.readyState === 1) socket.send("ping"); }, 30000);
}
connect();
"""


def render_page(view_html: str, title: str = "Dump Viewer") -> str:
    """Wrap pre-rendered view markup in the full page."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>{PAGE_STYLE}</style>
</head>
<body>
<header>
<h1>{title}</h1>
<span id="status"></span>
<button id="refresh" type="button">Refresh</button>
<button id="clear" type="button">Clear</button>
</header>
<main id="dumps">{view_html}</main>
<script>{PAGE_SCRIPT}</script>
</body>
</html>
"""
