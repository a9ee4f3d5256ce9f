"""Shared HTML shell for the server-rendered pages (dark card layout, no external assets)."""

from html import escape

_STYLE = """
* { box-sizing: border-box; }
body { font-family: system-ui, sans-serif; margin: 0; min-height: 100vh;
       background: #000; color: #e0e0e0; padding: 2rem 1rem; }
.wrap { max-width: 560px; margin: 0 auto; }
h1 { font-size: clamp(1.75rem, 5vw, 2.5rem); font-weight: 600; color: #fff; margin: 0 0 .5rem; }
.tagline { color: #888; margin: 0 0 2rem; }
.card { background: #0c0c0c; border: 1px solid #1a1a1a; padding: 1.5rem 1.75rem; margin-bottom: 1.25rem; }
.card h2 { font-size: .75rem; text-transform: uppercase; letter-spacing: .08em; color: #666; margin: 0 0 1rem; }
.card p { color: #999; line-height: 1.55; }
label { display: block; font-size: .875rem; color: #aaa; margin: .75rem 0 .25rem; }
input, textarea { width: 100%; padding: .55rem .7rem; background: #111; color: #e0e0e0;
                  border: 1px solid #333; font: inherit; }
.check label { display: inline; }
.check input { width: auto; }
button, a.btn { display: inline-block; margin-top: 1rem; padding: .65rem 1.25rem; background: #fff;
                color: #000; border: 1px solid #fff; font-weight: 500; text-decoration: none; cursor: pointer; }
a.btn.secondary { background: #222; color: #e0e0e0; border-color: #333; }
.code { font-family: ui-monospace, monospace; font-size: .8125rem; background: #111; color: #b0b0b0;
        padding: .6rem .85rem; border: 1px solid #1a1a1a; overflow-x: auto; word-break: break-all; }
.error { color: #f87171; }
.ok { color: #86efac; }
.foot { text-align: center; margin-top: 2.5rem; color: #444; font-size: .8125rem; }
"""


def render_page(title: str, body: str, *, app_name: str, script: str = "") -> str:
    """Wrap body (already-escaped HTML) in the common document shell."""
    script_tag = f"<script>{script}</script>" if script else ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)} · {escape(app_name)}</title>
    <style>{_STYLE}</style>
</head>
<body>
    <div class="wrap">
{body}
        <footer class="foot">{escape(app_name)} · API at <code>/api/v1</code></footer>
    </div>
    {script_tag}
</body>
</html>"""
