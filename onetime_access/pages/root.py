"""Root landing page: what the service is and where the API lives."""

from html import escape

_FONTS_CSS_URL = (
    "https://fonts.googleapis.com/css2?family=DM+Sans:wght@400;500;600"
    "&family=JetBrains+Mono:wght@400&display=swap"
)


def render_root_page(app_name: str, app_version: str) -> str:
    """Return HTML for the root landing page."""
    name = escape(app_name)
    version = escape(app_version)
    return f"""
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{name}</title>
    <link href="{_FONTS_CSS_URL}" rel="stylesheet">
    <style>
        * {{ box-sizing: border-box; }}
        body {{
            font-family: 'DM Sans', system-ui, sans-serif;
            margin: 0;
            min-height: 100vh;
            background: #000;
            color: #e0e0e0;
            padding: 2rem 1rem;
        }}
        .wrap {{ max-width: 560px; margin: 0 auto; }}
        h1 {{ color: #fff; font-weight: 600; margin: 0 0 0.5rem 0; }}
        .tagline {{ color: #888; margin: 0 0 2rem 0; }}
        .card {{
            background: #0c0c0c;
            border: 1px solid #1a1a1a;
            padding: 1.5rem 1.75rem;
            margin-bottom: 1.25rem;
        }}
        .card h2 {{
            font-size: 0.75rem;
            text-transform: uppercase;
            letter-spacing: 0.08em;
            color: #666;
            margin: 0 0 1rem 0;
        }}
        .card p {{ color: #999; line-height: 1.55; }}
        code, .code {{ font-family: 'JetBrains Mono', monospace; font-size: 0.8125rem; }}
        .code {{
            background: #111;
            color: #b0b0b0;
            padding: 0.6rem 0.85rem;
            border: 1px solid #1a1a1a;
            margin: 0.5rem 0 1rem 0;
            white-space: pre;
            overflow-x: auto;
        }}
        a.btn {{
            display: inline-block;
            padding: 0.65rem 1.25rem;
            margin-right: 0.75rem;
            background: #222;
            color: #e0e0e0;
            text-decoration: none;
            border: 1px solid #333;
        }}
        a.btn.primary {{ background: #fff; color: #000; border-color: #fff; }}
        .foot {{ text-align: center; margin-top: 2.5rem; color: #444; font-size: 0.8125rem; }}
    </style>
</head>
<body>
    <div class="wrap">
        <h1>{name}</h1>
        <p class="tagline">Single-use credentials, exchanged once for a time-limited session.</p>

        <section class="card" aria-labelledby="flow-heading">
            <h2 id="flow-heading">How it works</h2>
            <p>An operator issues a username, password and duration. The first successful
            login consumes the credential and returns a session token that stays valid for
            the configured number of hours. Every later login with the same credential is refused.</p>
            <div class="code">POST /api/v1/one-time/login     {{"username", "password"}}
POST /api/v1/one-time/validate  {{"token"}}</div>
        </section>

        <section class="card" aria-labelledby="run-heading">
            <h2 id="run-heading">Run locally</h2>
            <div class="code">uvicorn onetime_access.main:app --reload</div>
            <p>Copy <code>.env.example</code> to <code>.env</code> and choose the credential
            store (Firestore or Postgres) before starting.</p>
            <a href="/docs" class="btn primary">API docs (Swagger)</a>
            <a href="/redoc" class="btn">ReDoc</a>
        </section>

        <footer class="foot">{name} {version} · API at <code>/api/v1</code></footer>
    </div>
</body>
</html>
""".strip()
