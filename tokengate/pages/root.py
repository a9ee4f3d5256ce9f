"""Landing page: what the service is and where to go next."""

from html import escape

from tokengate.pages._layout import render_page


def render_root_page(app_name: str) -> str:
    """Return HTML for the root landing page."""
    body = f"""
        <header>
            <h1>{escape(app_name)}</h1>
            <p class="tagline">API access tokens for the financial data query service.</p>
        </header>
        <section class="card" aria-labelledby="apply-heading">
            <h2 id="apply-heading">Get a token</h2>
            <p>Access is by invitation. Enter your invite code and email address; we send a
            one-time verification link, and following it issues your API token.</p>
            <a href="/apply" class="btn">Apply with an invite code</a>
        </section>
        <section class="card" aria-labelledby="manage-heading">
            <h2 id="manage-heading">Already have a token?</h2>
            <p>Sign in to list or revoke your tokens. Administrators can review all tokens,
            API logs, and usage statistics.</p>
            <a href="/login" class="btn secondary">Sign in</a>
            <a href="/docs" class="btn secondary">API docs</a>
        </section>"""
    return render_page("Home", body, app_name=app_name)
