"""Verification result page (the target of the emailed link)."""

from html import escape

from tokengate.pages._layout import render_page


def render_verify_success(app_name: str, token: str, expires_at: str | None, email_delivered: bool) -> str:
    delivery = (
        "A copy has been emailed to you."
        if email_delivered
        else "The email copy could not be sent; save the token now."
    )
    expiry = f"<p>Valid until {escape(expires_at)}.</p>" if expires_at else ""
    body = f"""
        <header><h1>Email verified</h1><p class="tagline ok">Your API token has been issued.</p></header>
        <section class="card">
            <h2>Your API token</h2>
            <div class="code">{escape(token)}</div>
            {expiry}
            <p>{escape(delivery)} Keep it secret; it identifies you to the data service.</p>
            <a href="/manage" class="btn secondary">Manage tokens</a>
        </section>"""
    return render_page("Verified", body, app_name=app_name)


def render_verify_failure(app_name: str, message: str) -> str:
    body = f"""
        <header><h1>Verification failed</h1></header>
        <section class="card">
            <p class="error">{escape(message)}</p>
            <a href="/apply" class="btn">Apply again</a>
        </section>"""
    return render_page("Verification failed", body, app_name=app_name)
