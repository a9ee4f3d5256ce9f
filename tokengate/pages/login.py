"""Sign-in page. Posts to /api/v1/auth/sign-in and follows redirectTo on success."""

from html import escape

from tokengate.pages._layout import render_page


def safe_redirect_target(target: str | None, default: str = "/manage") -> str:
    """Only same-site absolute paths are followed (no //host or scheme URLs)."""
    if not target or not target.startswith("/") or target.startswith("//") or "\\" in target:
        return default
    return target


def render_login_page(app_name: str, redirect_to: str | None = None) -> str:
    target = safe_redirect_target(redirect_to)
    body = f"""
        <header><h1>Sign in</h1><p class="tagline">Manage your API tokens.</p></header>
        <section class="card">
            <form id="login-form">
                <label for="email">Email</label>
                <input id="email" name="email" type="email" autocomplete="email" required>
                <label for="password">Password</label>
                <input id="password" name="password" type="password" autocomplete="current-password" required>
                <button type="submit">Sign in</button>
            </form>
            <p id="message" class="error" role="alert"></p>
            <p><a href="/apply">No token yet? Apply with an invite code.</a></p>
            <input type="hidden" id="redirect" value="{escape(target)}">
        </section>"""
    script = """
document.getElementById('login-form').addEventListener('submit', async function (e) {
  e.preventDefault();
  var msg = document.getElementById('message');
  msg.textContent = '';
  var resp = await fetch('/api/v1/auth/sign-in', {
    method: 'POST', credentials: 'same-origin',
    headers: {'Content-Type': 'application/json'},
    body: JSON.stringify({email: this.email.value, password: this.password.value})
  });
  if (resp.ok) { window.location.assign(document.getElementById('redirect').value); return; }
  var data = await resp.json().catch(function () { return {}; });
  msg.textContent = data.message || 'Sign-in failed';
});
"""
    return render_page("Sign in", body, app_name=app_name, script=script)
