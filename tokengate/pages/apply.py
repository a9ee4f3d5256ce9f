"""Application form page. Posts to /api/v1/applications."""

from tokengate.pages._layout import render_page


def render_apply_page(app_name: str) -> str:
    body = """
        <header><h1>Apply for an API token</h1>
        <p class="tagline">Invite-only. We email you a link; the link issues your token.</p></header>
        <section class="card">
            <form id="apply-form">
                <label for="invite_code">Invite code</label>
                <input id="invite_code" name="invite_code" maxlength="64" required>
                <label for="email">Email</label>
                <input id="email" name="email" type="email" autocomplete="email" required>
                <label for="name">Name</label>
                <input id="name" name="name" maxlength="100" required>
                <label for="organization">Organization (optional)</label>
                <input id="organization" name="organization" maxlength="200">
                <label for="purpose">Intended use</label>
                <textarea id="purpose" name="purpose" rows="4" maxlength="1000" required></textarea>
                <p class="check"><input id="agree_terms" name="agree_terms" type="checkbox" required>
                <label for="agree_terms">I agree to the terms of use</label></p>
                <button type="submit">Submit application</button>
            </form>
            <p id="message" role="alert"></p>
        </section>"""
    script = """
document.getElementById('apply-form').addEventListener('submit', async function (e) {
  e.preventDefault();
  var f = this, msg = document.getElementById('message');
  msg.className = ''; msg.textContent = 'Submitting...';
  var resp = await fetch('/api/v1/applications', {
    method: 'POST', headers: {'Content-Type': 'application/json'},
    body: JSON.stringify({
      invite_code: f.invite_code.value, email: f.email.value, name: f.name.value,
      organization: f.organization.value || null, purpose: f.purpose.value,
      agree_terms: f.agree_terms.checked
    })
  });
  var data = await resp.json().catch(function () { return {}; });
  msg.className = resp.ok ? 'ok' : 'error';
  msg.textContent = data.message || (resp.ok ? 'Check your inbox.' : 'Submission failed');
  if (resp.ok) f.reset();
});
"""
    return render_page("Apply", body, app_name=app_name, script=script)
