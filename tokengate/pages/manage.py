"""Token management page. Lists the caller's tokens from /manage/tokens and revokes them in place."""

from html import escape

from tokengate.pages._layout import render_page


def render_manage_page(app_name: str, email: str) -> str:
    body = f"""
        <header><h1>Your API tokens</h1><p class="tagline">Signed in as {escape(email)}.</p></header>
        <section class="card">
            <h2>Tokens</h2>
            <p id="message" role="alert"></p>
            <div id="tokens"><p>Loading...</p></div>
        </section>
        <section class="card">
            <a href="/apply" class="btn secondary">Apply for another token</a>
            <button type="button" id="sign-out">Sign out</button>
        </section>"""
    script = """
var list = document.getElementById('tokens');
var msg = document.getElementById('message');

function esc(value) {
  var div = document.createElement('div');
  div.textContent = value == null ? '' : String(value);
  return div.innerHTML;
}

function show(text, ok) {
  msg.className = ok ? 'ok' : 'error';
  msg.textContent = text;
}

async function load() {
  var resp = await fetch('/manage/tokens', {credentials: 'same-origin'});
  if (resp.status === 401 || resp.redirected) { window.location.assign('/login?redirectTo=%2Fmanage'); return; }
  if (!resp.ok) { list.innerHTML = '<p class="error">Could not load tokens.</p>'; return; }
  var data = await resp.json();
  if (!data.items.length) { list.innerHTML = '<p>No tokens yet.</p>'; return; }
  list.innerHTML = data.items.map(function (t) {
    var expiry = t.expires_at ? 'expires ' + esc(t.expires_at) : 'never expires';
    var action = t.status === 'active'
      ? '<button type="button" data-revoke="' + esc(t.id) + '">Revoke</button>' : '';
    return '<div class="token"><div class="code">' + esc(t.token) + '</div>'
      + '<p>' + esc(t.status) + ' &middot; created ' + esc(t.created_at) + ' &middot; ' + expiry + '</p>'
      + action + '</div>';
  }).join('');
}

list.addEventListener('click', async function (e) {
  var id = e.target.getAttribute('data-revoke');
  if (!id || !window.confirm('Revoke this token? Clients using it will stop working.')) return;
  var resp = await fetch('/manage/tokens/' + encodeURIComponent(id) + '/revoke',
                         {method: 'POST', credentials: 'same-origin'});
  var data = await resp.json().catch(function () { return {}; });
  if (resp.ok) { show('Token revoked.', true); } else { show(data.message || 'Revoke failed', false); }
  load();
});

document.getElementById('sign-out').addEventListener('click', async function () {
  await fetch('/api/v1/auth/sign-out', {method: 'POST', credentials: 'same-origin'});
  window.location.assign('/login');
});

load();
"""
    return render_page("Manage tokens", body, app_name=app_name, script=script)
