"""Server-rendered HTML pages (landing, sign-in, application form, token management, verification result)."""

from tokengate.pages.apply import render_apply_page
from tokengate.pages.login import render_login_page, safe_redirect_target
from tokengate.pages.manage import render_manage_page
from tokengate.pages.root import render_root_page
from tokengate.pages.verify import render_verify_failure, render_verify_success

__all__ = [
    "render_apply_page",
    "render_login_page",
    "render_manage_page",
    "render_root_page",
    "render_verify_failure",
    "render_verify_success",
    "safe_redirect_target",
]
