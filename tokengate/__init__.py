"""tokengate: invitation-gated API token issuance over Supabase."""

__version__ = "1.0.0"
