"""Email integration: Supabase edge-function sender."""

from tokengate.infrastructure.external.email.edge_function_sender import (
    EdgeFunctionEmailSender,
)

__all__ = ["EdgeFunctionEmailSender"]
