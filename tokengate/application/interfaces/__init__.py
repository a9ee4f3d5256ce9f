"""Application interfaces (ports).

Protocols only. No runtime imports from tokengate.infrastructure or tokengate.api.
"""

from tokengate.application.interfaces.repositories import ICredentialStore, IUsageStatsStore
from tokengate.application.interfaces.services import IEmailSender, IIdentityProvider

__all__ = [
    "ICredentialStore",
    "IEmailSender",
    "IIdentityProvider",
    "IUsageStatsStore",
]
