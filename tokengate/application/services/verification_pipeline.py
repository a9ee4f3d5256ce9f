"""Verification pipeline: invite code → email verification → API token.

Each step maps its collaborator failures to a domain exception before it
reaches the presentation layer:

    apply   SUBMITTED → CODE_VALIDATED → REQUEST_CREATED → EMAIL_SENT
    verify  EMAIL_SENT → VERIFIED → TOKEN_ISSUED

Single-use guarantees rely on the store's conditional updates: the
verification request is claimed with "set is_verified where is_verified is
false", and the invite code with "set is_used where is_used is false". The
issued token's ID is derived from the verification request ID, so the
store's primary key rejects a second token for the same request, and a
verify that failed part-way can be repeated with the same link.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from urllib.parse import urlencode

from tokengate.application.dtos.verification import (
    ApplicationResult,
    ApplicationSubmission,
    VerificationOutcome,
    VerificationRequestCreate,
    VerificationRequestResult,
)
from tokengate.application.interfaces.repositories import ICredentialStore
from tokengate.application.interfaces.services import IEmailSender
from tokengate.application.services.token_lifecycle import TokenLifecycleManager
from tokengate.domain.enums import PipelineState
from tokengate.domain.exceptions import (
    BackendAuthorizationException,
    BackendUnavailableException,
    ConstraintViolationException,
    DeliveryException,
    ValidationException,
)
from tokengate.shared.telemetry.tracing import add_span_attributes, add_span_event, traced
from tokengate.shared.utils.datetime import utc_now
from tokengate.shared.utils.generators import derive_token_id, generate_secret_token
from tokengate.shared.utils.sanitization import normalize_email

logger = logging.getLogger(__name__)

INVALID_CODE_MESSAGE = "Invalid invite code; please check it and try again."
INVALID_TOKEN_MESSAGE = "Invalid or expired verification link; please apply again."
CODE_CONSUMED_MESSAGE = "This invite code has already been used."
RETRY_LATER_MESSAGE = "Could not process your request; please try again later."
EMAIL_FAILED_MESSAGE = (
    "Your application was recorded but the verification email could not be sent; "
    "please try again later."
)

_BACKEND_ERRORS = (
    BackendUnavailableException,
    BackendAuthorizationException,
    ConstraintViolationException,
)


def _retry_later(state: PipelineState) -> BackendUnavailableException:
    return BackendUnavailableException(RETRY_LATER_MESSAGE, {"state": state.value})


class VerificationPipeline:
    """Turns an invite code + email into an active API token in two user-driven steps."""

    def __init__(
        self,
        store: ICredentialStore,
        email_sender: IEmailSender,
        token_manager: TokenLifecycleManager,
        verification_base_url: str,
        verification_ttl: timedelta = timedelta(hours=24),
        token_validity_days: int = 365,
    ) -> None:
        self.store = store
        self.email_sender = email_sender
        self.token_manager = token_manager
        self.verification_base_url = verification_base_url
        self.verification_ttl = verification_ttl
        self.token_validity_days = token_validity_days

    def build_verification_url(self, token: str) -> str:
        return f"{self.verification_base_url}?{urlencode({'token': token})}"

    @traced("pipeline.apply")
    async def apply(self, submission: ApplicationSubmission) -> ApplicationResult:
        """Validate the invite code, record a verification request, and email the link.

        Raises:
            ValidationException: invite code absent, used, or expired (CODE_INVALID).
            BackendUnavailableException: lookup or persistence failed (REQUEST_FAILED).
            DeliveryException: email not accepted (EMAIL_FAILED); the request stays valid.
        """
        now = utc_now()
        try:
            invite = await self.store.find_invite_code_by_code(submission.invite_code)
        except _BACKEND_ERRORS as exc:
            logger.warning("Invite code lookup failed: %s", exc)
            raise _retry_later(PipelineState.REQUEST_FAILED) from exc
        if invite is None or not invite.is_redeemable(now):
            add_span_event(PipelineState.CODE_INVALID.value)
            raise ValidationException(INVALID_CODE_MESSAGE, field="invite_code")
        add_span_event(PipelineState.CODE_VALIDATED.value)

        verification_token = generate_secret_token()
        expires_at = now + self.verification_ttl
        try:
            request = await self.store.insert_verification_request(
                VerificationRequestCreate(
                    email=normalize_email(submission.email),
                    token=verification_token,
                    invite_code_id=invite.id,
                    expires_at=expires_at,
                )
            )
        except _BACKEND_ERRORS as exc:
            logger.warning(
                "Creating verification request for invite %s failed: %s",
                invite.id,
                exc,
            )
            raise _retry_later(PipelineState.REQUEST_FAILED) from exc
        add_span_attributes(verification_request_id=request.id)
        add_span_event(PipelineState.REQUEST_CREATED.value)

        try:
            await self.email_sender.send_verification_email(
                email=submission.email,
                name=submission.name,
                verification_token=verification_token,
                verification_url=self.build_verification_url(verification_token),
            )
        except (DeliveryException, BackendUnavailableException) as exc:
            logger.warning(
                "Verification email for request %s not sent: %s", request.id, exc
            )
            raise DeliveryException(
                EMAIL_FAILED_MESSAGE, {"state": PipelineState.EMAIL_FAILED.value}
            ) from exc

        logger.info("Verification request %s created and emailed", request.id)
        return ApplicationResult(
            state=PipelineState.EMAIL_SENT,
            email=submission.email,
            expires_at=request.expires_at,
        )

    @traced("pipeline.verify")
    async def verify(self, token: str) -> VerificationOutcome:
        """Consume a verification link and issue the API token.

        Resumable: a request that was claimed but whose token was never
        written (the store failed mid-way) continues from where it stopped
        on the next click. Once a token exists at the request's derived ID
        the link is spent.

        Raises:
            ValidationException: link unknown, spent, or expired; or the
                invite code was consumed by another verification.
            BackendUnavailableException: store failure (TOKEN_FAILED when it
                happens while persisting the token); the link stays usable.
        """
        if not token:
            raise ValidationException(INVALID_TOKEN_MESSAGE, field="token")
        now = utc_now()
        try:
            request = await self.store.find_verification_request_by_token(token)
        except _BACKEND_ERRORS as exc:
            logger.warning("Verification lookup failed: %s", exc)
            raise _retry_later(PipelineState.EMAIL_SENT) from exc
        if request is None:
            raise ValidationException(INVALID_TOKEN_MESSAGE, field="token")

        token_id = derive_token_id(request.id)
        if request.is_verified:
            verified_at = await self._resume_point(request, token_id)
        else:
            verified_at = await self._claim(request, now)
        add_span_event(PipelineState.VERIFIED.value)

        await self._consume_invite(request, verified_at)

        try:
            api_token = await self.token_manager.issue(
                email=request.email,
                invite_code_id=request.invite_code_id,
                validity_days=self.token_validity_days,
                token_id=token_id,
            )
        except ConstraintViolationException as exc:
            logger.info("Token for verification %s issued by a concurrent request", request.id)
            raise ValidationException(INVALID_TOKEN_MESSAGE, field="token") from exc
        except _BACKEND_ERRORS as exc:
            logger.error(
                "Token issuance for verification %s failed: %s", request.id, exc
            )
            raise _retry_later(PipelineState.TOKEN_FAILED) from exc
        add_span_event(PipelineState.TOKEN_ISSUED.value)

        email_delivered = True
        try:
            await self.email_sender.send_token_email(
                email=request.email,
                token=api_token.token,
                expires_at=api_token.expires_at,
            )
        except (DeliveryException, BackendUnavailableException) as exc:
            email_delivered = False
            logger.warning(
                "Token email for %s not sent (token still returned): %s",
                api_token.id,
                exc,
            )

        return VerificationOutcome(
            state=PipelineState.TOKEN_ISSUED,
            api_token=api_token,
            email_delivered=email_delivered,
        )

    async def _claim(self, request: VerificationRequestResult, now: datetime) -> datetime:
        """Flip is_verified on a pending request; the claim time keys the invite consumption."""
        if not request.is_pending(now):
            raise ValidationException(INVALID_TOKEN_MESSAGE, field="token")
        try:
            claimed = await self.store.mark_verification_verified(request.id, now)
        except _BACKEND_ERRORS as exc:
            logger.warning("Claiming verification %s failed: %s", request.id, exc)
            raise _retry_later(PipelineState.EMAIL_SENT) from exc
        if claimed is None:
            logger.info("Verification %s already claimed by another request", request.id)
            raise ValidationException(INVALID_TOKEN_MESSAGE, field="token")
        return claimed.verified_at or now

    async def _resume_point(self, request: VerificationRequestResult, token_id: str) -> datetime:
        """Claim time of an already verified request that never got its token."""
        try:
            existing = await self.store.get_api_token(token_id)
        except _BACKEND_ERRORS as exc:
            logger.warning("Token lookup for verification %s failed: %s", request.id, exc)
            raise _retry_later(PipelineState.VERIFIED) from exc
        if existing is not None or request.verified_at is None:
            raise ValidationException(INVALID_TOKEN_MESSAGE, field="token")
        logger.info("Resuming verification %s (claimed, no token yet)", request.id)
        return request.verified_at

    async def _consume_invite(
        self, request: VerificationRequestResult, verified_at: datetime
    ) -> None:
        """Mark the invite used by this request, or confirm an earlier attempt already did."""
        try:
            consumed = await self.store.mark_invite_code_used(
                request.invite_code_id, used_by=request.email, used_at=verified_at
            )
            if consumed is None:
                invite = await self.store.get_invite_code(request.invite_code_id)
                if invite is not None and invite.consumed_by(request.email, verified_at):
                    consumed = invite
        except _BACKEND_ERRORS as exc:
            logger.error(
                "Verification %s claimed but invite %s not marked used: %s",
                request.id,
                request.invite_code_id,
                exc,
            )
            raise _retry_later(PipelineState.VERIFIED) from exc
        if consumed is None:
            logger.warning(
                "Invite %s already consumed; verification %s issues no token",
                request.invite_code_id,
                request.id,
            )
            raise ValidationException(CODE_CONSUMED_MESSAGE, field="invite_code")
