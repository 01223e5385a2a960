"""
License key domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity: token generation, the activation
transition with expiry chaining, and validation.
"""
import base64
import hashlib
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from core.domain.exceptions import (
    IdentifierMismatchError,
    LicenseExpiredError,
    LicenseNotActiveError,
    NoPlanToLicenseError,
)
from core.domain.value_objects import Identifier
from licenses.domain.license_key import LicenseKey

TOKEN_GROUPS = 5
TOKEN_GROUP_SIZE = 5


class LicenseKeyGenerator:
    """Domain service for license value generation."""

    @staticmethod
    def generate(service_id: str) -> str:
        """
        Generate an opaque license value, e.g. ``K3QZ7-MA2PD-X6C4L-...``.

        The service id only salts the digest; the randomness comes from
        ``secrets``, so values are not predictable from the service id.
        Uniqueness is statistical; the store's unique index is the
        authority.

        Args:
            service_id: Owning service

        Returns:
            Generated license value
        """
        material = service_id.encode() + secrets.token_bytes(32) + uuid.uuid4().bytes
        digest = hashlib.sha256(material).digest()
        text = base64.b32encode(digest).decode("ascii")[: TOKEN_GROUPS * TOKEN_GROUP_SIZE]
        return "-".join(
            text[i : i + TOKEN_GROUP_SIZE] for i in range(0, len(text), TOKEN_GROUP_SIZE)
        )


@dataclass(frozen=True)
class ActivationResult:
    """Outcome of an activation: the activated key and the key it superseded."""

    activated: LicenseKey
    superseded: Optional[LicenseKey] = None
    superseded_from: Optional[LicenseKey] = None

    @property
    def chained(self) -> bool:
        return self.superseded is not None


class LicenseActivator:
    """Domain service for the issued -> activated transition."""

    @staticmethod
    def activate(
        license_key: LicenseKey,
        identifier: str,
        now: datetime,
        candidate: Optional[LicenseKey] = None,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> ActivationResult:
        """
        Compute the activated state of ``license_key`` and of its candidate.

        When ``candidate`` (an unexpired key for the same identifier and
        service) exists, the new window starts where the candidate's ends
        and the candidate is truncated to ``now``, so covered time is
        additive rather than overlapping.

        Args:
            license_key: Issued key to activate
            identifier: Binding target
            now: Activation time
            candidate: Superseding candidate, if any
            extra: Optional activation metadata

        Returns:
            ActivationResult with the new states; nothing is persisted here

        Raises:
            NoPlanToLicenseError: If the key has no plan
            LicenseAlreadyActiveError: If the key is already activated
        """
        Identifier(identifier)
        if license_key.plan is None:
            raise NoPlanToLicenseError()

        if candidate is not None and (
            candidate.id == license_key.id
            or candidate.identifier != identifier
            or candidate.service_id != license_key.service_id
            or candidate.expires_at is None
            or candidate.expires_at < now
        ):
            raise ValueError("Candidate does not supersede this license key")

        license_start = candidate.expires_at if candidate is not None else now
        expires_at = license_key.plan.duration.add_to(license_start)

        activated = license_key.activate(identifier, now, expires_at, extra)
        superseded = candidate.truncate(now) if candidate is not None else None

        return ActivationResult(
            activated=activated,
            superseded=superseded,
            superseded_from=candidate,
        )


class LicenseValidator:
    """Domain service for license validation."""

    @staticmethod
    def validate(license_key: LicenseKey, identifier: str, now: datetime) -> LicenseKey:
        """
        Check activation, identifier and expiry, in that order.

        Args:
            license_key: Key to check
            identifier: Identifier presented by the caller
            now: Reference time

        Returns:
            The key, when it is valid

        Raises:
            LicenseNotActiveError: If the key was never activated
            IdentifierMismatchError: If the key is bound to another identifier
            LicenseExpiredError: If the key's window has passed
        """
        if license_key.activated_at is None:
            raise LicenseNotActiveError()
        if license_key.identifier != identifier:
            raise IdentifierMismatchError()
        if license_key.is_expired(now):
            raise LicenseExpiredError()
        return license_key
