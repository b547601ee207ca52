"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Depends, HTTPException, Request, status

from src.adapters.notifications.gateway import NotificationGateway
from src.adapters.notifications.sms import SmsGateway
from src.adapters.resolver.dnspython import DnsPythonResolver
from src.config.settings import Settings, get_settings
from src.domain.credentials import OtpCredentialManager
from src.domain.ports import IdentityStore
from src.domain.validation import AddressValidator
from src.domain.workflow import AuthWorkflow


def get_identity_store(request: Request) -> IdentityStore:
    """
    Get identity store from app state.

    The store is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.identity_store


def get_address_validator(settings: Settings = Depends(get_settings)) -> AddressValidator:
    """Create validator backed by a bounded-time DNS resolver."""
    resolver = DnsPythonResolver(timeout=settings.dns_timeout_seconds)
    return AddressValidator(
        resolver=resolver,
        disposable_patterns=settings.disposable_patterns,
        timeout_seconds=settings.dns_timeout_seconds,
    )


def get_notification_gateway(settings: Settings = Depends(get_settings)) -> NotificationGateway:
    return NotificationGateway(settings)


def get_auth_workflow(
    store: IdentityStore = Depends(get_identity_store),
    validator: AddressValidator = Depends(get_address_validator),
    gateway: NotificationGateway = Depends(get_notification_gateway),
    settings: Settings = Depends(get_settings),
) -> AuthWorkflow:
    """
    Create auth workflow with injected dependencies.

    Wires together the validator, credential manager and notification gateway.
    """
    credentials = OtpCredentialManager(store=store, ttl_seconds=settings.otp_ttl_seconds)
    return AuthWorkflow(validator=validator, credentials=credentials, notifier=gateway)


def get_sms_gateway(settings: Settings = Depends(get_settings)) -> SmsGateway:
    return SmsGateway(settings)


def require_debug_routes(settings: Settings = Depends(get_settings)) -> None:
    """Hide debug endpoints unless debug_routes_enabled is set."""
    if not settings.debug_routes_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
