import logging
from dataclasses import dataclass
from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.enums import VerificationFailure
from app.core.identity import normalize_email, resolve_trainer_id
from app.core.proxy_signature import ProxyVerification, verify_proxy_request
from app.db.session import AsyncSessionLocal
from app.exceptions import (
    AdminForbiddenException,
    ConfigurationException,
    IdentityMismatchException,
    MissingTrainerIdentityException,
    SignatureException,
)
from app.metrics import proxy_verifications_total
from app.services.view_counter import ViewCounter

logger = logging.getLogger(__name__)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_db_session)]


@dataclass(frozen=True)
class ProxyTrainer:
    trainer_id: str
    email: Optional[str]
    shop: Optional[str]
    logged_in_customer_id: Optional[str]


async def verify_signed_proxy(request: Request) -> ProxyVerification:
    """Reject App Proxy requests whose query signature does not verify."""
    # Error rendering for proxy routes is a transport decision.
    request.state.embed_errors = settings.proxy_errors_as_ok

    verification = verify_proxy_request(
        str(request.url), settings.app_proxy_shared_secret
    )
    result = "ok" if verification.ok else verification.reason.value
    proxy_verifications_total.labels(result=result).inc()

    if verification.ok:
        return verification

    if verification.reason == VerificationFailure.MISSING_SECRET:
        logger.error("APP_PROXY_SHARED_SECRET is not configured")
        raise ConfigurationException(
            "APP_PROXY_SHARED_SECRET", error_code="MISSING_SHARED_SECRET"
        )

    logger.warning(
        "Proxy signature rejected reason=%s path=%s",
        result,
        request.url.path,
        extra={"reason": result, "path": request.url.path},
    )
    raise SignatureException(verification.reason.value)


async def get_proxy_trainer(
    request: Request,
    verification: Annotated[ProxyVerification, Depends(verify_signed_proxy)],
) -> ProxyTrainer:
    params = request.query_params
    customer_id = (
        params.get("shopifyCustomerId") or params.get("customerId") or ""
    ).strip()
    logged_in = verification.logged_in_customer_id

    if customer_id and logged_in and customer_id != logged_in:
        logger.warning(
            "Proxy identity mismatch customer_id=%s logged_in_customer_id=%s",
            customer_id,
            logged_in,
            extra={"path": request.url.path},
        )
        raise IdentityMismatchException()

    email = normalize_email(params.get("email"))
    trainer_id = resolve_trainer_id(customer_id or logged_in, email)
    if not trainer_id:
        raise MissingTrainerIdentityException()

    return ProxyTrainer(
        trainer_id=trainer_id,
        email=email,
        shop=verification.shop,
        logged_in_customer_id=logged_in,
    )


ProxyTrainerDep = Annotated[ProxyTrainer, Depends(get_proxy_trainer)]


async def require_admin(
    x_mf_admin_email: Annotated[Optional[str], Header()] = None,
) -> str:
    email = normalize_email(x_mf_admin_email)
    if not email or email not in settings.admin_email_list:
        raise AdminForbiddenException()
    return email


AdminDep = Annotated[str, Depends(require_admin)]


def get_view_counter(request: Request) -> ViewCounter:
    return request.app.state.view_counter


ViewCounterDep = Annotated[ViewCounter, Depends(get_view_counter)]
