"""
Billing API endpoints.

Handles Stripe Connect onboarding, the product catalog, payment links and
student checkout. All money moves through the tenant's connected account.
"""

import stripe
from django.http import HttpRequest
from ninja import Query, Router
from ninja.errors import HttpError

from apps.billing.exceptions import PayoutAccountNotActive, PriceNotFound
from apps.billing.fees import estimate_fees
from apps.billing.models import Product
from apps.billing.schemas import (
    BillingErrorResponse,
    ConnectAccountRequest,
    ConnectAccountResponse,
    FeeEstimateQuery,
    FeeEstimateResponse,
    PaymentLinkRequest,
    PaymentLinkResponse,
    ProductCreateRequest,
    ProductListResponse,
    ProductResponse,
    ProductUpdateRequest,
    StudentCheckoutRequest,
    StudentCheckoutResponse,
)
from apps.billing.services import (
    archive_product,
    create_connect_account,
    create_payment_link,
    create_product,
    create_student_checkout,
    update_product,
)
from apps.core.logging import get_logger
from apps.core.schemas import ErrorResponse
from apps.core.security import SessionJWTAuth
from apps.students.models import Modality, Student

logger = get_logger(__name__)

router = Router(tags=["billing"])
session_auth = SessionJWTAuth()


def _product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        name=product.name,
        description=product.description,
        product_type=product.product_type,
        price=product.price,
        recurring_interval=product.recurring_interval,
        quantity=product.quantity,
        modality_id=product.modality_id,
        stripe_product_id=product.stripe_product_id,
        stripe_price_id=product.stripe_price_id,
        is_archived=product.is_archived,
    )


@router.post(
    "/payment-links",
    response={
        200: PaymentLinkResponse,
        400: BillingErrorResponse,
        401: ErrorResponse,
        404: BillingErrorResponse,
        500: BillingErrorResponse,
    },
    auth=session_auth,
    by_alias=True,
    operation_id="createPaymentLink",
    summary="Create a payment link with the platform fee",
)
def create_payment_link_endpoint(request: HttpRequest, payload: PaymentLinkRequest):
    """
    Create a payment link for a price of the caller's organization.

    The organization must have an enabled payout account; no Stripe call is
    made otherwise.
    """
    org = request.auth.organization
    if org is None or org.id != payload.organization_id:
        return 404, {"error": "Organização não encontrada."}

    try:
        url = create_payment_link(
            org,
            stripe_price_id=payload.stripe_price_id,
            recurring=payload.recurring,
            student_id=payload.student_id,
        )
    except PayoutAccountNotActive as e:
        logger.info(
            "payment_link_payout_account_inactive",
            status=e.status,
            **{"organization.id": str(org.id)},
        )
        return 400, {"error": str(e)}
    except PriceNotFound as e:
        logger.warning("payment_link_price_without_amount", error=str(e))
        return 400, {"error": "Preço não encontrado ou sem valor definido."}
    except stripe.StripeError:
        logger.exception("payment_link_creation_failed")
        return 500, {"error": "Falha ao criar link de pagamento."}

    return 200, PaymentLinkResponse(payment_link_url=url)


@router.get(
    "/fee-estimate",
    response={200: FeeEstimateResponse, 401: ErrorResponse},
    auth=session_auth,
    operation_id="getFeeEstimate",
    summary="Estimate fees for a sale price",
)
def get_fee_estimate(request: HttpRequest, query: Query[FeeEstimateQuery]) -> FeeEstimateResponse:
    """Approximate net amount for a price in BRL, assuming card payment."""
    estimate = estimate_fees(query.price)
    return FeeEstimateResponse(
        price=estimate.price,
        platform_fee=estimate.platform_fee,
        estimated_processor_fee=estimate.estimated_processor_fee,
        estimated_net=estimate.estimated_net,
        method=estimate.method,
    )


@router.post(
    "/connect",
    response={200: ConnectAccountResponse, 401: ErrorResponse, 403: ErrorResponse},
    auth=session_auth,
    operation_id="createConnectAccount",
    summary="Start Stripe Connect onboarding",
)
def create_connect(request: HttpRequest, payload: ConnectAccountRequest) -> ConnectAccountResponse:
    """
    Create (or reuse) the organization's connected account.

    Returns the onboarding URL to redirect the gym owner to.
    """
    org = request.auth.require_organization()
    email = payload.email or request.auth.profile.email

    try:
        url = create_connect_account(
            org,
            email=email,
            return_url=payload.return_url,
            refresh_url=payload.refresh_url,
        )
    except stripe.StripeError:
        logger.exception("stripe_connect_account_creation_failed")
        raise HttpError(500, "Falha ao criar conta Stripe.")

    return ConnectAccountResponse(
        onboarding_url=url,
        stripe_account_id=org.stripe_account_id,
        status=org.stripe_account_status,
    )


@router.get(
    "/products",
    response={200: ProductListResponse, 401: ErrorResponse, 403: ErrorResponse},
    auth=session_auth,
    operation_id="listProducts",
    summary="List the organization's products",
)
def list_products(request: HttpRequest, include_archived: bool = False) -> ProductListResponse:
    org = request.auth.require_organization()
    products = Product.objects.filter(organization=org)
    if not include_archived:
        products = products.filter(is_archived=False)
    return ProductListResponse(products=[_product_response(p) for p in products])


@router.post(
    "/products",
    response={
        201: ProductResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        403: ErrorResponse,
        404: ErrorResponse,
    },
    auth=session_auth,
    operation_id="createProduct",
    summary="Create a product on the connected account",
)
def create_product_endpoint(request: HttpRequest, payload: ProductCreateRequest):
    """Create a product and its Stripe price. Requires an enabled payout account."""
    org = request.auth.require_organization()

    modality = None
    if payload.modality_id is not None:
        modality = Modality.objects.filter(id=payload.modality_id, organization=org).first()
        if modality is None:
            raise HttpError(404, "Modalidade não encontrada.")

    try:
        product = create_product(
            org,
            name=payload.name,
            price=payload.price,
            description=payload.description,
            recurring_interval=payload.recurring_interval,
            product_type=payload.product_type,
            quantity=payload.quantity,
            modality=modality,
        )
    except PayoutAccountNotActive as e:
        raise HttpError(400, str(e))
    except stripe.StripeError:
        logger.exception("product_creation_failed")
        raise HttpError(500, "Falha ao criar produto no Stripe.")

    return 201, _product_response(product)


def _get_product(request: HttpRequest, product_id: int) -> Product:
    org = request.auth.require_organization()
    try:
        return Product.objects.select_related("organization").get(id=product_id, organization=org)
    except Product.DoesNotExist:
        raise HttpError(404, "Produto não encontrado.") from None


@router.patch(
    "/products/{product_id}",
    response={200: ProductResponse, 401: ErrorResponse, 403: ErrorResponse, 404: ErrorResponse},
    auth=session_auth,
    operation_id="updateProduct",
    summary="Rename or re-describe a product",
)
def update_product_endpoint(
    request: HttpRequest, product_id: int, payload: ProductUpdateRequest
) -> ProductResponse:
    product = _get_product(request, product_id)
    try:
        product = update_product(product, name=payload.name, description=payload.description)
    except stripe.StripeError:
        logger.exception("product_update_failed", product_id=product_id)
        raise HttpError(500, "Falha ao atualizar produto no Stripe.")
    return _product_response(product)


@router.delete(
    "/products/{product_id}",
    response={200: ProductResponse, 401: ErrorResponse, 403: ErrorResponse, 404: ErrorResponse},
    auth=session_auth,
    operation_id="archiveProduct",
    summary="Archive a product",
)
def archive_product_endpoint(request: HttpRequest, product_id: int) -> ProductResponse:
    """Deactivate the product on Stripe and hide it from the catalog."""
    product = _get_product(request, product_id)
    try:
        product = archive_product(product)
    except stripe.StripeError:
        logger.exception("product_archive_failed", product_id=product_id)
        raise HttpError(500, "Falha ao arquivar produto no Stripe.")
    return _product_response(product)


@router.post(
    "/student-checkout",
    response={
        200: StudentCheckoutResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        403: ErrorResponse,
        404: ErrorResponse,
    },
    auth=session_auth,
    operation_id="createStudentCheckout",
    summary="Create a checkout session for a student",
)
def create_student_checkout_endpoint(
    request: HttpRequest, payload: StudentCheckoutRequest
) -> StudentCheckoutResponse:
    """One-time checkout (card, Pix or boleto) for a student's modality fee."""
    org = request.auth.require_organization()

    student = (
        Student.objects.select_related("organization")
        .filter(id=payload.student_id, organization=org)
        .first()
    )
    modality = Modality.objects.filter(id=payload.modality_id, organization=org).first()
    if student is None or modality is None:
        raise HttpError(404, "Aluno ou modalidade não encontrado.")

    try:
        url = create_student_checkout(
            student,
            modality,
            success_url=payload.success_url,
            cancel_url=payload.cancel_url,
        )
    except (PayoutAccountNotActive, PriceNotFound) as e:
        raise HttpError(400, str(e))
    except stripe.StripeError:
        logger.exception("student_checkout_creation_failed", student_id=student.id)
        raise HttpError(500, "Falha ao criar sessão de pagamento.")

    return StudentCheckoutResponse(checkout_url=url)
