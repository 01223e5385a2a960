"""
License key API views.

These endpoints are used by services to:
- Issue license keys under a plan
- Activate a key for an identifier
- Validate a key for an identifier
- Look up and list keys
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.license_keys.serializers import (
    SORT_FIELDS,
    ActivateLicenseKeyRequestSerializer,
    GenerateLicenseKeyRequestSerializer,
    LicenseKeyListParamsSerializer,
    LicenseKeyPageSerializer,
    LicenseKeySerializer,
    ValidateLicenseKeyRequestSerializer,
)
from core.domain.exceptions import DomainException, InvalidParametersError
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.activate_license_key import ActivateLicenseKeyCommand
from licenses.application.commands.generate_license_key import GenerateLicenseKeyCommand
from licenses.application.handlers.activate_license_key_handler import ActivateLicenseKeyHandler
from licenses.application.handlers.generate_license_key_handler import GenerateLicenseKeyHandler
from licenses.application.handlers.get_license_key_handler import GetLicenseKeyHandler
from licenses.application.handlers.list_license_keys_handler import ListLicenseKeysHandler
from licenses.application.handlers.validate_license_key_handler import ValidateLicenseKeyHandler
from licenses.application.queries.get_license_key import GetLicenseKeyQuery
from licenses.application.queries.list_license_keys import ListLicenseKeysQuery
from licenses.application.queries.validate_license_key import ValidateLicenseKeyQuery
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)
from plans.infrastructure.repositories.django_plan_repository import DjangoPlanRepository

# Initialize repositories (in production, use DI container)
_plan_repo = DjangoPlanRepository()
_license_key_repo = DjangoLicenseKeyRepository()

tracer = get_tracer(__name__)

ERROR_RESPONSES = {
    400: {"description": "Bad Request"},
    404: {"description": "Not Found"},
    503: {"description": "Service Unavailable"},
}


def _validated(serializer, span):
    """Return validated data or raise INVALID_PARAMETERS with the first field error."""
    if serializer.is_valid():
        return serializer.validated_data
    field, errors = next(iter(serializer.errors.items()))
    message = f"{field}: {errors[0]}" if isinstance(errors, list) and errors else str(errors)
    span.set_attribute("error", "validation_failed")
    span.set_attribute("error.details", str(serializer.errors))
    span.set_status(Status(StatusCode.ERROR, "Validation failed"))
    raise InvalidParametersError(message)


def _tag_license_value(request: Request, value: str) -> None:
    """Expose the license value to the observability middleware."""
    request._request.license_value = value  # pylint: disable=protected-access


def _record_failure(span, exc: DomainException) -> None:
    span.set_attribute("error", exc.code)
    span.set_status(Status(StatusCode.ERROR, exc.message))


class LicenseKeyCollectionView(APIView):
    """View for issuing and listing license keys."""

    @extend_schema(
        operation_id="generate_license_key",
        summary="Generate License Key",
        description="Issue a new license key for a service under a plan (UUID or alias).",
        tags=["License Keys"],
        request=GenerateLicenseKeyRequestSerializer,
        responses={201: LicenseKeySerializer, **ERROR_RESPONSES},
    )
    def post(self, request: Request) -> Response:
        """Issue a license key."""
        return async_to_sync(self._handle_generate)(request)

    async def _handle_generate(self, request: Request) -> Response:
        """Async handler for generate license key."""
        with tracer.start_as_current_span("generate_license_key") as span:
            span.set_attribute("operation", "generate_license_key")
            data = _validated(GenerateLicenseKeyRequestSerializer(data=request.data), span)

            command = GenerateLicenseKeyCommand(
                service_id=data.get("serviceId"),
                plan=data.get("plan"),
            )
            span.set_attribute("service_id", command.service_id or "")
            span.set_attribute("plan", command.plan or "")

            handler = GenerateLicenseKeyHandler(
                plan_repository=_plan_repo,
                license_key_repository=_license_key_repo,
            )
            try:
                result = await handler.handle(command)
            except DomainException as e:
                _record_failure(span, e)
                raise

            span.set_attribute("license_key.id", str(result.id))
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseKeySerializer(result).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="list_license_keys",
        summary="List License Keys",
        description="List license keys with optional filters, pagination and sorting.",
        tags=["License Keys"],
        parameters=[
            OpenApiParameter("status", str, enum=["issued", "active", "expired"]),
            OpenApiParameter("serviceId", str),
            OpenApiParameter("plan", str, description="Plan UUID or alias"),
            OpenApiParameter("identifier", str),
            OpenApiParameter("page", int),
            OpenApiParameter("limit", int),
            OpenApiParameter("sort", str, description="Field name, '-' prefix for descending"),
        ],
        responses={200: LicenseKeyPageSerializer, 400: {"description": "Bad Request"}},
    )
    def get(self, request: Request) -> Response:
        """List license keys."""
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        """Async handler for list license keys."""
        with tracer.start_as_current_span("list_license_keys") as span:
            span.set_attribute("operation", "list_license_keys")
            params = _validated(LicenseKeyListParamsSerializer(data=request.query_params), span)

            sort = params["sort"]
            descending = sort.startswith("-")
            sort_field = SORT_FIELDS[sort.lstrip("-")]
            query = ListLicenseKeysQuery(
                status=params.get("status"),
                service_id=params.get("serviceId"),
                plan=params.get("plan"),
                identifier=params.get("identifier"),
                page=params["page"],
                limit=params.get("limit"),
                sort=f"-{sort_field}" if descending else sort_field,
            )

            handler = ListLicenseKeysHandler(license_key_repository=_license_key_repo)
            try:
                result = await handler.handle(query)
            except DomainException as e:
                _record_failure(span, e)
                raise

            span.set_attribute("results.count", len(result.results))
            span.set_attribute("results.total", result.total)
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseKeyPageSerializer(result).data, status=status.HTTP_200_OK)


class LicenseKeyDetailView(APIView):
    """View for fetching one license key."""

    @extend_schema(
        operation_id="get_license_key",
        summary="Get License Key",
        description="Fetch a license key by its UUID or its value.",
        tags=["License Keys"],
        responses={200: LicenseKeySerializer, 404: {"description": "Not Found"}},
    )
    def get(self, request: Request, reference: str) -> Response:
        """Get a license key."""
        return async_to_sync(self._handle_get)(request, reference)

    async def _handle_get(self, request: Request, reference: str) -> Response:
        """Async handler for get license key."""
        with tracer.start_as_current_span("get_license_key") as span:
            span.set_attribute("operation", "get_license_key")
            _tag_license_value(request, reference)

            handler = GetLicenseKeyHandler(license_key_repository=_license_key_repo)
            try:
                result = await handler.handle(GetLicenseKeyQuery(reference=reference))
            except DomainException as e:
                _record_failure(span, e)
                raise

            span.set_attribute("license_key.id", str(result.id))
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseKeySerializer(result).data, status=status.HTTP_200_OK)


class ActivateLicenseKeyView(APIView):
    """View for activating license keys."""

    @extend_schema(
        operation_id="activate_license_key",
        summary="Activate License Key",
        description=(
            "Bind an issued license key to an identifier. If the identifier already "
            "holds an unexpired key for the same service, the new window starts where "
            "that key's window ends and the older key is truncated to now."
        ),
        tags=["License Keys"],
        request=ActivateLicenseKeyRequestSerializer,
        responses={
            200: LicenseKeySerializer,
            409: {"description": "Conflict - License already active"},
            **ERROR_RESPONSES,
        },
    )
    def post(self, request: Request, value: str) -> Response:
        """Activate a license key."""
        return async_to_sync(self._handle_activate)(request, value)

    async def _handle_activate(self, request: Request, value: str) -> Response:
        """Async handler for activate license key."""
        with tracer.start_as_current_span("activate_license_key") as span:
            span.set_attribute("operation", "activate_license_key")
            _tag_license_value(request, value)
            data = _validated(ActivateLicenseKeyRequestSerializer(data=request.data), span)

            command = ActivateLicenseKeyCommand(
                value=value,
                identifier=data.get("identifier"),
                extra=data.get("extra"),
            )
            span.set_attribute("identifier", command.identifier or "")

            handler = ActivateLicenseKeyHandler(license_key_repository=_license_key_repo)
            try:
                result = await handler.handle(command)
            except DomainException as e:
                _record_failure(span, e)
                raise

            span.set_attribute("license_key.id", str(result.id))
            span.set_attribute("expires_at", result.expires_at.isoformat())
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseKeySerializer(result).data, status=status.HTTP_200_OK)


class ValidateLicenseKeyView(APIView):
    """View for validating license keys."""

    @extend_schema(
        operation_id="validate_license_key",
        summary="Validate License Key",
        description=(
            "Check that a license key is activated, bound to the given identifier "
            "and not expired."
        ),
        tags=["License Keys"],
        request=ValidateLicenseKeyRequestSerializer,
        responses={
            200: LicenseKeySerializer,
            422: {"description": "License not active, bound elsewhere or expired"},
            **ERROR_RESPONSES,
        },
    )
    def post(self, request: Request, value: str) -> Response:
        """Validate a license key."""
        return async_to_sync(self._handle_validate)(request, value)

    async def _handle_validate(self, request: Request, value: str) -> Response:
        """Async handler for validate license key."""
        with tracer.start_as_current_span("validate_license_key") as span:
            span.set_attribute("operation", "validate_license_key")
            _tag_license_value(request, value)
            data = _validated(ValidateLicenseKeyRequestSerializer(data=request.data), span)

            query = ValidateLicenseKeyQuery(value=value, identifier=data.get("identifier"))

            handler = ValidateLicenseKeyHandler(license_key_repository=_license_key_repo)
            try:
                result = await handler.handle(query)
            except DomainException as e:
                _record_failure(span, e)
                raise

            span.set_attribute("license_key.id", str(result.id))
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseKeySerializer(result).data, status=status.HTTP_200_OK)
