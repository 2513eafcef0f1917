"""Consumer helpers built on the application schemas.

Session checks, query-string parsing, environment loading and the
frontend form schemas. Unlike the schema engine, these helpers log.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal, Mapping, NotRequired, TypedDict

from shared_types.errors import AppError, AppErrorException, ErrorCode
from shared_types.logging import get_logger
from shared_types.schemas import ApiResponseSchema, PaginationQuery, PaginationQuerySchema, User, UserRole, UserSchema
from shared_types.validation import BoundaryValidator, Failure, Issue, ParseError, Success, s

logger = get_logger(__name__)


# ============================================================================
# Parsing helpers
# ============================================================================

def safe_parse_api_response(data: Any) -> Any | None:
    """Return ``data`` from a success envelope; None for error or malformed envelopes."""
    match BoundaryValidator(ApiResponseSchema).parse_external(data, service_name="api"):
        case Success(response):
            return response.get("data") if response["success"] else None
        case Failure():
            return None


def parse_query_params(params: Mapping[str, Any]) -> PaginationQuery:
    """Parse pagination query parameters, falling back to defaults when they are invalid."""
    try:
        return PaginationQuerySchema.parse(dict(params))
    except ParseError as e:
        logger.warning("query_params_invalid", issues=[i.to_dict() for i in e.issues])
        return PaginationQuerySchema.parse({})


@dataclass(frozen=True, slots=True)
class SessionValidation:
    is_valid: bool
    user: User | None = None
    errors: tuple[Issue, ...] | None = None


def validate_user_session(session_data: Any) -> SessionValidation:
    match UserSchema.safe_parse(session_data):
        case Success(user):
            return SessionValidation(is_valid=True, user=user)
        case Failure(issues):
            logger.info("user_session_invalid", issue_count=len(issues), paths=[i.dotted_path for i in issues])
            return SessionValidation(is_valid=False, errors=issues)


def is_medical_case_array(data: Any) -> bool:
    """Type guard: any list qualifies, elements are not inspected."""
    return s.array(s.unknown()).is_valid(data)


# ============================================================================
# Environment
# ============================================================================

EnvSchema = s.object({
    "NODE_ENV": s.enum("development", "production", "test"),
    "DYNAMODB_TABLE_NAME": s.string().min(1),
    "COGNITO_USER_POOL_ID": s.string().min(1),
    "AWS_REGION": s.string().min(1),
    "API_BASE_URL": s.string().url(),
})


class Env(TypedDict):
    NODE_ENV: Literal["development", "production", "test"]
    DYNAMODB_TABLE_NAME: str
    COGNITO_USER_POOL_ID: str
    AWS_REGION: str
    API_BASE_URL: str


def validate_env(env: Mapping[str, str | None]) -> Env:
    """Strict-parse the process environment; any defect is fatal.

    Unset variables (``None``) are treated as absent. Raises
    AppErrorException with E9004_INVALID_CONFIGURATION listing every issue.
    """
    try:
        return EnvSchema.parse({k: v for k, v in env.items() if v is not None})
    except ParseError as e:
        logger.error("env_validation_failed", issues=[i.to_dict() for i in e.issues])
        raise AppErrorException(AppError(code=ErrorCode.E9004_INVALID_CONFIGURATION,
            message="Invalid environment configuration",
            metadata={"issues": [i.to_dict() for i in e.issues]}).with_origin("startup")) from e


# ============================================================================
# Form schemas
# ============================================================================

LoginFormSchema = s.object({
    "email": s.string().email("Please enter a valid email address"),
    "password": s.string().min(8, "Password must be at least 8 characters"),
    "rememberMe": s.boolean().optional(),
})


class LoginForm(TypedDict):
    email: str
    password: str
    rememberMe: NotRequired[bool]


UpdateUserSchema = UserSchema.partial().omit("id", "createdAt", "updatedAt")


class UpdateUser(TypedDict, total=False):
    email: str
    name: str
    role: UserRole


def _has_specialization(data: dict[str, Any]) -> bool:
    if data["type"] == "doctor":
        return bool(data.get("specialization"))
    return True


ConditionalSchema = s.object({
    "type": s.enum("student", "doctor"),
    "specialization": s.string().optional(),
}).refine(_has_specialization, "Specialization is required for doctors", path=["specialization"])


def _is_iso_date(value: str) -> bool:
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


DateStringSchema = (
    s.string()
    .refine(_is_iso_date, "Invalid date")
    .transform(lambda value: datetime.fromisoformat(value.replace("Z", "+00:00")))
)

ComplexFormSchema = s.object({
    "personalInfo": s.object({
        "firstName": s.string().min(1, "First name is required"),
        "lastName": s.string().min(1, "Last name is required"),
        "age": s.number().min(18, "Must be at least 18 years old").max(120, "Invalid age"),
    }),
    "preferences": s.object({
        "newsletter": s.boolean(),
        "notifications": s.object({
            "email": s.boolean(),
            "sms": s.boolean(),
        }),
    }),
}).strict()
