"""shared-types: schemas and validation shared by the API and the web client.

Usage:
    from shared_types import CreateMedicalCaseRequestSchema, Success, Failure

    match CreateMedicalCaseRequestSchema.safe_parse(body):
        case Success(request): ...
        case Failure(issues): ...
"""
from .schemas import (
    ApiErrorResponse,
    ApiErrorResponseSchema,
    ApiResponse,
    ApiResponseSchema,
    ApiSuccessResponse,
    ApiSuccessResponseSchema,
    CreateMedicalCaseRequest,
    CreateMedicalCaseRequestSchema,
    MedicalCase,
    MedicalCaseSchema,
    PaginatedResponse,
    PaginatedResponseSchema,
    PaginationQuery,
    PaginationQuerySchema,
    SignUpRequest,
    SignUpRequestSchema,
    UpdateMedicalCaseRequest,
    UpdateMedicalCaseRequestSchema,
    User,
    UserSchema,
)
from .utils import (
    ComplexFormSchema,
    ConditionalSchema,
    DateStringSchema,
    EnvSchema,
    LoginFormSchema,
    SessionValidation,
    UpdateUserSchema,
    is_medical_case_array,
    parse_query_params,
    safe_parse_api_response,
    validate_env,
    validate_user_session,
)
from .validation import Failure, Issue, IssueCode, ParseError, Success, parse, s, safe_parse

__version__ = "1.0.0"
