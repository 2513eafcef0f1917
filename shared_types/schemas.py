"""Application Schemas

Wire-format schemas shared by the API handlers and the web client. Keys
keep the camelCase names used on the wire. Each schema is paired with a
TypedDict describing the value it produces; the two are kept in sync by
tests that build a value of the declared type and parse it back.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, NotRequired, TypedDict

from shared_types.validation import s

UserRole = Literal["admin", "doctor", "student"]
Difficulty = Literal["beginner", "intermediate", "advanced"]
SortOrder = Literal["asc", "desc"]


# ============================================================================
# Users
# ============================================================================

UserSchema = s.object({
    "id": s.string().uuid(),
    "email": s.string().email(),
    "name": s.string().min(1).max(100),
    "role": s.enum("admin", "doctor", "student"),
    "createdAt": s.date(),
    "updatedAt": s.date(),
})


class User(TypedDict):
    id: str
    email: str
    name: str
    role: UserRole
    createdAt: datetime
    updatedAt: datetime


# ============================================================================
# Medical Cases
# ============================================================================

MedicalCaseSchema = s.object({
    "id": s.string().uuid(),
    "title": s.string().min(1).max(200),
    "description": s.string().min(1),
    "difficulty": s.enum("beginner", "intermediate", "advanced"),
    "tags": s.array(s.string()),
    "createdBy": s.string().uuid(),
    "createdAt": s.date(),
    "updatedAt": s.date(),
    "isPublished": s.boolean().default(False),
})


class MedicalCase(TypedDict):
    id: str
    title: str
    description: str
    difficulty: Difficulty
    tags: list[str]
    createdBy: str
    createdAt: datetime
    updatedAt: datetime
    isPublished: bool


CreateMedicalCaseRequestSchema = (
    MedicalCaseSchema.pick("title", "description", "difficulty", "tags")
    .extend(isPublished=s.boolean().optional())
)


class CreateMedicalCaseRequest(TypedDict):
    title: str
    description: str
    difficulty: Difficulty
    tags: list[str]
    isPublished: NotRequired[bool]


UpdateMedicalCaseRequestSchema = CreateMedicalCaseRequestSchema.partial()


class UpdateMedicalCaseRequest(TypedDict, total=False):
    title: str
    description: str
    difficulty: Difficulty
    tags: list[str]
    isPublished: bool


# ============================================================================
# API Envelopes
# ============================================================================

ApiSuccessResponseSchema = s.object({
    "success": s.literal(True),
    "data": s.unknown(),
    "message": s.string().optional(),
})


class ApiSuccessResponse(TypedDict):
    success: Literal[True]
    data: Any
    message: NotRequired[str]


ApiErrorResponseSchema = s.object({
    "success": s.literal(False),
    "error": s.string(),
    "details": s.unknown().optional(),
})


class ApiErrorResponse(TypedDict):
    success: Literal[False]
    error: str
    details: NotRequired[Any]


ApiResponseSchema = s.union(ApiSuccessResponseSchema, ApiErrorResponseSchema)

ApiResponse = ApiSuccessResponse | ApiErrorResponse


# ============================================================================
# Pagination
# ============================================================================

PaginationQuerySchema = s.object({
    "page": s.coerce.number().int().positive().default(1),
    "limit": s.coerce.number().int().positive().max(100).default(10),
    "sortBy": s.string().optional(),
    "sortOrder": s.enum("asc", "desc").default("asc"),
})


class PaginationQuery(TypedDict):
    page: int
    limit: int
    sortBy: NotRequired[str]
    sortOrder: SortOrder


class PaginationInfo(TypedDict):
    page: float
    limit: float
    total: float
    totalPages: float


PaginatedResponseSchema = s.object({
    "items": s.array(s.unknown()),
    "pagination": s.object({
        "page": s.number(),
        "limit": s.number(),
        "total": s.number(),
        "totalPages": s.number(),
    }),
})


class PaginatedResponse(TypedDict):
    items: list[Any]
    pagination: PaginationInfo


# ============================================================================
# Sign-up
# ============================================================================

# Mirrors the identity provider's password policy: length 8, upper, lower
# and digit required, symbols optional.
PasswordSchema = (
    s.string()
    .min(8, "Password must be at least 8 characters")
    .regex(r"[A-Z]", "Password must contain at least one uppercase letter")
    .regex(r"[a-z]", "Password must contain at least one lowercase letter")
    .regex(r"[0-9]", "Password must contain at least one number")
    .regex(r"^\S*$", "Password cannot contain spaces")
)

SignUpRequestSchema = s.object({
    "email": s.string().email(),
    "password": PasswordSchema,
    "name": s.string().min(1).max(100),
})


class SignUpRequest(TypedDict):
    email: str
    password: str
    name: str
