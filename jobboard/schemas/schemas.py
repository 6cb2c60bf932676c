"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Field names follow the stored documents (camelCase) so clients see the
same keys whether they read a job listing or an applicant record.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    admin = "Admin"
    provider = "Job Provider"
    seeker = "User"


class SignupRole(str, Enum):
    """Roles a visitor may pick at signup. Admins are created by admins."""
    provider = "Job Provider"
    seeker = "User"


SHORTLISTED_STATUS = "Shortlisted"
APPLIED_STATUS_PREFIX = "Applied on "


# ============================================================
# AUTH SCHEMAS
# ============================================================

class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=5)
    role: SignupRole = SignupRole.seeker

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    message: str = "Login Successful"
    token: str
    userId: str
    role: str

class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str
    jobsPosted: List[str] = []
    createdAt: Optional[datetime] = None


# ============================================================
# ADMIN USER SCHEMAS
# ============================================================

class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=5)
    role: UserRole

class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10)
    category: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[str] = None
    experience: Optional[str] = None

class JobUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = Field(None, min_length=10)
    category: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[str] = None
    experience: Optional[str] = None

class JobResponse(BaseModel):
    id: str
    title: str
    description: str
    category: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[str] = None
    experience: Optional[str] = None
    providerId: str
    status: Optional[str] = None  # applicant status, only on a seeker's applied list
    createdAt: Optional[datetime] = None


# ============================================================
# APPLICANT SCHEMAS
# ============================================================

class ApplicantUser(BaseModel):
    id: str
    name: str
    email: Optional[str] = None

class ApplicantResponse(BaseModel):
    id: str
    jobId: str
    providerId: str
    status: str
    user: Optional[ApplicantUser] = None
    createdAt: Optional[datetime] = None


# ============================================================
# LIST / STATS SCHEMAS
# ============================================================

class UserListResponse(BaseModel):
    message: str
    users: List[UserResponse]

class UserDetailResponse(BaseModel):
    message: str
    user: UserResponse

class JobListResponse(BaseModel):
    message: str
    jobs: List[JobResponse]

class JobDetailResponse(BaseModel):
    message: str
    job: JobResponse

class AppliedJobsResponse(BaseModel):
    message: str
    jobsApplied: List[JobResponse]

class ApplicantListResponse(BaseModel):
    message: str
    applicants: List[ApplicantResponse] = []

class ShortlistResponse(BaseModel):
    message: str
    shortlists: List[ApplicantResponse] = []

class AdminStats(BaseModel):
    jobCount: int
    providerCount: int
    applicantCount: int
    seekerCount: int

class AdminStatsResponse(BaseModel):
    message: str
    stats: AdminStats

class AdminRecentResponse(BaseModel):
    message: str
    recentUsers: List[UserResponse]
    recentJobs: List[JobResponse]

class ProviderStats(BaseModel):
    jobsCount: int
    applicantsCount: int

class ProviderStatsResponse(BaseModel):
    message: str
    stats: ProviderStats

class ProviderRecentResponse(BaseModel):
    message: str
    recentJobs: List[JobResponse]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
