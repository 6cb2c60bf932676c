"""
Admin Routes

GET /admin/stats - Counts of providers, seekers, jobs and applicants
GET /admin/recent - Three most recent users and jobs
GET /admin/users - List users (except yourself)
POST /admin/users - Add a user with any role
GET /admin/users/{user_id} - Get user
PUT /admin/users/{user_id} - Edit user (not yourself)
DELETE /admin/users/{user_id} - Delete user, cascading to their jobs and applications
GET /admin/jobs - List all jobs
POST /admin/jobs - Post a job owned by the admin
GET /admin/jobs/{job_id} - Get job
PUT /admin/jobs/{job_id} - Edit any job
DELETE /admin/jobs/{job_id} - Delete any job, cascading to its applicants
"""

from fastapi import APIRouter, HTTPException, Depends
from pymongo.errors import DuplicateKeyError

from jobboard.core.auth import get_current_admin, hash_password
from jobboard.services.integrity_service import IntegrityService, get_integrity_service
from jobboard.services.mongo_service import (
    UserService, JobService, ApplicantService,
    serialize_doc, serialize_user, to_object_id
)
from jobboard.utils.error_handlers import raise_for_outcome
from jobboard.schemas.schemas import (
    UserRole, UserCreate, UserUpdate, UserResponse, UserListResponse, UserDetailResponse,
    JobCreate, JobUpdate, JobResponse, JobListResponse, JobDetailResponse,
    AdminStats, AdminStatsResponse, AdminRecentResponse, MessageResponse
)

router = APIRouter(prefix="/admin", tags=["Admin"])


def _others(admin: dict) -> dict:
    return {"_id": {"$ne": to_object_id(admin["user_id"])}}


# ============================================================
# DASHBOARD
# ============================================================

@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(admin: dict = Depends(get_current_admin)):
    users = UserService()
    stats = AdminStats(
        jobCount=JobService().count(),
        providerCount=users.count({**_others(admin), "role": UserRole.provider.value}),
        applicantCount=ApplicantService().count(),
        seekerCount=users.count({**_others(admin), "role": UserRole.seeker.value}),
    )
    return AdminStatsResponse(message="Successfully fetched stats", stats=stats)


@router.get("/recent", response_model=AdminRecentResponse)
async def get_recent(admin: dict = Depends(get_current_admin)):
    recent_users = UserService().find(_others(admin), limit=3)
    recent_jobs = JobService().find(limit=3)
    return AdminRecentResponse(
        message="Successfully fetched recent stats",
        recentUsers=[UserResponse(**serialize_user(u)) for u in recent_users],
        recentJobs=[JobResponse(**serialize_doc(j)) for j in recent_jobs],
    )


# ============================================================
# USERS
# ============================================================

@router.get("/users", response_model=UserListResponse)
async def get_users(admin: dict = Depends(get_current_admin)):
    users = UserService().find(_others(admin))
    return UserListResponse(
        message="Fetched the list of users",
        users=[UserResponse(**serialize_user(u)) for u in users],
    )


@router.post("/users", response_model=MessageResponse, status_code=201)
async def add_user(data: UserCreate, admin: dict = Depends(get_current_admin)):
    users = UserService()
    if users.get_by_email(data.email):
        raise HTTPException(status_code=409, detail="E-Mail address already exists!")

    try:
        users.create(data.name, data.email, hash_password(data.password), data.role.value)
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="E-Mail address already exists!")

    return MessageResponse(message="User Added Successfully!")


@router.get("/users/{user_id}", response_model=UserDetailResponse)
async def get_user(user_id: str, admin: dict = Depends(get_current_admin)):
    oid = to_object_id(user_id)
    user = UserService().find_by_id(oid) if oid else None
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return UserDetailResponse(message="Fetched the user Successfully", user=UserResponse(**serialize_user(user)))


@router.put("/users/{user_id}", response_model=MessageResponse)
async def edit_user(user_id: str, update: UserUpdate, admin: dict = Depends(get_current_admin)):
    oid = to_object_id(user_id)
    if oid is not None and oid == to_object_id(admin["user_id"]):
        raise HTTPException(status_code=403, detail="Cannot edit the current User")

    fields = update.model_dump(exclude_none=True, mode="json")
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    users = UserService()
    user = users.find_by_id(oid) if oid else None
    if not user:
        raise HTTPException(
            status_code=404,
            detail=f"Cannot update user with id={user_id}. Maybe user was not found!"
        )

    # a job's providerId must stay a user allowed to post jobs
    if fields.get("role") == UserRole.seeker.value and user["role"] != UserRole.seeker.value:
        if user.get("jobsPosted") or JobService().count({"providerId": oid}):
            raise HTTPException(
                status_code=409,
                detail="Cannot make this user a job seeker while they still own jobs"
            )

    try:
        users.update_by_id(oid, fields)
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="E-Mail address already exists!")

    return MessageResponse(message="User was updated successfully.")


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    admin: dict = Depends(get_current_admin),
    service: IntegrityService = Depends(get_integrity_service),
):
    """Delete a user. Their jobs, applicants and resume files go with them."""
    result = raise_for_outcome(service.delete_user(user_id, admin["user_id"]))
    return MessageResponse(message=result.message)


# ============================================================
# JOBS
# ============================================================

@router.get("/jobs", response_model=JobListResponse)
async def get_jobs(admin: dict = Depends(get_current_admin)):
    jobs = JobService().find()
    return JobListResponse(message="Fetched the list of jobs", jobs=[JobResponse(**serialize_doc(j)) for j in jobs])


@router.post("/jobs", response_model=MessageResponse, status_code=201)
async def add_job(
    job: JobCreate,
    admin: dict = Depends(get_current_admin),
    service: IntegrityService = Depends(get_integrity_service),
):
    result = service.add_job(job.model_dump(), admin["user_id"])
    return MessageResponse(message=result.message)


@router.get("/jobs/{job_id}", response_model=JobDetailResponse)
async def get_job(job_id: str, admin: dict = Depends(get_current_admin)):
    oid = to_object_id(job_id)
    job = JobService().find_by_id(oid) if oid else None
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobDetailResponse(message="Fetched the job Successfully", job=JobResponse(**serialize_doc(job)))


@router.put("/jobs/{job_id}", response_model=MessageResponse)
async def edit_job(job_id: str, update: JobUpdate, admin: dict = Depends(get_current_admin)):
    fields = update.model_dump(exclude_none=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    oid = to_object_id(job_id)
    if not oid or not JobService().update_by_id(oid, fields):
        raise HTTPException(
            status_code=404,
            detail=f"Cannot update job with id={job_id}. Maybe job was not found!"
        )
    return MessageResponse(message="Job was updated successfully.")


@router.delete("/jobs/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    admin: dict = Depends(get_current_admin),
    service: IntegrityService = Depends(get_integrity_service),
):
    result = raise_for_outcome(service.delete_job(job_id, admin["user_id"], require_ownership=False))
    return MessageResponse(message=result.message)
