"""
Job Seeker Routes

GET /user/jobs - Jobs not yet applied to
GET /user/jobs/applied - Applied jobs with application status
POST /user/jobs/{job_id}/apply - Apply with a PDF resume (multipart)
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, UploadFile, File, Form

from jobboard.core.auth import get_current_seeker
from jobboard.services.integrity_service import IntegrityService, get_integrity_service
from jobboard.services.mongo_service import ApplicantService, JobService, serialize_doc, to_object_id
from jobboard.utils.error_handlers import raise_for_outcome
from jobboard.utils.file_upload import save_resume, clear_resume
from jobboard.schemas.schemas import (
    JobResponse, JobListResponse, AppliedJobsResponse, MessageResponse
)

router = APIRouter(prefix="/user", tags=["Job Seeker"])


@router.get("/jobs", response_model=JobListResponse)
async def get_available_jobs(seeker: dict = Depends(get_current_seeker)):
    applicants = ApplicantService().find({"userId": to_object_id(seeker["user_id"])})
    applied = [a["jobId"] for a in applicants]

    jobs = JobService().find({"_id": {"$nin": applied}})
    return JobListResponse(message="Fetched the list of jobs", jobs=[JobResponse(**serialize_doc(j)) for j in jobs])


@router.get("/jobs/applied", response_model=AppliedJobsResponse)
async def get_applied_jobs(seeker: dict = Depends(get_current_seeker)):
    applicants = ApplicantService().find({"userId": to_object_id(seeker["user_id"])})
    status_by_job = {a["jobId"]: a["status"] for a in applicants}

    jobs = JobService().find({"_id": {"$in": list(status_by_job)}})
    applied = []
    for job in jobs:
        data = serialize_doc(job)
        data["status"] = status_by_job.get(job["_id"])
        applied.append(JobResponse(**data))

    return AppliedJobsResponse(message="Fetched the list of jobs", jobsApplied=applied)


@router.post("/jobs/{job_id}/apply", response_model=MessageResponse, status_code=201)
async def apply_job(
    job_id: str,
    resume: Optional[UploadFile] = File(None, description="Resume (PDF)"),
    providerId: Optional[str] = Form(None),
    seeker: dict = Depends(get_current_seeker),
    service: IntegrityService = Depends(get_integrity_service),
):
    """
    Apply to a job. The resume is written first; if the application is
    turned down (duplicate, unknown job, wrong provider) the file is removed.
    """
    if resume is None:
        raise HTTPException(status_code=422, detail="Resume not Found")

    path = await save_resume(resume)
    try:
        result = service.apply_to_job(job_id, seeker["user_id"], providerId, path)
    except Exception:
        clear_resume(path)
        raise

    raise_for_outcome(result)
    return MessageResponse(message=result.message)
