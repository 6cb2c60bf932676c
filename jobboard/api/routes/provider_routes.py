"""
Job Provider Routes

GET /provider/stats - Own jobs and applicants count
GET /provider/recents - Three most recent own jobs
GET /provider/jobs - Own jobs
POST /provider/jobs - Post a job
GET /provider/jobs/{job_id} - Get own job
PUT /provider/jobs/{job_id} - Edit own job
DELETE /provider/jobs/{job_id} - Delete own job, cascading to its applicants
GET /provider/jobs/{job_id}/applicants - Applicants still in "Applied" status
GET /provider/jobs/{job_id}/shortlists - Shortlisted applicants
GET /provider/applicants/{applicant_id}/resume - Download applicant resume (PDF)
PATCH /provider/applicants/{applicant_id}/shortlist - Shortlist applicant
DELETE /provider/applicants/{applicant_id} - Reject applicant (deletes record and resume)
"""

from typing import List

from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import FileResponse

from jobboard.core.auth import get_current_provider
from jobboard.services.integrity_service import IntegrityService, get_integrity_service
from jobboard.services.mongo_service import (
    UserService, JobService, ApplicantService, serialize_doc, to_object_id
)
from jobboard.utils.error_handlers import raise_for_outcome
from jobboard.utils.file_upload import resume_exists
from jobboard.schemas.schemas import (
    JobCreate, JobUpdate, JobResponse, JobListResponse, JobDetailResponse,
    ApplicantResponse, ApplicantUser, ApplicantListResponse, ShortlistResponse,
    ProviderStats, ProviderStatsResponse, ProviderRecentResponse, MessageResponse,
    SHORTLISTED_STATUS
)

router = APIRouter(prefix="/provider", tags=["Job Provider"])


def _provider_oid(provider: dict):
    return to_object_id(provider["user_id"])


def _with_users(applicants: List[dict], include_email: bool) -> List[ApplicantResponse]:
    """Attach seeker name (and email) to applicant records."""
    user_ids = list({a["userId"] for a in applicants})
    users = {u["_id"]: u for u in UserService().find({"_id": {"$in": user_ids}})}

    out = []
    for applicant in applicants:
        data = serialize_doc(applicant)
        seeker = users.get(applicant["userId"])
        if seeker:
            data["user"] = ApplicantUser(
                id=str(seeker["_id"]),
                name=seeker["name"],
                email=seeker["email"] if include_email else None,
            )
        out.append(ApplicantResponse(**data))
    return out


# ============================================================
# DASHBOARD
# ============================================================

@router.get("/stats", response_model=ProviderStatsResponse)
async def get_stats(provider: dict = Depends(get_current_provider)):
    owner = {"providerId": _provider_oid(provider)}
    stats = ProviderStats(
        jobsCount=JobService().count(owner),
        applicantsCount=ApplicantService().count(owner),
    )
    return ProviderStatsResponse(message="Successfully fetched the stats", stats=stats)


@router.get("/recents", response_model=ProviderRecentResponse)
async def get_recents(provider: dict = Depends(get_current_provider)):
    jobs = JobService().find({"providerId": _provider_oid(provider)}, limit=3)
    return ProviderRecentResponse(
        message="Successfully fetched the recent jobs",
        recentJobs=[JobResponse(**serialize_doc(j)) for j in jobs],
    )


# ============================================================
# JOBS
# ============================================================

@router.get("/jobs", response_model=JobListResponse)
async def get_jobs(provider: dict = Depends(get_current_provider)):
    jobs = JobService().find({"providerId": _provider_oid(provider)})
    return JobListResponse(message="Fetched the list of jobs", jobs=[JobResponse(**serialize_doc(j)) for j in jobs])


@router.post("/jobs", response_model=MessageResponse, status_code=201)
async def add_job(
    job: JobCreate,
    provider: dict = Depends(get_current_provider),
    service: IntegrityService = Depends(get_integrity_service),
):
    result = service.add_job(job.model_dump(), provider["user_id"])
    return MessageResponse(message=result.message)


@router.get("/jobs/{job_id}", response_model=JobDetailResponse)
async def get_job(job_id: str, provider: dict = Depends(get_current_provider)):
    oid = to_object_id(job_id)
    job = JobService().get_owned(oid, _provider_oid(provider)) if oid else None
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobDetailResponse(message="Fetched the job Successfully", job=JobResponse(**serialize_doc(job)))


@router.put("/jobs/{job_id}", response_model=MessageResponse)
async def edit_job(job_id: str, update: JobUpdate, provider: dict = Depends(get_current_provider)):
    fields = update.model_dump(exclude_none=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    oid = to_object_id(job_id)
    if not oid or not JobService().update_owned(oid, _provider_oid(provider), fields):
        raise HTTPException(
            status_code=404,
            detail=f"Cannot update job with id={job_id}. Maybe job was not found!"
        )
    return MessageResponse(message="Job was updated successfully.")


@router.delete("/jobs/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    provider: dict = Depends(get_current_provider),
    service: IntegrityService = Depends(get_integrity_service),
):
    result = raise_for_outcome(service.delete_job(job_id, provider["user_id"], require_ownership=True))
    return MessageResponse(message=result.message)


# ============================================================
# APPLICANTS
# ============================================================

@router.get("/jobs/{job_id}/applicants", response_model=ApplicantListResponse)
async def get_applicants_for_job(job_id: str, provider: dict = Depends(get_current_provider)):
    oid = to_object_id(job_id)
    applicants = ApplicantService().find_by_status(_provider_oid(provider), oid, "Applied") if oid else []
    if not applicants:
        return ApplicantListResponse(message="Looks like no one has applied yet!")
    return ApplicantListResponse(
        message="Successfully fetched the applicants",
        applicants=_with_users(applicants, include_email=False),
    )


@router.get("/jobs/{job_id}/shortlists", response_model=ShortlistResponse)
async def get_shortlists_for_job(job_id: str, provider: dict = Depends(get_current_provider)):
    oid = to_object_id(job_id)
    shortlists = ApplicantService().find_by_status(_provider_oid(provider), oid, SHORTLISTED_STATUS) if oid else []
    if not shortlists:
        return ShortlistResponse(message="Looks like no one has been shortlisted yet!")
    return ShortlistResponse(
        message="Successfully fetched the shortlists",
        shortlists=_with_users(shortlists, include_email=True),
    )


@router.get("/applicants/{applicant_id}/resume")
async def get_applicant_resume(applicant_id: str, provider: dict = Depends(get_current_provider)):
    """Stream the applicant's resume. Only the job's provider may read it."""
    oid = to_object_id(applicant_id)
    applicant = ApplicantService().find_one({"_id": oid, "providerId": _provider_oid(provider)}) if oid else None
    if not applicant:
        raise HTTPException(status_code=404, detail="Applicant not found")
    if not resume_exists(applicant.get("resume")):
        raise HTTPException(status_code=404, detail="Resume file not found")
    return FileResponse(applicant["resume"], media_type="application/pdf")


@router.patch("/applicants/{applicant_id}/shortlist", response_model=MessageResponse)
async def shortlist_applicant(
    applicant_id: str,
    provider: dict = Depends(get_current_provider),
    service: IntegrityService = Depends(get_integrity_service),
):
    result = raise_for_outcome(service.shortlist_applicant(applicant_id, provider["user_id"]))
    return MessageResponse(message=result.message)


@router.delete("/applicants/{applicant_id}", response_model=MessageResponse)
async def reject_applicant(
    applicant_id: str,
    provider: dict = Depends(get_current_provider),
    service: IntegrityService = Depends(get_integrity_service),
):
    result = raise_for_outcome(service.reject_applicant(applicant_id, provider["user_id"]))
    return MessageResponse(message=result.message)
